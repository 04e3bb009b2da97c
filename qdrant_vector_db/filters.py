"""Search filters built on top of qdrant-client's filter models."""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence

from qdrant_client.http import models

from .models import PointId


def _geo_point(coordinate: Any) -> models.GeoPoint:
    if isinstance(coordinate, dict):
        return models.GeoPoint(lon=coordinate["lon"], lat=coordinate["lat"])
    lon, lat = coordinate
    return models.GeoPoint(lon=lon, lat=lat)


class QdrantFilter:
    """Conjunction of Qdrant field conditions.

    Every builder method appends one ``must`` condition and returns the
    filter, so calls can be chained::

        QdrantFilter().match("category", "news").range("year", gte=2020)
    """

    def __init__(self, conditions: Optional[Iterable[Any]] = None) -> None:
        self._conditions: List[Any] = list(conditions or [])

    def __len__(self) -> int:
        return len(self._conditions)

    def __bool__(self) -> bool:
        return bool(self._conditions)

    @property
    def conditions(self) -> List[Any]:
        return list(self._conditions)

    def match(self, key: str, value: Any) -> "QdrantFilter":
        self._conditions.append(models.FieldCondition(key=key, match=models.MatchValue(value=value)))
        return self

    def match_any(self, key: str, values: Sequence[Any]) -> "QdrantFilter":
        self._conditions.append(models.FieldCondition(key=key, match=models.MatchAny(any=list(values))))
        return self

    def match_text(self, key: str, text: str) -> "QdrantFilter":
        self._conditions.append(models.FieldCondition(key=key, match=models.MatchText(text=text)))
        return self

    def range(
        self,
        key: str,
        gt: Optional[float] = None,
        gte: Optional[float] = None,
        lt: Optional[float] = None,
        lte: Optional[float] = None,
    ) -> "QdrantFilter":
        if gt is None and gte is None and lt is None and lte is None:
            raise ValueError(f"Range on {key} needs at least one bound")
        self._conditions.append(
            models.FieldCondition(key=key, range=models.Range(gt=gt, gte=gte, lt=lt, lte=lte))
        )
        return self

    def geo_bounding_box(self, key: str, top_left: Any, bottom_right: Any) -> "QdrantFilter":
        """``top_left``/``bottom_right`` are ``(lon, lat)`` pairs or ``{"lon", "lat"}`` dicts."""
        box = models.GeoBoundingBox(top_left=_geo_point(top_left), bottom_right=_geo_point(bottom_right))
        self._conditions.append(models.FieldCondition(key=key, geo_bounding_box=box))
        return self

    def geo_radius(self, key: str, center: Any, radius: float) -> "QdrantFilter":
        geo_radius = models.GeoRadius(center=_geo_point(center), radius=radius)
        self._conditions.append(models.FieldCondition(key=key, geo_radius=geo_radius))
        return self

    def has_id(self, point_ids: Iterable[PointId]) -> "QdrantFilter":
        self._conditions.append(models.HasIdCondition(has_id=list(point_ids)))
        return self

    def merge(self, other: Optional["QdrantFilter"]) -> "QdrantFilter":
        if other is None:
            return QdrantFilter(self._conditions)
        return QdrantFilter(self._conditions + other.conditions)

    def to_model(self) -> Optional[models.Filter]:
        if not self._conditions:
            return None
        return models.Filter(must=list(self._conditions))

    def to_dict(self) -> Optional[Dict[str, Any]]:
        q_filter = self.to_model()
        if q_filter is None:
            return None
        return q_filter.model_dump(mode="json", exclude_none=True)


def build_filter(filters: Optional[Dict[str, Any]]) -> Optional[QdrantFilter]:
    if not filters:
        return None

    q_filter = QdrantFilter()
    for field_name, value in filters.items():
        _add_condition(q_filter, field_name, value)

    if not q_filter:
        return None

    return q_filter


def _add_condition(q_filter: QdrantFilter, field_name: str, value: Any) -> None:
    if value is None:
        return

    if isinstance(value, list):
        q_filter.match_any(field_name, value)
        return

    if isinstance(value, dict):
        if "top_left" in value and "bottom_right" in value:
            q_filter.geo_bounding_box(field_name, value["top_left"], value["bottom_right"])
            return
        range_kwargs = _range_from_dict(value)
        if range_kwargs is not None:
            q_filter.range(field_name, **range_kwargs)
        return

    q_filter.match(field_name, value)


def _range_from_dict(value: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    supported_keys = {"gte", "lte", "gt", "lt"}
    range_kwargs = {key: value[key] for key in supported_keys if value.get(key) is not None}
    if not range_kwargs:
        return None
    return range_kwargs
