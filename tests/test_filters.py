import pytest
from qdrant_client.http import models

from qdrant_vector_db.filters import QdrantFilter, build_filter


def test_build_filter_match_any_and_range() -> None:
    filters = {
        "platform": ["tiktok", "instagram"],
        "duration_sec": {"lte": 90},
    }
    q_filter = build_filter(filters)
    assert q_filter is not None
    model = q_filter.to_model()
    assert isinstance(model, models.Filter)
    assert len(model.must) == 2


def test_build_filter_match_value() -> None:
    q_filter = build_filter({"orientation": "vertical"})
    assert q_filter is not None
    assert q_filter.to_dict() == {"must": [{"key": "orientation", "match": {"value": "vertical"}}]}


def test_build_filter_geo_bounding_box() -> None:
    q_filter = build_filter(
        {"location": {"top_left": {"lon": 13.0, "lat": 52.6}, "bottom_right": (13.7, 52.3)}}
    )
    assert q_filter.to_dict() == {
        "must": [
            {
                "key": "location",
                "geo_bounding_box": {
                    "top_left": {"lon": 13.0, "lat": 52.6},
                    "bottom_right": {"lon": 13.7, "lat": 52.3},
                },
            }
        ]
    }


def test_build_filter_empty() -> None:
    assert build_filter({}) is None
    assert build_filter(None) is None
    assert build_filter({"a": None, "b": {"unknown": 1}}) is None


def test_range_needs_a_bound() -> None:
    with pytest.raises(ValueError):
        QdrantFilter().range("year")


def test_filter_chaining_is_conjunctive() -> None:
    q_filter = QdrantFilter().match("category", "news").range("year", gte=2020).match_text("body", "qdrant")
    data = q_filter.to_dict()
    assert list(data) == ["must"]
    assert [condition["key"] for condition in data["must"]] == ["category", "year", "body"]
    assert data["must"][1]["range"] == {"gte": 2020}
    assert data["must"][2]["match"] == {"text": "qdrant"}


def test_merge_keeps_both_sides() -> None:
    left = QdrantFilter().match("a", 1)
    right = QdrantFilter().has_id([7, "x"])
    merged = left.merge(right)
    assert len(merged) == 2
    assert len(left) == 1
    assert merged.to_dict()["must"][1] == {"has_id": [7, "x"]}


def test_empty_filter_serializes_to_none() -> None:
    assert QdrantFilter().to_model() is None
    assert QdrantFilter().to_dict() is None
    assert not QdrantFilter()


def test_geo_radius() -> None:
    q_filter = QdrantFilter().geo_radius("location", (13.4, 52.5), 1000.0)
    assert q_filter.to_dict() == {
        "must": [
            {
                "key": "location",
                "geo_radius": {"center": {"lon": 13.4, "lat": 52.5}, "radius": 1000.0},
            }
        ]
    }
