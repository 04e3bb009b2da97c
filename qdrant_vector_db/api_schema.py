"""Request and response models for Qdrant's REST API.

Each request model knows its own HTTP method, path and JSON body. The
collection name is a constructor argument on every request but is excluded
from serialization: it only ever appears as a path segment.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, ValidationError, computed_field

from .errors import QdrantDeserializationError
from .filters import QdrantFilter
from .http_request import (
    HttpRequest,
    create_delete_request,
    create_get_request,
    create_post_request,
    create_put_request,
)
from .models import (
    PAYLOAD_ID_KEY,
    PAYLOAD_TAGS_KEY,
    Distance,
    PayloadSchemaType,
    PointId,
    QdrantVectorRecord,
    payload_schema_type_to_str,
)


def _collection_path(collection_name: str) -> str:
    if not collection_name:
        raise ValueError("collection_name must not be empty")
    return f"collections/{quote(collection_name, safe='')}"


class _CollectionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    collection_name: str = Field(exclude=True)


# Collections


class VectorSettings(BaseModel):
    size: int = Field(gt=0)
    distance: Distance = Distance.COSINE


class CreateCollectionRequest(_CollectionRequest):
    vectors: VectorSettings

    @classmethod
    def create(
        cls,
        collection_name: str,
        vector_size: int,
        distance: Distance = Distance.COSINE,
    ) -> "CreateCollectionRequest":
        return cls(
            collection_name=collection_name,
            vectors=VectorSettings(size=vector_size, distance=Distance(distance)),
        )

    def build(self) -> HttpRequest:
        return create_put_request(_collection_path(self.collection_name), payload=self)


class DeleteCollectionRequest(_CollectionRequest):
    @classmethod
    def create(cls, collection_name: str) -> "DeleteCollectionRequest":
        return cls(collection_name=collection_name)

    def build(self) -> HttpRequest:
        return create_delete_request(_collection_path(self.collection_name))


class GetCollectionRequest(_CollectionRequest):
    @classmethod
    def create(cls, collection_name: str) -> "GetCollectionRequest":
        return cls(collection_name=collection_name)

    def build(self) -> HttpRequest:
        return create_get_request(_collection_path(self.collection_name))


class ListCollectionsRequest(BaseModel):
    @classmethod
    def create(cls) -> "ListCollectionsRequest":
        return cls()

    def build(self) -> HttpRequest:
        return create_get_request("collections")


# Payload indexes


class CreateIndexRequest(_CollectionRequest):
    field_name: str
    field_schema_type: PayloadSchemaType = Field(exclude=True)

    @computed_field
    @property
    def field_schema(self) -> str:
        return payload_schema_type_to_str(self.field_schema_type)

    @classmethod
    def create(
        cls,
        collection_name: str,
        field_name: str,
        field_schema: PayloadSchemaType,
    ) -> "CreateIndexRequest":
        # Reject unsupported values before pydantic gets a chance to coerce them.
        payload_schema_type_to_str(field_schema)
        return cls(
            collection_name=collection_name,
            field_name=field_name,
            field_schema_type=field_schema,
        )

    def build(self) -> HttpRequest:
        return create_put_request(
            f"{_collection_path(self.collection_name)}/index?wait=true",
            payload=self,
        )


# Points


class UpsertVectorRequest(_CollectionRequest):
    points: List[Dict[str, Any]]

    @classmethod
    def create(
        cls,
        collection_name: str,
        records: Iterable[QdrantVectorRecord],
    ) -> "UpsertVectorRequest":
        return cls(
            collection_name=collection_name,
            points=[record.to_point() for record in records],
        )

    def build(self) -> HttpRequest:
        return create_put_request(
            f"{_collection_path(self.collection_name)}/points?wait=true",
            payload=self,
        )


class OverwritePayloadRequest(_CollectionRequest):
    points: List[PointId]
    payload: Dict[str, Any]

    @classmethod
    def create(
        cls,
        collection_name: str,
        points: Sequence[PointId],
        payload: Dict[str, Any],
    ) -> "OverwritePayloadRequest":
        return cls(collection_name=collection_name, points=list(points), payload=payload)

    def build(self) -> HttpRequest:
        return create_put_request(
            f"{_collection_path(self.collection_name)}/points/payload?wait=true",
            payload=self,
        )


class GetVectorsRequest(_CollectionRequest):
    ids: List[PointId]
    with_payload: bool = True
    with_vector: bool = False

    @classmethod
    def create(
        cls,
        collection_name: str,
        point_ids: Iterable[PointId],
        with_vectors: bool = False,
    ) -> "GetVectorsRequest":
        return cls(collection_name=collection_name, ids=list(point_ids), with_vector=with_vectors)

    def build(self) -> HttpRequest:
        return create_post_request(f"{_collection_path(self.collection_name)}/points", payload=self)


class ScrollVectorsRequest(_CollectionRequest):
    scroll_filter: Optional[Dict[str, Any]] = Field(default=None, alias="filter")
    limit: int = Field(default=10, ge=1)
    offset: Optional[PointId] = None
    with_payload: bool = True
    with_vector: bool = False

    @classmethod
    def create(
        cls,
        collection_name: str,
        scroll_filter: Optional[QdrantFilter] = None,
        limit: int = 10,
        with_vectors: bool = False,
    ) -> "ScrollVectorsRequest":
        return cls(
            collection_name=collection_name,
            scroll_filter=scroll_filter.to_dict() if scroll_filter is not None else None,
            limit=limit,
            with_vector=with_vectors,
        )

    @classmethod
    def by_payload_id(
        cls,
        collection_name: str,
        metadata_id: str,
        with_vectors: bool = False,
    ) -> "ScrollVectorsRequest":
        return cls.create(
            collection_name,
            scroll_filter=QdrantFilter().match(PAYLOAD_ID_KEY, metadata_id),
            limit=1,
            with_vectors=with_vectors,
        )

    def build(self) -> HttpRequest:
        return create_post_request(
            f"{_collection_path(self.collection_name)}/points/scroll",
            payload=self,
        )


class DeleteVectorsRequest(_CollectionRequest):
    points: List[PointId]

    @classmethod
    def create(cls, collection_name: str, point_ids: Iterable[PointId]) -> "DeleteVectorsRequest":
        return cls(collection_name=collection_name, points=list(point_ids))

    def build(self) -> HttpRequest:
        return create_post_request(
            f"{_collection_path(self.collection_name)}/points/delete?wait=true",
            payload=self,
        )


class SearchVectorsRequest(_CollectionRequest):
    vector: List[float]
    search_filter: Optional[Dict[str, Any]] = Field(default=None, alias="filter")
    limit: int = Field(default=1, ge=1)
    score_threshold: Optional[float] = None
    with_payload: bool = True
    with_vector: bool = False

    @classmethod
    def create(
        cls,
        collection_name: str,
        target: Iterable[float],
        threshold: Optional[float] = None,
        filters: Optional[QdrantFilter] = None,
        top: int = 1,
        with_vectors: bool = False,
        required_tags: Optional[Iterable[str]] = None,
    ) -> "SearchVectorsRequest":
        tag_filter = QdrantFilter()
        for tag in required_tags or []:
            tag_filter.match(PAYLOAD_TAGS_KEY, tag)
        combined = tag_filter.merge(filters)
        return cls(
            collection_name=collection_name,
            vector=list(target),
            search_filter=combined.to_dict(),
            limit=top,
            score_threshold=threshold,
            with_vector=with_vectors,
        )

    def build(self) -> HttpRequest:
        return create_post_request(
            f"{_collection_path(self.collection_name)}/points/search",
            payload=self,
        )


# Responses


class _QdrantResponse(BaseModel):
    status: Any = None
    time: Optional[float] = None

    @classmethod
    def parse(cls, data: Any):
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise QdrantDeserializationError(f"Unexpected {cls.__name__} shape: {exc}") from exc


class PointRecord(BaseModel):
    id: PointId
    vector: Optional[Any] = None
    payload: Optional[Dict[str, Any]] = None

    def to_record(self) -> QdrantVectorRecord:
        return QdrantVectorRecord.from_point(self.model_dump())


class ScoredPoint(PointRecord):
    score: float
    version: Optional[int] = None


class CollectionDescription(BaseModel):
    name: str


class CollectionList(BaseModel):
    collections: List[CollectionDescription] = Field(default_factory=list)


class ListCollectionsResponse(_QdrantResponse):
    result: CollectionList


class CollectionInfoResponse(_QdrantResponse):
    result: Dict[str, Any]


class GetVectorsResponse(_QdrantResponse):
    result: List[PointRecord] = Field(default_factory=list)


class ScrollResult(BaseModel):
    points: List[PointRecord] = Field(default_factory=list)
    next_page_offset: Optional[PointId] = None


class ScrollVectorsResponse(_QdrantResponse):
    result: ScrollResult


class SearchVectorsResponse(_QdrantResponse):
    result: List[ScoredPoint] = Field(default_factory=list)
