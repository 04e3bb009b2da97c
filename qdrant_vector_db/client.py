"""Asynchronous Qdrant REST client."""
from __future__ import annotations

from abc import ABC, abstractmethod
from itertools import islice
from typing import Any, AsyncIterator, Dict, Iterable, List, Optional, Tuple

import httpx
from loguru import logger

from .api_schema import (
    CollectionInfoResponse,
    CreateCollectionRequest,
    CreateIndexRequest,
    DeleteCollectionRequest,
    DeleteVectorsRequest,
    GetCollectionRequest,
    GetVectorsRequest,
    GetVectorsResponse,
    ListCollectionsRequest,
    ListCollectionsResponse,
    OverwritePayloadRequest,
    ScrollVectorsRequest,
    ScrollVectorsResponse,
    SearchVectorsRequest,
    SearchVectorsResponse,
    UpsertVectorRequest,
)
from .config import Settings, settings as default_settings
from .errors import QdrantDeserializationError, QdrantResponseError, QdrantTransportError
from .filters import QdrantFilter
from .http_request import HttpRequest
from .models import (
    PAYLOAD_FILTERABLE_KEY,
    Distance,
    PayloadSchemaType,
    PointId,
    QdrantVectorRecord,
)


class QdrantVectorDbClientBase(ABC):
    """Operations a Qdrant vector store client offers.

    Multi-item results are async iterators; cancelling the consuming task
    aborts the in-flight request and no further pages are fetched.
    """

    @abstractmethod
    def get_vectors_by_id(
        self,
        collection_name: str,
        point_ids: Iterable[PointId],
        with_vectors: bool = False,
    ) -> AsyncIterator[QdrantVectorRecord]:
        """Yield the records stored under the given Qdrant point ids."""

    @abstractmethod
    async def get_vector_by_payload_id(
        self,
        collection_name: str,
        metadata_id: str,
        with_vector: bool = False,
    ) -> Optional[QdrantVectorRecord]:
        """Return the record whose payload ``id`` equals ``metadata_id``, or None."""

    @abstractmethod
    async def delete_vectors_by_id(self, collection_name: str, point_ids: Iterable[PointId]) -> None:
        """Delete points by their Qdrant ids."""

    @abstractmethod
    async def delete_vector_by_payload_id(self, collection_name: str, metadata_id: str) -> None:
        """Delete the point whose payload ``id`` equals ``metadata_id``, if any."""

    @abstractmethod
    async def upsert_vectors(self, collection_name: str, vector_data: Iterable[QdrantVectorRecord]) -> None:
        """Insert or replace a batch of records."""

    @abstractmethod
    async def overwrite_filterable(self, collection_name: str, point_id: PointId, filterable: Any) -> None:
        """Overwrite the ``filterable`` payload field of one point."""

    @abstractmethod
    def find_nearest_in_collection(
        self,
        collection_name: str,
        target: Iterable[float],
        threshold: Optional[float],
        filters: Optional[QdrantFilter] = None,
        top: int = 1,
        with_vectors: bool = False,
        required_tags: Optional[Iterable[str]] = None,
    ) -> AsyncIterator[Tuple[QdrantVectorRecord, float]]:
        """Yield ``(record, score)`` pairs, most similar first, at most ``top`` of them."""

    @abstractmethod
    async def create_collection(
        self,
        collection_name: str,
        vector_size: Optional[int] = None,
        distance: Optional[Distance] = None,
    ) -> None:
        """Create a collection; size and distance fall back to the client defaults."""

    @abstractmethod
    async def delete_collection(self, collection_name: str) -> None:
        """Delete a collection."""

    @abstractmethod
    async def does_collection_exist(self, collection_name: str) -> bool:
        """Return True when the collection exists."""

    @abstractmethod
    async def get_collection_info(self, collection_name: str) -> Optional[Dict[str, Any]]:
        """Return the collection description, or None when it does not exist."""

    @abstractmethod
    def list_collections(self) -> AsyncIterator[str]:
        """Yield collection names."""

    @abstractmethod
    async def create_index(
        self,
        collection_name: str,
        field_name: str,
        field_schema: PayloadSchemaType,
    ) -> None:
        """Index a payload field with the given schema type."""


def _iter_batches(items: Iterable[Any], batch_size: int):
    iterator = iter(items)
    while True:
        batch = list(islice(iterator, batch_size))
        if not batch:
            return
        yield batch


class QdrantVectorDbClient(QdrantVectorDbClientBase):
    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout_s: Optional[float] = None,
        vector_size: Optional[int] = None,
        distance: Optional[Distance] = None,
        page_size: Optional[int] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        config: Optional[Settings] = None,
    ) -> None:
        config = config or default_settings
        self._vector_size = vector_size if vector_size is not None else config.vector_size
        self._distance = Distance(distance if distance is not None else config.distance)
        self._page_size = page_size if page_size is not None else config.page_size
        if self._page_size < 1:
            raise ValueError(f"page_size must be positive, got {self._page_size}")

        if http_client is not None:
            self._client = http_client
            self._owns_client = False
        else:
            api_key = api_key or config.qdrant_api_key
            self._client = httpx.AsyncClient(
                base_url=base_url or config.qdrant_url,
                headers={"api-key": api_key} if api_key else None,
                timeout=timeout_s if timeout_s is not None else config.request_timeout_s,
            )
            self._owns_client = True

    async def __aenter__(self) -> "QdrantVectorDbClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def get_vectors_by_id(
        self,
        collection_name: str,
        point_ids: Iterable[PointId],
        with_vectors: bool = False,
    ) -> AsyncIterator[QdrantVectorRecord]:
        for page in _iter_batches(point_ids, self._page_size):
            request = GetVectorsRequest.create(collection_name, page, with_vectors=with_vectors).build()
            data = await self._execute(request)
            for point in GetVectorsResponse.parse(data).result:
                yield point.to_record()

    async def get_vector_by_payload_id(
        self,
        collection_name: str,
        metadata_id: str,
        with_vector: bool = False,
    ) -> Optional[QdrantVectorRecord]:
        request = ScrollVectorsRequest.by_payload_id(collection_name, metadata_id, with_vectors=with_vector).build()
        data = await self._execute(request, allow_not_found=True)
        if data is None:
            logger.debug("Collection {} not found while looking up {}", collection_name, metadata_id)
            return None
        points = ScrollVectorsResponse.parse(data).result.points
        if not points:
            return None
        return points[0].to_record()

    async def delete_vectors_by_id(self, collection_name: str, point_ids: Iterable[PointId]) -> None:
        ids = list(point_ids)
        if not ids:
            return
        await self._execute(DeleteVectorsRequest.create(collection_name, ids).build())

    async def delete_vector_by_payload_id(self, collection_name: str, metadata_id: str) -> None:
        record = await self.get_vector_by_payload_id(collection_name, metadata_id)
        if record is None:
            logger.debug("No point with payload id {} in {}", metadata_id, collection_name)
            return
        await self.delete_vectors_by_id(collection_name, [record.point_id])

    async def upsert_vectors(self, collection_name: str, vector_data: Iterable[QdrantVectorRecord]) -> None:
        records: List[QdrantVectorRecord] = list(vector_data)
        if not records:
            return
        await self._execute(UpsertVectorRequest.create(collection_name, records).build())

    async def overwrite_filterable(self, collection_name: str, point_id: PointId, filterable: Any) -> None:
        request = OverwritePayloadRequest.create(
            collection_name,
            [point_id],
            {PAYLOAD_FILTERABLE_KEY: filterable},
        ).build()
        await self._execute(request)

    async def find_nearest_in_collection(
        self,
        collection_name: str,
        target: Iterable[float],
        threshold: Optional[float],
        filters: Optional[QdrantFilter] = None,
        top: int = 1,
        with_vectors: bool = False,
        required_tags: Optional[Iterable[str]] = None,
    ) -> AsyncIterator[Tuple[QdrantVectorRecord, float]]:
        if top < 1:
            raise ValueError(f"top must be positive, got {top}")
        request = SearchVectorsRequest.create(
            collection_name,
            target,
            threshold=threshold,
            filters=filters,
            top=top,
            with_vectors=with_vectors,
            required_tags=required_tags,
        ).build()
        data = await self._execute(request)
        hits = sorted(SearchVectorsResponse.parse(data).result, key=lambda hit: hit.score, reverse=True)
        for hit in hits[:top]:
            yield hit.to_record(), hit.score

    async def create_collection(
        self,
        collection_name: str,
        vector_size: Optional[int] = None,
        distance: Optional[Distance] = None,
    ) -> None:
        request = CreateCollectionRequest.create(
            collection_name,
            vector_size if vector_size is not None else self._vector_size,
            distance if distance is not None else self._distance,
        ).build()
        await self._execute(request)
        logger.info("Created collection {}", collection_name)

    async def delete_collection(self, collection_name: str) -> None:
        await self._execute(DeleteCollectionRequest.create(collection_name).build())
        logger.info("Deleted collection {}", collection_name)

    async def does_collection_exist(self, collection_name: str) -> bool:
        data = await self._execute(GetCollectionRequest.create(collection_name).build(), allow_not_found=True)
        return data is not None

    async def get_collection_info(self, collection_name: str) -> Optional[Dict[str, Any]]:
        data = await self._execute(GetCollectionRequest.create(collection_name).build(), allow_not_found=True)
        if data is None:
            return None
        return CollectionInfoResponse.parse(data).result

    async def list_collections(self) -> AsyncIterator[str]:
        data = await self._execute(ListCollectionsRequest.create().build())
        for collection in ListCollectionsResponse.parse(data).result.collections:
            yield collection.name

    async def create_index(
        self,
        collection_name: str,
        field_name: str,
        field_schema: PayloadSchemaType,
    ) -> None:
        await self._execute(CreateIndexRequest.create(collection_name, field_name, field_schema).build())

    async def _execute(self, request: HttpRequest, allow_not_found: bool = False) -> Optional[Any]:
        logger.debug("Qdrant request {} {}", request.method, request.url)
        try:
            response = await self._client.request(request.method, request.url, json=request.body)
        except httpx.TransportError as exc:
            logger.warning("Qdrant request {} {} failed: {}", request.method, request.url, exc)
            raise QdrantTransportError(f"{request.method} {request.url} failed: {exc}") from exc

        if allow_not_found and response.status_code == 404:
            return None

        if response.is_error:
            logger.warning(
                "Qdrant request {} {} returned {}: {}",
                request.method,
                request.url,
                response.status_code,
                response.text,
            )
            raise QdrantResponseError(request.method, request.url, response.status_code, response.text)

        try:
            return response.json()
        except ValueError as exc:
            raise QdrantDeserializationError(
                f"{request.method} {request.url} returned invalid JSON: {exc}"
            ) from exc
