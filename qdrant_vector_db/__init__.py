"""Async client for Qdrant's REST API."""
from loguru import logger

from .client import QdrantVectorDbClient, QdrantVectorDbClientBase
from .config import Settings
from .errors import (
    QdrantDeserializationError,
    QdrantResponseError,
    QdrantTransportError,
    QdrantVectorDbError,
    UnsupportedPayloadSchemaTypeError,
)
from .filters import QdrantFilter, build_filter
from .models import Distance, PayloadSchemaType, QdrantVectorRecord, payload_schema_type_to_str
from .qdrant_schema import ensure_collection, ensure_payload_indexes
from .utils import setup_logger

logger.disable("qdrant_vector_db")

__all__ = [
    "Distance",
    "PayloadSchemaType",
    "QdrantDeserializationError",
    "QdrantFilter",
    "QdrantResponseError",
    "QdrantTransportError",
    "QdrantVectorDbClient",
    "QdrantVectorDbClientBase",
    "QdrantVectorDbError",
    "QdrantVectorRecord",
    "Settings",
    "UnsupportedPayloadSchemaTypeError",
    "build_filter",
    "ensure_collection",
    "ensure_payload_indexes",
    "payload_schema_type_to_str",
    "setup_logger",
]
