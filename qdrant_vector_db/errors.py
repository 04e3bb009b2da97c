"""Exceptions raised by the Qdrant client."""
from __future__ import annotations

from typing import Optional


class QdrantVectorDbError(Exception):
    """Base class for every error raised by this package."""


class QdrantTransportError(QdrantVectorDbError):
    """The request never produced an HTTP response (network failure, timeout)."""


class QdrantResponseError(QdrantVectorDbError):
    """Qdrant answered with a non-success status code."""

    def __init__(self, method: str, url: str, status_code: int, body: Optional[str]) -> None:
        self.method = method
        self.url = url
        self.status_code = status_code
        self.body = body
        super().__init__(f"{method} {url} failed with {status_code}: {body}")


class QdrantDeserializationError(QdrantVectorDbError):
    """The response body was not valid JSON or did not have the expected shape."""


class UnsupportedPayloadSchemaTypeError(QdrantVectorDbError, ValueError):
    """A payload schema type outside the supported set was requested."""
