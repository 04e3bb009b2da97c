"""Domain records and enums shared by the request builders and the client."""
from __future__ import annotations

import uuid
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .errors import UnsupportedPayloadSchemaTypeError


PointId = Union[int, str]

# Payload keys owned by this client.
PAYLOAD_ID_KEY = "id"
PAYLOAD_TAGS_KEY = "tags"
PAYLOAD_FILTERABLE_KEY = "filterable"


class PayloadSchemaType(Enum):
    """Payload field types Qdrant can index.

    KEYWORD affects match conditions, INTEGER match and range, FLOAT range,
    GEO bounding box and radius (payload value ``{"lon": .., "lat": ..}``),
    TEXT full text match.
    """

    KEYWORD = 0
    INTEGER = 1
    FLOAT = 2
    GEO = 3
    TEXT = 4


_SCHEMA_WIRE_NAMES: Dict[PayloadSchemaType, str] = {
    PayloadSchemaType.KEYWORD: "keyword",
    PayloadSchemaType.INTEGER: "integer",
    PayloadSchemaType.FLOAT: "float",
    PayloadSchemaType.GEO: "geo",
    PayloadSchemaType.TEXT: "text",
}


def payload_schema_type_to_str(schema_type: PayloadSchemaType) -> str:
    if not isinstance(schema_type, PayloadSchemaType) or schema_type not in _SCHEMA_WIRE_NAMES:
        name = getattr(schema_type, "name", repr(schema_type))
        raise UnsupportedPayloadSchemaTypeError(f"Payload schema type {name} not supported")
    return _SCHEMA_WIRE_NAMES[schema_type]


class Distance(str, Enum):
    COSINE = "Cosine"
    EUCLID = "Euclid"
    DOT = "Dot"


def _new_point_id() -> str:
    return str(uuid.uuid4())


class QdrantVectorRecord(BaseModel):
    """One Qdrant point: id, embedding and payload.

    Tags are kept apart from the payload in Python and folded into it under
    ``tags`` on the wire.
    """

    model_config = ConfigDict(populate_by_name=True)

    point_id: PointId = Field(default_factory=_new_point_id, alias="id")
    embedding: List[float] = Field(default_factory=list, alias="vector")
    payload: Dict[str, Any] = Field(default_factory=dict)
    tags: Optional[List[str]] = None

    def to_point(self) -> Dict[str, Any]:
        payload = dict(self.payload)
        if self.tags is not None:
            payload[PAYLOAD_TAGS_KEY] = list(self.tags)
        return {"id": self.point_id, "vector": list(self.embedding), "payload": payload}

    @classmethod
    def from_point(cls, point: Dict[str, Any]) -> "QdrantVectorRecord":
        payload = dict(point.get("payload") or {})
        tags = payload.pop(PAYLOAD_TAGS_KEY, None)
        vector = point.get("vector") or []
        if isinstance(vector, dict):
            # Named vectors: the client only manages the unnamed default.
            vector = next(iter(vector.values()), [])
        return cls(
            point_id=point["id"],
            embedding=vector,
            payload=payload,
            tags=list(tags) if isinstance(tags, list) else None,
        )

    @property
    def metadata_id(self) -> Optional[str]:
        value = self.payload.get(PAYLOAD_ID_KEY)
        return None if value is None else str(value)
