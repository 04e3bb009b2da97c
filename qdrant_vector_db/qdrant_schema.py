"""Idempotent collection and payload index setup."""
from __future__ import annotations

from typing import Iterable, Optional, Tuple

from loguru import logger

from .client import QdrantVectorDbClientBase
from .models import Distance, PAYLOAD_ID_KEY, PAYLOAD_TAGS_KEY, PayloadSchemaType


def default_payload_indexes() -> Iterable[Tuple[str, PayloadSchemaType]]:
    return [
        (PAYLOAD_ID_KEY, PayloadSchemaType.KEYWORD),
        (PAYLOAD_TAGS_KEY, PayloadSchemaType.KEYWORD),
    ]


async def ensure_collection(
    client: QdrantVectorDbClientBase,
    collection_name: str,
    vector_size: Optional[int] = None,
    distance: Optional[Distance] = None,
) -> bool:
    """Create the collection if it is missing. Returns True when it was created."""
    if await client.does_collection_exist(collection_name):
        return False
    await client.create_collection(collection_name, vector_size=vector_size, distance=distance)
    return True


async def ensure_payload_indexes(
    client: QdrantVectorDbClientBase,
    collection_name: str,
    indexes: Optional[Iterable[Tuple[str, PayloadSchemaType]]] = None,
) -> None:
    await ensure_collection(client, collection_name)

    collection_info = await client.get_collection_info(collection_name) or {}
    payload_schema = collection_info.get("payload_schema") or {}
    existing_fields = set(payload_schema.keys())

    for field_name, field_schema in indexes or default_payload_indexes():
        if field_name in existing_fields:
            continue
        await client.create_index(collection_name, field_name, field_schema)
        existing_fields.add(field_name)
        logger.debug("Created index {} ({}) on {}", field_name, field_schema.name, collection_name)
