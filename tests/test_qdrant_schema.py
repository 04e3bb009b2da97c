import pytest

from qdrant_vector_db.models import PayloadSchemaType
from qdrant_vector_db.qdrant_schema import ensure_collection, ensure_payload_indexes


pytestmark = pytest.mark.asyncio


class FakeClient:
    def __init__(self) -> None:
        self.collections = {}
        self.created_indexes = []
        self.create_calls = 0

    async def does_collection_exist(self, collection_name: str) -> bool:
        return collection_name in self.collections

    async def create_collection(self, collection_name: str, vector_size=None, distance=None) -> None:
        self.create_calls += 1
        self.collections[collection_name] = {"vector_size": vector_size, "payload_schema": {}}

    async def get_collection_info(self, collection_name: str):
        collection = self.collections.get(collection_name)
        if collection is None:
            return None
        return {"status": "green", "payload_schema": dict(collection["payload_schema"])}

    async def create_index(self, collection_name: str, field_name: str, field_schema) -> None:
        self.collections[collection_name]["payload_schema"][field_name] = field_schema
        self.created_indexes.append(field_name)


async def test_ensure_collection_idempotent() -> None:
    client = FakeClient()

    assert await ensure_collection(client, "docs", vector_size=8) is True
    assert await ensure_collection(client, "docs", vector_size=8) is False
    assert client.create_calls == 1
    assert client.collections["docs"]["vector_size"] == 8


async def test_ensure_payload_indexes_creates_collection_and_indexes() -> None:
    client = FakeClient()

    await ensure_payload_indexes(client, "docs", [("category", PayloadSchemaType.KEYWORD), ("year", PayloadSchemaType.INTEGER)])

    assert "docs" in client.collections
    assert client.collections["docs"]["payload_schema"] == {
        "category": PayloadSchemaType.KEYWORD,
        "year": PayloadSchemaType.INTEGER,
    }


async def test_ensure_payload_indexes_defaults() -> None:
    client = FakeClient()
    await ensure_payload_indexes(client, "docs")
    assert client.created_indexes == ["id", "tags"]


async def test_ensure_payload_indexes_idempotent() -> None:
    client = FakeClient()

    await ensure_payload_indexes(client, "docs")
    created_once = list(client.created_indexes)
    assert created_once == ["id", "tags"]

    await ensure_payload_indexes(client, "docs")
    assert client.created_indexes == created_once
    assert client.create_calls == 1


async def test_ensure_payload_indexes_skips_existing_fields() -> None:
    client = FakeClient()
    await client.create_collection("docs")
    client.collections["docs"]["payload_schema"]["id"] = PayloadSchemaType.KEYWORD

    await ensure_payload_indexes(client, "docs")

    assert client.created_indexes == ["tags"]
