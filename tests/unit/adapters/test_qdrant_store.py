"""
Tests for QdrantVectorStoreAdapter against qdrant-client's in-memory mode.
"""
import uuid

import pytest
from qdrant_client import AsyncQdrantClient

from app.adapters.vector_store.qdrant_store import QdrantVectorStoreAdapter
from app.core.domain.entities.search import VectorRecord


@pytest.fixture
def store():
    return QdrantVectorStoreAdapter(client=AsyncQdrantClient(location=":memory:"))


@pytest.fixture
def make_record(make_vector):
    def factory(values, key, value):
        return VectorRecord(
            id=str(uuid.uuid4()),
            vector=make_vector(values),
            metadata={"key": key, "value": value},
        )
    return factory


class TestQdrantVectorStore:

    @pytest.mark.asyncio
    async def test_search_missing_collection_is_empty(self, store, make_vector):
        assert await store.search(make_vector([1.0, 0.0]), "missing") == []

    @pytest.mark.asyncio
    async def test_ensure_collection_is_idempotent(self, store):
        await store.ensure_collection("test", 2)
        await store.ensure_collection("test", 2)

        assert await store._client.collection_exists("test")

    @pytest.mark.asyncio
    async def test_save_then_search(self, store, make_vector, make_record):
        red = make_record([1.0, 0.0, 0.0], "color", "red")
        blue = make_record([0.0, 1.0, 0.0], "color", "blue")
        await store.ensure_collection("test", 3)

        ids = await store.upsert("test", [red, blue])
        results = await store.search(make_vector([0.9, 0.1, 0.0]), "test", limit=5)

        assert ids == [red.id, blue.id]
        assert [r.id for r in results] == [red.id, blue.id]
        assert results[0].score > results[1].score
        assert results[0].metadata == {"key": "color", "value": "red"}

    @pytest.mark.asyncio
    async def test_search_filters_by_key(self, store, make_vector, make_record):
        await store.ensure_collection("test", 2)
        await store.upsert("test", [
            make_record([1.0, 0.0], "color", "red"),
            make_record([1.0, 0.1], "size", "large"),
        ])

        results = await store.search(make_vector([1.0, 0.0]), "test", filters={"key": "size"})

        assert [r.metadata["value"] for r in results] == ["large"]

    @pytest.mark.asyncio
    async def test_limit(self, store, make_vector, make_record):
        await store.ensure_collection("test", 2)
        await store.upsert("test", [make_record([1.0, float(i)], "n", str(i)) for i in range(5)])

        assert len(await store.search(make_vector([1.0, 0.0]), "test", limit=2)) == 2

    def test_point_ids_rendered_as_strings(self):
        assert QdrantVectorStoreAdapter._point_id_to_str(42) == "42"
        assert QdrantVectorStoreAdapter._point_id_to_str(None) == ""
