"""
Tests for semantic_memory/storage/vector/qdrant.py
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest


class TestQdrantVectorStore:
    """Tests for the QdrantVectorStore class."""

    @pytest.fixture
    def mock_qdrant_client(self):
        """Create a mock Qdrant client."""
        from semantic_memory.storage.vector.qdrant import point_id

        client = AsyncMock()
        client.get_collections = AsyncMock(return_value=MagicMock(collections=[]))
        client.create_collection = AsyncMock()
        client.delete_collection = AsyncMock()
        client.upsert = AsyncMock()
        client.query_points = AsyncMock(return_value=MagicMock(points=[
            MagicMock(id=point_id("mem_1"), score=0.95, payload={"memory_id": "mem_1"}),
            MagicMock(id=point_id("mem_2"), score=0.40, payload={"memory_id": "mem_2"}),
        ]))
        client.retrieve = AsyncMock(return_value=[
            MagicMock(id=point_id("mem_1"), payload={"memory_id": "mem_1"}, vector=[0.1, 0.2]),
        ])
        client.scroll = AsyncMock(side_effect=[
            ([MagicMock(payload={"memory_id": "mem_1"})], "next-page"),
            ([MagicMock(payload={"memory_id": "mem_2"})], None),
        ])
        client.count = AsyncMock(return_value=MagicMock(count=2))
        client.delete = AsyncMock()
        client.close = AsyncMock()
        return client

    @pytest.fixture
    def existing_collection(self, mock_qdrant_client):
        """Make the client report the collection as existing."""
        collection = MagicMock()
        collection.name = "memories"
        mock_qdrant_client.get_collections.return_value = MagicMock(collections=[collection])
        return mock_qdrant_client

    def test_point_id_is_stable_uuid(self):
        """Test that memory ids map to the same UUID every time."""
        from uuid import UUID

        from semantic_memory.storage.vector.qdrant import point_id

        assert point_id("mem_1") == point_id("mem_1")
        assert point_id("mem_1") != point_id("mem_2")
        UUID(point_id("file:///a.txt::chunk_0"))

    @pytest.mark.asyncio
    async def test_connect(self, mock_qdrant_client):
        """Test QdrantVectorStore connect method."""
        from semantic_memory.storage.vector.qdrant import QdrantVectorStore

        with patch("semantic_memory.storage.vector.qdrant.AsyncQdrantClient", return_value=mock_qdrant_client):
            store = QdrantVectorStore(url="http://localhost:6333", collection_name="memories")
            await store.connect()

        assert store.is_connected
        mock_qdrant_client.get_collections.assert_called()

    @pytest.mark.asyncio
    async def test_connect_failure(self, mock_qdrant_client):
        """Test that connection errors become VectorStoreError."""
        from semantic_memory.core.exceptions import VectorStoreError
        from semantic_memory.storage.vector.qdrant import QdrantVectorStore

        mock_qdrant_client.get_collections.side_effect = ConnectionError("refused")
        store = QdrantVectorStore(url="http://localhost:6333", collection_name="memories", client=mock_qdrant_client)

        with pytest.raises(VectorStoreError):
            await store.connect()
        assert not store.is_connected

    @pytest.mark.asyncio
    async def test_disconnect(self, mock_qdrant_client):
        """Test QdrantVectorStore disconnect method."""
        from semantic_memory.storage.vector.qdrant import QdrantVectorStore

        store = QdrantVectorStore(url="http://localhost:6333", collection_name="memories", client=mock_qdrant_client)
        await store.connect()
        await store.disconnect()

        assert not store.is_connected
        mock_qdrant_client.close.assert_called_once()

    @pytest.mark.asyncio
    async def test_upsert_creates_collection(self, mock_qdrant_client):
        """Test that the first upsert creates a cosine collection sized to the vector."""
        from qdrant_client.http import models

        from semantic_memory.core.types import VectorEntry
        from semantic_memory.storage.vector.qdrant import QdrantVectorStore, point_id

        store = QdrantVectorStore(url="http://localhost:6333", collection_name="memories", client=mock_qdrant_client)
        await store.connect()
        await store.upsert(VectorEntry("mem_1", [0.1, 0.2, 0.3]))
        await store.upsert(VectorEntry("mem_2", [0.3, 0.2, 0.1]))

        mock_qdrant_client.create_collection.assert_called_once()
        params = mock_qdrant_client.create_collection.call_args.kwargs["vectors_config"]
        assert params.size == 3
        assert params.distance == models.Distance.COSINE

        point = mock_qdrant_client.upsert.call_args_list[0].kwargs["points"][0]
        assert point.id == point_id("mem_1")
        assert point.payload == {"memory_id": "mem_1"}

    @pytest.mark.asyncio
    async def test_search_maps_payload_ids(self, existing_collection):
        """Test that hits carry the original memory ids."""
        from semantic_memory.storage.vector.qdrant import QdrantVectorStore

        store = QdrantVectorStore(url="http://localhost:6333", collection_name="memories", client=existing_collection)
        await store.connect()

        hits = await store.search([0.1, 0.2])

        assert [(h.memory_id, h.score) for h in hits] == [("mem_1", 0.95), ("mem_2", 0.40)]
        assert existing_collection.query_points.call_args.kwargs["limit"] == 2

    @pytest.mark.asyncio
    async def test_search_without_collection(self, mock_qdrant_client):
        """Test that searching before any upsert returns nothing."""
        from semantic_memory.storage.vector.qdrant import QdrantVectorStore

        store = QdrantVectorStore(url="http://localhost:6333", collection_name="memories", client=mock_qdrant_client)
        await store.connect()

        assert await store.search([0.1, 0.2]) == []
        assert await store.count() == 0
        assert await store.ids() == set()
        mock_qdrant_client.query_points.assert_not_called()

    @pytest.mark.asyncio
    async def test_ids_paginates(self, existing_collection):
        """Test that ids follow scroll pages to the end."""
        from semantic_memory.storage.vector.qdrant import QdrantVectorStore

        store = QdrantVectorStore(url="http://localhost:6333", collection_name="memories", client=existing_collection)
        await store.connect()

        assert await store.ids() == {"mem_1", "mem_2"}
        assert existing_collection.scroll.call_count == 2

    @pytest.mark.asyncio
    async def test_get_and_delete(self, existing_collection):
        """Test reading and deleting a point."""
        from semantic_memory.storage.vector.qdrant import QdrantVectorStore

        store = QdrantVectorStore(url="http://localhost:6333", collection_name="memories", client=existing_collection)
        await store.connect()

        entry = await store.get("mem_1")
        assert entry.memory_id == "mem_1"
        assert entry.vector == [0.1, 0.2]

        assert await store.delete("mem_1") is True
        existing_collection.delete.assert_called_once()

        existing_collection.retrieve.return_value = []
        assert await store.delete("mem_9") is False

    @pytest.mark.asyncio
    async def test_clear_drops_collection(self, existing_collection):
        """Test that clearing deletes the collection."""
        from semantic_memory.storage.vector.qdrant import QdrantVectorStore

        store = QdrantVectorStore(url="http://localhost:6333", collection_name="memories", client=existing_collection)
        await store.connect()
        await store.clear()

        existing_collection.delete_collection.assert_called_once_with(collection_name="memories")
        assert await store.count() == 0

    @pytest.mark.asyncio
    async def test_health_check(self, mock_qdrant_client):
        """Test health reports."""
        from semantic_memory.storage.vector.qdrant import QdrantVectorStore

        store = QdrantVectorStore(url="http://localhost:6333", collection_name="memories")
        assert (await store.health_check())["status"] == "disconnected"

        store = QdrantVectorStore(url="http://localhost:6333", collection_name="memories", client=mock_qdrant_client)
        assert (await store.health_check())["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_operations_require_connection(self):
        """Test that using a disconnected store fails."""
        from semantic_memory.core.exceptions import VectorStoreError
        from semantic_memory.storage.vector.qdrant import QdrantVectorStore

        store = QdrantVectorStore(url="http://localhost:6333", collection_name="memories")
        with pytest.raises(VectorStoreError):
            await store.search([0.1])
