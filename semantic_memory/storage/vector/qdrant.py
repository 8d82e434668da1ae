"""
Semantic Memory - Qdrant Vector Store Implementation
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional
from uuid import NAMESPACE_URL, uuid5

from qdrant_client import AsyncQdrantClient
from qdrant_client.http import models
from qdrant_client.http.exceptions import UnexpectedResponse

from semantic_memory.core.exceptions import VectorStoreError
from semantic_memory.core.types import ScoredVector, VectorEntry
from semantic_memory.storage.base import VectorStore


SCROLL_PAGE_SIZE = 256


def point_id(memory_id: str) -> str:
    """Qdrant only accepts UUIDs or integers, so memory ids are hashed to a UUID."""
    return str(uuid5(NAMESPACE_URL, memory_id))


class QdrantVectorStore(VectorStore):
    """
    Qdrant-backed vector table.

    The collection is created on the first upsert, sized to that vector.
    Each point carries the original memory id in its payload.
    """

    def __init__(
        self,
        url: str,
        collection_name: str,
        api_key: Optional[str] = None,
        client: Optional[AsyncQdrantClient] = None,
    ):
        self._url = url
        self._api_key = api_key
        self._collection = collection_name
        self._client: Optional[AsyncQdrantClient] = client
        self._collection_ready = False

    @property
    def collection_name(self) -> str:
        return self._collection

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    async def connect(self) -> None:
        """Connect to Qdrant server."""
        if self._client is None:
            self._client = AsyncQdrantClient(
                url=self._url,
                api_key=self._api_key,
                timeout=30,
            )

        try:
            self._collection_ready = await self._collection_exists()
            self.logger.info(
                "Connected to Qdrant",
                url=self._url,
                collection=self._collection,
                collection_exists=self._collection_ready,
            )
        except Exception as e:
            self._client = None
            raise VectorStoreError(f"Failed to connect to Qdrant: {e}") from e

    async def disconnect(self) -> None:
        """Disconnect from Qdrant server."""
        if self._client is not None:
            await self._client.close()
            self._client = None
            self._collection_ready = False
            self.logger.info("Disconnected from Qdrant")

    async def health_check(self) -> dict[str, Any]:
        """Check Qdrant health."""
        if not self._client:
            return {"status": "disconnected", "latency_ms": 0}

        try:
            loop = asyncio.get_running_loop()
            start = loop.time()
            await self._client.get_collections()
            latency = (loop.time() - start) * 1000
            return {"status": "healthy", "latency_ms": round(latency, 2)}
        except Exception as e:
            return {"status": "unhealthy", "error": str(e), "latency_ms": 0}

    def _ensure_connected(self) -> AsyncQdrantClient:
        """Ensure client is connected."""
        if self._client is None:
            raise VectorStoreError("Not connected to Qdrant")
        return self._client

    async def _collection_exists(self) -> bool:
        client = self._ensure_connected()
        collections = await client.get_collections()
        return any(c.name == self._collection for c in collections.collections)

    async def _ensure_collection(self, dimension: int) -> None:
        if self._collection_ready:
            return

        client = self._ensure_connected()
        try:
            await client.create_collection(
                collection_name=self._collection,
                vectors_config=models.VectorParams(
                    size=dimension,
                    distance=models.Distance.COSINE,
                ),
            )
            self.logger.info(
                "Created Qdrant collection",
                collection=self._collection,
                dimension=dimension,
            )
        except UnexpectedResponse as e:
            if "already exists" not in str(e):
                raise VectorStoreError(f"Failed to create collection: {e}") from e
            self.logger.debug("Collection already exists", collection=self._collection)
        self._collection_ready = True

    async def upsert(self, entry: VectorEntry) -> None:
        client = self._ensure_connected()
        await self._ensure_collection(len(entry.vector))

        try:
            await client.upsert(
                collection_name=self._collection,
                points=[
                    models.PointStruct(
                        id=point_id(entry.memory_id),
                        vector=list(entry.vector),
                        payload={"memory_id": entry.memory_id},
                    )
                ],
                wait=True,
            )
        except Exception as e:
            raise VectorStoreError(
                f"Failed to upsert vector: {e}",
                details={"memory_id": entry.memory_id},
            ) from e

    async def get(self, memory_id: str) -> Optional[VectorEntry]:
        client = self._ensure_connected()
        if not self._collection_ready:
            return None

        try:
            points = await client.retrieve(
                collection_name=self._collection,
                ids=[point_id(memory_id)],
                with_payload=False,
                with_vectors=True,
            )
        except Exception as e:
            raise VectorStoreError(f"Failed to get vector: {e}") from e

        if not points or not isinstance(points[0].vector, list):
            return None
        return VectorEntry(memory_id, list(points[0].vector))

    async def delete(self, memory_id: str) -> bool:
        if await self.get(memory_id) is None:
            return False

        client = self._ensure_connected()
        try:
            await client.delete(
                collection_name=self._collection,
                points_selector=models.PointIdsList(points=[point_id(memory_id)]),
                wait=True,
            )
        except Exception as e:
            raise VectorStoreError(f"Failed to delete vector: {e}") from e
        return True

    async def clear(self) -> None:
        client = self._ensure_connected()
        if not self._collection_ready:
            return

        try:
            await client.delete_collection(collection_name=self._collection)
        except UnexpectedResponse as e:
            raise VectorStoreError(f"Failed to delete collection: {e}") from e
        self._collection_ready = False
        self.logger.info("Cleared Qdrant collection", collection=self._collection)

    async def ids(self) -> set[str]:
        client = self._ensure_connected()
        if not self._collection_ready:
            return set()

        memory_ids: set[str] = set()
        offset = None
        try:
            while True:
                points, offset = await client.scroll(
                    collection_name=self._collection,
                    limit=SCROLL_PAGE_SIZE,
                    offset=offset,
                    with_payload=True,
                    with_vectors=False,
                )
                memory_ids.update(
                    p.payload["memory_id"] for p in points if p.payload and "memory_id" in p.payload
                )
                if offset is None:
                    break
        except Exception as e:
            raise VectorStoreError(f"Failed to list vectors: {e}") from e
        return memory_ids

    async def count(self) -> int:
        client = self._ensure_connected()
        if not self._collection_ready:
            return 0

        try:
            result = await client.count(collection_name=self._collection, exact=True)
        except Exception as e:
            raise VectorStoreError(f"Failed to count vectors: {e}") from e
        return result.count

    async def search(
        self,
        query_vector: list[float],
        limit: Optional[int] = None,
    ) -> list[ScoredVector]:
        client = self._ensure_connected()
        if not self._collection_ready:
            return []

        if limit is None:
            limit = await self.count()
            if limit == 0:
                return []

        try:
            response = await client.query_points(
                collection_name=self._collection,
                query=list(query_vector),
                limit=limit,
                with_payload=True,
                with_vectors=False,
            )
        except Exception as e:
            raise VectorStoreError(f"Search failed: {e}") from e

        return [
            ScoredVector(point.payload["memory_id"], point.score)
            for point in response.points
            if point.payload and "memory_id" in point.payload
        ]
