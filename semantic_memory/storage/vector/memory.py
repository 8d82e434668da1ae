"""
Semantic Memory - In-Memory Vector Store
"""

from __future__ import annotations

from typing import Any, Optional

from semantic_memory.core.exceptions import VectorStoreError
from semantic_memory.core.types import ScoredVector, VectorEntry
from semantic_memory.memory.similarity import cosine_similarity
from semantic_memory.storage.base import VectorStore


class InMemoryVectorStore(VectorStore):
    """
    Vector table held in a dict keyed by memory id.

    The first vector stored fixes the dimension for the table; later vectors
    of another length are rejected. Searches score a snapshot, so concurrent
    upserts and deletes never disturb a query in flight.
    """

    def __init__(self, dimension: Optional[int] = None) -> None:
        self._entries: dict[str, VectorEntry] = {}
        self._dimension = dimension
        self._connected = False

    @property
    def dimension(self) -> Optional[int]:
        return self._dimension

    @property
    def is_connected(self) -> bool:
        return self._connected

    async def connect(self) -> None:
        self._connected = True

    async def disconnect(self) -> None:
        self._connected = False

    async def health_check(self) -> dict[str, Any]:
        return {"status": "healthy", "vectors": len(self._entries), "dimension": self._dimension}

    async def upsert(self, entry: VectorEntry) -> None:
        if not entry.vector:
            raise VectorStoreError("Cannot store an empty vector", details={"memory_id": entry.memory_id})
        if self._dimension is None:
            self._dimension = len(entry.vector)
        elif len(entry.vector) != self._dimension:
            raise VectorStoreError(
                f"Vector dimension {len(entry.vector)} does not match index dimension {self._dimension}",
                details={"memory_id": entry.memory_id},
            )
        self._entries[entry.memory_id] = VectorEntry(entry.memory_id, list(entry.vector))

    async def get(self, memory_id: str) -> Optional[VectorEntry]:
        return self._entries.get(memory_id)

    async def delete(self, memory_id: str) -> bool:
        return self._entries.pop(memory_id, None) is not None

    async def clear(self) -> None:
        self._entries.clear()

    async def ids(self) -> set[str]:
        return set(self._entries)

    async def count(self) -> int:
        return len(self._entries)

    async def search(
        self,
        query_vector: list[float],
        limit: Optional[int] = None,
    ) -> list[ScoredVector]:
        snapshot = list(self._entries.values())
        try:
            scored = [
                ScoredVector(entry.memory_id, cosine_similarity(query_vector, entry.vector))
                for entry in snapshot
            ]
        except ValueError as e:
            raise VectorStoreError(f"Search failed: {e}") from e

        scored.sort(key=lambda hit: hit.score, reverse=True)
        return scored if limit is None else scored[:limit]
