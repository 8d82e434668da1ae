"""
Semantic Memory - Storage Base Classes
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from semantic_memory.core.events import ChangeChannel
from semantic_memory.core.logging import LoggerMixin
from semantic_memory.core.types import Content, MemoryRecord, ScoredVector, StoreChange, VectorEntry


class StorageBackend(ABC, LoggerMixin):
    """Abstract base class for all storage backends."""

    @abstractmethod
    async def connect(self) -> None:
        """Establish connection to the storage backend."""
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Close connection to the storage backend."""
        pass

    @abstractmethod
    async def health_check(self) -> dict[str, Any]:
        """Check health of the storage backend."""
        pass

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        """Check if connected to storage backend."""
        pass


class RecordStore(StorageBackend):
    """
    Abstract base class for memory record storage.

    Every mutation is published on ``changes`` after it has been applied.
    """

    def __init__(self) -> None:
        self.changes: ChangeChannel[StoreChange] = ChangeChannel(
            f"{self.__class__.__name__}.changes"
        )

    @abstractmethod
    async def store_memory(
        self,
        content: Content,
        metadata: Optional[dict[str, Any]] = None,
        id: Optional[str] = None,
    ) -> MemoryRecord:
        """Create a record, assigning an id when none is supplied."""
        pass

    @abstractmethod
    async def get_memories(self) -> list[MemoryRecord]:
        """All records in insertion order."""
        pass

    @abstractmethod
    async def get_memory(self, memory_id: str) -> Optional[MemoryRecord]:
        pass

    @abstractmethod
    async def delete_memory(self, memory_id: str) -> bool:
        """Delete a record, returning whether it existed."""
        pass

    @abstractmethod
    async def clear_memories(self) -> None:
        pass

    @abstractmethod
    async def search_memories(
        self,
        query: str,
        limit: int = 10,
        memory_filter: Optional[Any] = None,
    ) -> list[MemoryRecord]:
        """Case-insensitive substring search over text records."""
        pass


class VectorStore(StorageBackend):
    """Abstract base class for the vector table of the semantic index."""

    @abstractmethod
    async def upsert(self, entry: VectorEntry) -> None:
        """Insert or replace the vector for one memory id."""
        pass

    @abstractmethod
    async def get(self, memory_id: str) -> Optional[VectorEntry]:
        pass

    @abstractmethod
    async def delete(self, memory_id: str) -> bool:
        pass

    @abstractmethod
    async def clear(self) -> None:
        pass

    @abstractmethod
    async def ids(self) -> set[str]:
        pass

    @abstractmethod
    async def count(self) -> int:
        pass

    @abstractmethod
    async def search(
        self,
        query_vector: list[float],
        limit: Optional[int] = None,
    ) -> list[ScoredVector]:
        """Score every stored vector against the query, best first."""
        pass
