"""
Semantic Memory - In-Memory Record Store
"""

from __future__ import annotations

from typing import Any, Optional
from uuid import uuid4

from semantic_memory.core.exceptions import StorageError
from semantic_memory.core.types import ChangeKind, Content, MemoryRecord, StoreChange
from semantic_memory.memory.filters import MemoryFilter, apply_filter
from semantic_memory.storage.base import RecordStore


def new_memory_id() -> str:
    return f"mem_{uuid4()}"


def lexical_match(records: list[MemoryRecord], query: str) -> list[MemoryRecord]:
    """Text records whose content contains ``query``, ignoring case."""
    needle = query.lower()
    return [
        record for record in records
        if record.is_text and needle in record.content.lower()
    ]


class InMemoryRecordStore(RecordStore):
    """Records kept in an insertion-ordered dict. Contents are lost on exit."""

    def __init__(self) -> None:
        super().__init__()
        self._records: dict[str, MemoryRecord] = {}
        self._connected = False

    @property
    def is_connected(self) -> bool:
        return self._connected

    async def connect(self) -> None:
        self._connected = True

    async def disconnect(self) -> None:
        self._connected = False

    async def health_check(self) -> dict[str, Any]:
        return {"status": "healthy", "records": len(self._records)}

    async def store_memory(
        self,
        content: Content,
        metadata: Optional[dict[str, Any]] = None,
        id: Optional[str] = None,
    ) -> MemoryRecord:
        if id is not None and id in self._records:
            raise StorageError(
                f"Memory {id} already exists",
                details={"memory_id": id},
            )
        record = MemoryRecord(
            id=id or new_memory_id(),
            content=content,
            metadata=dict(metadata or {}),
        )
        self._records[record.id] = record
        self.logger.debug("Memory stored", memory_id=record.id)
        self.changes.emit(StoreChange(ChangeKind.ADDED, record.id))
        return record

    async def get_memories(self) -> list[MemoryRecord]:
        return list(self._records.values())

    async def get_memory(self, memory_id: str) -> Optional[MemoryRecord]:
        return self._records.get(memory_id)

    async def delete_memory(self, memory_id: str) -> bool:
        if self._records.pop(memory_id, None) is None:
            return False
        self.changes.emit(StoreChange(ChangeKind.DELETED, memory_id))
        return True

    async def clear_memories(self) -> None:
        self._records.clear()
        self.changes.emit(StoreChange(ChangeKind.CLEARED))

    async def search_memories(
        self,
        query: str,
        limit: int = 10,
        memory_filter: Optional[MemoryFilter] = None,
    ) -> list[MemoryRecord]:
        matches = lexical_match(list(self._records.values()), query)
        return apply_filter(matches, memory_filter)[:limit]
