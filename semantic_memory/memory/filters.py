"""
Semantic Memory - Metadata Filters

Filters applied to memory records after retrieval: exact match on source and
type, subset match on tags, inclusive range on the creation timestamp.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field

from semantic_memory.core.types import MemoryRecord


def _aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare with stored timestamps."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class MemoryFilter(BaseModel):
    """
    Composite record filter. Every set field must match (AND logic).

    Example:
        MemoryFilter(source="file", tags=["ext:py"])
    """

    source: Optional[str] = None
    type: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    from_timestamp: Optional[datetime] = None
    to_timestamp: Optional[datetime] = None

    @property
    def is_empty(self) -> bool:
        return (
            self.source is None
            and self.type is None
            and not self.tags
            and self.from_timestamp is None
            and self.to_timestamp is None
        )

    def matches(self, record: MemoryRecord) -> bool:
        """Check if a record satisfies every condition."""
        if self.source is not None and record.source != self.source:
            return False
        if self.type is not None and record.type != self.type:
            return False
        if self.tags:
            record_tags = set(record.tags)
            if not all(tag in record_tags for tag in self.tags):
                return False

        timestamp = _aware(record.timestamp)
        if self.from_timestamp is not None and timestamp < _aware(self.from_timestamp):
            return False
        if self.to_timestamp is not None and timestamp > _aware(self.to_timestamp):
            return False
        return True

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation, omitting unset conditions."""
        return self.model_dump(exclude_defaults=True, mode="json")


def apply_filter(
    records: list[MemoryRecord],
    memory_filter: Optional[MemoryFilter],
) -> list[MemoryRecord]:
    if memory_filter is None or memory_filter.is_empty:
        return list(records)
    return [record for record in records if memory_filter.matches(record)]
