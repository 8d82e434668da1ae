"""
Semantic Memory - Record Store Factory
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from semantic_memory.core.exceptions import ConfigurationError
from semantic_memory.storage.base import RecordStore
from semantic_memory.storage.records.memory import InMemoryRecordStore
from semantic_memory.storage.records.sql import SqlRecordStore


class RecordBackend(str, Enum):
    """Available record store backends."""
    MEMORY = "memory"
    SQL = "sql"


def create_record_store(
    backend: RecordBackend | str,
    database_url: Optional[str] = None,
    echo: bool = False,
) -> RecordStore:
    """Build the record store selected by ``backend``."""
    try:
        backend = RecordBackend(backend)
    except ValueError as e:
        raise ConfigurationError(f"Unknown record backend: {backend}") from e

    if backend is RecordBackend.MEMORY:
        return InMemoryRecordStore()
    if backend is RecordBackend.SQL:
        if not database_url:
            raise ConfigurationError("The sql record backend requires a database URL")
        return SqlRecordStore(database_url, echo=echo)
    raise ConfigurationError(f"Unhandled record backend: {backend}")
