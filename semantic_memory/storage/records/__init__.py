"""
Record stores: the system of record for memory records.
"""

from semantic_memory.storage.records.factory import RecordBackend, create_record_store
from semantic_memory.storage.records.memory import InMemoryRecordStore, lexical_match, new_memory_id
from semantic_memory.storage.records.sql import MemoryRecordModel, SqlRecordStore

__all__ = [
    "RecordBackend",
    "create_record_store",
    "InMemoryRecordStore",
    "SqlRecordStore",
    "MemoryRecordModel",
    "lexical_match",
    "new_memory_id",
]
