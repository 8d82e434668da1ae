"""
Semantic Memory - Storage Module

Record stores hold memory records; vector stores hold their embeddings.
"""

from semantic_memory.storage.base import RecordStore, StorageBackend, VectorStore
from semantic_memory.storage.records import (
    InMemoryRecordStore,
    RecordBackend,
    SqlRecordStore,
    create_record_store,
)
from semantic_memory.storage.vector import (
    InMemoryVectorStore,
    QdrantVectorStore,
    VectorBackend,
    create_vector_store,
)

__all__ = [
    "StorageBackend",
    "RecordStore",
    "VectorStore",
    "InMemoryRecordStore",
    "SqlRecordStore",
    "RecordBackend",
    "create_record_store",
    "InMemoryVectorStore",
    "QdrantVectorStore",
    "VectorBackend",
    "create_vector_store",
]
