"""
Vector stores: the vector table behind the semantic index.
"""

from semantic_memory.storage.vector.factory import VectorBackend, create_vector_store
from semantic_memory.storage.vector.memory import InMemoryVectorStore
from semantic_memory.storage.vector.qdrant import QdrantVectorStore, point_id

__all__ = [
    "VectorBackend",
    "create_vector_store",
    "InMemoryVectorStore",
    "QdrantVectorStore",
    "point_id",
]
