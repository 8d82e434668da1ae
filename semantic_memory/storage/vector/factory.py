"""
Semantic Memory - Vector Store Factory
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from semantic_memory.core.exceptions import ConfigurationError
from semantic_memory.storage.base import VectorStore
from semantic_memory.storage.vector.memory import InMemoryVectorStore
from semantic_memory.storage.vector.qdrant import QdrantVectorStore


class VectorBackend(str, Enum):
    """Available vector store backends."""
    MEMORY = "memory"
    QDRANT = "qdrant"


def create_vector_store(
    backend: VectorBackend | str,
    url: Optional[str] = None,
    collection_name: str = "memories",
    api_key: Optional[str] = None,
    dimension: Optional[int] = None,
) -> VectorStore:
    """Build the vector store selected by ``backend``."""
    try:
        backend = VectorBackend(backend)
    except ValueError as e:
        raise ConfigurationError(f"Unknown vector backend: {backend}") from e

    if backend is VectorBackend.MEMORY:
        return InMemoryVectorStore(dimension=dimension)
    if backend is VectorBackend.QDRANT:
        if not url:
            raise ConfigurationError("The qdrant vector backend requires a URL")
        return QdrantVectorStore(url=url, collection_name=collection_name, api_key=api_key)
    raise ConfigurationError(f"Unhandled vector backend: {backend}")
