"""
Semantic Memory - Memory Module

Metadata filters, vector similarity and the manager that keeps the
semantic index in step with a record store.
"""

from semantic_memory.memory.filters import MemoryFilter, apply_filter
from semantic_memory.memory.similarity import cosine_similarity
from semantic_memory.memory.manager import (
    IndexState,
    SearchMode,
    SyncResult,
    VectorMemoryManager,
)

__all__ = [
    "MemoryFilter",
    "apply_filter",
    "cosine_similarity",
    "IndexState",
    "SearchMode",
    "SyncResult",
    "VectorMemoryManager",
]
