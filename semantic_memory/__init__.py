"""
Semantic Memory

Ingests content sources into a memory record store and keeps a semantic
index over the stored records for similarity search.
"""

from semantic_memory.core.config import ChunkingConfig, Settings, get_settings
from semantic_memory.core.types import MemoryRecord, ProcessResult, BatchResult
from semantic_memory.ingestion import IngestionPipeline, InMemorySource, LocalFileSource
from semantic_memory.memory import MemoryFilter, VectorMemoryManager
from semantic_memory.services import MemoryServices, build_services, get_services

__version__ = "0.1.0"

__all__ = [
    "ChunkingConfig",
    "Settings",
    "get_settings",
    "MemoryRecord",
    "ProcessResult",
    "BatchResult",
    "IngestionPipeline",
    "InMemorySource",
    "LocalFileSource",
    "MemoryFilter",
    "VectorMemoryManager",
    "MemoryServices",
    "build_services",
    "get_services",
]
