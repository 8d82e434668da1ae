"""
Semantic Memory - Core Module

This module provides core functionality used throughout the package:
- Configuration management
- Logging
- Custom exceptions
- Change channels
- Shared type definitions
"""

from semantic_memory.core.config import ChunkingConfig, LocalFileConfig, Settings, get_settings, settings
from semantic_memory.core.events import ChangeChannel, Subscription
from semantic_memory.core.exceptions import (
    MemoryException,
    IngestionError,
    RetrievalError,
    StorageError,
    ValidationError,
    ConfigurationError,
)
from semantic_memory.core.logging import get_logger, setup_logging, LoggerMixin
from semantic_memory.core.types import (
    # Enums
    ProcessStatus,
    MemorySource,
    MemoryType,
    ChangeKind,
    # Ingestion types
    SourceMetadata,
    ExtractedContent,
    Fragment,
    ProcessResult,
    BatchError,
    BatchResult,
    # Memory types
    MemoryRecord,
    VectorEntry,
    ScoredVector,
    StoreChange,
)

__all__ = [
    # Config
    "ChunkingConfig",
    "LocalFileConfig",
    "Settings",
    "get_settings",
    "settings",
    # Events
    "ChangeChannel",
    "Subscription",
    # Exceptions
    "MemoryException",
    "IngestionError",
    "RetrievalError",
    "StorageError",
    "ValidationError",
    "ConfigurationError",
    # Logging
    "get_logger",
    "setup_logging",
    "LoggerMixin",
    # Types
    "ProcessStatus",
    "MemorySource",
    "MemoryType",
    "ChangeKind",
    "SourceMetadata",
    "ExtractedContent",
    "Fragment",
    "ProcessResult",
    "BatchError",
    "BatchResult",
    "MemoryRecord",
    "VectorEntry",
    "ScoredVector",
    "StoreChange",
]
