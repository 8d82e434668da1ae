"""
Semantic Memory - Shared Type Definitions
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import PurePosixPath
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


Content = Union[str, bytes]


# =============================================================================
# Enums
# =============================================================================

class ProcessStatus(str, Enum):
    """Outcome of processing one source."""
    PROCESSED = "processed"
    SKIPPED = "skipped"
    ERROR = "error"


class MemorySource(str, Enum):
    """Where a memory record came from."""
    CONVERSATION = "conversation"
    FILE = "file"
    WORKSPACE = "workspace"
    USER = "user"
    SYSTEM = "system"
    DATABASE = "database"
    UNKNOWN = "unknown"


class MemoryType(str, Enum):
    """What kind of content a memory record holds."""
    CONVERSATION = "conversation"
    SEMANTIC = "semantic"
    PROJECT = "project"
    USER_PREFERENCE = "user_preference"
    CODE = "code"
    FILE = "file"
    TEXT = "text"
    DOCUMENT = "document"
    IMAGE = "image"
    AUDIO = "audio"
    VIDEO = "video"
    BINARY = "binary"
    GENERIC = "generic"
    UNKNOWN = "unknown"


class ChangeKind(str, Enum):
    """Kinds of record store mutation."""
    ADDED = "added"
    DELETED = "deleted"
    CLEARED = "cleared"


# =============================================================================
# Ingestion Types
# =============================================================================

class SourceMetadata(BaseModel):
    """Snapshot of a content source, taken once per processing attempt."""

    model_config = ConfigDict(frozen=True, extra="allow")

    uri: str
    source_type: str
    size: Optional[int] = None
    last_modified: Optional[datetime] = None
    mime_type: Optional[str] = None
    file_name: Optional[str] = None

    @property
    def extension(self) -> Optional[str]:
        """Lower-case file extension with its dot, if the source has one."""
        name = self.file_name or PurePosixPath(self.uri).name
        suffix = PurePosixPath(name).suffix
        return suffix.lower() if suffix else None

    @property
    def extra_fields(self) -> dict[str, Any]:
        """Free-form fields supplied beyond the declared ones."""
        return dict(self.model_extra or {})


@dataclass
class ExtractedContent:
    """Decoded content of one source."""
    content_type: str
    content: Content
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def is_text(self) -> bool:
        return isinstance(self.content, str)

    @property
    def is_empty(self) -> bool:
        if self.is_text:
            return not self.content.strip()
        return len(self.content) == 0


@dataclass
class Fragment:
    """One bounded piece of extracted content."""
    content: Content
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def is_blank(self) -> bool:
        if isinstance(self.content, str):
            return not self.content.strip()
        return len(self.content) == 0


# =============================================================================
# Memory Types
# =============================================================================

def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MemoryRecord(BaseModel):
    """A stored unit of memory."""

    model_config = ConfigDict(frozen=True)

    id: str
    content: Content
    timestamp: datetime = Field(default_factory=utc_now)
    metadata: dict[str, Any] = Field(default_factory=dict)
    relevance: Optional[float] = None

    @property
    def is_text(self) -> bool:
        return isinstance(self.content, str)

    @property
    def source(self) -> Optional[str]:
        return self.metadata.get("source")

    @property
    def type(self) -> Optional[str]:
        return self.metadata.get("type")

    @property
    def tags(self) -> list[str]:
        return list(self.metadata.get("tags") or [])


@dataclass(frozen=True)
class VectorEntry:
    """Embedding of one memory record."""
    memory_id: str
    vector: list[float]


@dataclass(frozen=True)
class ScoredVector:
    """A vector store hit."""
    memory_id: str
    score: float


@dataclass(frozen=True)
class StoreChange:
    """A mutation observed on a record store."""
    kind: ChangeKind
    record_id: Optional[str] = None


# =============================================================================
# Result Types
# =============================================================================

class ProcessResult(BaseModel):
    """Outcome of processing a single source."""
    source_uri: str
    success: bool
    status: ProcessStatus
    chunk_count: int = 0
    added_entries: list[MemoryRecord] = Field(default_factory=list)
    message: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None
    extracted_content_type: Optional[str] = None
    chunking_strategy_used: Optional[str] = None


class BatchError(BaseModel):
    """A failed source in a batch."""
    uri: str
    error: str


class BatchResult(BaseModel):
    """Aggregate outcome of a batch of sources."""
    total_sources: int = 0
    processed_sources: int = 0
    skipped_sources: int = 0
    failed_sources: int = 0
    total_chunks_added: int = 0
    results: list[ProcessResult] = Field(default_factory=list)
    errors: list[BatchError] = Field(default_factory=list)
