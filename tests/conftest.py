"""
Semantic Memory - Test Configuration and Fixtures
"""
from __future__ import annotations

import asyncio
from typing import Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from semantic_memory.core.exceptions import EmbeddingError
from semantic_memory.embeddings.base import EmbeddingProvider, EmbeddingResult
from semantic_memory.ingestion.sources.base import ContentSource


# =============================================================================
# Fakes
# =============================================================================

class KeywordEmbeddings(EmbeddingProvider):
    """
    Deterministic embeddings for tests.

    Each vector counts occurrences of a fixed keyword list, so texts sharing
    keywords score high against each other. Texts listed in ``vectors`` get
    that exact vector instead; texts listed in ``failing`` raise.
    """

    KEYWORDS = ["python", "database", "cooking", "music"]

    def __init__(
        self,
        vectors: Optional[dict[str, list[float]]] = None,
        failing: Optional[set[str]] = None,
        delay: float = 0.0,
    ):
        self.vectors = vectors or {}
        self.failing = failing or set()
        self.delay = delay
        self.calls: list[str] = []

    @property
    def model_name(self) -> str:
        return "keyword-test"

    @property
    def dimensions(self) -> int:
        return len(self.KEYWORDS)

    def _vector(self, text: str) -> list[float]:
        if text in self.vectors:
            return list(self.vectors[text])
        lowered = text.lower()
        return [float(lowered.count(k)) for k in self.KEYWORDS]

    async def embed_texts(self, texts, batch_size=None) -> EmbeddingResult:
        self.calls.extend(texts)
        if self.delay:
            await asyncio.sleep(self.delay)
        for text in texts:
            if text in self.failing:
                raise EmbeddingError(f"cannot embed {text!r}")
        return EmbeddingResult(
            embeddings=[self._vector(t) for t in texts],
            model=self.model_name,
            dimensions=self.dimensions,
            tokens_used=len(texts),
        )


# =============================================================================
# Core Fixtures
# =============================================================================

@pytest.fixture
def chunking_config():
    """Small chunk sizes so tests produce several fragments."""
    from semantic_memory.core.config import ChunkingConfig

    return ChunkingConfig(
        default_chunk_size=100,
        default_chunk_overlap=20,
        max_chunks_per_source=50,
        concurrency_limit=2,
        fixed_binary_chunk_size=4096,
    )


@pytest.fixture
def sample_document_content() -> str:
    """Sample document content for testing."""
    return (
        "Data Privacy Policy\n\n"
        "Our company is committed to protecting your personal data. We collect only "
        "the information necessary to provide our services. All data is encrypted "
        "at rest and in transit.\n\n"
        "Data Retention\n\n"
        "We retain your data for as long as your account is active or as needed to "
        "provide you services. You may request deletion of your data at any time.\n\n"
        "Your Rights\n\n"
        "You have the right to access, correct, or delete your personal data."
    )


# =============================================================================
# Storage Fixtures
# =============================================================================

@pytest.fixture
def record_store():
    """Empty in-memory record store."""
    from semantic_memory.storage.records.memory import InMemoryRecordStore

    return InMemoryRecordStore()


@pytest.fixture
def vector_store():
    """Empty in-memory vector store."""
    from semantic_memory.storage.vector.memory import InMemoryVectorStore

    return InMemoryVectorStore()


@pytest.fixture
def embeddings() -> KeywordEmbeddings:
    """Deterministic keyword embedding provider."""
    return KeywordEmbeddings()


@pytest.fixture
def embeddings_factory():
    """Build keyword embedding providers with custom vectors or failures."""
    return KeywordEmbeddings


@pytest.fixture
def manager(record_store, vector_store, embeddings):
    """Vector memory manager over in-memory stores."""
    from semantic_memory.memory.manager import VectorMemoryManager

    return VectorMemoryManager(
        record_store=record_store,
        vector_store=vector_store,
        embedding_provider=embeddings,
        relevance_threshold=0.5,
        batch_size=2,
    )


# =============================================================================
# Mock Fixtures
# =============================================================================

@pytest.fixture
def mock_record_store() -> MagicMock:
    """Mock record store that hands back stored records."""
    from semantic_memory.core.events import ChangeChannel
    from semantic_memory.core.types import MemoryRecord

    counter = {"n": 0}

    async def store_memory(content, metadata=None, id=None):
        counter["n"] += 1
        return MemoryRecord(id=id or f"mock_{counter['n']}", content=content, metadata=metadata or {})

    store = AsyncMock()
    store.changes = ChangeChannel("mock.changes")
    store.store_memory = AsyncMock(side_effect=store_memory)
    return store


# =============================================================================
# Ingestion Fixtures
# =============================================================================

class StubSource(ContentSource):
    """
    Content source with scripted metadata and content.

    Counts cleanup calls and stream closes, and tracks how many stub sources
    are between their first and last step at once.
    """

    active = 0
    max_active = 0

    def __init__(
        self,
        uri: str = "memory://doc",
        data: bytes | str = b"",
        mime_type: Optional[str] = "text/plain",
        source_type: str = "memory",
        size: Optional[int] = None,
        file_name: Optional[str] = None,
        metadata_error: Optional[Exception] = None,
        delay: float = 0.0,
    ):
        self._uri = uri
        self.data = data.encode("utf-8") if isinstance(data, str) else data
        self.mime_type = mime_type
        self.source_type = source_type
        self.size = size
        self.file_name = file_name
        self.metadata_error = metadata_error
        self.delay = delay
        self.cleanup_calls = 0
        self.stream_opens = 0
        self.stream_closes = 0

    @property
    def uri(self) -> str:
        return self._uri

    async def get_metadata(self):
        from semantic_memory.core.types import SourceMetadata

        StubSource.active += 1
        StubSource.max_active = max(StubSource.max_active, StubSource.active)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.metadata_error is not None:
            raise self.metadata_error
        return SourceMetadata(
            uri=self._uri,
            source_type=self.source_type,
            size=len(self.data) if self.size is None else self.size,
            mime_type=self.mime_type,
            file_name=self.file_name,
        )

    async def open_stream(self):
        from semantic_memory.ingestion.sources.base import ContentStream

        self.stream_opens += 1
        data = self.data

        async def blocks():
            yield data

        async def on_close():
            self.stream_closes += 1

        return ContentStream(blocks(), on_close=on_close)

    async def cleanup(self) -> None:
        self.cleanup_calls += 1
        StubSource.active -= 1


@pytest.fixture
def stub_source():
    """Build scripted content sources."""
    StubSource.active = 0
    StubSource.max_active = 0
    return StubSource


@pytest.fixture
def pipeline(chunking_config, record_store):
    """Ingestion pipeline with default extractors and strategies."""
    from semantic_memory.ingestion.chunking.registry import StrategyRegistry
    from semantic_memory.ingestion.extractors.registry import ExtractorRegistry
    from semantic_memory.ingestion.pipeline import IngestionPipeline

    return IngestionPipeline(
        config=chunking_config,
        extractors=ExtractorRegistry(),
        strategies=StrategyRegistry(),
        record_store=record_store,
    )
