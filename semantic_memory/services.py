"""
Semantic Memory - Service Wiring

Builds the record store, vector store, embedding provider, semantic index
and ingestion pipeline from settings, and manages their lifecycle.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from semantic_memory.core.config import Settings, get_settings
from semantic_memory.core.logging import get_logger, setup_logging
from semantic_memory.embeddings.base import EmbeddingProvider
from semantic_memory.embeddings.factory import create_embedding_provider
from semantic_memory.ingestion.chunking.registry import StrategyRegistry, default_strategies
from semantic_memory.ingestion.extractors.registry import ExtractorRegistry, default_extractors
from semantic_memory.ingestion.pipeline import IngestionPipeline
from semantic_memory.memory.manager import VectorMemoryManager
from semantic_memory.storage.base import RecordStore, VectorStore
from semantic_memory.storage.records.factory import create_record_store
from semantic_memory.storage.vector.factory import create_vector_store

logger = get_logger(__name__)


@dataclass
class MemoryServices:
    """The wired-up components of one memory instance."""
    record_store: RecordStore
    vector_store: VectorStore
    embedding_provider: Optional[EmbeddingProvider]
    manager: VectorMemoryManager
    pipeline: IngestionPipeline

    async def start(self) -> None:
        """Configure logging, connect the record store and build the semantic index."""
        setup_logging()
        logger.info("Starting memory services", env=get_settings().MEMORY_ENV)
        await self.record_store.connect()
        await self.manager.initialize()
        logger.info(
            "Memory services started",
            search_mode=self.manager.search_mode.value,
        )

    async def stop(self) -> None:
        """Release everything ``start`` acquired, in reverse order."""
        logger.info("Stopping memory services")
        try:
            await self.manager.dispose()
        except Exception as e:
            logger.error("Failed to dispose vector memory", error=str(e))
        await self.record_store.disconnect()
        logger.info("Memory services stopped")

    async def __aenter__(self) -> "MemoryServices":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()


def build_services(
    settings: Optional[Settings] = None,
    *,
    record_store: Optional[RecordStore] = None,
    vector_store: Optional[VectorStore] = None,
    embedding_provider: Optional[EmbeddingProvider] = None,
    **chunking_overrides: Any,
) -> MemoryServices:
    """
    Build every component from settings.

    Any component passed in explicitly replaces the configured one. Extra
    keyword arguments override chunking configuration values.
    """
    settings = settings or get_settings()

    if record_store is None:
        record_store = create_record_store(
            settings.RECORD_BACKEND,
            database_url=settings.DATABASE_URL,
            echo=settings.DEBUG,
        )
    if vector_store is None:
        vector_store = create_vector_store(
            settings.VECTOR_BACKEND,
            url=settings.QDRANT_URL,
            collection_name=settings.QDRANT_COLLECTION_NAME,
            api_key=settings.QDRANT_API_KEY,
        )
    if embedding_provider is None:
        embedding_provider = create_embedding_provider(settings)

    manager = VectorMemoryManager(
        record_store=record_store,
        vector_store=vector_store,
        embedding_provider=embedding_provider,
        relevance_threshold=settings.RELEVANCE_THRESHOLD,
        batch_size=settings.VECTOR_BATCH_SIZE,
        default_source=settings.DEFAULT_MEMORY_SOURCE,
        default_type=settings.DEFAULT_MEMORY_TYPE,
        default_limit=settings.DEFAULT_SEARCH_LIMIT,
    )
    pipeline = IngestionPipeline(
        config=settings.chunking_config(**chunking_overrides),
        extractors=ExtractorRegistry(default_extractors()),
        strategies=StrategyRegistry(default_strategies()),
        record_store=record_store,
    )

    return MemoryServices(
        record_store=record_store,
        vector_store=vector_store,
        embedding_provider=embedding_provider,
        manager=manager,
        pipeline=pipeline,
    )


# Global services instance
_services: Optional[MemoryServices] = None


def get_services() -> MemoryServices:
    """Get the global services instance, built from settings on first use."""
    global _services
    if _services is None:
        _services = build_services()
    return _services
