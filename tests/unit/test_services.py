"""
Tests for semantic_memory/services.py
"""

import pytest


@pytest.fixture
def offline_settings():
    """Settings that need no network services."""
    from semantic_memory.core.config import Settings

    return Settings(
        _env_file=None,
        RECORD_BACKEND="memory",
        VECTOR_BACKEND="memory",
        EMBEDDING_PROVIDER="none",
        RELEVANCE_THRESHOLD=0.4,
        VECTOR_BATCH_SIZE=3,
    )


class TestBuildServices:
    """Tests for build_services."""

    def test_builds_from_settings(self, offline_settings):
        """Test that every component is built from settings."""
        from semantic_memory.memory.manager import SearchMode
        from semantic_memory.services import build_services
        from semantic_memory.storage.records.memory import InMemoryRecordStore
        from semantic_memory.storage.vector.memory import InMemoryVectorStore

        services = build_services(offline_settings)

        assert isinstance(services.record_store, InMemoryRecordStore)
        assert isinstance(services.vector_store, InMemoryVectorStore)
        assert services.embedding_provider is None
        assert services.manager.search_mode is SearchMode.LEXICAL
        assert services.manager.relevance_threshold == 0.4
        assert services.manager.batch_size == 3
        assert services.manager.record_store is services.record_store
        assert services.pipeline.record_store is services.record_store

    def test_explicit_components_win(self, offline_settings, record_store, vector_store, embeddings):
        """Test that passed-in components replace configured ones."""
        from semantic_memory.memory.manager import SearchMode
        from semantic_memory.services import build_services

        services = build_services(
            offline_settings,
            record_store=record_store,
            vector_store=vector_store,
            embedding_provider=embeddings,
        )

        assert services.record_store is record_store
        assert services.vector_store is vector_store
        assert services.manager.embedding_provider is embeddings
        assert services.manager.search_mode is SearchMode.SEMANTIC

    def test_chunking_overrides(self, offline_settings):
        """Test that keyword arguments reach the pipeline configuration."""
        from semantic_memory.services import build_services

        services = build_services(offline_settings, default_chunk_size=300, concurrency_limit=2)

        assert services.pipeline.config.default_chunk_size == 300
        assert services.pipeline.config.concurrency_limit == 2

    def test_unknown_backend(self):
        """Test that an unknown backend is a configuration error."""
        from semantic_memory.core.config import Settings
        from semantic_memory.core.exceptions import ConfigurationError
        from semantic_memory.services import build_services

        settings = Settings(_env_file=None, RECORD_BACKEND="cassandra", EMBEDDING_PROVIDER="none")

        with pytest.raises(ConfigurationError):
            build_services(settings)


class TestMemoryServices:
    """Tests for the MemoryServices lifecycle."""

    @pytest.mark.asyncio
    async def test_start_and_stop(self, offline_settings):
        """Test that start connects and initializes, stop releases."""
        from semantic_memory.memory.manager import IndexState
        from semantic_memory.services import build_services

        services = build_services(offline_settings)

        await services.start()
        assert services.record_store.is_connected
        assert services.manager.state is IndexState.READY

        await services.stop()
        assert not services.record_store.is_connected
        assert services.manager.state is IndexState.DISPOSED

    @pytest.mark.asyncio
    async def test_context_manager(self, offline_settings, embeddings):
        """Test using the services as an async context manager."""
        from semantic_memory.memory.manager import IndexState
        from semantic_memory.services import build_services

        async with build_services(offline_settings, embedding_provider=embeddings) as services:
            record = await services.manager.add_memory("python packaging")
            assert await services.vector_store.get(record.id) is not None

        assert services.manager.state is IndexState.DISPOSED

    def test_get_services_singleton(self):
        """Test that get_services returns the same instance."""
        from unittest.mock import patch

        from semantic_memory import services as services_module

        with patch.object(services_module, "_services", None):
            first = services_module.get_services()
            second = services_module.get_services()

        assert first is second
