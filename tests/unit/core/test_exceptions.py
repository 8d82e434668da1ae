"""
Tests for semantic_memory/core/exceptions.py
"""

import pytest


class TestExceptionHierarchy:
    """Tests for the exception classes."""

    def test_base_exception_fields(self):
        """Test MemoryException carries message, code and details."""
        from semantic_memory.core.exceptions import MemoryException

        error = MemoryException("boom", details={"a": 1})
        assert error.message == "boom"
        assert error.code == "MEMORY_ERROR"
        assert error.details == {"a": 1}
        assert str(error) == "boom"

    def test_ingestion_errors_share_code(self):
        """Test that ingestion errors use the ingestion code."""
        from semantic_memory.core.exceptions import (
            ChunkingError,
            ExtractionError,
            IngestionError,
            PreconditionFailedError,
        )

        for cls in (ChunkingError, ExtractionError, PreconditionFailedError):
            error = cls("failed")
            assert isinstance(error, IngestionError)
            assert error.code == "INGESTION_ERROR"

    def test_no_matching_extractor_message(self):
        """Test the fixed skip message for unsupported sources."""
        from semantic_memory.core.exceptions import NoMatchingExtractorError

        error = NoMatchingExtractorError("file:///a.bin", "application/x-thing")
        assert error.message == "No suitable content extractor found."
        assert error.details["mime_type"] == "application/x-thing"

    def test_no_matching_strategy_message(self):
        """Test the strategy skip message names the content type."""
        from semantic_memory.core.exceptions import NoMatchingStrategyError

        assert NoMatchingStrategyError("image/png").message == "No chunking strategy for image/png"

    def test_cancelled_message(self):
        """Test the cancellation message."""
        from semantic_memory.core.exceptions import ProcessingCancelledError

        assert ProcessingCancelledError("file:///a").message == "Processing cancelled."

    def test_provider_unavailable_is_embedding_error(self):
        """Test that an unavailable provider is a kind of embedding error."""
        from semantic_memory.core.exceptions import EmbeddingError, ProviderUnavailableError

        error = ProviderUnavailableError("openai", "no key")
        assert isinstance(error, EmbeddingError)
        assert error.details == {"provider": "openai", "reason": "no key"}

    def test_retrieval_and_storage_codes(self):
        """Test codes of the retrieval and storage families."""
        from semantic_memory.core.exceptions import StorageError, VectorStoreError

        assert VectorStoreError("x").code == "RETRIEVAL_ERROR"
        assert StorageError("x").code == "STORAGE_ERROR"

    def test_validation_error_names_field(self):
        """Test ValidationError formats its message."""
        from semantic_memory.core.exceptions import ValidationError

        error = ValidationError("chunk_size", "too small")
        assert error.message == "Validation error for chunk_size: too small"
        assert error.details == {"field": "chunk_size"}

    def test_exceptions_can_be_raised(self):
        """Test that exceptions behave as normal exceptions."""
        from semantic_memory.core.exceptions import ConfigurationError, MemoryException

        with pytest.raises(MemoryException):
            raise ConfigurationError("bad config")
