"""
Semantic Memory - Custom Exceptions
"""

from typing import Any, Optional


class MemoryException(Exception):
    """Base exception for all semantic memory errors."""

    def __init__(
        self,
        message: str,
        code: str = "MEMORY_ERROR",
        details: Optional[dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


# =============================================================================
# Ingestion Exceptions
# =============================================================================

class IngestionError(MemoryException):
    """Base exception for ingestion errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message, code="INGESTION_ERROR", details=details)


class SourceRetrievalError(IngestionError):
    """Raised when a source's metadata or content cannot be read."""

    def __init__(self, uri: str, reason: str):
        super().__init__(
            message=f"Failed to read source {uri}: {reason}",
            details={"uri": uri, "reason": reason}
        )


class PreconditionFailedError(IngestionError):
    """Raised when a source is rejected before extraction."""
    pass


class NoMatchingExtractorError(IngestionError):
    """Raised when no registered extractor accepts a source."""

    def __init__(self, uri: str, mime_type: Optional[str] = None):
        super().__init__(
            message="No suitable content extractor found.",
            details={"uri": uri, "mime_type": mime_type}
        )


class ExtractionError(IngestionError):
    """Raised when an extractor cannot decode its input."""
    pass


class NoMatchingStrategyError(IngestionError):
    """Raised when no chunking strategy accepts a content type."""

    def __init__(self, content_type: str):
        super().__init__(
            message=f"No chunking strategy for {content_type}",
            details={"content_type": content_type}
        )


class ChunkingError(IngestionError):
    """Raised when chunking fails."""
    pass


class ProcessingCancelledError(IngestionError):
    """Raised when a cancellation signal is observed mid-source."""

    def __init__(self, uri: str):
        super().__init__(
            message="Processing cancelled.",
            details={"uri": uri}
        )


class EmbeddingError(IngestionError):
    """Raised when embedding generation fails."""
    pass


class ProviderUnavailableError(EmbeddingError):
    """Raised when the embedding provider cannot be used at all."""

    def __init__(self, provider: str, reason: str):
        super().__init__(
            message=f"Embedding provider {provider} unavailable: {reason}",
            details={"provider": provider, "reason": reason}
        )


# =============================================================================
# Retrieval Exceptions
# =============================================================================

class RetrievalError(MemoryException):
    """Base exception for retrieval errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message, code="RETRIEVAL_ERROR", details=details)


class VectorStoreError(RetrievalError):
    """Raised when vector store operations fail."""
    pass


# =============================================================================
# Storage Exceptions
# =============================================================================

class StorageError(MemoryException):
    """Raised when a record store operation fails."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message, code="STORAGE_ERROR", details=details)


# =============================================================================
# Validation Exceptions
# =============================================================================

class ValidationError(MemoryException):
    """Raised when input validation fails."""

    def __init__(self, field: str, message: str):
        super().__init__(
            message=f"Validation error for {field}: {message}",
            code="VALIDATION_ERROR",
            details={"field": field}
        )


class ConfigurationError(MemoryException):
    """Raised when configuration is invalid."""

    def __init__(self, message: str):
        super().__init__(message, code="CONFIGURATION_ERROR")
