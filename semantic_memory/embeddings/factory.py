"""
Semantic Memory - Embedding Provider Factory
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from semantic_memory.core.config import Settings
from semantic_memory.core.exceptions import ConfigurationError
from semantic_memory.core.logging import get_logger
from semantic_memory.embeddings.base import EmbeddingProvider
from semantic_memory.embeddings.openai import OpenAIEmbeddings

logger = get_logger(__name__)


class EmbeddingBackend(str, Enum):
    """Available embedding providers."""
    OPENAI = "openai"
    NONE = "none"


def create_embedding_provider(settings: Settings) -> Optional[EmbeddingProvider]:
    """
    Build the configured embedding provider.

    Returns None when embeddings are disabled or cannot be configured, in
    which case the semantic index answers searches lexically.
    """
    try:
        backend = EmbeddingBackend(settings.EMBEDDING_PROVIDER.lower())
    except ValueError as e:
        raise ConfigurationError(f"Unknown embedding provider: {settings.EMBEDDING_PROVIDER}") from e

    if backend is EmbeddingBackend.NONE:
        return None

    if backend is EmbeddingBackend.OPENAI:
        if not settings.OPENAI_API_KEY:
            logger.warning("OPENAI_API_KEY not set, semantic search disabled")
            return None
        return OpenAIEmbeddings(
            api_key=settings.OPENAI_API_KEY,
            model=settings.EMBEDDING_MODEL,
            dimensions=settings.EMBEDDING_DIMENSIONS,
        )
    raise ConfigurationError(f"Unhandled embedding provider: {backend}")
