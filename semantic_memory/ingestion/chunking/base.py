"""
Semantic Memory - Chunking Base Classes
"""

from abc import ABC, abstractmethod
from typing import AsyncIterator

from semantic_memory.core.config import ChunkingConfig
from semantic_memory.core.logging import LoggerMixin
from semantic_memory.core.types import Content, Fragment, SourceMetadata


# application/* types that carry text
TEXTUAL_APPLICATION_TYPES = frozenset({
    "application/json",
    "application/ld+json",
    "application/xml",
    "application/xhtml+xml",
    "application/javascript",
    "application/typescript",
    "application/yaml",
    "application/x-yaml",
    "application/toml",
    "application/sql",
    "application/graphql",
    "application/x-sh",
    "application/x-python",
})


def is_text_content_type(content_type: str) -> bool:
    """True for MIME types whose payload is human-readable text."""
    base = content_type.split(";", 1)[0].strip().lower()
    if base.startswith("text/"):
        return True
    if base in TEXTUAL_APPLICATION_TYPES:
        return True
    return base.startswith("application/") and base.endswith(("+json", "+xml"))


class ChunkingStrategy(ABC, LoggerMixin):
    """Abstract base class for chunking strategies."""

    @property
    def name(self) -> str:
        return self.__class__.__name__

    @abstractmethod
    def supports(self, content_type: str) -> bool:
        """Check whether this strategy can split the given content type."""
        pass

    @abstractmethod
    def chunk(
        self,
        content: Content,
        config: ChunkingConfig,
        metadata: SourceMetadata,
    ) -> AsyncIterator[Fragment]:
        """
        Split content into fragments.

        The returned iterator is single-pass: each fragment is produced only
        when the caller asks for it, and a finished iterator cannot be
        restarted. Call ``chunk`` again to split the same content anew.

        Args:
            content: Extracted text or bytes
            config: Validated pipeline configuration
            metadata: Snapshot of the source the content came from

        Returns:
            Async iterator of Fragment objects

        Raises:
            ChunkingError: If the content variant does not suit the strategy
        """
        pass
