"""
Semantic Memory - Content Extractor Base Classes
"""

from abc import ABC, abstractmethod
from typing import Optional

from semantic_memory.core.logging import LoggerMixin
from semantic_memory.core.types import ExtractedContent, SourceMetadata
from semantic_memory.ingestion.sources.base import ContentStream


GENERIC_MIME_TYPE = "application/octet-stream"


class ContentExtractor(ABC, LoggerMixin):
    """Abstract base class for content extractors."""

    supported_extensions: list[str] = []
    supported_mimetypes: list[str] = []

    @property
    def name(self) -> str:
        return self.__class__.__name__

    def supports(self, metadata: SourceMetadata) -> bool:
        """Check whether this extractor can decode the described source."""
        return self.can_process(metadata.extension, metadata.mime_type)

    @classmethod
    def can_process(cls, extension: Optional[str], mimetype: Optional[str] = None) -> bool:
        """Match on MIME type, or on extension when the MIME type says nothing."""
        if mimetype and mimetype in cls.supported_mimetypes:
            return True
        if extension and (not mimetype or mimetype == GENERIC_MIME_TYPE):
            ext = extension.lower().lstrip(".")
            return ext in [e.lstrip(".") for e in cls.supported_extensions]
        return False

    @abstractmethod
    async def extract(
        self,
        stream: ContentStream,
        metadata: SourceMetadata,
    ) -> ExtractedContent:
        """
        Read a source's stream and decode its content.

        Args:
            stream: Open stream over the source content
            metadata: Snapshot of the source

        Returns:
            ExtractedContent holding either text or raw bytes

        Raises:
            ExtractionError: If the content is malformed
        """
        pass

    def _decode(self, data: bytes, encoding: str = "utf-8") -> str:
        """Decode bytes strictly, stripping a UTF-8 byte order mark."""
        text = data.decode(encoding)
        return text.lstrip("\ufeff")
