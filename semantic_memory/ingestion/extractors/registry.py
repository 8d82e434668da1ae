"""
Semantic Memory - Content Extractor Registry
"""

from typing import Iterable, Optional

from semantic_memory.core.logging import LoggerMixin
from semantic_memory.core.types import SourceMetadata
from semantic_memory.ingestion.extractors.base import ContentExtractor
from semantic_memory.ingestion.extractors.binary import BinaryExtractor
from semantic_memory.ingestion.extractors.html import HtmlExtractor
from semantic_memory.ingestion.extractors.pdf import PdfExtractor
from semantic_memory.ingestion.extractors.text import TextExtractor


def default_extractors() -> list[ContentExtractor]:
    """Default extractor order. HTML before text, binary last as the catch-all."""
    return [
        HtmlExtractor(),
        PdfExtractor(),
        TextExtractor(),
        BinaryExtractor(),
    ]


class ExtractorRegistry(LoggerMixin):
    """
    Ordered, read-only list of extractors.

    ``find`` returns the first extractor whose ``supports`` accepts the
    metadata, so registration order decides between overlapping extractors.
    """

    def __init__(self, extractors: Optional[Iterable[ContentExtractor]] = None):
        self._extractors: tuple[ContentExtractor, ...] = tuple(
            default_extractors() if extractors is None else extractors
        )
        self.logger.debug(
            "Extractor registry built",
            extractors=[e.name for e in self._extractors],
        )

    def __len__(self) -> int:
        return len(self._extractors)

    def __iter__(self):
        return iter(self._extractors)

    @property
    def names(self) -> list[str]:
        return [e.name for e in self._extractors]

    def find(self, metadata: SourceMetadata) -> Optional[ContentExtractor]:
        for extractor in self._extractors:
            if extractor.supports(metadata):
                return extractor
        return None
