"""
Semantic Memory - Binary Extractor
"""

from semantic_memory.core.types import ExtractedContent, SourceMetadata
from semantic_memory.ingestion.extractors.base import GENERIC_MIME_TYPE, ContentExtractor
from semantic_memory.ingestion.sources.base import ContentStream


class BinaryExtractor(ContentExtractor):
    """Keeps raw bytes. Accepts every source, so it belongs last in a registry."""

    def supports(self, metadata: SourceMetadata) -> bool:
        return True

    async def extract(
        self,
        stream: ContentStream,
        metadata: SourceMetadata,
    ) -> ExtractedContent:
        data = await stream.read_all()
        return ExtractedContent(
            content_type=metadata.mime_type or GENERIC_MIME_TYPE,
            content=data,
            metadata={},
        )
