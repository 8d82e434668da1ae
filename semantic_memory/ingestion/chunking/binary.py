"""
Semantic Memory - Fixed-Size Binary Chunker
"""

from typing import AsyncIterator

from semantic_memory.core.config import ChunkingConfig
from semantic_memory.core.exceptions import ChunkingError
from semantic_memory.core.types import Content, Fragment, SourceMetadata
from semantic_memory.ingestion.chunking.base import ChunkingStrategy, is_text_content_type


class FixedSizeBinaryChunker(ChunkingStrategy):
    """Cuts bytes into windows of ``fixed_binary_chunk_size`` with no overlap."""

    def supports(self, content_type: str) -> bool:
        return not is_text_content_type(content_type)

    async def chunk(
        self,
        content: Content,
        config: ChunkingConfig,
        metadata: SourceMetadata,
    ) -> AsyncIterator[Fragment]:
        if not isinstance(content, (bytes, bytearray)):
            raise ChunkingError(
                f"{self.name} expects binary content, got {type(content).__name__}",
                details={"uri": metadata.uri},
            )

        window = config.fixed_binary_chunk_size
        for start in range(0, len(content), window):
            end = min(start + window, len(content))
            yield Fragment(
                content=bytes(content[start:end]),
                metadata={
                    "chunker": self.name,
                    "start_byte": start,
                    "end_byte": end,
                    "chunk_size": end - start,
                },
            )
