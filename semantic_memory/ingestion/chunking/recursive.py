"""
Semantic Memory - Recursive Text Chunker
"""

from __future__ import annotations

from collections import deque
from typing import AsyncIterator, Iterator

from semantic_memory.core.config import ChunkingConfig
from semantic_memory.core.exceptions import ChunkingError
from semantic_memory.core.types import Content, Fragment, SourceMetadata
from semantic_memory.ingestion.chunking.base import ChunkingStrategy, is_text_content_type


class RecursiveTextChunker(ChunkingStrategy):
    """
    Recursively splits text using a hierarchy of separators.

    Text is first split on the coarsest separator (paragraphs). Pieces that
    are still too long are split again on the next one, down to single
    characters. Adjacent pieces are then merged back up to the chunk size,
    and each fragment starts with up to ``chunk_overlap`` characters carried
    over from the end of the previous one.
    """

    def supports(self, content_type: str) -> bool:
        return is_text_content_type(content_type)

    async def chunk(
        self,
        content: Content,
        config: ChunkingConfig,
        metadata: SourceMetadata,
    ) -> AsyncIterator[Fragment]:
        if not isinstance(content, str):
            raise ChunkingError(
                f"{self.name} expects text content, got {type(content).__name__}",
                details={"uri": metadata.uri},
            )

        size = config.default_chunk_size
        overlap = config.default_chunk_overlap
        separators = config.separators_for(metadata.extension)

        splits = self._split_recursive(content, separators, size)

        search_from = 0
        for text in self._merge_splits(splits, size, overlap):
            fragment_metadata = {
                "chunker": self.name,
                "chunk_size": len(text),
                "original_length": len(content),
            }
            start_char = content.find(text, search_from)
            if start_char != -1:
                fragment_metadata["start_char"] = start_char
                fragment_metadata["end_char"] = start_char + len(text)
                search_from = start_char + 1
            yield Fragment(content=text, metadata=fragment_metadata)

    def _split_recursive(
        self,
        text: str,
        separators: list[str],
        size: int,
    ) -> list[str]:
        """Split text into pieces no longer than ``size``, coarse separators first."""
        if len(text) <= size:
            return [text] if text.strip() else []

        if not separators or separators[0] == "":
            # Character level; merging glues the characters back together
            return list(text)

        separator = separators[0]
        remaining_separators = separators[1:]

        splits = text.split(separator)
        if len(splits) == 1:
            return self._split_recursive(text, remaining_separators, size)

        pieces = []
        for i, split in enumerate(splits):
            # Keep the separator so merged text reads like the original
            if i < len(splits) - 1:
                split = split + separator
            if not split.strip():
                continue

            if len(split) <= size:
                pieces.append(split)
            else:
                pieces.extend(self._split_recursive(split, remaining_separators, size))

        return pieces

    def _merge_splits(
        self,
        splits: list[str],
        size: int,
        overlap: int,
    ) -> Iterator[str]:
        """Merge pieces up to ``size``, carrying ``overlap`` characters forward."""
        current: deque[str] = deque()
        total = 0

        for piece in splits:
            length = len(piece)
            if current and total + length > size:
                text = "".join(current).strip()
                if text:
                    yield text
                # Drop leading pieces until only the overlap tail remains
                while current and (total > overlap or total + length > size):
                    total -= len(current.popleft())
            current.append(piece)
            total += length

        text = "".join(current).strip()
        if text:
            yield text
