"""
Semantic Memory - In-Memory Source
"""

from __future__ import annotations

from typing import AsyncIterator, Optional, Union

from semantic_memory.core.types import SourceMetadata, utc_now
from semantic_memory.ingestion.sources.base import ContentSource, ContentStream


class InMemorySource(ContentSource):
    """Bytes or text that are already loaded, such as an upload or a clipboard paste."""

    def __init__(
        self,
        uri: str,
        data: Union[str, bytes],
        mime_type: Optional[str] = None,
        file_name: Optional[str] = None,
        source_type: str = "memory",
        block_size: int = 64 * 1024,
    ) -> None:
        self._uri = uri
        self.data = data.encode("utf-8") if isinstance(data, str) else data
        self.mime_type = mime_type or ("text/plain" if isinstance(data, str) else None)
        self.file_name = file_name
        self.source_type = source_type
        self.block_size = max(1, block_size)
        self._created_at = utc_now()

    @property
    def uri(self) -> str:
        return self._uri

    async def get_metadata(self) -> SourceMetadata:
        return SourceMetadata(
            uri=self._uri,
            source_type=self.source_type,
            size=len(self.data),
            last_modified=self._created_at,
            mime_type=self.mime_type,
            file_name=self.file_name,
        )

    async def open_stream(self) -> ContentStream:
        data, size = self.data, self.block_size

        async def blocks() -> AsyncIterator[bytes]:
            for start in range(0, len(data), size):
                yield data[start:start + size]

        return ContentStream(blocks())
