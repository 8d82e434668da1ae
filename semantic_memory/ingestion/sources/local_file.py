"""
Semantic Memory - Local File Source
"""

from __future__ import annotations

import asyncio
import os
import stat
from datetime import datetime, timezone
from pathlib import Path
from typing import AsyncIterator, Union

from semantic_memory.core.exceptions import SourceRetrievalError
from semantic_memory.core.types import SourceMetadata
from semantic_memory.ingestion.sources.base import ContentSource, ContentStream


LOCAL_FILE = "local_file"

READ_BLOCK_SIZE = 64 * 1024

# Extension map instead of the mimetypes module, whose answers depend on the
# host's registry (".ts" comes back as MPEG transport stream on most systems)
MIME_TYPES = {
    ".txt": "text/plain",
    ".md": "text/markdown",
    ".html": "text/html",
    ".htm": "text/html",
    ".css": "text/css",
    ".js": "text/javascript",
    ".csv": "text/csv",
    ".json": "application/json",
    ".xml": "application/xml",
    ".yaml": "application/yaml",
    ".yml": "application/yaml",
    ".pdf": "application/pdf",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".wav": "audio/wav",
    ".mp3": "audio/mpeg",
    ".ogg": "audio/ogg",
    ".mp4": "video/mp4",
    ".webm": "video/webm",
    ".zip": "application/zip",
    ".gz": "application/gzip",
}

DEFAULT_MIME_TYPE = "application/octet-stream"


def detect_mime_type(path: Union[str, Path]) -> str:
    """Guess a MIME type from the file extension."""
    return MIME_TYPES.get(Path(path).suffix.lower(), DEFAULT_MIME_TYPE)


class LocalFileSource(ContentSource):
    """A file on the local filesystem, addressed by absolute path."""

    def __init__(self, path: Union[str, Path]) -> None:
        path = Path(path)
        if not path.is_absolute():
            raise ValueError(f"LocalFileSource requires an absolute path. Received: {path}")
        self.path = path
        self._uri = path.as_uri()

    @property
    def uri(self) -> str:
        return self._uri

    async def get_metadata(self) -> SourceMetadata:
        try:
            info = await asyncio.to_thread(os.stat, self.path)
        except OSError as e:
            self.logger.error("Failed to stat file", uri=self.uri, error=str(e))
            raise SourceRetrievalError(self.uri, str(e)) from e

        if not stat.S_ISREG(info.st_mode):
            raise SourceRetrievalError(self.uri, f"Path is not a file: {self.path}")

        return SourceMetadata(
            uri=self.uri,
            source_type=LOCAL_FILE,
            size=info.st_size,
            last_modified=datetime.fromtimestamp(info.st_mtime, tz=timezone.utc),
            mime_type=detect_mime_type(self.path),
            file_name=self.path.name,
            file_path=str(self.path),
        )

    async def open_stream(self) -> ContentStream:
        try:
            handle = await asyncio.to_thread(open, self.path, "rb")
        except OSError as e:
            self.logger.error("Failed to open file", uri=self.uri, error=str(e))
            raise SourceRetrievalError(self.uri, str(e)) from e

        async def blocks() -> AsyncIterator[bytes]:
            while True:
                block = await asyncio.to_thread(handle.read, READ_BLOCK_SIZE)
                if not block:
                    break
                yield block

        async def close() -> None:
            await asyncio.to_thread(handle.close)

        return ContentStream(blocks(), on_close=close)
