"""
Semantic Memory - Content Source Base Classes
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import AsyncIterator, Awaitable, Callable, Optional

from semantic_memory.core.logging import LoggerMixin
from semantic_memory.core.types import SourceMetadata


class ContentStream:
    """
    Asynchronous byte stream over a source's content.

    Iterating yields byte blocks in order. ``aclose`` releases the underlying
    resource exactly once no matter how many times it is called.
    """

    def __init__(
        self,
        blocks: AsyncIterator[bytes],
        on_close: Optional[Callable[[], Awaitable[None]]] = None,
    ) -> None:
        self._blocks = blocks
        self._on_close = on_close
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[bytes]:
        if self._closed:
            raise ValueError("Cannot read from a closed stream")
        async for block in self._blocks:
            yield block

    async def read_all(self) -> bytes:
        """Read every remaining block into one buffer."""
        parts = [block async for block in self]
        return b"".join(parts)

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        aclose = getattr(self._blocks, "aclose", None)
        if aclose is not None:
            await aclose()
        if self._on_close is not None:
            await self._on_close()

    async def __aenter__(self) -> "ContentStream":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


class ContentSource(ABC, LoggerMixin):
    """Abstract base class for anything the pipeline can ingest."""

    @property
    @abstractmethod
    def uri(self) -> str:
        """Stable identifier of the source."""
        pass

    @abstractmethod
    async def get_metadata(self) -> SourceMetadata:
        """
        Take a metadata snapshot.

        Raises:
            SourceRetrievalError: If the source cannot be inspected
        """
        pass

    @abstractmethod
    async def open_stream(self) -> ContentStream:
        """Open a fresh stream over the source's content."""
        pass

    async def cleanup(self) -> None:
        """Release source-level resources. Called once after processing."""
        return None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.uri!r})"
