"""
Semantic Memory - Chunking Strategy Registry
"""

from typing import Iterable, Optional

from semantic_memory.core.logging import LoggerMixin
from semantic_memory.ingestion.chunking.base import ChunkingStrategy
from semantic_memory.ingestion.chunking.binary import FixedSizeBinaryChunker
from semantic_memory.ingestion.chunking.recursive import RecursiveTextChunker


def default_strategies() -> list[ChunkingStrategy]:
    return [
        RecursiveTextChunker(),
        FixedSizeBinaryChunker(),
    ]


class StrategyRegistry(LoggerMixin):
    """Ordered, read-only list of chunking strategies. First match wins."""

    def __init__(self, strategies: Optional[Iterable[ChunkingStrategy]] = None):
        self._strategies: tuple[ChunkingStrategy, ...] = tuple(
            default_strategies() if strategies is None else strategies
        )
        self.logger.debug(
            "Strategy registry built",
            strategies=[s.name for s in self._strategies],
        )

    def __len__(self) -> int:
        return len(self._strategies)

    def __iter__(self):
        return iter(self._strategies)

    @property
    def names(self) -> list[str]:
        return [s.name for s in self._strategies]

    def find(self, content_type: str) -> Optional[ChunkingStrategy]:
        for strategy in self._strategies:
            if strategy.supports(content_type):
                return strategy
        return None
