"""
Chunking strategies: split extracted content into bounded fragments.
"""

from semantic_memory.ingestion.chunking.base import ChunkingStrategy, is_text_content_type
from semantic_memory.ingestion.chunking.binary import FixedSizeBinaryChunker
from semantic_memory.ingestion.chunking.recursive import RecursiveTextChunker
from semantic_memory.ingestion.chunking.registry import StrategyRegistry, default_strategies

__all__ = [
    "ChunkingStrategy",
    "is_text_content_type",
    "FixedSizeBinaryChunker",
    "RecursiveTextChunker",
    "StrategyRegistry",
    "default_strategies",
]
