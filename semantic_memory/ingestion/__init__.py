"""
Semantic Memory - Ingestion Module

Sources, extractors, chunking strategies and the pipeline that ties them
to a record store.
"""

from semantic_memory.ingestion.chunking import (
    ChunkingStrategy,
    FixedSizeBinaryChunker,
    RecursiveTextChunker,
    StrategyRegistry,
    default_strategies,
)
from semantic_memory.ingestion.extractors import (
    BinaryExtractor,
    ContentExtractor,
    ExtractorRegistry,
    HtmlExtractor,
    PdfExtractor,
    TextExtractor,
    default_extractors,
)
from semantic_memory.ingestion.pipeline import IngestionPipeline
from semantic_memory.ingestion.sources import ContentSource, ContentStream, InMemorySource, LocalFileSource

__all__ = [
    "ChunkingStrategy",
    "FixedSizeBinaryChunker",
    "RecursiveTextChunker",
    "StrategyRegistry",
    "default_strategies",
    "BinaryExtractor",
    "ContentExtractor",
    "ExtractorRegistry",
    "HtmlExtractor",
    "PdfExtractor",
    "TextExtractor",
    "default_extractors",
    "IngestionPipeline",
    "ContentSource",
    "ContentStream",
    "InMemorySource",
    "LocalFileSource",
]
