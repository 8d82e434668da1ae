"""
Content extractors: turn a source stream into text or raw bytes.
"""

from semantic_memory.ingestion.extractors.base import ContentExtractor
from semantic_memory.ingestion.extractors.binary import BinaryExtractor
from semantic_memory.ingestion.extractors.html import HtmlExtractor
from semantic_memory.ingestion.extractors.pdf import PdfExtractor
from semantic_memory.ingestion.extractors.registry import ExtractorRegistry, default_extractors
from semantic_memory.ingestion.extractors.text import TextExtractor

__all__ = [
    "ContentExtractor",
    "BinaryExtractor",
    "HtmlExtractor",
    "PdfExtractor",
    "TextExtractor",
    "ExtractorRegistry",
    "default_extractors",
]
