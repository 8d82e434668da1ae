"""
Content sources for the ingestion pipeline.
"""

from semantic_memory.ingestion.sources.base import ContentSource, ContentStream
from semantic_memory.ingestion.sources.local_file import LocalFileSource, detect_mime_type
from semantic_memory.ingestion.sources.memory import InMemorySource

__all__ = [
    "ContentSource",
    "ContentStream",
    "LocalFileSource",
    "InMemorySource",
    "detect_mime_type",
]
