"""
Semantic Memory - Fragment Metadata

Builds the metadata stored alongside each fragment: where it came from, how
it was extracted and chunked, and the source/type/tags used for filtering.
"""

from __future__ import annotations

from typing import Any

from semantic_memory.core.types import ExtractedContent, MemorySource, MemoryType, SourceMetadata


FILE_SOURCE_TYPES = ("local_file", "http_url", "s3_object")


def map_to_memory_source(source_type: str) -> MemorySource:
    """Map a source type tag onto a MemorySource."""
    if source_type in FILE_SOURCE_TYPES:
        return MemorySource.FILE
    if "db" in source_type or "database" in source_type:
        return MemorySource.DATABASE
    return MemorySource.UNKNOWN


def map_to_memory_type(content_type: str, source_type: str) -> MemoryType:
    """Map an extracted content type onto a MemoryType."""
    if content_type.startswith("text/"):
        return MemoryType.TEXT
    if "pdf" in content_type:
        return MemoryType.DOCUMENT
    if "word" in content_type or "opendocument.text" in content_type:
        return MemoryType.DOCUMENT
    if content_type.startswith("image/"):
        return MemoryType.IMAGE
    if content_type.startswith("audio/"):
        return MemoryType.AUDIO
    if content_type.startswith("video/"):
        return MemoryType.VIDEO
    if content_type == "application/octet-stream" or "binary" in content_type:
        return MemoryType.BINARY
    if source_type == "local_file":
        return MemoryType.FILE
    return MemoryType.UNKNOWN


def generate_tags(source: SourceMetadata, extracted: ExtractedContent) -> list[str]:
    """Ordered, de-duplicated tags for a source's fragments."""
    tags = [
        map_to_memory_source(source.source_type).value,
        map_to_memory_type(extracted.content_type, source.source_type).value,
    ]
    if source.extension:
        tags.append(f"ext:{source.extension.lstrip('.')}")
    if extracted.content_type:
        tags.append(f"mime:{extracted.content_type.replace('/', '_')}")
    language = extracted.metadata.get("language")
    if language:
        tags.append(f"lang:{language}")
    return list(dict.fromkeys(tags))


def chunk_id(uri: str, index: int) -> str:
    return f"{uri}::chunk_{index}"


def build_fragment_metadata(
    source: SourceMetadata,
    extracted: ExtractedContent,
    fragment_metadata: dict[str, Any],
    index: int,
) -> dict[str, Any]:
    """
    Combine source, extraction and fragment metadata for one record.

    Later groups override earlier ones on key collisions, except for
    ``source``, ``type`` and ``tags``, which are always computed here.
    """
    combined: dict[str, Any] = {
        # Source
        "source_uri": source.uri,
        "source_type": source.source_type,
        "file_name": source.file_name,
        "file_extension": source.extension,
        "file_size": source.size,
        "file_mtime": source.last_modified.isoformat() if source.last_modified else None,
        # Extraction
        "extracted_content_type": extracted.content_type,
        **extracted.metadata,
        # Fragment
        "chunk_index": index,
        "chunk_id": chunk_id(source.uri, index),
        **fragment_metadata,
        # Filtering
        "source": map_to_memory_source(source.source_type).value,
        "type": map_to_memory_type(extracted.content_type, source.source_type).value,
        "tags": generate_tags(source, extracted),
    }
    return {key: value for key, value in combined.items() if value is not None}
