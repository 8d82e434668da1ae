"""
Tests for semantic_memory/ingestion/chunking/
"""

import pytest


def text_metadata(file_name=None):
    from semantic_memory.core.types import SourceMetadata

    return SourceMetadata(uri="memory://doc", source_type="memory", mime_type="text/plain", file_name=file_name)


async def collect(fragments):
    return [fragment async for fragment in fragments]


class TestContentTypes:
    """Tests for textual content type detection."""

    @pytest.mark.parametrize("content_type,expected", [
        ("text/plain", True),
        ("text/markdown; charset=utf-8", True),
        ("application/json", True),
        ("application/vnd.api+json", True),
        ("application/atom+xml", True),
        ("application/pdf", False),
        ("image/png", False),
        ("application/octet-stream", False),
    ])
    def test_is_text_content_type(self, content_type, expected):
        """Test which content types count as text."""
        from semantic_memory.ingestion.chunking.base import is_text_content_type

        assert is_text_content_type(content_type) is expected


class TestRecursiveTextChunker:
    """Tests for the RecursiveTextChunker."""

    @pytest.mark.asyncio
    async def test_short_text_is_one_fragment(self, chunking_config):
        """Test that text under the chunk size is not split."""
        from semantic_memory.ingestion.chunking.recursive import RecursiveTextChunker

        fragments = await collect(RecursiveTextChunker().chunk("  short text  ", chunking_config, text_metadata()))

        assert [f.content for f in fragments] == ["short text"]

    @pytest.mark.asyncio
    async def test_fragments_respect_chunk_size(self, chunking_config, sample_document_content):
        """Test that no fragment exceeds the chunk size."""
        from semantic_memory.ingestion.chunking.recursive import RecursiveTextChunker

        fragments = await collect(
            RecursiveTextChunker().chunk(sample_document_content, chunking_config, text_metadata())
        )

        assert len(fragments) > 1
        for fragment in fragments:
            assert 0 < len(fragment.content) <= chunking_config.default_chunk_size
            assert fragment.metadata["chunker"] == "RecursiveTextChunker"
            assert fragment.metadata["original_length"] == len(sample_document_content)

    @pytest.mark.asyncio
    async def test_adjacent_fragments_overlap(self, chunking_config):
        """Test that each fragment starts inside the previous one."""
        from semantic_memory.ingestion.chunking.recursive import RecursiveTextChunker

        text = " ".join(f"w{i}" for i in range(200))
        fragments = await collect(RecursiveTextChunker().chunk(text, chunking_config, text_metadata()))

        assert len(fragments) > 2
        for previous, current in zip(fragments, fragments[1:]):
            assert current.metadata["start_char"] < previous.metadata["end_char"]
            assert current.metadata["start_char"] > previous.metadata["start_char"]

    @pytest.mark.asyncio
    async def test_offsets_locate_fragment(self, chunking_config):
        """Test that start and end offsets point at the fragment text."""
        from semantic_memory.ingestion.chunking.recursive import RecursiveTextChunker

        text = " ".join(f"Sentence number {i} is here." for i in range(30))
        fragments = await collect(RecursiveTextChunker().chunk(text, chunking_config, text_metadata()))

        assert len(fragments) > 1
        for fragment in fragments:
            start, end = fragment.metadata["start_char"], fragment.metadata["end_char"]
            assert text[start:end] == fragment.content

    @pytest.mark.asyncio
    async def test_character_level_split(self, chunking_config):
        """Test text with no separators at all."""
        from semantic_memory.ingestion.chunking.recursive import RecursiveTextChunker

        fragments = await collect(RecursiveTextChunker().chunk("a" * 250, chunking_config, text_metadata()))

        assert len(fragments) > 2
        assert all(len(f.content) <= 100 for f in fragments)

    @pytest.mark.asyncio
    async def test_deterministic(self, chunking_config, sample_document_content):
        """Test that chunking the same input twice gives the same output."""
        from semantic_memory.ingestion.chunking.recursive import RecursiveTextChunker

        chunker = RecursiveTextChunker()
        first = await collect(chunker.chunk(sample_document_content, chunking_config, text_metadata()))
        second = await collect(chunker.chunk(sample_document_content, chunking_config, text_metadata()))

        assert [f.content for f in first] == [f.content for f in second]

    @pytest.mark.asyncio
    async def test_whitespace_only_yields_nothing(self, chunking_config):
        """Test that blank text produces no fragments."""
        from semantic_memory.ingestion.chunking.recursive import RecursiveTextChunker

        assert await collect(RecursiveTextChunker().chunk(" \n\n \t", chunking_config, text_metadata())) == []

    @pytest.mark.asyncio
    async def test_extension_separators(self):
        """Test that per-extension separators drive the split."""
        from semantic_memory.core.config import ChunkingConfig
        from semantic_memory.ingestion.chunking.recursive import RecursiveTextChunker

        config = ChunkingConfig(
            default_chunk_size=60,
            default_chunk_overlap=0,
            recursive_separators={".py": ["\ndef ", "\n", " ", ""]},
        )
        code = "def first():\n    return 1\n\ndef second():\n    return 2\n\ndef third():\n    return 3\n"
        fragments = await collect(RecursiveTextChunker().chunk(code, config, text_metadata("mod.py")))

        assert len(fragments) > 1
        assert fragments[0].content.startswith("def first")

    @pytest.mark.asyncio
    async def test_rejects_bytes(self, chunking_config):
        """Test that binary content is refused."""
        from semantic_memory.core.exceptions import ChunkingError
        from semantic_memory.ingestion.chunking.recursive import RecursiveTextChunker

        with pytest.raises(ChunkingError):
            await collect(RecursiveTextChunker().chunk(b"bytes", chunking_config, text_metadata()))

    @pytest.mark.asyncio
    async def test_fragments_are_pulled_lazily(self, chunking_config, sample_document_content):
        """Test that fragments are produced one at a time."""
        from semantic_memory.ingestion.chunking.recursive import RecursiveTextChunker

        fragments = RecursiveTextChunker().chunk(sample_document_content, chunking_config, text_metadata())
        first = await anext(fragments)
        await fragments.aclose()

        assert first.content


class TestFixedSizeBinaryChunker:
    """Tests for the FixedSizeBinaryChunker."""

    @pytest.mark.asyncio
    async def test_windows(self, chunking_config):
        """Test 10000 bytes cut into 4096-byte windows."""
        from semantic_memory.ingestion.chunking.binary import FixedSizeBinaryChunker

        data = bytes(range(256)) * 39 + bytes(16)
        assert len(data) == 10000

        fragments = await collect(FixedSizeBinaryChunker().chunk(data, chunking_config, text_metadata()))

        assert [(f.metadata["start_byte"], f.metadata["end_byte"]) for f in fragments] == [
            (0, 4096), (4096, 8192), (8192, 10000),
        ]
        assert b"".join(f.content for f in fragments) == data

    @pytest.mark.parametrize("size,expected", [(1, 1), (4096, 1), (4097, 2), (12288, 3)])
    @pytest.mark.asyncio
    async def test_window_count(self, chunking_config, size, expected):
        """Test that N bytes give ceil(N / window) fragments."""
        from semantic_memory.ingestion.chunking.binary import FixedSizeBinaryChunker

        fragments = await collect(FixedSizeBinaryChunker().chunk(b"x" * size, chunking_config, text_metadata()))
        assert len(fragments) == expected

    @pytest.mark.asyncio
    async def test_rejects_text(self, chunking_config):
        """Test that text content is refused."""
        from semantic_memory.core.exceptions import ChunkingError
        from semantic_memory.ingestion.chunking.binary import FixedSizeBinaryChunker

        with pytest.raises(ChunkingError):
            await collect(FixedSizeBinaryChunker().chunk("text", chunking_config, text_metadata()))


class TestStrategyRegistry:
    """Tests for StrategyRegistry."""

    def test_default_dispatch(self):
        """Test the default text and binary strategies."""
        from semantic_memory.ingestion.chunking.registry import StrategyRegistry

        registry = StrategyRegistry()
        assert registry.find("text/plain").name == "RecursiveTextChunker"
        assert registry.find("application/json").name == "RecursiveTextChunker"
        assert registry.find("image/png").name == "FixedSizeBinaryChunker"

    def test_no_match(self):
        """Test that an unmatched content type returns None."""
        from semantic_memory.ingestion.chunking.recursive import RecursiveTextChunker
        from semantic_memory.ingestion.chunking.registry import StrategyRegistry

        assert StrategyRegistry([RecursiveTextChunker()]).find("image/png") is None
