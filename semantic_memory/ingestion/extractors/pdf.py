"""
Semantic Memory - PDF Extractor
"""

from __future__ import annotations

import io

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from semantic_memory.core.exceptions import ExtractionError
from semantic_memory.core.types import ExtractedContent, SourceMetadata
from semantic_memory.ingestion.extractors.base import ContentExtractor
from semantic_memory.ingestion.sources.base import ContentStream


class PdfExtractor(ContentExtractor):
    """Extracts page text from PDF documents."""

    supported_extensions = [".pdf"]
    supported_mimetypes = ["application/pdf"]

    async def extract(
        self,
        stream: ContentStream,
        metadata: SourceMetadata,
    ) -> ExtractedContent:
        data = await stream.read_all()
        try:
            reader = PdfReader(io.BytesIO(data))
            pages = [page.extract_text() or "" for page in reader.pages]
        except (PdfReadError, ValueError, KeyError) as e:
            self.logger.error("Failed to read PDF", uri=metadata.uri, error=str(e))
            raise ExtractionError(
                f"Failed to read PDF: {e}",
                details={"uri": metadata.uri},
            ) from e

        text_parts = [
            f"--- Page {page_num} ---\n{page_text}"
            for page_num, page_text in enumerate(pages, start=1)
            if page_text.strip()
        ]

        pdf_metadata: dict[str, object] = {"page_count": len(pages)}
        info = reader.metadata
        if info:
            if info.title:
                pdf_metadata["pdf_title"] = info.title
            if info.author:
                pdf_metadata["pdf_author"] = info.author
            if info.subject:
                pdf_metadata["pdf_subject"] = info.subject
            if info.creator:
                pdf_metadata["pdf_creator"] = info.creator

        return ExtractedContent(
            content_type="text/plain",
            content="\n\n".join(text_parts),
            metadata=pdf_metadata,
        )
