"""
Semantic Memory - Text Extractor
"""

from typing import Iterable, Optional

from semantic_memory.core.exceptions import ExtractionError
from semantic_memory.core.types import ExtractedContent, SourceMetadata
from semantic_memory.ingestion.chunking.base import is_text_content_type
from semantic_memory.ingestion.extractors.base import GENERIC_MIME_TYPE, ContentExtractor
from semantic_memory.ingestion.sources.base import ContentStream
from semantic_memory.ingestion.sources.local_file import LOCAL_FILE


DEFAULT_TEXT_MIMETYPES = [
    "text/plain",
    "text/markdown",
    "text/html",
    "text/css",
    "text/csv",
    "text/javascript",
    "application/json",
    "application/xml",
    "application/yaml",
]

TEXT_EXTENSIONS = [
    ".txt", ".md", ".log", ".csv", ".tsv", ".html", ".css",
    ".js", ".ts", ".jsx", ".tsx", ".py", ".java", ".c", ".cpp",
    ".h", ".hpp", ".cs", ".go", ".rb", ".php", ".sh", ".bash",
    ".ps1", ".xml", ".json", ".yaml", ".yml", ".sql", ".graphql",
    ".gql", ".dockerfile", ".tf", ".hcl", ".swift", ".kt", ".kts",
    ".groovy", ".scala", ".rs", ".lua", ".pl", ".pm", ".r",
    ".dart", ".vue", ".svelte",
]


class TextExtractor(ContentExtractor):
    """
    Decodes text and source code.

    Accepts the configured MIME types and every other type the chunkers treat
    as text, so textual content never reaches the binary fallback.
    """

    supported_extensions = TEXT_EXTENSIONS
    supported_mimetypes = DEFAULT_TEXT_MIMETYPES

    # Map extensions to language names
    LANGUAGE_MAP = {
        ".py": "python",
        ".js": "javascript",
        ".ts": "typescript",
        ".jsx": "javascript",
        ".tsx": "typescript",
        ".java": "java",
        ".cpp": "cpp",
        ".c": "c",
        ".cs": "csharp",
        ".go": "go",
        ".rs": "rust",
        ".rb": "ruby",
        ".php": "php",
        ".swift": "swift",
        ".kt": "kotlin",
        ".scala": "scala",
        ".sql": "sql",
        ".sh": "bash",
        ".lua": "lua",
        ".dart": "dart",
    }

    def __init__(
        self,
        supported_mimetypes: Optional[Iterable[str]] = None,
        encoding: str = "utf-8",
    ) -> None:
        self._mimetypes = frozenset(supported_mimetypes or DEFAULT_TEXT_MIMETYPES)
        self.encoding = encoding

    def supports(self, metadata: SourceMetadata) -> bool:
        if metadata.mime_type and (
            metadata.mime_type in self._mimetypes or is_text_content_type(metadata.mime_type)
        ):
            return True
        # A known text extension wins over a missing or generic MIME type
        return (
            metadata.source_type == LOCAL_FILE
            and metadata.extension in self.supported_extensions
            and (not metadata.mime_type or metadata.mime_type == GENERIC_MIME_TYPE)
        )

    async def extract(
        self,
        stream: ContentStream,
        metadata: SourceMetadata,
    ) -> ExtractedContent:
        data = await stream.read_all()
        try:
            content = self._decode(data, self.encoding)
        except (UnicodeDecodeError, LookupError) as e:
            self.logger.error("Failed to decode text", uri=metadata.uri, error=str(e))
            raise ExtractionError(
                f"Failed to extract text content: {e}",
                details={"uri": metadata.uri, "encoding": self.encoding},
            ) from e

        content_type = metadata.mime_type
        if not content_type or content_type == GENERIC_MIME_TYPE:
            content_type = "text/plain"

        extracted = {"encoding": self.encoding}
        language = self.LANGUAGE_MAP.get(metadata.extension or "")
        if language:
            extracted["language"] = language

        return ExtractedContent(
            content_type=content_type,
            content=content,
            metadata=extracted,
        )
