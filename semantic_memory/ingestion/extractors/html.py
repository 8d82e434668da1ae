"""
Semantic Memory - HTML Extractor
"""

import re

from bs4 import BeautifulSoup
from bs4.element import PreformattedString

from semantic_memory.core.exceptions import ExtractionError
from semantic_memory.core.types import ExtractedContent, SourceMetadata
from semantic_memory.ingestion.extractors.base import ContentExtractor
from semantic_memory.ingestion.sources.base import ContentStream


class HtmlExtractor(ContentExtractor):
    """Extracts readable text from HTML pages."""

    supported_extensions = [".html", ".htm", ".xhtml"]
    supported_mimetypes = ["text/html", "application/xhtml+xml"]

    # Tags dropped together with their content
    REMOVE_TAGS = ["script", "style", "noscript", "iframe", "svg", "canvas"]

    BLOCK_TAGS = [
        "p", "div", "section", "article", "header", "footer",
        "ul", "ol", "table", "tr", "blockquote",
    ]

    HEADINGS = ("h1", "h2", "h3", "h4", "h5", "h6")

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    async def extract(
        self,
        stream: ContentStream,
        metadata: SourceMetadata,
    ) -> ExtractedContent:
        data = await stream.read_all()
        try:
            html = self._decode(data, self.encoding)
        except UnicodeDecodeError as e:
            raise ExtractionError(
                f"Failed to decode HTML: {e}",
                details={"uri": metadata.uri},
            ) from e

        soup = BeautifulSoup(html, "html.parser")

        for tag in self.REMOVE_TAGS:
            for element in soup.find_all(tag):
                element.decompose()

        html_metadata: dict[str, str] = {"format": "html"}

        title_tag = soup.find("title")
        title = title_tag.get_text(strip=True) if title_tag else ""
        if not title:
            h1 = soup.find("h1")
            title = h1.get_text(strip=True) if h1 else ""
        if title:
            html_metadata["html_title"] = title

        for meta in soup.find_all("meta"):
            name = meta.get("name", meta.get("property", ""))
            content = meta.get("content", "")
            if not (name and content):
                continue
            if name in ("description", "author", "keywords") or name.startswith("og:"):
                html_metadata[f"html_{name}"] = content

        main = (
            soup.find("main")
            or soup.find("article")
            or soup.find("body")
            or soup
        )
        text = self._extract_text(main)
        text = re.sub(r"[ \t]+\n", "\n", text)
        text = re.sub(r"\n{3,}", "\n\n", text).strip()

        return ExtractedContent(
            content_type="text/plain",
            content=text,
            metadata=html_metadata,
        )

    def _extract_text(self, element) -> str:
        """Flatten an element to text, keeping headings and list items on their own lines."""
        parts = []

        for child in element.children:
            if child.name is None:
                # Comments, doctypes and CDATA are markup, not page text
                if isinstance(child, PreformattedString):
                    continue
                text = str(child).strip()
                if text:
                    parts.append(text)
            elif child.name in self.HEADINGS:
                text = child.get_text(strip=True)
                if text:
                    level = int(child.name[1])
                    parts.append(f"\n\n{'#' * level} {text}\n\n")
            elif child.name == "li":
                text = child.get_text(" ", strip=True)
                if text:
                    parts.append(f"\n- {text}")
            elif child.name == "br":
                parts.append("\n")
            elif child.name == "pre":
                text = child.get_text()
                if text:
                    parts.append(f"\n\n{text}\n\n")
            elif child.name in self.BLOCK_TAGS:
                text = self._extract_text(child)
                if text:
                    parts.append(f"\n\n{text}\n\n")
            else:
                text = self._extract_text(child)
                if text:
                    parts.append(text)

        return " ".join(parts)
