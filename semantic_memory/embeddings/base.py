"""
Semantic Memory - Embedding Providers
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from semantic_memory.core.exceptions import EmbeddingError
from semantic_memory.core.logging import LoggerMixin


@dataclass(frozen=True)
class EmbeddingResult:
    """Vectors for a list of texts, in input order."""
    embeddings: list[list[float]]
    model: str
    dimensions: int
    tokens_used: int = 0

    def __len__(self) -> int:
        return len(self.embeddings)


class EmbeddingProvider(ABC, LoggerMixin):
    """
    Turns text into fixed-length vectors.

    Implementations only provide ``embed_texts``; the single-text and query
    helpers are built on it.
    """

    @property
    @abstractmethod
    def model_name(self) -> str:
        pass

    @property
    @abstractmethod
    def dimensions(self) -> int:
        """Length of every vector this provider returns."""
        pass

    @abstractmethod
    async def embed_texts(
        self,
        texts: list[str],
        batch_size: Optional[int] = None,
    ) -> EmbeddingResult:
        """
        Embed several texts.

        Args:
            texts: Texts to embed
            batch_size: Texts sent per request, provider default when None

        Returns:
            EmbeddingResult with one vector per text, in order

        Raises:
            EmbeddingError: If the provider rejects the request
            ProviderUnavailableError: If the provider cannot be used at all
        """
        pass

    async def embed_text(self, text: str) -> list[float]:
        result = await self.embed_texts([text])
        if len(result) != 1:
            raise EmbeddingError(
                f"{self.model_name} returned {len(result)} vectors for one text",
                details={"model": self.model_name},
            )
        self.logger.debug(
            "Embedded text",
            model=result.model,
            chars=len(text),
            tokens=result.tokens_used,
        )
        return result.embeddings[0]

    async def embed_query(self, query: str) -> list[float]:
        """Embed a search query. Providers with a separate query model override this."""
        return await self.embed_text(query)
