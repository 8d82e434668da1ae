"""
Semantic Memory - OpenAI Embeddings Provider
"""

from __future__ import annotations

from typing import Any, Optional

import openai
from openai import AsyncOpenAI
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from semantic_memory.core.exceptions import EmbeddingError, ProviderUnavailableError
from semantic_memory.embeddings.base import EmbeddingProvider, EmbeddingResult


# Worth retrying: the same request may succeed a moment later
TRANSIENT_ERRORS = (
    openai.APIConnectionError,
    openai.APITimeoutError,
    openai.RateLimitError,
    openai.InternalServerError,
)

# Every later request would fail the same way
FATAL_ERRORS = (
    openai.AuthenticationError,
    openai.PermissionDeniedError,
    openai.NotFoundError,
)


class OpenAIEmbeddings(EmbeddingProvider):
    """OpenAI embeddings provider."""

    # Model dimension mappings
    MODEL_DIMENSIONS = {
        "text-embedding-3-large": 3072,
        "text-embedding-3-small": 1536,
        "text-embedding-ada-002": 1536,
    }

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "text-embedding-3-small",
        dimensions: Optional[int] = None,
        client: Optional[AsyncOpenAI] = None,
    ):
        self._api_key = api_key
        self._model = model
        self._dimensions = dimensions
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        """Get or create the OpenAI client."""
        if self._client is None:
            if not self._api_key:
                raise ProviderUnavailableError("openai", "API key not configured")
            self._client = AsyncOpenAI(api_key=self._api_key)
        return self._client

    @property
    def model_name(self) -> str:
        return self._model

    @property
    def dimensions(self) -> int:
        if self._dimensions:
            return self._dimensions
        return self.MODEL_DIMENSIONS.get(self._model, 1536)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type(TRANSIENT_ERRORS),
        reraise=True,
    )
    async def _create(self, batch: list[str]) -> Any:
        kwargs: dict[str, Any] = {"model": self._model, "input": batch}
        # Only the text-embedding-3 family accepts a dimensions parameter
        if self._model.startswith("text-embedding-3"):
            kwargs["dimensions"] = self.dimensions
        return await self._get_client().embeddings.create(**kwargs)

    async def embed_texts(
        self,
        texts: list[str],
        batch_size: Optional[int] = None,
    ) -> EmbeddingResult:
        """Generate embeddings using OpenAI API."""
        if not texts:
            return EmbeddingResult(
                embeddings=[],
                model=self._model,
                dimensions=self.dimensions,
                tokens_used=0,
            )

        batch_size = batch_size or 100
        all_embeddings: list[list[float]] = []
        total_tokens = 0

        for i in range(0, len(texts), batch_size):
            batch = texts[i:i + batch_size]

            try:
                response = await self._create(batch)
            except ProviderUnavailableError:
                raise
            except FATAL_ERRORS as e:
                self.logger.error("Embedding provider rejected credentials or model", error=str(e))
                raise ProviderUnavailableError("openai", str(e)) from e
            except Exception as e:
                self.logger.error(
                    "Embedding generation failed",
                    error=str(e),
                    batch_start=i,
                )
                raise EmbeddingError(f"Failed to generate embeddings: {e}") from e

            # Items may come back out of order
            batch_embeddings: list[list[float]] = [[] for _ in batch]
            for item in response.data:
                batch_embeddings[item.index] = item.embedding
            all_embeddings.extend(batch_embeddings)

            if response.usage is not None:
                total_tokens += response.usage.total_tokens

            self.logger.debug(
                "Generated embeddings batch",
                batch_num=i // batch_size + 1,
                batch_size=len(batch),
            )

        return EmbeddingResult(
            embeddings=all_embeddings,
            model=self._model,
            dimensions=self.dimensions,
            tokens_used=total_tokens,
        )
