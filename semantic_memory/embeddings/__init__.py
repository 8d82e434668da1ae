"""
Embedding providers for the semantic index.
"""

from semantic_memory.embeddings.base import EmbeddingProvider, EmbeddingResult
from semantic_memory.embeddings.factory import EmbeddingBackend, create_embedding_provider
from semantic_memory.embeddings.openai import OpenAIEmbeddings

__all__ = [
    "EmbeddingProvider",
    "EmbeddingResult",
    "EmbeddingBackend",
    "create_embedding_provider",
    "OpenAIEmbeddings",
]
