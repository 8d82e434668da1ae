"""
Semantic Memory - Configuration Management
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import structlog
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from semantic_memory.core.exceptions import ValidationError

# config loads before logging is set up, so this cannot go through core.logging
logger = structlog.get_logger(__name__)


DEFAULT_TEXT_SEPARATORS = ["\n\n", "\n", ". ", "? ", "! ", " ", ""]


def _clamped(name: str, value: Any, minimum: float, default: Any) -> Any:
    """Replace a missing value with its default and raise it to its minimum."""
    if value is None:
        return default
    if value < minimum:
        error = ValidationError(name, f"{value} is below minimum {minimum}")
        logger.warning("Configuration value clamped", error=error.message, value=value)
        return type(default)(minimum)
    return value


class LocalFileConfig(BaseModel):
    """Preconditions applied to sources of type ``local_file``."""

    max_file_size_mb: float = 100.0
    allowed_extensions: list[str] = Field(default_factory=list)
    excluded_patterns: list[str] = Field(default_factory=list)

    @field_validator("max_file_size_mb", mode="before")
    @classmethod
    def clamp_max_file_size(cls, v):
        return _clamped("local_file.max_file_size_mb", v, 0.1, 100.0)

    @field_validator("allowed_extensions")
    @classmethod
    def normalize_extensions(cls, v: list[str]) -> list[str]:
        """Store extensions lower-case with a leading dot."""
        return ["." + ext.lower().lstrip(".") for ext in v if ext]


class ChunkingConfig(BaseModel):
    """
    Validated options for the ingestion pipeline.

    Out-of-range values are clamped rather than rejected, so a config that
    passes through this model always satisfies
    ``0 <= default_chunk_overlap < default_chunk_size``.
    """

    default_chunk_size: int = 1000
    default_chunk_overlap: int = 200
    max_chunks_per_source: int = 500
    concurrency_limit: int = 5
    fixed_binary_chunk_size: int = 4096
    local_file: LocalFileConfig = Field(default_factory=LocalFileConfig)
    recursive_separators: dict[str, list[str]] = Field(default_factory=dict)
    default_text_separators: list[str] = Field(
        default_factory=lambda: list(DEFAULT_TEXT_SEPARATORS)
    )

    @field_validator("default_chunk_size", mode="before")
    @classmethod
    def clamp_chunk_size(cls, v):
        return _clamped("default_chunk_size", v, 50, 1000)

    @field_validator("default_chunk_overlap", mode="before")
    @classmethod
    def clamp_chunk_overlap(cls, v):
        return _clamped("default_chunk_overlap", v, 0, 200)

    @field_validator("max_chunks_per_source", mode="before")
    @classmethod
    def clamp_max_chunks(cls, v):
        return _clamped("max_chunks_per_source", v, 1, 500)

    @field_validator("concurrency_limit", mode="before")
    @classmethod
    def clamp_concurrency(cls, v):
        return _clamped("concurrency_limit", v, 1, 5)

    @field_validator("fixed_binary_chunk_size", mode="before")
    @classmethod
    def clamp_binary_chunk_size(cls, v):
        return _clamped("fixed_binary_chunk_size", v, 128, 4096)

    @field_validator("local_file", mode="before")
    @classmethod
    def default_local_file(cls, v):
        return LocalFileConfig() if v is None else v

    @field_validator("recursive_separators")
    @classmethod
    def normalize_separator_keys(cls, v: dict[str, list[str]]) -> dict[str, list[str]]:
        """Key per-extension separators by lower-case extension with a dot."""
        return {"." + ext.lower().lstrip("."): seps for ext, seps in v.items()}

    @model_validator(mode="after")
    def clamp_overlap_to_chunk_size(self) -> "ChunkingConfig":
        ceiling = self.default_chunk_size - 10
        if self.default_chunk_overlap > ceiling:
            logger.warning(
                "Chunk overlap too large for chunk size, clamping",
                chunk_overlap=self.default_chunk_overlap,
                chunk_size=self.default_chunk_size,
            )
            self.default_chunk_overlap = ceiling
        return self

    def separators_for(self, extension: Optional[str]) -> list[str]:
        """Separator list for a file extension, falling back to the defaults."""
        if extension:
            override = self.recursive_separators.get(extension.lower())
            if override is not None:
                return override
        return self.default_text_separators


class Settings(BaseSettings):
    """Application settings loaded from environment variables and config files."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Application
    # -------------------------------------------------------------------------
    MEMORY_ENV: str = Field(default="development", description="Environment name")
    DEBUG: bool = Field(default=False, description="Debug mode")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")

    # -------------------------------------------------------------------------
    # Ingestion
    # -------------------------------------------------------------------------
    CHUNK_SIZE: int = Field(default=1000, description="Default fragment size in characters")
    CHUNK_OVERLAP: int = Field(default=200, description="Overlap between text fragments")
    MAX_CHUNKS_PER_SOURCE: int = Field(default=500, description="Fragment cap per source")
    CONCURRENCY_LIMIT: int = Field(default=5, description="Sources processed at once")
    FIXED_BINARY_CHUNK_SIZE: int = Field(default=4096, description="Binary window in bytes")
    MAX_FILE_SIZE_MB: float = Field(default=100.0, description="Max local file size in MB")

    # -------------------------------------------------------------------------
    # Semantic Index
    # -------------------------------------------------------------------------
    RELEVANCE_THRESHOLD: float = Field(default=0.7, description="Minimum similarity score")
    VECTOR_BATCH_SIZE: int = Field(default=10, description="Records embedded per batch")
    DEFAULT_SEARCH_LIMIT: int = Field(default=10, description="Default number of results")
    DEFAULT_MEMORY_SOURCE: str = Field(default="unknown", description="Source for bare text")
    DEFAULT_MEMORY_TYPE: str = Field(default="generic", description="Type for bare text")

    # -------------------------------------------------------------------------
    # Storage
    # -------------------------------------------------------------------------
    RECORD_BACKEND: str = Field(default="memory", description="Record store: memory, sql")
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./data/memory.db",
        description="Database connection URL for the sql record store"
    )
    VECTOR_BACKEND: str = Field(default="memory", description="Vector store: memory, qdrant")
    QDRANT_URL: str = Field(default="http://localhost:6333", description="Qdrant server URL")
    QDRANT_API_KEY: Optional[str] = Field(default=None, description="Qdrant API key")
    QDRANT_COLLECTION_NAME: str = Field(default="memories", description="Qdrant collection")

    # -------------------------------------------------------------------------
    # Embeddings
    # -------------------------------------------------------------------------
    EMBEDDING_PROVIDER: str = Field(default="openai", description="Embedding provider: openai, none")
    OPENAI_API_KEY: Optional[str] = Field(default=None, description="OpenAI API key")
    EMBEDDING_MODEL: str = Field(default="text-embedding-3-small", description="Embedding model")
    EMBEDDING_DIMENSIONS: int = Field(default=1536, description="Embedding dimensions")

    # -------------------------------------------------------------------------
    # Paths
    # -------------------------------------------------------------------------
    @property
    def BASE_DIR(self) -> Path:
        """Get the base directory of the project."""
        return Path(__file__).parent.parent.parent

    @property
    def CONFIG_DIR(self) -> Path:
        """Get the config directory."""
        return self.BASE_DIR / "configs"

    def load_yaml_config(self, name: str) -> dict:
        """Load a YAML configuration file."""
        config_path = self.CONFIG_DIR / f"{name}.yaml"
        if config_path.exists():
            with open(config_path) as f:
                return yaml.safe_load(f) or {}
        return {}

    def chunking_config(self, **overrides: Any) -> ChunkingConfig:
        """
        Build the pipeline configuration.

        Environment values come first, then ``configs/chunking.yaml``, then
        explicit keyword overrides.
        """
        values: dict[str, Any] = {
            "default_chunk_size": self.CHUNK_SIZE,
            "default_chunk_overlap": self.CHUNK_OVERLAP,
            "max_chunks_per_source": self.MAX_CHUNKS_PER_SOURCE,
            "concurrency_limit": self.CONCURRENCY_LIMIT,
            "fixed_binary_chunk_size": self.FIXED_BINARY_CHUNK_SIZE,
            "local_file": {"max_file_size_mb": self.MAX_FILE_SIZE_MB},
        }
        file_values = self.load_yaml_config("chunking")
        local_file = {**values["local_file"], **file_values.pop("local_file", {})}
        values.update(file_values)
        values["local_file"] = local_file
        values.update(overrides)
        return ChunkingConfig(**values)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
