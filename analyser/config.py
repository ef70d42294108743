"""Configuration management using pydantic-settings."""

from enum import Enum
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EmbeddingBackend(str, Enum):
    """Supported embedding services."""

    OPENAI = "openai"
    OLLAMA = "ollama"


# Output sizes of common embedding models
MODEL_DIMENSIONS = {
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
    "text-embedding-ada-002": 1536,
    "nomic-embed-text": 768,
    "mxbai-embed-large": 1024,
    "all-minilm": 384,
}
DEFAULT_DIMENSIONS = 1536


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Embedding Service Configuration
    embedding_backend: EmbeddingBackend = Field(
        default=EmbeddingBackend.OPENAI,
        description="Service used to embed page text and answers",
    )
    embedding_dimensions: int | None = Field(
        default=None,
        description="Fallback vector size; derived from the embedding model when unset",
    )
    max_embedding_chars: int = Field(
        default=8000,
        description="Text is truncated to this many characters before embedding",
    )
    strict_embeddings: bool = Field(
        default=False,
        description="Fail the batch instead of falling back to random vectors",
    )

    # OpenAI Configuration
    openai_api_key: str | None = Field(
        default=None,
        description="OpenAI API key",
    )
    openai_embedding_model: str = Field(
        default="text-embedding-3-small",
        description="OpenAI embedding model to use",
    )

    # Ollama Configuration
    ollama_host: str = Field(
        default="http://localhost:11434",
        description="Ollama API host URL",
    )
    ollama_embedding_model: str = Field(
        default="nomic-embed-text",
        description="Ollama embedding model to use",
    )

    # Scraping Configuration
    scrape_proxy_url: str | None = Field(
        default="https://api.allorigins.win/get",
        description="Fetch-and-render proxy; pages are fetched directly when unset",
    )
    request_timeout: float = Field(
        default=30.0,
        description="Timeout in seconds for outbound HTTP calls",
    )

    # Batch Configuration
    max_urls: int = Field(
        default=5,
        description="Maximum number of URL rows consumed per batch",
    )
    text_preview_chars: int = Field(
        default=300,
        description="Characters of page text and answer kept on each result",
    )
    export_dir: Path = Field(
        default=Path("."),
        description="Directory that receives exported CSV files",
    )

    # Web Server Configuration
    server_host: str = Field(default="0.0.0.0", description="HTTP bind address")
    server_port: int = Field(default=3000, description="HTTP port")

    # Application Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    @property
    def embedding_model(self) -> str:
        """Model name of the selected backend."""
        if self.embedding_backend == EmbeddingBackend.OLLAMA:
            return self.ollama_embedding_model
        return self.openai_embedding_model

    def fallback_dimensions(self) -> int:
        """Size of random fallback vectors for the selected model."""
        if self.embedding_dimensions is not None:
            return self.embedding_dimensions
        # Ollama tags such as "nomic-embed-text:latest" share the base model's size
        model = self.embedding_model.split(":", 1)[0]
        return MODEL_DIMENSIONS.get(model, DEFAULT_DIMENSIONS)


def validate_openai_key(api_key: str | None) -> bool:
    """Return True if the key looks like an OpenAI secret key."""
    return bool(api_key) and api_key.startswith("sk-") and len(api_key) > 20


# Global settings instance - lazy loaded
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
