"""Ollama embedding provider implementation."""

import logging
from typing import Any

import httpx
from pydantic import BaseModel

from analyser.llm.base import EmbeddingProvider, EmbeddingResult

logger = logging.getLogger(__name__)


class OllamaConfig(BaseModel):
    """Configuration for Ollama provider."""

    host: str = "http://localhost:11434"
    embedding_model: str = "nomic-embed-text"
    timeout: float = 30.0


class OllamaProvider(EmbeddingProvider):
    """Ollama embedding provider implementation."""

    def __init__(self, config: OllamaConfig | None = None, **kwargs: Any) -> None:
        """Initialize Ollama provider.

        Args:
            config: Ollama configuration
            **kwargs: Additional configuration options
        """
        self.config = config or OllamaConfig(**kwargs)
        self.client = httpx.AsyncClient(
            base_url=self.config.host,
            timeout=self.config.timeout,
        )

    async def generate_embedding(self, text: str) -> EmbeddingResult:
        """Generate embedding using Ollama's embedding model.

        Args:
            text: Text to embed

        Returns:
            EmbeddingResult with embedding vector
        """
        try:
            response = await self.client.post(
                "/api/embed",
                json={
                    "model": self.config.embedding_model,
                    "input": text,
                },
            )
            response.raise_for_status()
            data = response.json()

            # Ollama returns a batch; a single input yields one vector
            embedding = data["embeddings"][0] if data.get("embeddings") else []

            return EmbeddingResult(
                embedding=embedding,
                model=self.config.embedding_model,
                token_count=data.get("prompt_eval_count"),
                success=bool(embedding),
                error=None if embedding else "Ollama returned no embeddings",
            )

        except httpx.RequestError as e:
            logger.error(f"Ollama embedding request failed: {e}")
            raise RuntimeError(f"Failed to generate embedding: {e}") from e
        except httpx.HTTPStatusError as e:
            logger.error(f"Ollama embedding HTTP error: {e}")
            raise RuntimeError(f"Ollama API error: {e}") from e

    async def aclose(self) -> None:
        await self.client.aclose()

