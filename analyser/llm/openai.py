"""OpenAI embedding provider implementation."""

import logging
from typing import Any

import openai
from pydantic import BaseModel

from analyser.llm.base import EmbeddingProvider, EmbeddingResult

logger = logging.getLogger(__name__)


class OpenAIConfig(BaseModel):
    """Configuration for OpenAI provider."""

    api_key: str
    embedding_model: str = "text-embedding-3-small"
    timeout: float = 30.0
    max_retries: int = 0


class OpenAIProvider(EmbeddingProvider):
    """OpenAI embedding provider implementation."""

    def __init__(self, config: OpenAIConfig | None = None, **kwargs: Any) -> None:
        """Initialize OpenAI provider.

        Args:
            config: OpenAI configuration
            **kwargs: Additional configuration options
        """
        self.config = config or OpenAIConfig(**kwargs)
        self.client = openai.AsyncOpenAI(
            api_key=self.config.api_key,
            timeout=self.config.timeout,
            max_retries=self.config.max_retries,
        )

    async def generate_embedding(self, text: str) -> EmbeddingResult:
        """Generate embedding using OpenAI's embedding model.

        Args:
            text: Text to embed

        Returns:
            EmbeddingResult with embedding vector
        """
        try:
            response = await self.client.embeddings.create(
                model=self.config.embedding_model,
                input=text,
            )

            embedding_data = response.data[0]

            return EmbeddingResult(
                embedding=embedding_data.embedding,
                model=self.config.embedding_model,
                token_count=response.usage.total_tokens if response.usage else None,
            )

        except openai.OpenAIError as e:
            logger.error(f"OpenAI embedding request failed: {e}")
            raise RuntimeError(f"Failed to generate embedding: {e}") from e

    async def aclose(self) -> None:
        await self.client.close()
