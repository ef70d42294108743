"""Embedding service clients."""

from analyser.llm.base import EmbeddingProvider, EmbeddingProviderFactory, EmbeddingResult
from analyser.llm.factory import create_embedding_provider
from analyser.llm.ollama import OllamaConfig, OllamaProvider
from analyser.llm.openai import OpenAIConfig, OpenAIProvider

# Register all providers
EmbeddingProviderFactory.register("ollama", OllamaProvider)
EmbeddingProviderFactory.register("openai", OpenAIProvider)

__all__ = [
    "EmbeddingProvider",
    "EmbeddingProviderFactory",
    "EmbeddingResult",
    "OllamaConfig",
    "OllamaProvider",
    "OpenAIConfig",
    "OpenAIProvider",
    "create_embedding_provider",
]
