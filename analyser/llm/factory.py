"""Factory for creating embedding providers from configuration."""

from analyser.config import EmbeddingBackend, get_settings
from analyser.errors import ConfigurationError
from analyser.llm.base import EmbeddingProvider, EmbeddingProviderFactory


def create_embedding_provider(
    backend: str | None = None,
    api_key: str | None = None,
) -> EmbeddingProvider:
    """Create embedding provider from configuration.

    Args:
        backend: Override backend name, defaults to settings.embedding_backend
        api_key: Credential supplied for this batch; wins over settings.openai_api_key

    Returns:
        Configured embedding provider instance

    Raises:
        ConfigurationError: If provider configuration is invalid
    """
    settings = get_settings()
    backend = backend or settings.embedding_backend

    if backend == EmbeddingBackend.OPENAI:
        from analyser.llm.openai import OpenAIConfig

        key = api_key or settings.openai_api_key
        if not key:
            raise ConfigurationError("OpenAI API key is required")

        config = OpenAIConfig(
            api_key=key,
            embedding_model=settings.openai_embedding_model,
            timeout=settings.request_timeout,
        )
        return EmbeddingProviderFactory.create("openai", config=config)

    elif backend == EmbeddingBackend.OLLAMA:
        from analyser.llm.ollama import OllamaConfig

        config = OllamaConfig(
            host=settings.ollama_host,
            embedding_model=settings.ollama_embedding_model,
            timeout=settings.request_timeout,
        )
        return EmbeddingProviderFactory.create("ollama", config=config)

    else:
        raise ConfigurationError(f"Unknown embedding backend: {backend}")
