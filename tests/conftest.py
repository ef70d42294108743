"""Shared fixtures and test doubles."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from analyser.config import Settings
from analyser.diagnostics import IntentType
from analyser.llm.base import EmbeddingProvider, EmbeddingResult
from analyser.pipeline.models import AnalysisResult


class FakeFetcher:
    """Returns canned page text per URL and records requests."""

    def __init__(self, pages: dict[str, str] | None = None, default: str = "Page about trains"):
        self.pages = pages or {}
        self.default = default
        self.requested: list[str] = []

    async def fetch(self, url: str) -> str:
        self.requested.append(url)
        return self.pages.get(url, self.default)

    async def aclose(self) -> None:
        pass


def make_result(**overrides) -> AnalysisResult:
    values = {
        "url": "https://example.com/train-times/london-to-paris/",
        "prompt": "cheapest london to paris train tickets online",
        "page_text": "Trains from London to Paris",
        "gpt_answer": "Book early for the cheapest fares",
        "similarity": 0.8123456,
        "intent_type": IntentType.TRANSACTIONAL,
        "priority_score": 77.5,
    }
    values.update(overrides)
    return AnalysisResult(**values)


@pytest.fixture
def settings():
    """Settings isolated from the environment's .env file."""
    return Settings(
        _env_file=None,
        openai_api_key="sk-test-key-0123456789abcdef",
        embedding_dimensions=8,
        scrape_proxy_url=None,
    )


@pytest.fixture
def failing_provider():
    """Embedding provider whose every call fails."""
    provider = MagicMock(spec=EmbeddingProvider)
    provider.generate_embedding = AsyncMock(side_effect=RuntimeError("401 Unauthorized"))
    provider.aclose = AsyncMock()
    return provider


@pytest.fixture
def fixed_provider():
    """Embedding provider returning the same unit vector for every text."""
    provider = MagicMock(spec=EmbeddingProvider)
    provider.generate_embedding = AsyncMock(
        return_value=EmbeddingResult(embedding=[1.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0], model="test")
    )
    provider.aclose = AsyncMock()
    return provider
