"""Embedding generation with truncation and random-vector fallback."""

import logging
import random
from dataclasses import dataclass, replace

from analyser.errors import EmbeddingError
from analyser.llm.base import EmbeddingProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmbeddedText:
    """Vector for a piece of text, flagged when it is a synthetic fallback."""

    vector: tuple[float, ...]
    degraded: bool = False
    error: str | None = None


class FallbackEmbedder:
    """Wraps an embedding provider so that failures never abort a batch.

    Text is truncated to ``max_chars`` before submission. When the provider
    fails, a vector drawn uniformly from [-0.5, 0.5) is returned instead and
    marked as degraded. Its size is ``dimensions`` until the provider has
    returned a real vector, then the size of the last real vector. With
    ``strict=True`` the failure is raised as EmbeddingError.
    """

    def __init__(
        self,
        provider: EmbeddingProvider,
        dimensions: int = 1536,
        max_chars: int = 8000,
        strict: bool = False,
        rng: random.Random | None = None,
    ):
        self.provider = provider
        self.dimensions = dimensions
        self.max_chars = max_chars
        self.strict = strict
        self._rng = rng or random.Random()

    async def embed(self, text: str) -> EmbeddedText:
        """Embed ``text``, falling back to a random vector on failure."""
        truncated = text[: self.max_chars]
        try:
            result = await self.provider.generate_embedding(truncated)
        except Exception as e:
            return self._fallback(str(e))

        if not result.success or not result.embedding:
            return self._fallback(result.error or "empty embedding returned")

        self.dimensions = len(result.embedding)
        return EmbeddedText(vector=tuple(result.embedding))

    def align(self, first: EmbeddedText, second: EmbeddedText) -> tuple[EmbeddedText, EmbeddedText]:
        """Resize a fallback vector to the length of its real counterpart."""
        if first.degraded and not second.degraded and len(first.vector) != len(second.vector):
            first = replace(first, vector=self._random_vector(len(second.vector)))
        elif second.degraded and not first.degraded and len(second.vector) != len(first.vector):
            second = replace(second, vector=self._random_vector(len(first.vector)))
        return first, second

    def _fallback(self, reason: str) -> EmbeddedText:
        if self.strict:
            raise EmbeddingError(f"Failed to generate embedding: {reason}")

        logger.warning(f"Failed to generate embedding, using random vector: {reason}")
        return EmbeddedText(vector=self._random_vector(self.dimensions), degraded=True, error=reason)

    def _random_vector(self, dimensions: int) -> tuple[float, ...]:
        return tuple(self._rng.random() - 0.5 for _ in range(dimensions))
