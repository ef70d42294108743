"""Vector embedding and similarity module."""

from .embedder import EmbeddedText, FallbackEmbedder
from .similarity import cosine_similarity

__all__ = ["EmbeddedText", "FallbackEmbedder", "cosine_similarity"]
