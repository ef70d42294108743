"""Page scraping module."""

from .extractor import extract_visible_text
from .fetcher import ContentFetcher, placeholder_text

__all__ = ["ContentFetcher", "extract_visible_text", "placeholder_text"]
