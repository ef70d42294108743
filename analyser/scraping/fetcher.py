"""Page content acquisition through a fetch-and-render proxy."""

import logging
from typing import Any

import httpx

from .extractor import extract_visible_text

logger = logging.getLogger(__name__)

PLACEHOLDER_TEMPLATE = "Sample content for {url} - This would be the actual page content in production."


def placeholder_text(url: str) -> str:
    """Marker text used in place of a page that could not be fetched."""
    return PLACEHOLDER_TEMPLATE.format(url=url)


class ContentFetcher:
    """Fetches pages and returns their visible text.

    When ``proxy_url`` is set the page is requested as ``<proxy_url>?url=<page>``
    and the proxy is expected to answer with JSON carrying the document in a
    ``contents`` field. Without a proxy the page is fetched directly.
    """

    def __init__(
        self,
        proxy_url: str | None = None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize content fetcher.

        Args:
            proxy_url: Fetch-and-render proxy endpoint, None to fetch directly
            timeout: Request timeout in seconds
            client: Shared HTTP client (one is created if None)
        """
        self.proxy_url = proxy_url
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    async def fetch(self, url: str) -> str:
        """Return the visible text of ``url``, or placeholder text on failure."""
        try:
            html = await self._fetch_html(url)
            text = extract_visible_text(html)
        except Exception as e:
            logger.warning(f"Failed to scrape {url}: {e}")
            return placeholder_text(url)

        logger.debug(f"Scraped {len(text)} characters from {url}")
        return text

    async def _fetch_html(self, url: str) -> str:
        if not self.proxy_url:
            response = await self.client.get(url)
            response.raise_for_status()
            return response.text

        response = await self.client.get(self.proxy_url, params={"url": url})
        response.raise_for_status()
        data: Any = response.json()
        contents = data.get("contents") if isinstance(data, dict) else None
        if not isinstance(contents, str):
            raise ValueError("proxy response has no document contents")
        return contents

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()
