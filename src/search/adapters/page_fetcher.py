# src/search/adapters/page_fetcher.py — v1
"""HTTP page fetcher returning the readable text of a page.

Naver blog posts wrap their body in an iframe (`iframe#mainFrame`); the
fetcher follows that frame once so the post text, not the shell page, is
returned.
"""

from __future__ import annotations

import logging
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup

from originality.core.errors import ProviderFailure, RateLimited
from originality.search.adapters.http_client import html_to_text, parse_retry_after
from originality.search.base import BasePageFetcher

logger = logging.getLogger(__name__)

DEFAULT_MAX_CHARS = 20_000
PROVIDER_NAME = "page_fetcher"


class HttpPageFetcher(BasePageFetcher):
    """Fetch a URL with httpx and convert the HTML body to plain text."""

    def __init__(self, client: httpx.AsyncClient, max_chars: int = DEFAULT_MAX_CHARS) -> None:
        self._client = client
        self._max_chars = max_chars

    async def fetch(self, url: str) -> str:
        markup = await self._get(url)
        frame_url = main_frame_url(markup, url)
        if frame_url is not None:
            logger.debug("Following mainFrame of %s -> %s", url, frame_url)
            markup = await self._get(frame_url)
        return html_to_text(markup)[: self._max_chars]

    async def _get(self, url: str) -> str:
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as exc:
            raise ProviderFailure(PROVIDER_NAME, f"{url}: {exc}") from exc

        if response.status_code == 429:
            raise RateLimited(
                PROVIDER_NAME,
                detail=f"{url}: HTTP 429",
                retry_after_s=parse_retry_after(response.headers.get("Retry-After")),
            )
        if response.status_code >= 400:
            raise ProviderFailure(
                PROVIDER_NAME,
                f"{url}: HTTP {response.status_code}",
                status_code=response.status_code,
            )
        return response.text


def main_frame_url(markup: str, base_url: str) -> str | None:
    """Absolute URL of `iframe#mainFrame`, or None when the page has none."""
    if "mainFrame" not in markup:
        return None
    frame = BeautifulSoup(markup, "html.parser").find("iframe", id="mainFrame")
    if frame is None or not frame.get("src"):
        return None
    return urljoin(base_url, frame["src"])
