# src/search/adapters/google_cse.py — v1
"""Primary search provider: Google Custom Search JSON API.

Restricted to one site (default blog.naver.com) through `siteSearch`.
The API serves at most 10 items per request; `start` is 1-based.
"""

from __future__ import annotations

import logging

import httpx

from originality.core.errors import ProviderFailure, RateLimited
from originality.core.models import SearchItem, SearchPage
from originality.search.adapters.http_client import parse_retry_after, strip_html_tags
from originality.search.base import BaseSearchProvider

logger = logging.getLogger(__name__)

GOOGLE_CSE_URL = "https://www.googleapis.com/customsearch/v1"
MAX_PAGE_SIZE = 10


class GoogleCustomSearchProvider(BaseSearchProvider):
    """Google Custom Search over a restricted domain."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        search_engine_id: str,
        site_restrict: str | None = None,
        base_url: str = GOOGLE_CSE_URL,
    ) -> None:
        self._client = client
        self._api_key = api_key
        self._search_engine_id = search_engine_id
        self._site_restrict = site_restrict
        self._base_url = base_url

    @property
    def provider_name(self) -> str:
        return "google_cse"

    async def search(self, query: str, count: int, offset: int = 0) -> SearchPage:
        params: dict[str, str | int] = {
            "key": self._api_key,
            "cx": self._search_engine_id,
            "q": query,
            "num": max(1, min(count, MAX_PAGE_SIZE)),
            "start": offset + 1,
        }
        if self._site_restrict:
            params["siteSearch"] = self._site_restrict
            params["siteSearchFilter"] = "i"

        try:
            response = await self._client.get(self._base_url, params=params)
        except httpx.HTTPError as exc:
            raise ProviderFailure(self.provider_name, f"transport error: {exc}") from exc

        if response.status_code == 429:
            raise RateLimited(
                self.provider_name,
                retry_after_s=parse_retry_after(response.headers.get("Retry-After")),
            )
        if response.status_code >= 400:
            raise ProviderFailure(
                self.provider_name,
                f"HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise ProviderFailure(self.provider_name, "invalid JSON response") from exc

        return _parse_payload(payload)


def _parse_payload(payload: dict) -> SearchPage:
    items = [
        SearchItem(
            title=strip_html_tags(raw.get("title", "")),
            link=raw["link"],
            snippet=strip_html_tags(raw.get("snippet", "")),
        )
        for raw in payload.get("items") or []
        if raw.get("link")
    ]
    total_raw = (payload.get("searchInformation") or {}).get("totalResults", 0)
    try:
        total = int(total_raw)
    except (TypeError, ValueError):
        total = 0
    return SearchPage(items=items, total_results=total)
