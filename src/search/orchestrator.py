# src/search/orchestrator.py — v1
"""Paginated web search with a crawl-based fallback.

Flow:
  1. Primary provider, page by page (page size fixed by the provider),
     with a fixed delay between pages. Stops when the requested count is
     reached, a page comes back empty, or a page fails.
     - Failure on the first page aborts the primary path.
     - Failure on a later page keeps what was collected and stops.
  2. Fallback provider, one request, only when the primary path produced
     nothing.
  3. If the primary failed on its first page and the fallback produced
     nothing either, SearchUnavailable is raised.

Results are SearchMatch stubs (title/url/snippet); page text is fetched
later by the fetch pipeline.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Awaitable, Callable

from originality.cache.memory_cache import with_cache
from originality.core.errors import ProviderFailure, SearchUnavailable
from originality.core.models import SearchMatch, SearchPage
from originality.logging.context import set_stage_context

if TYPE_CHECKING:
    from originality.cache.base_cache import BaseCache
    from originality.search.base import BaseSearchProvider

logger = logging.getLogger(__name__)

SEARCH_CACHE_PREFIX = "web_search"
DEFAULT_PAGE_SIZE = 10
DEFAULT_PAGE_DELAY_S = 0.5
DEFAULT_TIMEOUT_S = 20.0


class SearchOrchestrator:
    """Execute a keyword query against primary and fallback providers.

    Args:
        primary: Restricted-domain paginated search provider.
        fallback: Crawl-based provider used when the primary yields nothing.
        cache: Optional shared cache for completed searches.
        cache_ttl_s: TTL for cached searches.
        page_size: Items requested per page.
        page_delay_s: Delay between successive primary pages.
        timeout_s: Per-request timeout.
        sleep: Awaitable sleep (injectable for tests).
    """

    def __init__(
        self,
        primary: BaseSearchProvider | None,
        fallback: BaseSearchProvider | None = None,
        cache: BaseCache | None = None,
        cache_ttl_s: float | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        page_delay_s: float = DEFAULT_PAGE_DELAY_S,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if primary is None and fallback is None:
            raise ValueError("At least one search provider is required")
        self._primary = primary
        self._fallback = fallback
        self._cache = cache
        self._cache_ttl_s = cache_ttl_s
        self._page_size = page_size
        self._page_delay_s = page_delay_s
        self._timeout_s = timeout_s
        self._sleep = sleep

    async def search(self, query: str, max_results: int = 10) -> list[SearchMatch]:
        """Return up to `max_results` ordered, de-duplicated stubs.

        Raises:
            SearchUnavailable: Primary failed on its first page and the
                fallback returned nothing.
        """
        query = query.strip()
        if not query or max_results <= 0:
            return []

        async def _compute() -> list[SearchMatch]:
            return await self._search_uncached(query, max_results)

        return await with_cache(
            self._cache,
            SEARCH_CACHE_PREFIX,
            {"query": query, "max_results": max_results},
            _compute,
            ttl_s=self._cache_ttl_s,
        )

    async def _search_uncached(self, query: str, max_results: int) -> list[SearchMatch]:
        set_stage_context("search")
        primary_failure: ProviderFailure | None = None
        matches: list[SearchMatch] = []

        if self._primary is not None:
            try:
                matches = await self._paginate(self._primary, query, max_results)
            except ProviderFailure as exc:
                primary_failure = exc
                logger.warning("Primary search failed on first page: %s", exc)

        if not matches and self._fallback is not None:
            try:
                matches = await self._single_request(self._fallback, query, max_results)
                logger.info("Fallback search returned %d results", len(matches))
            except ProviderFailure as exc:
                logger.warning("Fallback search failed: %s", exc)

        if not matches and primary_failure is not None:
            raise SearchUnavailable(
                primary_failure.provider,
                f"search unavailable: {primary_failure.detail}",
                status_code=primary_failure.status_code,
            ) from primary_failure

        return matches

    async def _paginate(
        self, provider: BaseSearchProvider, query: str, max_results: int
    ) -> list[SearchMatch]:
        collected: dict[str, SearchMatch] = {}
        offset = 0
        page_number = 0
        max_pages = -(-max_results // self._page_size)

        while len(collected) < max_results and page_number < max_pages:
            if page_number > 0:
                await self._sleep(self._page_delay_s)

            count = min(self._page_size, max_results - len(collected))
            try:
                page = await self._request(provider, query, count, offset)
            except ProviderFailure as exc:
                if page_number == 0:
                    raise
                logger.warning(
                    "Search page %d failed, keeping %d results: %s",
                    page_number + 1, len(collected), exc,
                )
                break

            page_number += 1
            if not page.items:
                break

            for match in _to_matches(page, provider.provider_name):
                if len(collected) >= max_results:
                    break
                collected.setdefault(match.url, match)

            offset += len(page.items)
            if page.total_results and offset >= page.total_results:
                break

        logger.info(
            "Primary search '%s' collected %d results over %d pages",
            query, len(collected), page_number,
        )
        return list(collected.values())

    async def _single_request(
        self, provider: BaseSearchProvider, query: str, max_results: int
    ) -> list[SearchMatch]:
        page = await self._request(provider, query, max_results, 0)
        unique: dict[str, SearchMatch] = {}
        for match in _to_matches(page, provider.provider_name):
            unique.setdefault(match.url, match)
        return list(unique.values())[:max_results]

    async def _request(
        self, provider: BaseSearchProvider, query: str, count: int, offset: int
    ) -> SearchPage:
        """One provider call raced against the timeout; all errors become ProviderFailure."""
        try:
            return await asyncio.wait_for(
                provider.search(query, count, offset), timeout=self._timeout_s
            )
        except ProviderFailure:
            raise
        except asyncio.TimeoutError as exc:
            raise ProviderFailure(
                provider.provider_name, f"timed out after {self._timeout_s}s"
            ) from exc
        except Exception as exc:
            raise ProviderFailure(provider.provider_name, str(exc)) from exc


def _to_matches(page: SearchPage, source: str) -> list[SearchMatch]:
    return [
        SearchMatch(title=item.title, url=item.link, snippet=item.snippet, source=source)
        for item in page.items
        if item.link
    ]
