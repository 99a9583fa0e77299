# src/search/adapters/crawl_search.py — v1
"""Fallback search provider: Naver blog search result page scraping.

Issues one exact-phrase query restricted to the last N months, sorted by
relevance, and extracts blog post links from the result markup. Used only
when the primary provider returns nothing.
"""

from __future__ import annotations

import logging
import re
from datetime import date

import httpx
from bs4 import BeautifulSoup

from originality.core.errors import ProviderFailure, RateLimited
from originality.core.models import SearchItem, SearchPage
from originality.search.adapters.http_client import parse_retry_after, strip_html_tags
from originality.search.base import BaseSearchProvider

logger = logging.getLogger(__name__)

NAVER_SEARCH_URL = "https://search.naver.com/search.naver"
DEFAULT_MONTHS = 6

_BLOG_URL = re.compile(
    r"https?://(?:m\.)?blog\.naver\.com/[\w-]+/\d+"
    r"|https?://[\w-]+\.tistory\.com/[\w/%-]+"
    r"|https?://brunch\.co\.kr/@[\w-]+/\d+"
)


def months_before(day: date, months: int) -> date:
    """Same calendar day `months` earlier, clamped to the month's length."""
    total = day.year * 12 + (day.month - 1) - months
    year, month = divmod(total, 12)
    month += 1
    for candidate_day in range(day.day, 0, -1):
        try:
            return date(year, month, candidate_day)
        except ValueError:
            continue
    return date(year, month, 1)


def date_filter(today: date, months: int = DEFAULT_MONTHS) -> str:
    """Naver `nso` value: relevance sort over [today - months, today]."""
    start = months_before(today, months)
    return f"so:sim,p:from{start:%Y%m%d}to{today:%Y%m%d}"


class CrawlSearchProvider(BaseSearchProvider):
    """Scrape the Naver blog tab for an exact phrase."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str = NAVER_SEARCH_URL,
        months: int = DEFAULT_MONTHS,
        today: date | None = None,
    ) -> None:
        self._client = client
        self._base_url = base_url
        self._months = months
        self._today = today

    @property
    def provider_name(self) -> str:
        return "crawl"

    async def search(self, query: str, count: int, offset: int = 0) -> SearchPage:
        today = self._today or date.today()
        params = {
            "where": "blog",
            "query": f'"{query}"',
            "start": offset + 1,
            "sm": "tab_opt",
            "nso": date_filter(today, self._months),
        }
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
                f"HTTP {response.status_code}",
                status_code=response.status_code,
            )

        items = parse_results(response.text)[:count]
        logger.debug("Crawl search '%s' parsed %d links", query, len(items))
        return SearchPage(items=items, total_results=len(items))


def parse_results(markup: str) -> list[SearchItem]:
    """Blog post links from a result page, in page order, de-duplicated."""
    soup = BeautifulSoup(markup, "html.parser")
    found: dict[str, SearchItem] = {}

    for anchor in soup.find_all("a", href=True):
        href = anchor["href"]
        match = _BLOG_URL.match(href)
        if not match:
            continue
        url = match.group(0)
        title = strip_html_tags(anchor.get_text(" ", strip=True))
        existing = found.get(url)
        if existing is None:
            found[url] = SearchItem(title=title, link=url, snippet="")
        elif not existing.title and title:
            found[url] = SearchItem(title=title, link=url, snippet=existing.snippet)

    # Plain-text links (e.g. inside data attributes or scripts)
    for match in _BLOG_URL.finditer(markup):
        found.setdefault(match.group(0), SearchItem(title="", link=match.group(0)))

    return list(found.values())
