# src/search/base.py — v1
"""Abstract collaborator interfaces consumed by the pipeline.

Providers signal failure by raising ProviderFailure (or RateLimited) and
signal "nothing found" by returning an empty page, so callers can tell the
two apart.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from originality.core.models import SearchPage


class BaseSearchProvider(ABC):
    """Paginated web search returning title/link/snippet items."""

    @abstractmethod
    async def search(self, query: str, count: int, offset: int = 0) -> SearchPage:
        """Return up to `count` items starting at 0-based `offset`.

        Raises:
            ProviderFailure: On transport or provider errors.
        """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier used as the match `source`."""


class BasePageFetcher(ABC):
    """Retrieves the readable text of a page."""

    @abstractmethod
    async def fetch(self, url: str) -> str:
        """Return page text.

        Raises:
            RateLimited: When the remote answers HTTP 429.
            ProviderFailure: On any other transport or HTTP error.
        """


class BaseKeywordExtractor(ABC):
    """Derives a search query from free text."""

    @abstractmethod
    async def extract(self, text: str) -> str:
        """Return a short keyword query for `text`."""
