# src/core/errors.py — v1
"""Error taxonomy for the originality pipeline.

Only InputError and SearchUnavailable may reach the top-level caller;
every other ProviderFailure is recovered locally as an empty or excluded
result.
"""

from __future__ import annotations


class OriginalityError(Exception):
    """Base class for all originality pipeline errors."""


class InputError(OriginalityError):
    """Candidate text is empty or otherwise unusable."""


class ProviderFailure(OriginalityError):
    """A search provider or page fetcher failed."""

    def __init__(self, provider: str, detail: str, status_code: int | None = None):
        self.provider = provider
        self.detail = detail
        self.status_code = status_code
        super().__init__(f"{provider}: {detail}")


class RateLimited(ProviderFailure):
    """The remote surface signalled rate limiting (HTTP 429)."""

    def __init__(
        self,
        provider: str,
        detail: str = "rate limited",
        retry_after_s: float | None = None,
    ):
        self.retry_after_s = retry_after_s
        super().__init__(provider, detail, status_code=429)


class SearchUnavailable(ProviderFailure):
    """The first search page failed and no fallback produced results."""
