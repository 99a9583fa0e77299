# src/fetch/retry.py — v1
"""Fetch retry policy: exponential backoff on rate limits, linear otherwise.

Schedule for attempt index `n` (0-based, delay applied after attempt n
fails and before attempt n+1):
- rate limited:     min(max_delay, base_delay * 2**n)  -> 2 s, 4 s, 8 s, 16 s, 16 s
- transport error:  (n + 1) * linear_delay             -> 1 s, 2 s, 3 s
No delay follows the last attempt.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING

from originality.core.errors import RateLimited

if TYPE_CHECKING:
    from originality.config.settings import Settings


@dataclass(frozen=True)
class FetchRetryConfig:
    """Retry, pacing and acceptance policy for the fetch pipeline."""

    retries: int = 3
    base_delay_s: float = 2.0
    max_delay_s: float = 16.0
    linear_delay_s: float = 1.0
    inter_request_delay_s: float = 0.8
    min_content_chars: int = 100
    timeout_s: float = 20.0
    concurrency: int = 1

    @classmethod
    def from_settings(cls, settings: Settings) -> FetchRetryConfig:
        return cls(
            retries=settings.fetch_retries,
            base_delay_s=settings.fetch_base_delay_s,
            max_delay_s=settings.fetch_max_delay_s,
            linear_delay_s=settings.fetch_linear_delay_s,
            inter_request_delay_s=settings.fetch_inter_request_delay_s,
            min_content_chars=settings.fetch_min_content_chars,
            timeout_s=settings.fetch_timeout_s,
            concurrency=settings.fetch_concurrency,
        )


def classify_error(error: BaseException) -> str:
    """Classify a fetch exception as 'rate_limit', 'timeout' or 'transport'.

    Only the typed signal counts: messages carry URLs, so their text is
    never inspected.
    """
    if isinstance(error, RateLimited) or getattr(error, "status_code", None) == 429:
        return "rate_limit"
    if isinstance(error, asyncio.TimeoutError):
        return "timeout"
    return "transport"


def rate_limit_delay(config: FetchRetryConfig, attempt: int, retry_after_s: float | None = None) -> float:
    """Exponential delay, raised to a server Retry-After hint, capped at max."""
    delay = config.base_delay_s * (2 ** attempt)
    if retry_after_s is not None:
        delay = max(delay, retry_after_s)
    return min(config.max_delay_s, delay)


def transport_delay(config: FetchRetryConfig, attempt: int) -> float:
    """Linear delay for non-rate-limit failures."""
    return (attempt + 1) * config.linear_delay_s


def compute_delay(config: FetchRetryConfig, attempt: int, error: BaseException) -> float:
    if classify_error(error) == "rate_limit":
        retry_after = getattr(error, "retry_after_s", None)
        return rate_limit_delay(config, attempt, retry_after)
    return transport_delay(config, attempt)
