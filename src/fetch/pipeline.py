# src/fetch/pipeline.py — v1
"""Rate-limited, retrying retrieval of page text.

Per-URL state machine:

    PENDING -> FETCHING -> SUCCESS
                        -> RATE_LIMITED -> FETCHING ... (backoff, retry)
                        -> FAILED

Retry exhaustion, timeouts, transport errors and content shorter than
`min_content_chars` all end in FAILED for that URL only; the batch always
continues. Short content is a soft failure and is not retried.

URLs run through a BoundedWorkerPool with concurrency=1 and a fixed
inter-request delay: the crawl surface rate-limits by calling IP, so
parallel fetches would only trigger cascading 429s.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Awaitable, Callable

from originality.cache.memory_cache import with_cache
from originality.core.models import FetchOutcome, ProgressEvent
from originality.fetch.retry import FetchRetryConfig, classify_error, compute_delay
from originality.fetch.worker_pool import BoundedWorkerPool
from originality.logging.context import set_stage_context

if TYPE_CHECKING:
    from originality.cache.base_cache import BaseCache
    from originality.search.base import BasePageFetcher

logger = logging.getLogger(__name__)

PAGE_CACHE_PREFIX = "page_content"

ProgressCallback = Callable[[ProgressEvent], None]


@dataclass
class FetchBatch:
    """Outcomes in input order; URLs never started stay PENDING."""

    outcomes: list[FetchOutcome] = field(default_factory=list)
    cancelled: bool = False

    @property
    def successful(self) -> list[FetchOutcome]:
        return [o for o in self.outcomes if o.usable]


class FetchPipeline:
    """Sequential page fetcher with per-URL retry and backoff.

    Args:
        fetcher: Page-content collaborator.
        config: Retry/pacing policy. Defaults to the documented constants.
        cache: Optional shared cache for successful page text.
        cache_ttl_s: TTL for cached page text.
        sleep: Awaitable sleep (injectable so tests can record the schedule).
    """

    def __init__(
        self,
        fetcher: BasePageFetcher,
        config: FetchRetryConfig | None = None,
        cache: BaseCache | None = None,
        cache_ttl_s: float | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._fetcher = fetcher
        self._config = config or FetchRetryConfig()
        self._cache = cache
        self._cache_ttl_s = cache_ttl_s
        self._sleep = sleep
        self._pool = BoundedWorkerPool(
            concurrency=self._config.concurrency,
            start_delay_s=self._config.inter_request_delay_s,
            sleep=sleep,
        )

    @property
    def config(self) -> FetchRetryConfig:
        return self._config

    async def fetch_content(self, url: str) -> str | None:
        """Return usable page text for `url`, or None."""
        outcome = await self.fetch_one(url)
        return outcome.content if outcome.usable else None

    async def fetch_one(
        self, url: str, cancel_event: asyncio.Event | None = None
    ) -> FetchOutcome:
        """Drive one URL through the state machine (cache-aware)."""
        outcome = FetchOutcome(url=url)

        async def _compute() -> str | None:
            return await self._fetch_with_retry(outcome, cancel_event)

        content = await with_cache(
            self._cache, PAGE_CACHE_PREFIX, {"url": url}, _compute, ttl_s=self._cache_ttl_s
        )
        if content is not None and outcome.status == "PENDING":
            # Served from cache without any network attempt
            _transition(outcome, "SUCCESS")
            outcome.content = content
        return outcome

    async def fetch_all(
        self,
        urls: list[str],
        cancel_event: asyncio.Event | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> FetchBatch:
        """Fetch every URL strictly in order, pacing successive requests."""
        unique = list(dict.fromkeys(urls))
        total = len(unique)

        def _done(index: int, outcome: FetchOutcome) -> None:
            if on_progress is not None:
                on_progress(
                    ProgressEvent(
                        stage="fetch",
                        message=f"{outcome.status}: {outcome.url}",
                        current=index + 1,
                        total=total,
                    )
                )

        run = await self._pool.run(
            unique,
            lambda u: self.fetch_one(u, cancel_event),
            cancel_event=cancel_event,
            on_done=_done,
        )
        outcomes = [
            r if r is not None else FetchOutcome(url=u)
            for u, r in zip(unique, run.results)
        ]
        batch = FetchBatch(outcomes=outcomes, cancelled=run.cancelled)
        logger.info(
            "Fetched %d/%d pages (cancelled=%s)",
            len(batch.successful), total, batch.cancelled,
        )
        return batch

    async def _fetch_with_retry(
        self, outcome: FetchOutcome, cancel_event: asyncio.Event | None
    ) -> str | None:
        config = self._config
        set_stage_context("fetch", outcome.url)

        for attempt in range(config.retries):
            _transition(outcome, "FETCHING")
            outcome.attempts += 1
            try:
                raw = await asyncio.wait_for(
                    self._fetcher.fetch(outcome.url), timeout=config.timeout_s
                )
            except Exception as exc:  # noqa: BLE001 - one URL never fails the batch
                error_type = classify_error(exc)
                outcome.error = f"{error_type}: {exc}"
                if error_type == "rate_limit":
                    _transition(outcome, "RATE_LIMITED")

                is_last = attempt >= config.retries - 1
                if is_last or _cancelled(cancel_event):
                    _transition(outcome, "FAILED")
                    logger.warning(
                        "Fetch failed for %s after %d attempts (%s)",
                        outcome.url, outcome.attempts, error_type,
                    )
                    return None

                delay = compute_delay(config, attempt, exc)
                logger.warning(
                    "Fetch %s for %s (attempt %d/%d), retrying in %.1fs",
                    error_type, outcome.url, outcome.attempts, config.retries, delay,
                )
                await self._sleep(delay)
                continue

            content = (raw or "").strip()
            if len(content) < config.min_content_chars:
                outcome.error = (
                    f"content too short ({len(content)} < {config.min_content_chars} chars)"
                )
                _transition(outcome, "FAILED")
                logger.info("Excluding %s: %s", outcome.url, outcome.error)
                return None

            outcome.content = content
            outcome.error = None
            _transition(outcome, "SUCCESS")
            return content

        _transition(outcome, "FAILED")
        return None


def _transition(outcome: FetchOutcome, status) -> None:
    outcome.status = status
    outcome.history.append(status)


def _cancelled(cancel_event: asyncio.Event | None) -> bool:
    return cancel_event is not None and cancel_event.is_set()
