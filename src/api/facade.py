# src/api/facade.py — v1
"""Public API facade: single entry point for originality checks.

Usage:
    from originality.api.facade import check_similarity
    result = await check_similarity(text, title="My post", corpus=published)

Pipeline of check_similarity():
  1. Validate the candidate (InputError on empty text)
  2. Score against the caller's own corpus
  3. Derive keywords, search the web, fetch pages sequentially
  4. Re-score every fetched page and collect similar sentence pairs
  5. Aggregate into one risk verdict

Texts are cut to `max_compare_chars` before scoring: the edit-distance
metric is quadratic and does not bound its own input.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncIterator, Callable

from originality.api.aggregator import aggregate
from originality.cache.memory_cache import MemoryCache
from originality.config.settings import ConfigurationError, Settings
from originality.core.errors import InputError, ProviderFailure, SearchUnavailable
from originality.core.models import (
    AggregateResult,
    CorpusMatch,
    Document,
    ProgressEvent,
    ProgressStage,
    SearchMatch,
    WebMatch,
)
from originality.fetch.pipeline import FetchPipeline
from originality.fetch.retry import FetchRetryConfig
from originality.logging.context import clear_context, set_check_context, set_stage_context
from originality.search.keywords import FrequencyKeywordExtractor
from originality.similarity.corpus_matcher import check_against_corpus
from originality.similarity.scorer import (
    SimilarityScorer,
    classify,
    score,
    similar_sentence_pairs,
)

if TYPE_CHECKING:
    import httpx

    from originality.cache.base_cache import BaseCache
    from originality.search.base import BaseKeywordExtractor
    from originality.search.orchestrator import SearchOrchestrator

logger = logging.getLogger(__name__)

__all__ = [
    "OriginalityChecker",
    "check_against_corpus",
    "check_similarity",
    "classify",
    "score",
    "search_similar_on_web",
    "similar_sentence_pairs",
]

ProgressCallback = Callable[[ProgressEvent], None]

MAX_SENTENCE_PAIRS = 5


class OriginalityChecker:
    """Wires scorer, corpus matcher, search and fetch into one check.

    Args:
        settings: Global settings. Loaded from .env if None.
        search: Search orchestrator. None disables the web step.
        fetch_pipeline: Page fetch pipeline. None disables the web step.
        keyword_extractor: Query derivation from candidate text. Defaults
            to FrequencyKeywordExtractor.
        scorer: Scorer (optionally cache-backed). Defaults to uncached.
        cache: Shared cache. Used as an async context manager, the checker
            runs the cache sweep every `cache_sweep_interval_s` while open.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        search: SearchOrchestrator | None = None,
        fetch_pipeline: FetchPipeline | None = None,
        keyword_extractor: BaseKeywordExtractor | None = None,
        scorer: SimilarityScorer | None = None,
        cache: BaseCache | None = None,
    ) -> None:
        self._settings = settings or Settings()
        self._search = search
        self._fetch_pipeline = fetch_pipeline
        self._keyword_extractor = keyword_extractor or FrequencyKeywordExtractor()
        self._scorer = scorer or SimilarityScorer()
        self._cache = cache
        self._owns_sweeper = False

    async def __aenter__(self) -> OriginalityChecker:
        if isinstance(self._cache, MemoryCache):
            self._owns_sweeper = self._cache.start_sweeper(
                self._settings.cache_sweep_interval_s
            )
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        if self._owns_sweeper and isinstance(self._cache, MemoryCache):
            await self._cache.stop_sweeper()
        self._owns_sweeper = False

    @classmethod
    def from_settings(
        cls,
        client: httpx.AsyncClient,
        settings: Settings | None = None,
        cache: BaseCache | None = None,
        keyword_extractor: BaseKeywordExtractor | None = None,
    ) -> OriginalityChecker:
        """Build a fully wired checker on top of an httpx client.

        Raises:
            ConfigurationError: If the configured search provider cannot be built.
        """
        from originality.search.provider_factory import (
            create_page_fetcher,
            create_search_orchestrator,
        )

        settings = settings or Settings()
        return cls(
            settings=settings,
            search=create_search_orchestrator(client, settings, cache),
            fetch_pipeline=FetchPipeline(
                create_page_fetcher(client, settings),
                config=FetchRetryConfig.from_settings(settings),
                cache=cache,
                cache_ttl_s=settings.cache_fetch_ttl_s,
            ),
            keyword_extractor=keyword_extractor,
            scorer=SimilarityScorer(cache=cache, ttl_s=settings.cache_score_ttl_s),
            cache=cache,
        )

    @property
    def web_enabled(self) -> bool:
        return self._search is not None and self._fetch_pipeline is not None

    def check_against_corpus(
        self, candidate: str, corpus: list[Document], top_n: int | None = None
    ) -> list[CorpusMatch]:
        """Top-N own-corpus matches, texts bounded to max_compare_chars."""
        limit = self._settings.max_compare_chars
        bounded = [
            doc.model_copy(update={"raw_text": doc.raw_text[:limit]}) for doc in corpus
        ]
        return check_against_corpus(
            candidate[:limit],
            bounded,
            top_n=top_n if top_n is not None else self._settings.corpus_top_n,
            scorer=self._scorer,
        )

    async def search_similar_on_web(
        self,
        candidate: str,
        keywords: str | None = None,
        max_results: int | None = None,
        cancel_event: asyncio.Event | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> list[WebMatch]:
        """Search, fetch and re-score web pages, best match first.

        Raises:
            ConfigurationError: If no search orchestrator or fetch pipeline is set.
            SearchUnavailable: First search page failed with no fallback results.
        """
        matches, _ = await self._search_web(
            candidate, keywords, max_results, cancel_event, on_progress
        )
        return matches

    async def check_similarity(
        self,
        candidate: str,
        title: str = "",
        corpus: list[Document] | None = None,
        keywords: str | None = None,
        on_progress: ProgressCallback | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> AggregateResult:
        """Full originality check of `candidate`.

        Raises:
            InputError: If the candidate text is empty.
            SearchUnavailable: First search page failed with no fallback results.
        """
        if not candidate or not candidate.strip():
            raise InputError("Candidate text is empty")

        started = time.perf_counter()
        check_id = uuid.uuid4().hex[:12]
        set_check_context(check_id)
        document = Document(id=check_id, title=title, raw_text=candidate)

        try:
            _emit(on_progress, "start", "Starting originality check")
            logger.info(
                "Starting check: chars=%d, corpus=%d", len(candidate), len(corpus or [])
            )

            set_stage_context("corpus")
            corpus_matches = self.check_against_corpus(candidate, corpus or [])
            _emit(
                on_progress, "corpus",
                f"Compared against {len(corpus or [])} own documents",
                current=len(corpus_matches), total=len(corpus or []),
            )

            web_matches: list[WebMatch] = []
            web_search_failed = False
            cancelled = _is_cancelled(cancel_event)

            if not self.web_enabled:
                logger.info("Web search not configured, skipping web step")
            elif not cancelled:
                try:
                    web_matches, cancelled = await self._search_web(
                        candidate, keywords, None, cancel_event, on_progress
                    )
                except SearchUnavailable:
                    raise
                except ProviderFailure as exc:
                    web_search_failed = True
                    logger.warning("Web step degraded: %s", exc)

            set_stage_context("aggregate")
            duration_ms = int((time.perf_counter() - started) * 1000)
            result = aggregate(
                document,
                corpus_matches,
                web_matches,
                duration_ms=duration_ms,
                web_search_failed=web_search_failed,
                cancelled=cancelled,
            )
            _emit(on_progress, "aggregate", result.message)
            _emit(on_progress, "done", f"{result.risk_status} ({result.overall_score:.1f}%)")
            return result
        finally:
            clear_context()

    async def _search_web(
        self,
        candidate: str,
        keywords: str | None,
        max_results: int | None,
        cancel_event: asyncio.Event | None,
        on_progress: ProgressCallback | None,
    ) -> tuple[list[WebMatch], bool]:
        if self._search is None or self._fetch_pipeline is None:
            raise ConfigurationError(
                "Web search requires a SearchOrchestrator and a FetchPipeline"
            )
        settings = self._settings
        limit = settings.max_compare_chars
        bounded_candidate = candidate[:limit]

        query = (keywords or "").strip()
        if not query:
            query = await self._extract_keywords(bounded_candidate)
        if not query:
            logger.info("No search keywords derived, skipping web search")
            return [], False

        set_stage_context("search")
        _emit(on_progress, "search", f"Searching the web for '{query}'")
        stubs = await self._search.search(
            query, max_results if max_results is not None else settings.search_max_results
        )
        _emit(on_progress, "search", f"Found {len(stubs)} candidate pages", total=len(stubs))
        if not stubs:
            return [], False

        batch = await self._fetch_pipeline.fetch_all(
            [s.url for s in stubs], cancel_event=cancel_event, on_progress=on_progress
        )
        contents = {o.url: o.content for o in batch.successful}

        matches = [
            self._score_page(stub, contents[stub.url][:limit], bounded_candidate)
            for stub in stubs
            if stub.url in contents
        ]
        matches.sort(key=lambda m: m.score, reverse=True)
        logger.info(
            "Web comparison: %d pages scored of %d results", len(matches), len(stubs)
        )
        return matches, batch.cancelled

    async def _extract_keywords(self, text: str) -> str:
        """Keyword extractor failures and timeouts surface as ProviderFailure."""
        timeout_s = self._settings.keyword_timeout_s
        try:
            keywords = await asyncio.wait_for(
                self._keyword_extractor.extract(text), timeout=timeout_s
            )
        except asyncio.TimeoutError as exc:
            raise ProviderFailure(
                "keyword_extractor", f"timed out after {timeout_s}s"
            ) from exc
        except ProviderFailure:
            raise
        except Exception as exc:
            raise ProviderFailure("keyword_extractor", str(exc)) from exc
        return keywords.strip()

    def _score_page(self, stub: SearchMatch, page_text: str, candidate: str) -> WebMatch:
        similarity = self._scorer.fused_score(candidate, page_text)
        pairs = similar_sentence_pairs(
            candidate, page_text, threshold=self._settings.sentence_pair_threshold
        )
        return WebMatch(
            title=stub.title,
            url=stub.url,
            snippet=stub.snippet,
            source=stub.source,
            score=similarity,
            level=classify(similarity),
            content_chars=len(page_text),
            similar_sentences=pairs[:MAX_SENTENCE_PAIRS],
        )


# --- Module-level API ---


async def search_similar_on_web(
    candidate: str,
    keywords: str | None = None,
    max_results: int | None = None,
    settings: Settings | None = None,
    cache: BaseCache | None = None,
    client: httpx.AsyncClient | None = None,
    cancel_event: asyncio.Event | None = None,
    on_progress: ProgressCallback | None = None,
) -> list[WebMatch]:
    """Convenience wrapper building a checker from settings for one call."""
    async with _checker_session(settings, cache, client) as checker:
        return await checker.search_similar_on_web(
            candidate,
            keywords=keywords,
            max_results=max_results,
            cancel_event=cancel_event,
            on_progress=on_progress,
        )


async def check_similarity(
    candidate: str,
    title: str = "",
    corpus: list[Document] | None = None,
    keywords: str | None = None,
    on_progress: ProgressCallback | None = None,
    cancel_event: asyncio.Event | None = None,
    settings: Settings | None = None,
    cache: BaseCache | None = None,
    client: httpx.AsyncClient | None = None,
) -> AggregateResult:
    """Run a full originality check with components built from settings.

    Raises:
        InputError: If the candidate text is empty.
        SearchUnavailable: First search page failed with no fallback results.
        ConfigurationError: If the search provider cannot be built.
    """
    if not candidate or not candidate.strip():
        raise InputError("Candidate text is empty")
    async with _checker_session(settings, cache, client) as checker:
        return await checker.check_similarity(
            candidate,
            title=title,
            corpus=corpus,
            keywords=keywords,
            on_progress=on_progress,
            cancel_event=cancel_event,
        )


@asynccontextmanager
async def _checker_session(
    settings: Settings | None,
    cache: BaseCache | None,
    client: httpx.AsyncClient | None,
) -> AsyncIterator[OriginalityChecker]:
    """Yield a wired checker; closes the httpx client only if it created it."""
    from originality.search.adapters.http_client import build_async_client

    settings = settings or Settings()
    if client is not None:
        yield OriginalityChecker.from_settings(client, settings, cache)
        return
    async with build_async_client(settings) as owned_client:
        yield OriginalityChecker.from_settings(owned_client, settings, cache)


def _emit(
    callback: ProgressCallback | None,
    stage: ProgressStage,
    message: str,
    current: int = 0,
    total: int = 0,
) -> None:
    if callback is not None:
        callback(ProgressEvent(stage=stage, message=message, current=current, total=total))


def _is_cancelled(cancel_event: asyncio.Event | None) -> bool:
    return cancel_event is not None and cancel_event.is_set()
