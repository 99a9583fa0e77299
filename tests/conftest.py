# tests/conftest.py — v1
"""Shared test fixtures for all unit and integration tests.

Provides sample documents, stub collaborators (search provider, page
fetcher), a sleep recorder and a fake clock. No network: all I/O is stubbed.
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from originality.config.settings import Settings
from originality.core.models import Document, SearchItem, SearchPage
from originality.search.base import BasePageFetcher, BaseSearchProvider


# === HELPERS ===


class SleepRecorder:
    """Awaitable stand-in for asyncio.sleep that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)

    @property
    def total(self) -> float:
        return sum(self.delays)


class FakeClock:
    """Monotonic clock controlled by the test."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StubSearchProvider(BaseSearchProvider):
    """Search provider serving pre-baked pages, or raising per page index."""

    def __init__(self, name: str = "stub", pages: list | None = None) -> None:
        self._name = name
        self._pages = pages or []
        self.calls: list[tuple[str, int, int]] = []

    @property
    def provider_name(self) -> str:
        return self._name

    async def search(self, query: str, count: int, offset: int = 0) -> SearchPage:
        index = len(self.calls)
        self.calls.append((query, count, offset))
        if index >= len(self._pages):
            return SearchPage()
        page = self._pages[index]
        if isinstance(page, Exception):
            raise page
        return page


class StubPageFetcher(BasePageFetcher):
    """Page fetcher replaying a scripted list of results/exceptions per URL."""

    def __init__(self, script: dict[str, list] | None = None) -> None:
        self._script = {url: list(steps) for url, steps in (script or {}).items()}
        self.calls: list[str] = []

    async def fetch(self, url: str) -> str:
        self.calls.append(url)
        steps = self._script.get(url)
        if not steps:
            raise RuntimeError(f"no script for {url}")
        step = steps.pop(0) if len(steps) > 1 else steps[0]
        if isinstance(step, Exception):
            raise step
        return step


def make_page(*links: str, total: int = 0) -> SearchPage:
    return SearchPage(
        items=[SearchItem(title=f"title {i}", link=link, snippet="snippet") for i, link in enumerate(links)],
        total_results=total,
    )


# === FIXTURES ===


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def candidate_text() -> str:
    return (
        "Regular dental checkups help detect cavities early. "
        "Brushing twice a day with fluoride toothpaste protects the enamel. "
        "Flossing removes plaque between the teeth where brushes cannot reach."
    )


@pytest.fixture
def sample_corpus(candidate_text: str) -> list[Document]:
    """Three own documents: identical, partially overlapping, unrelated."""
    return [
        Document(
            id="doc_unrelated",
            title="Autumn hiking",
            source="own",
            raw_text=(
                "Mountain trails in autumn offer colorful foliage and cool air. "
                "Pack water, snacks and a light jacket for the descent."
            ),
        ),
        Document(id="doc_identical", title="Dental care", source="own", raw_text=candidate_text),
        Document(
            id="doc_partial",
            title="Oral hygiene basics",
            source="own",
            raw_text=(
                "Brushing twice a day with fluoride toothpaste protects the enamel. "
                "Mouthwash freshens breath but does not replace brushing."
            ),
        ),
    ]


@pytest.fixture
def mock_keyword_extractor() -> AsyncMock:
    extractor = AsyncMock()
    extractor.extract.return_value = "dental checkups"
    return extractor
