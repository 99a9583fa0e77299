# tests/unit/core/test_unit_models.py — v2
"""Tests for core/models.py and core/errors.py."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from originality.core.errors import (
    InputError,
    OriginalityError,
    ProviderFailure,
    RateLimited,
    SearchUnavailable,
)
from originality.core.models import (
    AggregateResult,
    Document,
    FetchOutcome,
    SimilarityScore,
    WebMatch,
)


class TestModels:
    def test_similarity_score_bounds(self):
        with pytest.raises(ValidationError):
            SimilarityScore(cosine=1.0, jaccard=1.0, edit_distance=1.0, overall=101.0, level="very-high")
        with pytest.raises(ValidationError):
            SimilarityScore(cosine=-0.1, jaccard=0.0, edit_distance=0.0, overall=0.0, level="very-low")

    def test_unknown_level_rejected(self):
        with pytest.raises(ValidationError):
            SimilarityScore(cosine=0, jaccard=0, edit_distance=0, overall=0, level="extreme")

    def test_fetch_outcome_defaults(self):
        outcome = FetchOutcome(url="https://a/1")
        assert outcome.status == "PENDING"
        assert outcome.history == ["PENDING"]
        assert outcome.usable is False

    def test_fetch_outcome_history_not_shared(self):
        a = FetchOutcome(url="https://a/1")
        b = FetchOutcome(url="https://b/2")
        a.history.append("FETCHING")
        assert b.history == ["PENDING"]

    def test_web_match_defaults(self):
        match = WebMatch(url="https://a/1")
        assert match.level == "very-low"
        assert match.similar_sentences == []

    def test_aggregate_defaults(self):
        result = AggregateResult(
            candidate_document=Document(id="c", raw_text="text"), message="ok"
        )
        assert result.risk_status == "ORIGINAL"
        assert result.overall_score == 0.0
        assert result.own_corpus_matches == []


class TestErrors:
    def test_hierarchy(self):
        assert issubclass(InputError, OriginalityError)
        assert issubclass(RateLimited, ProviderFailure)
        assert issubclass(SearchUnavailable, ProviderFailure)

    def test_provider_failure_message(self):
        exc = ProviderFailure("google_cse", "HTTP 500", status_code=500)
        assert str(exc) == "google_cse: HTTP 500"
        assert exc.provider == "google_cse"
        assert exc.status_code == 500

    def test_rate_limited(self):
        exc = RateLimited("page_fetcher", retry_after_s=3.0)
        assert exc.status_code == 429
        assert exc.retry_after_s == 3.0
        assert "rate limited" in str(exc)
