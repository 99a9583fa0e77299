# tests/unit/search/test_keywords.py — v1
"""Tests for search/keywords.py: frequency keyword extractor."""

from __future__ import annotations

import pytest

from originality.search.keywords import FrequencyKeywordExtractor


class TestFrequencyKeywordExtractor:
    def test_ranked_by_frequency(self):
        extractor = FrequencyKeywordExtractor(max_keywords=2)
        text = "implant cost implant care implant cost"
        assert extractor.keywords(text) == ["implant", "cost"]

    def test_ties_keep_first_occurrence(self):
        extractor = FrequencyKeywordExtractor(max_keywords=3)
        assert extractor.keywords("gamma alpha beta") == ["gamma", "alpha", "beta"]

    def test_skips_digits_and_stopwords(self):
        extractor = FrequencyKeywordExtractor(stopwords=frozenset({"the"}))
        assert extractor.keywords("the 2024 the clinic 2024") == ["clinic"]

    def test_empty_text(self):
        assert FrequencyKeywordExtractor().keywords("") == []

    @pytest.mark.asyncio
    async def test_extract_joins_with_spaces(self):
        extractor = FrequencyKeywordExtractor(max_keywords=2)
        assert await extractor.extract("치과 치과 스케일링") == "치과 스케일링"
