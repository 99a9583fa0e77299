# tests/unit/similarity/test_tokenizer.py — v1
"""Tests for similarity/tokenizer.py: normalization and tokenization."""

from __future__ import annotations

from originality.similarity.tokenizer import term_frequencies, tokenize


class TestTokenize:
    def test_lowercases_and_strips_punctuation(self):
        assert tokenize("Hello, World! Hello?") == ["hello", "world", "hello"]

    def test_discards_single_character_tokens(self):
        assert tokenize("a bb c dd") == ["bb", "dd"]

    def test_keeps_korean_words(self):
        assert tokenize("치과 검진은 중요합니다.") == ["치과", "검진은", "중요합니다"]

    def test_mixed_scripts_and_digits(self):
        assert tokenize("임플란트 2024년 price: 100") == ["임플란트", "2024년", "price", "100"]

    def test_punctuation_splits_words(self):
        assert tokenize("state-of-the-art") == ["state", "of", "the", "art"]

    def test_empty_and_whitespace(self):
        assert tokenize("") == []
        assert tokenize("   \n\t ") == []

    def test_deterministic_order(self):
        text = "zeta alpha zeta beta"
        assert tokenize(text) == tokenize(text) == ["zeta", "alpha", "zeta", "beta"]


class TestTermFrequencies:
    def test_counts(self):
        tf = term_frequencies(["aa", "bb", "aa"])
        assert tf["aa"] == 2
        assert tf["bb"] == 1

    def test_empty(self):
        assert not term_frequencies([])
