# src/search/keywords.py — v1
"""Default keyword extractor: most frequent tokens of the candidate text.

Used when the caller supplies neither explicit keywords nor an external
(e.g. LLM-backed) extractor.
"""

from __future__ import annotations

from collections import Counter

from originality.search.base import BaseKeywordExtractor
from originality.similarity.tokenizer import tokenize

DEFAULT_MAX_KEYWORDS = 5


class FrequencyKeywordExtractor(BaseKeywordExtractor):
    """Pick the top-N tokens by frequency, ties broken by first occurrence."""

    def __init__(
        self,
        max_keywords: int = DEFAULT_MAX_KEYWORDS,
        stopwords: frozenset[str] | None = None,
    ) -> None:
        self._max_keywords = max_keywords
        self._stopwords = stopwords or frozenset()

    async def extract(self, text: str) -> str:
        return " ".join(self.keywords(text))

    def keywords(self, text: str) -> list[str]:
        tokens = [
            t for t in tokenize(text)
            if not t.isdigit() and t not in self._stopwords
        ]
        counts = Counter(tokens)
        first_seen = {t: i for i, t in reversed(list(enumerate(tokens)))}
        ranked = sorted(counts, key=lambda t: (-counts[t], first_seen[t]))
        return ranked[: self._max_keywords]
