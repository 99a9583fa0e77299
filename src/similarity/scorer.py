# src/similarity/scorer.py — v1
"""Fused similarity score and similarity-level classification.

The fused score combines cosine (50%), Jaccard (30%) and normalized edit
similarity (20%) into a 0-100 value rounded to two decimals. The weights
and the level thresholds are fixed named policies; the aggregate risk
scale in api/aggregator.py is a separate policy and is not derived from
these thresholds.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from originality.cache.keys import text_digest
from originality.core.models import LevelInfo, SentencePair, SimilarityLevel, SimilarityScore
from originality.similarity.metrics import (
    cosine_from_tokens,
    jaccard_from_tokens,
    normalized_edit_similarity,
)
from originality.similarity.tokenizer import tokenize

if TYPE_CHECKING:
    from originality.cache.base_cache import BaseCache

logger = logging.getLogger(__name__)

COSINE_WEIGHT = 0.5
JACCARD_WEIGHT = 0.3
EDIT_WEIGHT = 0.2

# Descending (minimum score, level) lookup table
SIMILARITY_LEVEL_THRESHOLDS: tuple[tuple[float, SimilarityLevel], ...] = (
    (90.0, "very-high"),
    (70.0, "high"),
    (50.0, "medium"),
    (30.0, "low"),
)

_LEVEL_INFO: dict[SimilarityLevel, tuple[str, str]] = {
    "very-high": ("Very high", "Nearly identical content. Plagiarism risk is very high."),
    "high": ("High", "Substantially similar content. Revision is needed."),
    "medium": ("Medium", "Some overlapping passages. Review is recommended."),
    "low": ("Low", "Low similarity. The content is largely original."),
    "very-low": ("Very low", "Essentially different content. Originality is high."),
}

_SENTENCE_SPLIT = re.compile(r"[.!?]\s+")
MIN_SENTENCE_CHARS = 10

SCORE_CACHE_PREFIX = "similarity_score"


def fuse(cosine: float, jaccard: float, edit: float) -> float:
    """Weighted fusion of the three metrics, scaled to 0-100, 2 decimals."""
    raw = (
        cosine * COSINE_WEIGHT + jaccard * JACCARD_WEIGHT + edit * EDIT_WEIGHT
    ) * 100
    return round(min(100.0, max(0.0, raw)), 2)


def classify(score: float) -> SimilarityLevel:
    """Map a fused score onto its similarity level."""
    for minimum, level in SIMILARITY_LEVEL_THRESHOLDS:
        if score >= minimum:
            return level
    return "very-low"


def describe_level(score: float) -> LevelInfo:
    """Level plus label/description for display."""
    level = classify(score)
    label, description = _LEVEL_INFO[level]
    return LevelInfo(level=level, label=label, description=description)


def score(text_a: str, text_b: str) -> SimilarityScore:
    """Compute all three metrics and the fused score for two texts."""
    tokens_a = tokenize(text_a)
    tokens_b = tokenize(text_b)
    cosine = cosine_from_tokens(tokens_a, tokens_b)
    jaccard = jaccard_from_tokens(tokens_a, tokens_b)
    edit = normalized_edit_similarity(text_a, text_b)
    overall = fuse(cosine, jaccard, edit)
    return SimilarityScore(
        cosine=cosine,
        jaccard=jaccard,
        edit_distance=edit,
        overall=overall,
        level=classify(overall),
    )


def fused_score(text_a: str, text_b: str) -> float:
    """Shortcut returning only the 0-100 fused score."""
    return score(text_a, text_b).overall


def split_sentences(text: str) -> list[str]:
    """Split on terminators followed by whitespace, dropping short fragments."""
    return [
        s.strip()
        for s in _SENTENCE_SPLIT.split(text)
        if len(s.strip()) > MIN_SENTENCE_CHARS
    ]


def similar_sentence_pairs(
    text_a: str,
    text_b: str,
    threshold: float = 70.0,
) -> list[SentencePair]:
    """Every sentence pair whose fused score is >= threshold, best first.

    Compares all S_a x S_b pairs. Per-document sentence counts are small
    enough that the quadratic pass is acceptable; callers bound very long
    texts before calling.
    """
    sentences_a = split_sentences(text_a)
    sentences_b = split_sentences(text_b)

    pairs: list[SentencePair] = []
    for s_a in sentences_a:
        for s_b in sentences_b:
            similarity = fused_score(s_a, s_b)
            if similarity >= threshold:
                pairs.append(
                    SentencePair(sentence_a=s_a, sentence_b=s_b, similarity=similarity)
                )

    pairs.sort(key=lambda p: p.similarity, reverse=True)
    return pairs


class SimilarityScorer:
    """Scorer with optional transparent caching of full-text comparisons.

    Args:
        cache: Cache instance shared with the rest of the pipeline. None
            disables caching.
        ttl_s: Time-to-live for cached scores.
    """

    def __init__(self, cache: BaseCache | None = None, ttl_s: float | None = None) -> None:
        self._cache = cache
        self._ttl_s = ttl_s

    def score(self, text_a: str, text_b: str) -> SimilarityScore:
        if self._cache is None:
            return score(text_a, text_b)

        # Order-independent key: score is symmetric
        digests = sorted((text_digest(text_a), text_digest(text_b)))
        params = {"a": digests[0], "b": digests[1]}
        cached = self._cache.get(SCORE_CACHE_PREFIX, params)
        if cached is not None:
            return cached

        result = score(text_a, text_b)
        self._cache.set(SCORE_CACHE_PREFIX, params, result, ttl_s=self._ttl_s)
        return result

    def fused_score(self, text_a: str, text_b: str) -> float:
        return self.score(text_a, text_b).overall
