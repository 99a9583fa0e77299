# src/similarity/metrics.py — v1
"""Lexical similarity metrics: cosine, Jaccard, normalized edit distance.

All metrics return a value in [0, 1] and return 0 instead of raising for
empty input.

The edit-distance metric runs an O(n·m) dynamic program over the raw
strings and does not truncate its inputs. Callers comparing long documents
must bound input length first (the aggregator cuts texts to
`max_compare_chars`).
"""

from __future__ import annotations

import numpy as np

from originality.similarity.tokenizer import term_frequencies, tokenize


def cosine_similarity(text_a: str, text_b: str) -> float:
    """Cosine of the term-frequency vectors over the token union."""
    return cosine_from_tokens(tokenize(text_a), tokenize(text_b))


def cosine_from_tokens(tokens_a: list[str], tokens_b: list[str]) -> float:
    tf_a = term_frequencies(tokens_a)
    tf_b = term_frequencies(tokens_b)
    if not tf_a or not tf_b:
        return 0.0

    vocabulary = sorted(tf_a.keys() | tf_b.keys())
    vec_a = np.array([tf_a.get(t, 0) for t in vocabulary], dtype=np.float64)
    vec_b = np.array([tf_b.get(t, 0) for t in vocabulary], dtype=np.float64)

    magnitude = float(np.linalg.norm(vec_a) * np.linalg.norm(vec_b))
    if magnitude == 0.0:
        return 0.0
    # Clamp float drift on identical vectors
    return min(1.0, float(vec_a @ vec_b) / magnitude)


def jaccard_similarity(text_a: str, text_b: str) -> float:
    """|intersection| / |union| over token sets."""
    return jaccard_from_tokens(tokenize(text_a), tokenize(text_b))


def jaccard_from_tokens(tokens_a: list[str], tokens_b: list[str]) -> float:
    set_a = set(tokens_a)
    set_b = set(tokens_b)
    union = set_a | set_b
    if not union:
        return 0.0
    return len(set_a & set_b) / len(union)


def levenshtein_distance(text_a: str, text_b: str) -> int:
    """Insert/delete/substitute edit distance, O(n·m) time, O(m) memory.

    Each DP row is computed with numpy: deletions and substitutions come
    from the previous row, then insertions are resolved in one pass with
    current[j] = j + min(current[k] - k for k <= j).
    """
    if text_a == text_b:
        return 0
    if not text_a:
        return len(text_b)
    if not text_b:
        return len(text_a)

    codes_b = np.fromiter((ord(c) for c in text_b), dtype=np.int64, count=len(text_b))
    offsets = np.arange(len(text_b) + 1, dtype=np.int64)
    previous = offsets.copy()
    current = np.empty_like(previous)

    for i, char_a in enumerate(text_a, start=1):
        cost = (codes_b != ord(char_a)).astype(np.int64)
        current[0] = i
        np.minimum(previous[1:] + 1, previous[:-1] + cost, out=current[1:])
        current = np.minimum.accumulate(current - offsets) + offsets
        previous, current = current, previous

    return int(previous[-1])


def normalized_edit_similarity(text_a: str, text_b: str) -> float:
    """1 - levenshtein / max(len). Two empty strings score 0."""
    max_len = max(len(text_a), len(text_b))
    if max_len == 0:
        return 0.0
    return 1.0 - levenshtein_distance(text_a, text_b) / max_len
