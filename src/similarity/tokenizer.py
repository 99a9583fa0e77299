# src/similarity/tokenizer.py — v1
"""Text → comparable token sequence.

Lowercases, replaces punctuation with whitespace and drops tokens of length
<= 1. `\\w` is Unicode-aware, so Hangul, CJK, Cyrillic and other in-script
word characters survive alongside ASCII letters and digits.
"""

from __future__ import annotations

import re
from collections import Counter

_NON_WORD = re.compile(r"[^\w\s]+")
_WHITESPACE = re.compile(r"\s+")

MIN_TOKEN_LENGTH = 2


def tokenize(text: str) -> list[str]:
    """Return the ordered token list for `text`."""
    if not text:
        return []
    cleaned = _NON_WORD.sub(" ", text.lower())
    return [t for t in _WHITESPACE.split(cleaned) if len(t) >= MIN_TOKEN_LENGTH]


def term_frequencies(tokens: list[str]) -> Counter[str]:
    """Term-frequency vector as a Counter."""
    return Counter(tokens)
