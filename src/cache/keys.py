# src/cache/keys.py — v1
"""Canonical cache keys.

Parameter dicts are serialized with sorted keys so that argument order
never changes the cache key. Long texts are reduced to a SHA-256 digest
before they become part of a key.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any


def make_cache_key(prefix: str, params: dict[str, Any]) -> str:
    """Return `prefix:<canonical JSON of params>`."""
    canonical = json.dumps(
        params, sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=str
    )
    return f"{prefix}:{canonical}"


def text_digest(text: str) -> str:
    """SHA-256 of the UTF-8 text, hex encoded."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()
