# src/cache/models.py — v1
"""Cache domain models: CacheEntry, CacheEntryStats, CacheStats."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class CacheEntry(BaseModel):
    """Single cached value with its insertion time and TTL."""

    key: str
    value: Any = None
    created_at: float
    ttl_s: float
    hits: int = 0

    def is_expired(self, now: float) -> bool:
        return now - self.created_at > self.ttl_s


class CacheEntryStats(BaseModel):
    """Per-entry statistics row."""

    key: str
    hits: int
    age_minutes: int


class CacheStats(BaseModel):
    """Snapshot returned by get_stats()."""

    size: int
    max_size: int
    entries: list[CacheEntryStats] = Field(default_factory=list)
    total_hits: int = 0
    hit_rate: float = 0.0
