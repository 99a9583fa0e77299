# src/cache/base_cache.py — v1
"""Abstract cache interface keyed by (prefix, params)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from originality.cache.models import CacheStats


class BaseCache(ABC):
    """Unified interface for (prefix, params) -> value caches."""

    @abstractmethod
    def get(self, prefix: str, params: dict[str, Any]) -> Any | None:
        """Return the cached value, or None on miss or expiry."""

    @abstractmethod
    def set(
        self,
        prefix: str,
        params: dict[str, Any],
        value: Any,
        ttl_s: float | None = None,
    ) -> None:
        """Store a value. `ttl_s=None` uses the cache default."""

    @abstractmethod
    def invalidate(self, prefix: str, params: dict[str, Any] | None = None) -> int:
        """Remove one entry, or every entry under `prefix`. Returns count removed."""

    @abstractmethod
    def clear(self) -> int:
        """Remove every entry. Returns count removed."""

    @abstractmethod
    def cleanup(self) -> int:
        """Remove expired entries. Returns count removed."""

    @abstractmethod
    def get_stats(self) -> CacheStats:
        """Snapshot of size, hits and hit rate."""
