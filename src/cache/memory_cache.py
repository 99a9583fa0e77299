# src/cache/memory_cache.py — v1
"""Bounded in-memory TTL cache (default backend).

Eviction rules:
- Lazy expiry: get() treats `now - created_at > ttl` as a miss and deletes
  the entry.
- Eager bound: set() evicts the single oldest-inserted entry when the cache
  already holds `max_size` entries. Eviction follows insertion order, not
  access order (this is not an LRU).
- Background sweep: start_sweeper() runs cleanup() every interval until
  stop_sweeper() is awaited.

All mutations go through one lock so concurrent checks in the same process
can share an instance. with_cache() does not de-duplicate in-flight
computations: two concurrent misses on the same key both compute.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from typing import Any, Awaitable, Callable, TypeVar

from originality.cache.base_cache import BaseCache
from originality.cache.keys import make_cache_key
from originality.cache.models import CacheEntry, CacheEntryStats, CacheStats

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_SIZE = 100
DEFAULT_TTL_S = 3600.0
DEFAULT_SWEEP_INTERVAL_S = 300.0


class MemoryCache(BaseCache):
    """Process-local (prefix, params) -> value cache.

    Args:
        max_size: Maximum number of entries held at once.
        default_ttl_s: TTL applied when set() receives no explicit TTL.
        sweep_interval_s: Period of the background sweep started by start_sweeper().
        clock: Monotonic time source in seconds (injectable for tests).
    """

    def __init__(
        self,
        max_size: int = DEFAULT_MAX_SIZE,
        default_ttl_s: float = DEFAULT_TTL_S,
        sweep_interval_s: float = DEFAULT_SWEEP_INTERVAL_S,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_size < 1:
            raise ValueError("max_size must be >= 1")
        self._max_size = max_size
        self._default_ttl_s = default_ttl_s
        self._sweep_interval_s = sweep_interval_s
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._sweeper: asyncio.Task[None] | None = None

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def sweep_interval_s(self) -> float:
        return self._sweep_interval_s

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def get(self, prefix: str, params: dict[str, Any]) -> Any | None:
        key = make_cache_key(prefix, params)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None

            if entry.is_expired(self._clock()):
                del self._entries[key]
                logger.debug("Cache expired: %s", key[:80])
                return None

            entry.hits += 1
            logger.debug("Cache hit (%d): %s", entry.hits, key[:80])
            return entry.value

    def set(
        self,
        prefix: str,
        params: dict[str, Any],
        value: Any,
        ttl_s: float | None = None,
    ) -> None:
        key = make_cache_key(prefix, params)
        entry = CacheEntry(
            key=key,
            value=value,
            created_at=self._clock(),
            ttl_s=self._default_ttl_s if ttl_s is None else ttl_s,
        )
        with self._lock:
            # Overwrite re-inserts the key as the newest entry
            if key in self._entries:
                del self._entries[key]
            elif len(self._entries) >= self._max_size:
                oldest = next(iter(self._entries))
                del self._entries[oldest]
                logger.debug("Cache evicted oldest: %s", oldest[:80])
            self._entries[key] = entry

    def invalidate(self, prefix: str, params: dict[str, Any] | None = None) -> int:
        with self._lock:
            if params is not None:
                key = make_cache_key(prefix, params)
                return 1 if self._entries.pop(key, None) is not None else 0

            marker = f"{prefix}:"
            doomed = [k for k in self._entries if k.startswith(marker)]
            for k in doomed:
                del self._entries[k]
        logger.debug("Cache invalidated %d entries with prefix %s", len(doomed), prefix)
        return len(doomed)

    def clear(self) -> int:
        with self._lock:
            size = len(self._entries)
            self._entries.clear()
        return size

    def cleanup(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [k for k, e in self._entries.items() if e.is_expired(now)]
            for k in expired:
                del self._entries[k]
        if expired:
            logger.info("Cache cleanup removed %d expired entries", len(expired))
        return len(expired)

    def get_stats(self) -> CacheStats:
        now = self._clock()
        with self._lock:
            rows = [
                CacheEntryStats(
                    key=e.key[:50],
                    hits=e.hits,
                    age_minutes=round((now - e.created_at) / 60),
                )
                for e in self._entries.values()
            ]
        total_hits = sum(r.hits for r in rows)
        # Each entry counts its initial set as one request
        total_requests = total_hits + len(rows)
        return CacheStats(
            size=len(rows),
            max_size=self._max_size,
            entries=sorted(rows, key=lambda r: r.hits, reverse=True),
            total_hits=total_hits,
            hit_rate=(total_hits / total_requests * 100) if total_requests else 0.0,
        )

    # --- Background sweep ---

    @property
    def sweeping(self) -> bool:
        return self._sweeper is not None and not self._sweeper.done()

    def start_sweeper(self, interval_s: float | None = None) -> bool:
        """Start the periodic expiry sweep on the running event loop.

        Returns:
            False if a sweep was already running.
        """
        if self.sweeping:
            return False
        self._sweeper = asyncio.get_running_loop().create_task(
            self._sweep_loop(interval_s if interval_s is not None else self._sweep_interval_s)
        )
        return True

    async def stop_sweeper(self) -> None:
        """Cancel the sweep task and wait for it to finish."""
        task, self._sweeper = self._sweeper, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _sweep_loop(self, interval_s: float) -> None:
        while True:
            await asyncio.sleep(interval_s)
            self.cleanup()


async def with_cache(
    cache: BaseCache | None,
    prefix: str,
    params: dict[str, Any],
    compute: Callable[[], Awaitable[T]],
    ttl_s: float | None = None,
) -> T:
    """Get-or-compute-and-set.

    No single-flight: concurrent identical calls may both miss and both
    run `compute`. A `None` result is returned but not cached, since None
    is the miss sentinel.
    """
    if cache is None:
        return await compute()

    cached = cache.get(prefix, params)
    if cached is not None:
        return cached

    logger.debug("Cache miss: %s", prefix)
    result = await compute()
    if result is not None:
        cache.set(prefix, params, result, ttl_s=ttl_s)
    return result
