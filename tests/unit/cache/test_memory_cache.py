# tests/unit/cache/test_memory_cache.py — v1
"""Tests for cache/memory_cache.py: TTL, bounded eviction, stats, sweep."""

from __future__ import annotations

import asyncio
import threading

import pytest

from originality.cache.memory_cache import MemoryCache, with_cache


class TestGetSet:
    def test_roundtrip(self):
        cache = MemoryCache()
        cache.set("search", {"q": "implant"}, ["r1"])
        assert cache.get("search", {"q": "implant"}) == ["r1"]

    def test_miss(self):
        assert MemoryCache().get("search", {"q": "none"}) is None

    def test_param_order_does_not_matter(self):
        cache = MemoryCache()
        cache.set("search", {"a": 1, "b": 2}, "value")
        assert cache.get("search", {"b": 2, "a": 1}) == "value"

    def test_hit_increments_hits(self):
        cache = MemoryCache()
        cache.set("p", {"k": 1}, "v")
        cache.get("p", {"k": 1})
        cache.get("p", {"k": 1})
        assert cache.get_stats().total_hits == 2

    def test_invalid_max_size(self):
        with pytest.raises(ValueError, match="max_size"):
            MemoryCache(max_size=0)


class TestExpiry:
    def test_expired_entry_is_miss_and_deleted(self, fake_clock):
        cache = MemoryCache(default_ttl_s=60, clock=fake_clock)
        cache.set("p", {"k": 1}, "v")
        fake_clock.advance(60)
        assert cache.get("p", {"k": 1}) == "v"
        fake_clock.advance(0.5)
        assert cache.get("p", {"k": 1}) is None
        assert len(cache) == 0

    def test_explicit_ttl_overrides_default(self, fake_clock):
        cache = MemoryCache(default_ttl_s=3600, clock=fake_clock)
        cache.set("p", {"k": 1}, "v", ttl_s=5)
        fake_clock.advance(6)
        assert cache.get("p", {"k": 1}) is None

    def test_cleanup_removes_only_expired(self, fake_clock):
        cache = MemoryCache(clock=fake_clock)
        cache.set("p", {"k": "short"}, 1, ttl_s=10)
        cache.set("p", {"k": "long"}, 2, ttl_s=1000)
        fake_clock.advance(11)
        assert cache.cleanup() == 1
        assert cache.get("p", {"k": "long"}) == 2


class TestEviction:
    def test_max_size_plus_one_evicts_first_inserted(self):
        cache = MemoryCache(max_size=100)
        for i in range(101):
            cache.set("p", {"i": i}, i)
        assert len(cache) == 100
        assert cache.get("p", {"i": 0}) is None
        assert cache.get("p", {"i": 1}) == 1
        assert cache.get("p", {"i": 100}) == 100

    def test_insertion_order_not_lru(self):
        cache = MemoryCache(max_size=2)
        cache.set("p", {"i": 1}, 1)
        cache.set("p", {"i": 2}, 2)
        cache.get("p", {"i": 1})  # access does not refresh position
        cache.set("p", {"i": 3}, 3)
        assert cache.get("p", {"i": 1}) is None
        assert cache.get("p", {"i": 2}) == 2

    def test_overwrite_does_not_evict(self):
        cache = MemoryCache(max_size=2)
        cache.set("p", {"i": 1}, 1)
        cache.set("p", {"i": 2}, 2)
        cache.set("p", {"i": 1}, "updated")
        assert len(cache) == 2
        assert cache.get("p", {"i": 1}) == "updated"
        # Overwritten key became newest, so key 2 is now the oldest
        cache.set("p", {"i": 3}, 3)
        assert cache.get("p", {"i": 2}) is None
        assert cache.get("p", {"i": 1}) == "updated"


class TestInvalidate:
    def test_single_entry(self):
        cache = MemoryCache()
        cache.set("search", {"q": "a"}, 1)
        cache.set("search", {"q": "b"}, 2)
        assert cache.invalidate("search", {"q": "a"}) == 1
        assert cache.get("search", {"q": "a"}) is None
        assert cache.get("search", {"q": "b"}) == 2

    def test_whole_prefix(self):
        cache = MemoryCache()
        cache.set("search", {"q": "a"}, 1)
        cache.set("search", {"q": "b"}, 2)
        cache.set("search_extra", {"q": "a"}, 3)
        assert cache.invalidate("search") == 2
        assert cache.get("search_extra", {"q": "a"}) == 3

    def test_missing_entry(self):
        assert MemoryCache().invalidate("search", {"q": "x"}) == 0

    def test_clear(self):
        cache = MemoryCache()
        cache.set("a", {}, 1)
        cache.set("b", {}, 2)
        assert cache.clear() == 2
        assert len(cache) == 0


class TestStats:
    def test_empty(self):
        stats = MemoryCache(max_size=10).get_stats()
        assert stats.size == 0
        assert stats.max_size == 10
        assert stats.hit_rate == 0.0

    def test_entries_sorted_by_hits_with_age(self, fake_clock):
        cache = MemoryCache(clock=fake_clock)
        cache.set("p", {"k": "cold"}, 1)
        cache.set("p", {"k": "hot"}, 2)
        for _ in range(3):
            cache.get("p", {"k": "hot"})
        fake_clock.advance(120)
        stats = cache.get_stats()
        assert stats.size == 2
        assert stats.total_hits == 3
        assert stats.entries[0].hits == 3
        assert stats.entries[0].age_minutes == 2
        # 3 hits over 3 hits + 2 initial sets
        assert stats.hit_rate == pytest.approx(60.0)


class TestConcurrency:
    def test_parallel_writers_respect_bound(self):
        cache = MemoryCache(max_size=50)

        def writer(offset: int) -> None:
            for i in range(200):
                cache.set("p", {"w": offset, "i": i}, i)

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(cache) == 50


class TestSweeper:
    @pytest.mark.asyncio
    async def test_sweeper_removes_expired(self, fake_clock):
        cache = MemoryCache(clock=fake_clock)
        cache.set("p", {"k": 1}, "v", ttl_s=1)
        fake_clock.advance(5)
        cache.start_sweeper(interval_s=0.01)
        await asyncio.sleep(0.05)
        await cache.stop_sweeper()
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_stop_without_start(self):
        await MemoryCache().stop_sweeper()

    @pytest.mark.asyncio
    async def test_uses_configured_interval(self, fake_clock):
        cache = MemoryCache(sweep_interval_s=0.01, clock=fake_clock)
        cache.set("p", {"k": 1}, "v", ttl_s=1)
        fake_clock.advance(5)
        assert cache.start_sweeper() is True
        assert cache.start_sweeper() is False
        await asyncio.sleep(0.05)
        await cache.stop_sweeper()
        assert len(cache) == 0
        assert cache.sweeping is False


class TestWithCache:
    @pytest.mark.asyncio
    async def test_computes_once(self):
        cache = MemoryCache()
        calls = 0

        async def compute():
            nonlocal calls
            calls += 1
            return "result"

        assert await with_cache(cache, "op", {"x": 1}, compute) == "result"
        assert await with_cache(cache, "op", {"x": 1}, compute) == "result"
        assert calls == 1

    @pytest.mark.asyncio
    async def test_none_result_not_cached(self):
        cache = MemoryCache()

        async def compute():
            return None

        assert await with_cache(cache, "op", {"x": 1}, compute) is None
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_without_cache(self):
        async def compute():
            return 42

        assert await with_cache(None, "op", {}, compute) == 42

    @pytest.mark.asyncio
    async def test_no_single_flight(self):
        cache = MemoryCache()
        calls = 0
        gate = asyncio.Event()

        async def compute():
            nonlocal calls
            calls += 1
            await gate.wait()
            return "value"

        tasks = [
            asyncio.create_task(with_cache(cache, "op", {"x": 1}, compute))
            for _ in range(2)
        ]
        await asyncio.sleep(0)
        gate.set()
        assert await asyncio.gather(*tasks) == ["value", "value"]
        assert calls == 2
