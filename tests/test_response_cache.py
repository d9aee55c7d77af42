"""
Tests for the response cache.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from f1history.core.cache import ResponseCache
from f1history.core.exceptions import CacheError


class TestResponseCacheBasics:
    """Test cases for hits, misses and copies."""

    @pytest.mark.asyncio
    async def test_miss_then_hit(self):
        """Test that the second lookup is served without fetching."""
        cache = ResponseCache()
        fetch = AsyncMock(return_value={"RaceTable": {"Races": []}})

        first = await cache.get_or_fetch("2021", fetch)
        second = await cache.get_or_fetch("2021", fetch)

        assert first == second
        assert fetch.await_count == 1
        assert cache.misses == 1
        assert cache.hits == 1
        assert "2021" in cache
        assert len(cache) == 1

    @pytest.mark.asyncio
    async def test_returned_values_are_copies(self):
        """Test that mutating a returned value leaves the cache intact."""
        cache = ResponseCache()
        fetch = AsyncMock(return_value={"RaceTable": {"Races": [{"round": "1"}]}})

        first = await cache.get_or_fetch("2021", fetch)
        first["RaceTable"]["Races"].clear()

        second = await cache.get_or_fetch("2021", fetch)
        assert second == {"RaceTable": {"Races": [{"round": "1"}]}}

    @pytest.mark.asyncio
    async def test_paths_are_not_normalized(self):
        """Test that equivalent paths spelled differently are separate entries."""
        cache = ResponseCache()
        fetch = AsyncMock(return_value={})

        await cache.get_or_fetch("2021/1", fetch)
        await cache.get_or_fetch("2021/01", fetch)

        assert fetch.await_count == 2
        assert len(cache) == 2

    @pytest.mark.asyncio
    async def test_failures_are_not_cached(self):
        """Test that a failed fetch is retried on the next lookup."""
        cache = ResponseCache()
        fetch = AsyncMock(side_effect=[RuntimeError("boom"), {"ok": True}])

        with pytest.raises(RuntimeError, match="boom"):
            await cache.get_or_fetch("2021", fetch)

        assert await cache.get_or_fetch("2021", fetch) == {"ok": True}
        assert fetch.await_count == 2

    @pytest.mark.asyncio
    async def test_clear(self):
        cache = ResponseCache()
        await cache.get_or_fetch("2021", AsyncMock(return_value={}))

        cache.clear()

        assert len(cache) == 0
        assert cache.hits == 0
        assert cache.misses == 0


class TestResponseCacheBounds:
    """Test cases for bounded storage."""

    @pytest.mark.asyncio
    async def test_oldest_entry_is_evicted(self):
        cache = ResponseCache(max_size=2)
        fetch = AsyncMock(return_value={})

        for path in ("2019", "2020", "2021"):
            await cache.get_or_fetch(path, fetch)

        assert len(cache) == 2
        assert "2019" not in cache
        assert "2021" in cache

    @pytest.mark.asyncio
    async def test_unbounded_by_default(self):
        cache = ResponseCache()
        fetch = AsyncMock(return_value={})

        for year in range(1950, 2022):
            await cache.get_or_fetch(str(year), fetch)

        assert len(cache) == 72

    def test_negative_max_size_is_rejected(self):
        with pytest.raises(ValueError, match="max_size"):
            ResponseCache(max_size=-1)

    @pytest.mark.asyncio
    async def test_zero_max_size_keeps_nothing(self):
        """Test that a zero bound still returns payloads without storing them."""
        cache = ResponseCache(max_size=0)
        fetch = AsyncMock(return_value={"round": "1"})

        assert await cache.get_or_fetch("2021/1", fetch) == {"round": "1"}
        assert await cache.get_or_fetch("2021/1", fetch) == {"round": "1"}

        assert len(cache) == 0
        assert fetch.await_count == 2


class TestResponseCacheConcurrency:
    """Test cases for concurrent misses."""

    @pytest.mark.asyncio
    async def test_concurrent_misses_fetch_once(self):
        """Test that callers racing on one path share a single fetch."""
        cache = ResponseCache()
        calls = 0

        async def fetch():
            nonlocal calls
            calls += 1
            await asyncio.sleep(0.01)
            return {"round": "22"}

        results = await asyncio.gather(
            *(cache.get_or_fetch("2021/22", fetch) for _ in range(5))
        )

        assert calls == 1
        assert all(r == {"round": "22"} for r in results)

    @pytest.mark.asyncio
    async def test_different_paths_do_not_wait_on_each_other(self):
        """Test that a slow fetch does not block another path."""
        cache = ResponseCache()
        release = asyncio.Event()

        async def slow_fetch():
            await release.wait()
            return {"slow": True}

        slow = asyncio.create_task(cache.get_or_fetch("2021/1", slow_fetch))
        await asyncio.sleep(0)

        fast = await asyncio.wait_for(
            cache.get_or_fetch("2021/2", AsyncMock(return_value={"fast": True})),
            timeout=1,
        )
        assert fast == {"fast": True}

        release.set()
        assert await slow == {"slow": True}

    @pytest.mark.asyncio
    async def test_failed_paths_leave_no_locks_behind(self):
        cache = ResponseCache()
        fetch = AsyncMock(side_effect=RuntimeError("boom"))

        for round in range(100):
            with pytest.raises(RuntimeError):
                await cache.get_or_fetch(f"2021/{round}", fetch)

        assert cache._locks == {}
        assert cache._lock_users == {}

    @pytest.mark.asyncio
    async def test_lock_survives_until_last_waiter_leaves(self):
        """Test that concurrent failures still hand the lock to every waiter."""
        cache = ResponseCache()
        calls = 0

        async def failing_fetch():
            nonlocal calls
            calls += 1
            await asyncio.sleep(0.01)
            raise RuntimeError("boom")

        results = await asyncio.gather(
            *(cache.get_or_fetch("2021/22", failing_fetch) for _ in range(3)),
            return_exceptions=True,
        )

        assert all(isinstance(r, RuntimeError) for r in results)
        assert calls == 3
        assert cache._locks == {}
        assert cache._lock_users == {}

    def test_lock_bound_to_another_loop_is_a_cache_error(self):
        """Test that a lock owned by a different event loop is reported."""
        cache = ResponseCache()

        async def hold_lock():
            lock = cache._locks.setdefault("2021", asyncio.Lock())
            await lock.acquire()
            # Contend once so the lock binds to this loop.
            waiter = asyncio.create_task(lock.acquire())
            await asyncio.sleep(0)
            return lock, waiter

        first_loop = asyncio.new_event_loop()
        try:
            first_loop.run_until_complete(hold_lock())

            async def lookup():
                await cache.get_or_fetch("2021", AsyncMock(return_value={}))

            with pytest.raises(CacheError, match="Cache lock failed"):
                asyncio.run(lookup())
        finally:
            first_loop.close()
