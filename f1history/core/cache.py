"""
In-memory response cache for Ergast payloads.

The cache maps a logical resource path (``"2021/22/qualifying"``) to the
decoded payload found under the provider envelope. Entries live for the
lifetime of the cache object; callers own the object and inject it into the
client, so tests can start from an empty cache.
"""

import asyncio
import copy
from collections import OrderedDict
from typing import Any, Awaitable, Callable, Dict, Optional

import structlog

from f1history.core.exceptions import CacheError

logger = structlog.get_logger()


class ResponseCache:
    """Path-keyed memo of decoded provider payloads.

    Misses for the same path are serialized: the per-path lock is held while
    the payload is fetched and stored, so concurrent callers asking for the
    same path trigger a single upstream request. Different paths never wait
    on each other.

    Keys are used verbatim. ``"2021/1"`` and ``"2021/01"`` are separate
    entries.
    """

    def __init__(self, max_size: Optional[int] = None):
        """
        Initialize the cache.

        Args:
            max_size: Maximum number of entries, or None for unbounded storage.
                When bounded, the oldest entry is evicted first.
        """
        if max_size is not None and max_size < 0:
            raise ValueError(f"max_size must be None or >= 0, got {max_size}")
        self.max_size = max_size
        self.hits = 0
        self.misses = 0
        self._entries: "OrderedDict[str, Any]" = OrderedDict()
        self._locks: Dict[str, asyncio.Lock] = {}
        self._lock_users: Dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def clear(self) -> None:
        """Drop every cached entry and reset the counters."""
        self._entries.clear()
        self._locks.clear()
        self._lock_users.clear()
        self.hits = 0
        self.misses = 0

    async def get_or_fetch(
        self, path: str, fetch: Callable[[], Awaitable[Any]]
    ) -> Any:
        """
        Return the cached payload for ``path``, fetching it on a miss.

        Args:
            path: Logical resource path used as the cache key
            fetch: Coroutine factory producing the payload on a miss

        Returns:
            A deep copy of the cached payload

        Raises:
            CacheError: If the per-path lock cannot be acquired
            Exception: Whatever ``fetch`` raises; failures are not cached
        """
        if path in self._entries:
            return self._hit(path)

        lock = self._locks.setdefault(path, asyncio.Lock())
        self._lock_users[path] = self._lock_users.get(path, 0) + 1
        try:
            try:
                await lock.acquire()
            except RuntimeError as e:
                raise CacheError("lock", str(e)) from e

            try:
                # Another caller may have filled the entry while we waited.
                if path in self._entries:
                    return self._hit(path)

                self.misses += 1
                logger.debug("Cache miss", path=path)
                value = await fetch()
                self._store(path, value)
                return copy.deepcopy(value)
            finally:
                lock.release()
        finally:
            self._release_lock_slot(path, lock)

    def _release_lock_slot(self, path: str, lock: asyncio.Lock) -> None:
        # The last caller out drops the lock, whether or not the fetch succeeded.
        users = self._lock_users.get(path, 0) - 1
        if users > 0:
            self._lock_users[path] = users
            return
        self._lock_users.pop(path, None)
        if self._locks.get(path) is lock:
            del self._locks[path]

    def _hit(self, path: str) -> Any:
        self.hits += 1
        logger.debug("Cache hit", path=path)
        return copy.deepcopy(self._entries[path])

    def _store(self, path: str, value: Any) -> None:
        self._entries[path] = value
        if self.max_size is not None:
            while len(self._entries) > self.max_size:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Cache eviction", path=evicted)
