"""Process-wide TTL + LRU cache store built on the fastapi-cache2 in-memory backend."""

import asyncio
import time
from collections import OrderedDict
from collections.abc import Awaitable, Callable

from fastapi_cache.backends.inmemory import InMemoryBackend, Value
from loguru import logger


class CacheStore(InMemoryBackend):
    """In-memory key/value store with per-entry expiry and LRU eviction.

    Values are opaque bytes; callers serialize before writing. Expired
    entries are dropped lazily on access. When the store reaches max_size,
    the least recently used entry is evicted to make room.

    The store does not coalesce computes: two concurrent misses for the
    same key may both run their compute function, and the last write wins.

    Example:
        >>> cache = CacheStore(max_size=3)
        >>> import asyncio
        >>> asyncio.run(cache.write("a", b"1", 60))
        >>> asyncio.run(cache.exists("a"))
        True
    """

    def __init__(
        self,
        max_size: int = 10000,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize the cache store.

        Args:
            max_size: Maximum number of entries before LRU eviction (default: 10000)
            clock: Returns the current time in seconds, injectable for tests

        Example:
            >>> cache = CacheStore(max_size=100)
            >>> cache.max_size
            100
        """
        super().__init__()
        self.max_size = max_size
        self._clock = clock
        # Instance-level store and lock; the parent class shares them across instances
        self._store: OrderedDict[str, Value] = OrderedDict()
        self._lock = asyncio.Lock()

    @property
    def _now(self) -> float:
        return self._clock()

    def _get(self, key: str) -> Value | None:
        entry = self._store.get(key)
        if entry is None:
            return None
        if entry.ttl_ts <= self._now:
            del self._store[key]
            return None
        self._store.move_to_end(key)
        return entry

    def _set(self, key: str, value: bytes, ttl: float) -> None:
        if key not in self._store and len(self._store) >= self.max_size:
            evicted_key, _ = self._store.popitem(last=False)
            logger.debug("Cache entry evicted", key=evicted_key)
        self._store[key] = Value(value, self._now + ttl)
        self._store.move_to_end(key)

    async def read(self, key: str) -> bytes | None:
        """Return the cached value, or None if absent or expired.

        Example:
            >>> cache = CacheStore()
            >>> import asyncio
            >>> asyncio.run(cache.read("missing")) is None
            True
        """
        async with self._lock:
            entry = self._get(key)
            return entry.data if entry else None

    async def write(self, key: str, value: bytes, ttl: float) -> None:
        """Store a value that expires ttl seconds from now."""
        async with self._lock:
            self._set(key, value, ttl)

    async def exists(self, key: str) -> bool:
        """Check whether a live entry exists without returning it."""
        async with self._lock:
            return self._get(key) is not None

    async def fetch_or_compute(
        self,
        key: str,
        ttl: float,
        compute: Callable[[], Awaitable[bytes]],
    ) -> bytes:
        """Return the cached value, populating it from compute() on a miss.

        compute() runs outside the lock. Its exceptions propagate and
        nothing is cached for the key.

        Args:
            key: Cache key
            ttl: Expiry in seconds for a freshly computed value
            compute: Async callable producing the serialized value

        Returns:
            The cached or freshly computed bytes
        """
        cached = await self.read(key)
        if cached is not None:
            logger.debug("Cache hit", key=key)
            return cached

        logger.debug("Cache miss", key=key)
        value = await compute()
        await self.write(key, value, ttl)
        return value

    # fastapi-cache2 backend contract

    async def get_with_ttl(self, key: str) -> tuple[int, bytes | None]:
        async with self._lock:
            entry = self._get(key)
            if entry:
                return int(entry.ttl_ts - self._now), entry.data
            return 0, None

    async def get(self, key: str) -> bytes | None:
        return await self.read(key)

    async def set(self, key: str, value: bytes, expire: int | None = None) -> None:
        await self.write(key, value, expire or 0)

    async def delete(self, key: str) -> None:
        """Delete key from cache."""
        async with self._lock:
            self._store.pop(key, None)

    async def clear(self, namespace: str | None = None, key: str | None = None) -> int:
        """Clear cache entries.

        Args:
            namespace: Key prefix to clear
            key: Specific key to clear

        Returns:
            Number of entries removed
        """
        async with self._lock:
            if key:
                return 1 if self._store.pop(key, None) is not None else 0
            if namespace:
                doomed = [k for k in self._store if k.startswith(namespace)]
                for k in doomed:
                    del self._store[k]
                return len(doomed)
            removed = len(self._store)
            self._store.clear()
            return removed

    def size(self) -> int:
        """Get current number of stored entries (expired ones included until touched)."""
        return len(self._store)
