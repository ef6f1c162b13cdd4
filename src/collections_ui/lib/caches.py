"""
Short-lived disk cache for server-computed aggregates.

Analytics cards are re-requested on every criteria or exclusion change and
after every scroll-triggered re-render. Caching them on disk for a few
seconds keeps those repeats off the database and lets several worker
processes share the results. Backed by the diskcache library.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, TypeVar

import diskcache

T = TypeVar("T")


@dataclass
class CacheEntry:
    """
    Result of a cache lookup.

    Attributes:
        value: The loaded or cached value.
        hit: True when the value was read from disk.
    """

    value: Any
    hit: bool = False


class DiskCache:
    """
    Async read-through cache over a ``diskcache.Cache`` directory.

    Attributes:
        cache_dir: Directory holding the cache files; created on first use.
    """

    def __init__(self, cache_dir: str | Path) -> None:
        self.cache_dir = Path(cache_dir)
        self._store = diskcache.Cache(str(self.cache_dir))

    async def get_or_load(
        self,
        key: str,
        loader: Callable[[], Awaitable[T]],
        expire: int | None = None,
    ) -> CacheEntry:
        """
        Return the value stored under ``key``, awaiting ``loader`` on a miss.

        Loader exceptions propagate and nothing is stored.

        Args:
            key: Cache key, usually a digest of the request.
            loader: Coroutine function producing the value.
            expire: Seconds the value stays valid. None keeps it until
                    evicted; 0 bypasses the cache.
        """
        if expire == 0:
            return CacheEntry(value=await loader())

        stored = self._store.get(key, default=None)
        if stored is not None:
            return CacheEntry(value=stored, hit=True)

        value = await loader()
        self._store.set(key, value, expire=expire)
        return CacheEntry(value=value)
