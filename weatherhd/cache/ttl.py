"""
TTL response cache.

Wraps cachetools.TLRUCache so every entry carries its own lifetime.
There is no size bound and no background sweep; expired entries are
dropped the next time the cache is read or written.
"""

import logging
import math
import time
from typing import Any, Awaitable, Callable, Optional, Tuple

from cachetools import TLRUCache

logger = logging.getLogger(__name__)


def _expires_at(key: str, entry: Tuple[Any, float], now: float) -> float:
    return now + entry[1]


class TTLCache:
    """
    Process-wide cache with per-entry lifetimes.

    No locking: concurrent misses for one key both refetch and the last
    write wins.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._entries = TLRUCache(maxsize=math.inf, ttu=_expires_at, timer=clock)

    def get(self, key: str) -> Optional[Any]:
        """Return the stored value, or None when absent or expired."""
        entry = self._entries.get(key)
        return entry[0] if entry is not None else None

    def set(self, key: str, value: Any, ttl: float):
        """Store `value` for `ttl` seconds, replacing any previous entry."""
        self._entries[key] = (value, ttl)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        self._entries.expire()
        return len(self._entries)


async def fetch_through(
    cache: TTLCache,
    key: str,
    ttl: float,
    fetch: Callable[[], Awaitable[Any]],
    bypass: bool = False
) -> Any:
    """
    Serve `key` from the cache, or await `fetch()` and store its result.

    With `bypass` the cached value is ignored but the fresh result is still
    written, so later reads benefit from the forced refetch.
    """
    if not bypass:
        cached = cache.get(key)
        if cached is not None:
            logger.debug("cache hit %s", key)
            return cached

    logger.debug("cache %s %s", 'bypass' if bypass else 'miss', key)
    data = await fetch()
    cache.set(key, data, ttl)
    return data
