"""
Short-lived caching of list query results.

Dashboards poll list endpoints repeatedly with the same filters. Results are
memoized by a key derived from the query's predicate set and page window, and
served until the entry's TTL (60 seconds by default) elapses. Stale reads
within that window are accepted.

One cache instance is constructed per process at startup and injected into the
routes that use it (see ``api.dependencies.get_result_cache``).
"""
import json
import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from core.redis import RedisClient

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 60

# Bump when the shape of cached list payloads changes; old keys then simply miss.
CACHE_SCHEMA_VERSION = 1


def build_cache_key(namespace: str, where: list[dict[str, Any]], offset: int, limit: int) -> str:
    """
    Derive a cache key from the structural form of a query.

    The key is a direct JSON serialization of the ordered predicate list, so
    two logically identical predicate sets built in a different order produce
    different keys. Non-JSON values (dates, enums, the query-time marker) are
    rendered with ``str``.
    """
    payload = json.dumps({"where": where, "skip": offset, "limit": limit}, default=str)
    return f"{namespace}:{payload}"


class ResultCache(ABC):
    """Interface for list result caches."""

    def __init__(self, ttl_seconds: int = DEFAULT_TTL_SECONDS) -> None:
        self.ttl_seconds = ttl_seconds

    @abstractmethod
    async def get(self, key: str) -> dict[str, Any] | None:
        """Return the cached value, or None on a miss or an expired entry."""
        ...

    @abstractmethod
    async def put(self, key: str, value: dict[str, Any], ttl_seconds: int | None = None) -> None:
        """Store a JSON-serializable value for ``ttl_seconds`` (default: the cache TTL)."""
        ...

    @abstractmethod
    async def clear(self) -> None:
        """Drop every entry."""
        ...


@dataclass(frozen=True)
class CacheEntry:
    """An immutable cached value and the monotonic time it stops being served."""

    value: dict[str, Any]
    expires_at: float


class InMemoryResultCache(ResultCache):
    """
    Process-local cache backed by a dict.

    Expired entries are evicted lazily on access. When ``max_entries`` is set
    and the cache is full, expired entries are swept and then the oldest
    entries are dropped. Entries are replaced wholesale, never mutated, so
    concurrent requests on the event loop need no locking.

    Not shared between server processes; use ``RedisResultCache`` for that.
    """

    def __init__(
        self,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        max_entries: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(ttl_seconds)
        self._max_entries = max_entries or None
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, key: str) -> dict[str, Any] | None:
        entry = self._entries.get(key)
        if entry is None:
            logger.debug("result_cache_miss key=%s", key)
            return None
        if self._clock() >= entry.expires_at:
            self._entries.pop(key, None)
            logger.debug("result_cache_expired key=%s", key)
            return None
        logger.debug("result_cache_hit key=%s", key)
        return dict(entry.value)

    async def put(self, key: str, value: dict[str, Any], ttl_seconds: int | None = None) -> None:
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        # Re-inserting moves the key to the end of the eviction order
        self._entries.pop(key, None)
        if self._max_entries is not None and len(self._entries) >= self._max_entries:
            self._evict()
        self._entries[key] = CacheEntry(value=dict(value), expires_at=self._clock() + ttl)

    async def clear(self) -> None:
        self._entries.clear()

    def _evict(self) -> None:
        """Make room for one entry: sweep expired entries, then drop the oldest."""
        now = self._clock()
        for key in [k for k, entry in self._entries.items() if now >= entry.expires_at]:
            del self._entries[key]
        while self._max_entries is not None and len(self._entries) >= self._max_entries:
            oldest = next(iter(self._entries))
            del self._entries[oldest]
            logger.debug("result_cache_evict key=%s", oldest)


class RedisResultCache(ResultCache):
    """
    Cache shared across server processes via Redis.

    Redis enforces the TTL itself. If Redis is unavailable every lookup is a
    miss and writes are dropped.
    """

    def __init__(
        self,
        redis_client: "RedisClient",
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
    ) -> None:
        super().__init__(ttl_seconds)
        self._redis = redis_client
        self._prefix = f"results:v{CACHE_SCHEMA_VERSION}:"

    async def get(self, key: str) -> dict[str, Any] | None:
        data = await self._redis.get(self._prefix + key)
        if data is None:
            logger.debug("result_cache_miss key=%s", key)
            return None
        logger.debug("result_cache_hit key=%s", key)
        return json.loads(data)

    async def put(self, key: str, value: dict[str, Any], ttl_seconds: int | None = None) -> None:
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        await self._redis.setex(self._prefix + key, ttl, json.dumps(value))

    async def clear(self) -> None:
        deleted = await self._redis.delete_matching(f"{self._prefix}*")
        logger.debug("result_cache_clear deleted=%s", deleted)
