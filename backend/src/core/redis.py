"""Thin async Redis wrapper used by the shared result cache."""
import logging

from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


class RedisClient:
    """
    Pooled Redis connection that never raises on Redis failures.

    The only consumer is ``RedisResultCache``. A cache that cannot reach Redis
    should degrade to "always miss", so reads return None, writes return
    False, and deletes report zero keys when Redis is down or was never reached.
    """

    def __init__(self, url: str, enabled: bool = True, pool_size: int = 20) -> None:
        self._url = url
        self._enabled = enabled
        self._pool_size = pool_size
        self._pool: ConnectionPool | None = None
        self._client: Redis | None = None

    async def connect(self) -> None:
        """Open the pool and ping once. Failure leaves the client disconnected."""
        if not self._enabled:
            logger.info("redis_disabled")
            return
        pool = ConnectionPool.from_url(self._url, max_connections=self._pool_size)
        client = Redis(connection_pool=pool)
        try:
            await client.ping()
        except RedisError as e:
            logger.warning("redis_connect_failed url=%s error=%s", self._url, e)
            await pool.aclose()
            return
        self._pool, self._client = pool, client
        logger.info("redis_connected url=%s", self._url)

    async def close(self) -> None:
        """Release pooled connections."""
        if self._client is None:
            return
        await self._client.aclose()
        if self._pool is not None:
            await self._pool.aclose()
        self._client = self._pool = None
        logger.info("redis_closed")

    @property
    def is_connected(self) -> bool:
        """True once ``connect`` has reached Redis."""
        return self._client is not None

    async def get(self, key: str) -> bytes | None:
        """Read a key. None on a miss or when Redis is unavailable."""
        if self._client is None:
            return None
        try:
            return await self._client.get(key)
        except RedisError as e:
            logger.warning("redis_get_failed key=%s error=%s", key, e)
            return None

    async def setex(self, key: str, seconds: int, value: str | bytes) -> bool:
        """Write a key that Redis expires after ``seconds``. False if the write was dropped."""
        if self._client is None:
            return False
        try:
            await self._client.setex(key, seconds, value)
        except RedisError as e:
            logger.warning("redis_setex_failed key=%s error=%s", key, e)
            return False
        return True

    async def delete_matching(self, pattern: str) -> int:
        """Delete every key matching a glob pattern and return how many were removed."""
        if self._client is None:
            return 0
        deleted = 0
        try:
            async for key in self._client.scan_iter(match=pattern):
                deleted += await self._client.delete(key)
        except RedisError as e:
            logger.warning("redis_delete_matching_failed pattern=%s error=%s", pattern, e)
        return deleted
