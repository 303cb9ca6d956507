"""Redis hash store adapter."""
import structlog
from redis.asyncio import Redis
from redis.exceptions import RedisError

from .base import StoreAdapter

log = structlog.get_logger()


class RedisHashStore(StoreAdapter):
    """Redis implementation of the store adapter.

    One client per process, shared by every request. The client is created
    on first use and released by ``close``.
    """

    name = "redis"

    def __init__(self, redis_url: str, scan_count: int = 500):
        """
        Initialize Redis hash adapter.

        Args:
            redis_url: Redis connection URL
            scan_count: COUNT hint passed to each SCAN call
        """
        self.redis_url = redis_url
        self.scan_count = scan_count
        self._client: Redis | None = None

    def _get_client(self) -> Redis:
        """Get or create Redis client."""
        if self._client is None:
            self._client = Redis.from_url(
                self.redis_url,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
            )
        return self._client

    async def hgetall(self, key: str) -> dict[str, str]:
        try:
            return await self._get_client().hgetall(key)
        except RedisError as e:
            log.error("redis.hgetall_failed", error=str(e), key=key)
            raise

    async def hset(self, key: str, mapping: dict[str, str]) -> int:
        try:
            return await self._get_client().hset(key, mapping=mapping)
        except RedisError as e:
            log.error("redis.hset_failed", error=str(e), key=key)
            raise

    async def delete(self, key: str) -> int:
        try:
            return await self._get_client().delete(key)
        except RedisError as e:
            log.error("redis.delete_failed", error=str(e), key=key)
            raise

    async def scan_keys(self, pattern: str) -> list[str]:
        """Walk the keyspace with SCAN; KEYS would block the server."""
        try:
            client = self._get_client()
            return [key async for key in client.scan_iter(match=pattern, count=self.scan_count)]
        except RedisError as e:
            log.error("redis.scan_failed", error=str(e), pattern=pattern)
            raise

    async def health_check(self) -> bool:
        """
        Check Redis connection health.

        Returns:
            True if Redis is accessible, False otherwise
        """
        try:
            return bool(await self._get_client().ping())
        except Exception as e:
            log.warning("redis.health_check_failed", error=str(e))
            return False

    async def close(self):
        """Close Redis connection."""
        if self._client:
            await self._client.aclose()
            self._client = None
