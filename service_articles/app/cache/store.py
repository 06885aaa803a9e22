"""
Key-value store binding for the article cache.
"""

from typing import Optional, Protocol

import redis.asyncio as redis
from redis.exceptions import RedisError

from shared.logging import get_logger
from shared.errors import StoreUnavailableError


class KeyValueStore(Protocol):
    """Per-key get/put capability. No transactions, listing or deletes."""

    async def get(self, key: str) -> Optional[bytes]:
        ...

    async def put(self, key: str, value: bytes) -> None:
        ...


class RedisKeyValueStore:
    """Redis-backed KeyValueStore."""

    def __init__(self, redis_url: str):
        self.redis_url = redis_url
        self.logger = get_logger("articles.cache.redis")
        self.redis: Optional[redis.Redis] = None

    async def start(self):
        """Open the connection pool and check the server answers.

        An unreachable server does not stop startup: the pool reconnects on
        demand and reads report STORE_UNAVAILABLE until it does.
        """
        # Values are stored and returned as raw bytes.
        self.redis = redis.from_url(
            self.redis_url,
            decode_responses=False,
            socket_connect_timeout=5,
            socket_timeout=5,
            health_check_interval=30
        )

        if await self.health_check():
            self.logger.info("Redis store started")
        else:
            self.logger.warning("Redis store started but server is unreachable")

    async def stop(self):
        """Close the connection pool."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            self.logger.info("Redis store stopped")

    async def get(self, key: str) -> Optional[bytes]:
        client = self._client()
        try:
            return await client.get(key)
        except RedisError as e:
            self.logger.error("Redis get failed", key=key, error=str(e))
            raise StoreUnavailableError(str(e), details={"key": key, "operation": "get"})

    async def put(self, key: str, value: bytes) -> None:
        client = self._client()
        try:
            await client.set(key, value)
        except RedisError as e:
            self.logger.error("Redis put failed", key=key, error=str(e))
            raise StoreUnavailableError(str(e), details={"key": key, "operation": "put"})

    async def health_check(self) -> bool:
        """Check Redis health."""
        if self.redis is None:
            return False
        try:
            await self.redis.ping()
            return True
        except RedisError:
            return False

    def _client(self) -> redis.Redis:
        if self.redis is None:
            raise StoreUnavailableError("Redis store has not been started")
        return self.redis
