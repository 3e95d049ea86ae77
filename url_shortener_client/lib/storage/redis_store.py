"""Redis key-value store."""

import logging
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from .base import KeyValueStore, StorageError


class RedisStore(KeyValueStore):
    """Key-value store backed by Redis, for sharing results between app instances."""

    def __init__(
        self,
        redis_url: str,
        namespace: str = "url:shortener:client",
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize Redis store.

        Args:
            redis_url: Redis connection URL (e.g., redis://localhost:6379/0)
            namespace: Prefix applied to every key
            logger: Optional logger instance
        """
        self.redis_url = redis_url
        self.namespace = namespace
        self.logger = logger or logging.getLogger(__name__)
        self.client: Optional[redis.Redis] = None

    async def connect(self) -> None:
        """Connect to Redis."""
        try:
            self.client = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            await self.client.ping()
            self.logger.info("Connected to Redis")
        except RedisError as e:
            self.logger.error(f"Failed to connect to Redis: {e}")
            raise StorageError(f"Cannot connect to Redis: {e}") from e

    def get_key(self, key: str) -> str:
        """Namespaced Redis key for a store key."""
        return f"{self.namespace}:{key}"

    def _require_client(self) -> redis.Redis:
        if self.client is None:
            raise StorageError("Redis store is not connected")
        return self.client

    async def get(self, key: str) -> Optional[str]:
        client = self._require_client()
        try:
            return await client.get(self.get_key(key))
        except RedisError as e:
            self.logger.error(f"Store get error: {e}")
            raise StorageError(f"Redis get failed: {e}") from e

    async def set(self, key: str, value: str) -> None:
        client = self._require_client()
        try:
            await client.set(self.get_key(key), value)
        except RedisError as e:
            self.logger.error(f"Store set error: {e}")
            raise StorageError(f"Redis set failed: {e}") from e

    async def delete(self, key: str) -> bool:
        client = self._require_client()
        try:
            return await client.delete(self.get_key(key)) > 0
        except RedisError as e:
            self.logger.error(f"Store delete error: {e}")
            raise StorageError(f"Redis delete failed: {e}") from e

    async def close(self) -> None:
        """Close Redis connection."""
        if self.client:
            await self.client.aclose()
            self.client = None
            self.logger.info("Redis connection closed")
