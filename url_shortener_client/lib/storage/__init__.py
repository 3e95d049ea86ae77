"""Key-value storage backends for persisted client state."""

import logging
from typing import Optional

from .base import KeyValueStore, StorageError
from .json_file import JSONFileStore
from .memory import MemoryStore
from .redis_store import RedisStore

STORE_BACKENDS = ("json", "redis", "memory")


async def open_store(
    backend: str,
    store_path: Optional[str] = None,
    redis_url: Optional[str] = None,
    logger: Optional[logging.Logger] = None,
) -> KeyValueStore:
    """Create and connect the configured store backend.

    Raises:
        ValueError: If the backend name is unknown or its settings are missing
        StorageError: If the backend cannot be reached
    """
    logger = logger or logging.getLogger(__name__)

    if backend == "json":
        if not store_path:
            raise ValueError("store_path is required for the json store backend")
        logger.info(f"Using JSON file store at {store_path}")
        return JSONFileStore(store_path, logger=logger)

    if backend == "redis":
        if not redis_url:
            raise ValueError("redis_url is required for the redis store backend")
        logger.info(f"Connecting to Redis at {redis_url}")
        store = RedisStore(redis_url, logger=logger)
        await store.connect()
        return store

    if backend == "memory":
        logger.warning("Using in-memory store; shortened URLs are lost on restart")
        return MemoryStore()

    raise ValueError(f"Unknown store backend '{backend}' (expected one of {', '.join(STORE_BACKENDS)})")


__all__ = [
    "KeyValueStore",
    "StorageError",
    "JSONFileStore",
    "MemoryStore",
    "RedisStore",
    "STORE_BACKENDS",
    "open_store",
]
