"""
Factory for creating storage instances.
Builds the backend selected by settings; the caller owns the instance.
"""

from enum import Enum

import redis.asyncio as redis

from shorturl_app.config import Settings
from .strategies import StorageStrategy, RedisStorage, InMemoryStorage


class StorageBackend(Enum):
    """Available storage backends"""
    REDIS = "redis"
    MEMORY = "memory"

    @classmethod
    def from_setting(cls, value: str) -> "StorageBackend":
        """Anything other than "redis" means in-memory."""
        return cls.REDIS if value == cls.REDIS.value else cls.MEMORY


class StorageFactory:
    """
    Simple factory for creating storage instances.

    No instance is cached here: the application lifespan builds one
    storage per process and injects it into request handlers.
    """

    @classmethod
    def create(cls, settings: Settings) -> StorageStrategy:
        """
        Create the storage backend named by settings.storage.

        The Redis client connects lazily; call `connect()` on the result
        before serving traffic.
        """
        backend = StorageBackend.from_setting(settings.storage)

        if backend == StorageBackend.REDIS:
            redis_client = redis.from_url(
                settings.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            return RedisStorage(redis_client)

        if backend == StorageBackend.MEMORY:
            return InMemoryStorage(max_keys=settings.memory_max_keys)

        raise ValueError(f"Unknown storage backend: {backend}")
