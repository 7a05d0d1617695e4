"""
Record storage module.

This module implements the Strategy Pattern for pluggable record storage:
an in-process store for development and a Redis store for production.
"""

from .strategies import StorageStrategy, RedisStorage, InMemoryStorage
from .factory import StorageFactory, StorageBackend

__all__ = [
    "StorageStrategy",
    "RedisStorage",
    "InMemoryStorage",
    "StorageFactory",
    "StorageBackend",
]
