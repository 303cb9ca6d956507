"""
Key-value store adapters.

- InMemoryStore: dict-backed store for development and tests
- RedisHashStore: Redis hashes over the asyncio client
"""

from .base import StoreAdapter
from .memory import InMemoryStore
from .redis_hash import RedisHashStore

__all__ = [
    "StoreAdapter",
    "InMemoryStore",
    "RedisHashStore",
]
