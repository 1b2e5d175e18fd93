"""
storage.py - Atomic counter + key-value store used by the indexer and queries.

Only three single-key primitives are assumed: INCR, GET, SET.
There are no transactions and no multi-key atomicity.
"""

import logging
import threading
from typing import Protocol

import redis

from chain_indexer.config import settings
from chain_indexer.errors import storage_unavailable

logger = logging.getLogger(__name__)


class Storage(Protocol):
    def incr(self, key: str) -> int:
        """Atomically add 1 to ``key`` (absent counts as 0) and return the new value."""
        ...

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class RedisStorage:
    """
    Storage over a redis-py client.

    Every backend failure, pool exhaustion included, surfaces as
    StorageUnavailable. Nothing is retried here.
    """

    def __init__(self, client: redis.Redis):
        self.client = client

    def incr(self, key: str) -> int:
        try:
            return int(self.client.incr(key))
        except redis.RedisError as e:
            raise storage_unavailable("incr", key, e) from e

    def get(self, key: str) -> str | None:
        try:
            value = self.client.get(key)
        except redis.RedisError as e:
            raise storage_unavailable("get", key, e) from e
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def set(self, key: str, value: str) -> None:
        try:
            self.client.set(key, value)
        except redis.RedisError as e:
            raise storage_unavailable("set", key, e) from e


class InMemoryStorage:
    """Process-local storage with the same single-key atomicity as Redis."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}
        self._lock = threading.Lock()

    def incr(self, key: str) -> int:
        with self._lock:
            value = int(self._data.get(key, "0")) + 1
            self._data[key] = str(value)
            return value

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value


def create_storage(pool_size: int) -> Storage:
    """Build the configured backend. ``pool_size`` only applies to Redis."""
    if settings.STORAGE_BACKEND == "memory":
        logger.warning("Using in-memory storage; records are lost on exit")
        return InMemoryStorage()

    from chain_indexer.core.redis import create_redis_client

    return RedisStorage(create_redis_client(pool_size))
