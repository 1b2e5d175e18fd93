"""
redis.py - Redis client construction.

Each process gets one client over a bounded, blocking connection pool.
The pool is the only shared mutable resource between concurrent requests:
a checkout is an independent connection, and a checkout that waits longer
than REDIS_POOL_TIMEOUT fails instead of queueing forever.
"""

import logging

import redis

from chain_indexer.config import settings

logger = logging.getLogger(__name__)


def create_redis_client(max_connections: int) -> redis.Redis:
    """
    Build a Redis client over a bounded connection pool.

    No connection is opened here; the first command checks one out.

    Args:
        max_connections: Pool size for this process.

    Returns:
        redis.Redis: Client returning ``str`` values.
    """
    pool = redis.BlockingConnectionPool.from_url(
        settings.REDIS_URL,
        max_connections=max_connections,
        timeout=settings.REDIS_POOL_TIMEOUT,
        decode_responses=True,
        socket_connect_timeout=5,
        socket_timeout=5,
    )
    logger.info(
        "Redis pool created for %s (max_connections=%d)",
        settings.REDIS_URL,
        max_connections,
    )
    return redis.Redis(connection_pool=pool)
