"""Redis async client for the source fetch gateway.

Builds a Redis client backed by a ConnectionPool. The pool lifecycle is
managed independently from the client so closing one never closes the other
prematurely.

Usage::

    from src.core.redis import create_redis, close_redis

    redis = create_redis(settings)
    await redis.set("key", "value")

    # During application shutdown:
    await close_redis(redis)
"""

import redis.asyncio as aioredis

from .config import Settings


def create_redis(settings: Settings) -> aioredis.Redis:
    """Create an async Redis client for *settings*.

    The pool uses ``decode_responses=True`` so all values are returned as
    strings (important for caching JSON).
    """
    pool = aioredis.ConnectionPool.from_url(
        settings.redis_url,
        max_connections=settings.redis_max_connections,
        decode_responses=True,
    )
    # Use connection_pool= parameter (NOT from_pool()) so the pool
    # lifecycle is managed independently from the client.
    return aioredis.Redis(connection_pool=pool)


async def close_redis(client: aioredis.Redis) -> None:
    """Close a client and its pool. Safe to call multiple times."""
    await client.aclose()
    await client.connection_pool.aclose()
