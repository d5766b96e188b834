"""Redis-backed state backend.

Maps the :class:`StateBackend` operations onto native Redis commands so
expiry, counters and capped lists are handled server-side:

- ``incr``         -> SET NX EX + INCR in one MULTI/EXEC pipeline
- ``push_capped``  -> LPUSH + LTRIM in one MULTI/EXEC pipeline
- ``hash_*``       -> HSET / HGET / HDEL / HVALS
- ``delete_prefix``-> SCAN MATCH prefix* + DEL in batches

The client must be created with ``decode_responses=True``
(see :func:`src.core.redis.create_redis`).
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from src.core.redis import close_redis
from src.store.base import StateBackend, StateBackendError


@contextmanager
def _translate_errors(op: str) -> Iterator[None]:
    try:
        yield
    except RedisError as exc:
        raise StateBackendError(f"Redis {op} failed: {exc}") from exc


class RedisBackend(StateBackend):
    """:class:`StateBackend` over an async Redis client.

    Parameters
    ----------
    redis_client : redis.asyncio.Redis
        An async Redis client instance (from ``src.core.redis.create_redis``).
    """

    def __init__(self, redis_client: aioredis.Redis) -> None:
        self._redis = redis_client

    async def get(self, key: str) -> str | None:
        with _translate_errors("GET"):
            return await self._redis.get(key)

    async def set(self, key: str, value: str, ttl: int | None = None) -> None:
        with _translate_errors("SET"):
            await self._redis.set(key, value, ex=ttl)

    async def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        with _translate_errors("DEL"):
            return int(await self._redis.delete(*keys))

    async def incr(self, key: str, ttl: int) -> int:
        with _translate_errors("INCR"):
            # NX opens the window with its expiry; later calls leave it alone
            async with self._redis.pipeline(transaction=True) as pipe:
                pipe.set(key, 0, ex=ttl, nx=True)
                pipe.incr(key)
                _, count = await pipe.execute()
            return int(count)

    async def push_capped(self, key: str, value: str, max_len: int) -> None:
        with _translate_errors("LPUSH"):
            async with self._redis.pipeline(transaction=True) as pipe:
                pipe.lpush(key, value)
                pipe.ltrim(key, 0, max_len - 1)
                await pipe.execute()

    async def list_range(self, key: str) -> list[str]:
        with _translate_errors("LRANGE"):
            return list(await self._redis.lrange(key, 0, -1))

    async def hash_set(self, key: str, field: str, value: str) -> None:
        with _translate_errors("HSET"):
            await self._redis.hset(key, field, value)

    async def hash_get(self, key: str, field: str) -> str | None:
        with _translate_errors("HGET"):
            return await self._redis.hget(key, field)

    async def hash_delete(self, key: str, field: str) -> bool:
        with _translate_errors("HDEL"):
            return int(await self._redis.hdel(key, field)) > 0

    async def hash_values(self, key: str) -> list[str]:
        with _translate_errors("HVALS"):
            return list(await self._redis.hvals(key))

    async def delete_prefix(self, prefix: str) -> int:
        removed = 0
        with _translate_errors("SCAN"):
            cursor = 0
            while True:
                cursor, keys = await self._redis.scan(
                    cursor=cursor,
                    match=f"{prefix}*",
                    count=100,
                )
                if keys:
                    removed += int(await self._redis.delete(*keys))
                if cursor == 0:
                    break
        return removed

    async def ping(self) -> bool:
        try:
            return bool(await self._redis.ping())
        except RedisError:
            return False

    async def aclose(self) -> None:
        await close_redis(self._redis)
