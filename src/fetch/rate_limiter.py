"""Fixed-window rate limiter for outbound source requests.

Each source name owns one counter that opens on the first recorded request
and expires ``window_seconds`` later; the next request after expiry opens a
fresh window at 1. The limit is global (not per source): it is read from the
state backend, where admins may override it, falling back to the configured
default.

``allow`` and ``record`` are separate calls, so under concurrent load the
effective limit can be overshot by the number of concurrent callers minus
one. This is a soft limit::

    if await limiter.allow("weather"):
        await limiter.record("weather")
        ...  # perform the request
"""

from __future__ import annotations

import structlog

from src.store.base import StateBackend

logger = structlog.get_logger()

DEFAULT_LIMIT = 30
DEFAULT_WINDOW_SECONDS = 60


class RateLimiter:
    """Per-source fixed-window request counter.

    Parameters
    ----------
    backend : StateBackend
        Store holding the counters and the limit override.
    default_limit : int
        Requests allowed per window when no override is stored.
    window_seconds : int
        Length of each window.
    """

    def __init__(
        self,
        backend: StateBackend,
        key_prefix: str = "fetch:",
        default_limit: int = DEFAULT_LIMIT,
        window_seconds: int = DEFAULT_WINDOW_SECONDS,
    ) -> None:
        self._backend = backend
        self._counter_prefix = f"{key_prefix}rl:"
        self._limit_key = f"{key_prefix}settings:rate_limit"
        self._default_limit = default_limit
        self.window_seconds = window_seconds

    async def allow(self, name: str) -> bool:
        """True iff the current window count is below the limit."""
        return await self.get_count(name) < await self.get_limit()

    async def record(self, name: str) -> int:
        """Count one request against the active window and return the new count."""
        count = await self._backend.incr(
            f"{self._counter_prefix}{name}", self.window_seconds
        )
        logger.debug("rate_limit_recorded", source=name, count=count)
        return count

    async def get_count(self, name: str) -> int:
        raw = await self._backend.get(f"{self._counter_prefix}{name}")
        return int(raw) if raw is not None else 0

    async def get_limit(self) -> int:
        raw = await self._backend.get(self._limit_key)
        if raw is None:
            return self._default_limit
        try:
            return int(raw)
        except ValueError:
            logger.warning("rate_limit_setting_invalid", value=raw)
            return self._default_limit

    async def set_limit(self, limit: int) -> None:
        """Persist a global limit override.

        Raises:
            ValueError: If *limit* is below 1.
        """
        if limit < 1:
            raise ValueError(f"Rate limit must be >= 1, got {limit}")
        await self._backend.set(self._limit_key, str(int(limit)))
        logger.info("rate_limit_updated", limit=limit)

    async def reset(self, name: str) -> None:
        """Drop the active window for *name*."""
        await self._backend.delete(f"{self._counter_prefix}{name}")
