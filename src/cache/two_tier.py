"""Two-tier cache for fetched source payloads.

Every logical key owns two independent slots:

- primary:  the caller's TTL -- "fresh" data served without a live fetch
- stale:    a fixed long TTL (24h) -- last successful payload, used only as
            a fallback when a live fetch is rate limited or fails

Both slots are written on every ``set`` (stale first), so the stale slot
always holds the most recent successful payload.

Usage::

    cache = TwoTierCache(backend)
    data = await cache.get("source_weather")
    if data is None:
        data = fetch_upstream()
        await cache.set("source_weather", data, ttl=600)
"""

from __future__ import annotations

import json
import logging
from typing import Any

from src.store.base import StateBackend

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Default TTLs (seconds)
# ---------------------------------------------------------------------------
STALE_TTL = 86400  # one day
DEFAULT_TTL = 300

# Key prefixes for the two slots
PRIMARY_PREFIX = "cache:"
STALE_PREFIX = "stale:"


class TwoTierCache:
    """Primary + stale cache over a :class:`StateBackend`.

    The cache is best effort: backend errors are logged and reported as a
    miss (reads) or ignored (writes), never raised.

    Parameters
    ----------
    backend : StateBackend
        Store holding the serialized payloads.
    key_prefix : str
        Namespace prepended to every key.
    stale_ttl : int
        Lifetime of the stale slot in seconds.
    """

    def __init__(
        self,
        backend: StateBackend,
        key_prefix: str = "fetch:",
        stale_ttl: int = STALE_TTL,
    ) -> None:
        self._backend = backend
        self._primary = f"{key_prefix}{PRIMARY_PREFIX}"
        self._stale = f"{key_prefix}{STALE_PREFIX}"
        self._stale_ttl = stale_ttl

    async def get(self, key: str) -> Any | None:
        """Retrieve the primary value for *key*, or ``None`` on miss."""
        return await self._get(f"{self._primary}{key}")

    async def get_stale(self, key: str) -> Any | None:
        """Retrieve the stale value for *key*, regardless of the primary slot."""
        return await self._get(f"{self._stale}{key}")

    async def set(self, key: str, data: Any, ttl: int = DEFAULT_TTL) -> None:
        """Write *data* to the stale slot (long TTL) and the primary slot (*ttl*)."""
        await self._set(f"{self._stale}{key}", data, self._stale_ttl)
        await self._set(f"{self._primary}{key}", data, ttl)

    async def delete(self, key: str) -> None:
        """Remove both slots for *key*."""
        try:
            await self._backend.delete(f"{self._stale}{key}", f"{self._primary}{key}")
            logger.debug("TwoTierCache DELETE: %s", key)
        except Exception:
            logger.warning("TwoTierCache: DELETE failed for %s", key, exc_info=True)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    async def _get(self, key: str) -> Any | None:
        """GET a JSON-serialized value. Returns None on miss or error."""
        try:
            raw = await self._backend.get(key)
            if raw is None:
                logger.debug("TwoTierCache MISS: %s", key)
                return None
            logger.debug("TwoTierCache HIT: %s", key)
            return json.loads(raw)
        except Exception:
            logger.warning("TwoTierCache: GET failed for %s", key, exc_info=True)
            return None

    async def _set(self, key: str, data: Any, ttl: int) -> None:
        """SET a JSON-serialized value with a TTL in seconds."""
        try:
            raw = json.dumps(data, default=str)
            await self._backend.set(key, raw, ttl=ttl)
            logger.debug("TwoTierCache SET: %s (ttl=%ds)", key, ttl)
        except Exception:
            logger.warning("TwoTierCache: SET failed for %s", key, exc_info=True)
