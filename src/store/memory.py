"""In-process state backend with lazy expiry.

Stores plain values, lists and hashes in dicts guarded by a single
``threading.Lock``. Expired entries are discovered and dropped when they are
next touched; there is no sweeper thread. The clock is injectable so tests can
move time forward to simulate TTL expiry::

    clock = FakeClock()
    backend = MemoryBackend(clock=clock)
    await backend.set("k", "v", ttl=10)
    clock.advance(11)
    assert await backend.get("k") is None
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import Any

from src.store.base import StateBackend


class MemoryBackend(StateBackend):
    """Dict-backed :class:`StateBackend` for tests and single-process runs.

    Parameters
    ----------
    clock : callable, optional
        Returns the current time in epoch seconds. Defaults to ``time.time``.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        # key -> (value, expires_at or None); value is str, list or dict
        self._data: dict[str, tuple[Any, float | None]] = {}

    # ------------------------------------------------------------------
    # Internal helpers (caller holds the lock)
    # ------------------------------------------------------------------
    def _live(self, key: str) -> Any | None:
        entry = self._data.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._data[key]
            return None
        return value

    def _expiry(self, ttl: int | None) -> float | None:
        return None if ttl is None else self._clock() + ttl

    # ------------------------------------------------------------------
    # Plain keys
    # ------------------------------------------------------------------
    async def get(self, key: str) -> str | None:
        with self._lock:
            value = self._live(key)
        return value if isinstance(value, str) else None

    async def set(self, key: str, value: str, ttl: int | None = None) -> None:
        with self._lock:
            self._data[key] = (value, self._expiry(ttl))

    async def delete(self, *keys: str) -> int:
        removed = 0
        with self._lock:
            for key in keys:
                if self._live(key) is not None:
                    removed += 1
                self._data.pop(key, None)
        return removed

    async def incr(self, key: str, ttl: int) -> int:
        with self._lock:
            current = self._live(key)
            if current is None:
                self._data[key] = ("1", self._expiry(ttl))
                return 1
            count = int(current) + 1
            # Keep the window's original expiry (fixed window)
            self._data[key] = (str(count), self._data[key][1])
            return count

    # ------------------------------------------------------------------
    # Lists
    # ------------------------------------------------------------------
    async def push_capped(self, key: str, value: str, max_len: int) -> None:
        with self._lock:
            items = self._live(key)
            items = [value] + (items if isinstance(items, list) else [])
            self._data[key] = (items[:max_len], None)

    async def list_range(self, key: str) -> list[str]:
        with self._lock:
            items = self._live(key)
            return list(items) if isinstance(items, list) else []

    # ------------------------------------------------------------------
    # Hashes
    # ------------------------------------------------------------------
    async def hash_set(self, key: str, field: str, value: str) -> None:
        with self._lock:
            mapping = self._live(key)
            if not isinstance(mapping, dict):
                mapping = {}
                self._data[key] = (mapping, None)
            mapping[field] = value

    async def hash_get(self, key: str, field: str) -> str | None:
        with self._lock:
            mapping = self._live(key)
            return mapping.get(field) if isinstance(mapping, dict) else None

    async def hash_delete(self, key: str, field: str) -> bool:
        with self._lock:
            mapping = self._live(key)
            if not isinstance(mapping, dict) or field not in mapping:
                return False
            del mapping[field]
            if not mapping:
                del self._data[key]
            return True

    async def hash_values(self, key: str) -> list[str]:
        with self._lock:
            mapping = self._live(key)
            return list(mapping.values()) if isinstance(mapping, dict) else []

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------
    async def delete_prefix(self, prefix: str) -> int:
        with self._lock:
            doomed = [k for k in self._data if k.startswith(prefix)]
            live = sum(1 for k in doomed if self._live(k) is not None)
            for key in doomed:
                self._data.pop(key, None)
        return live

    async def ping(self) -> bool:
        return True
