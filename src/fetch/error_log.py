"""Bounded per-source failure log.

Entries are ``{"message": str, "time": ISO-8601 UTC}`` dicts kept newest
first. Writing past ``max_errors`` drops the oldest entry; nothing else ever
removes entries except :meth:`ErrorLog.clear`. "Recent" means within the last
24 hours and is a filtered view, not a pruning pass.
"""

from __future__ import annotations

import json
import time
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

from src.store.base import StateBackend

MAX_ERRORS = 50
RECENT_WINDOW = timedelta(hours=24)


class ErrorLog:
    """Capped, newest-first error history per source.

    Parameters
    ----------
    backend : StateBackend
        Store holding one list per source.
    max_errors : int
        Maximum number of retained entries per source.
    clock : callable, optional
        Returns the current time in epoch seconds. Defaults to ``time.time``.
    """

    def __init__(
        self,
        backend: StateBackend,
        key_prefix: str = "fetch:",
        max_errors: int = MAX_ERRORS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._backend = backend
        self._prefix = f"{key_prefix}errors:"
        self.max_errors = max_errors
        self._clock = clock

    def _now(self) -> datetime:
        return datetime.fromtimestamp(self._clock(), tz=timezone.utc)

    async def log(self, name: str, message: str) -> None:
        entry = {
            "message": " ".join(str(message).split()),
            "time": self._now().isoformat(),
        }
        await self._backend.push_capped(
            f"{self._prefix}{name}", json.dumps(entry), self.max_errors
        )

    async def get_errors(self, name: str) -> list[dict[str, Any]]:
        """Entries for *name*, newest first."""
        return [
            json.loads(raw)
            for raw in await self._backend.list_range(f"{self._prefix}{name}")
        ]

    async def count_recent(self, name: str) -> int:
        """Number of entries logged within the last 24 hours."""
        cutoff = self._now() - RECENT_WINDOW
        return sum(
            1
            for entry in await self.get_errors(name)
            if datetime.fromisoformat(entry["time"]) >= cutoff
        )

    async def clear(self, name: str) -> None:
        await self._backend.delete(f"{self._prefix}{name}")
