"""Abstract state backend shared by the registry, cache, limiter and error log.

Every stateful component of the fetch pipeline is a thin layer over this
interface, so the same component code runs against an in-process dict
(tests, single-process deployments) or Redis (multi-worker deployments).

Values are plain strings; callers own serialization. Expiring keys follow
Redis semantics: a key past its TTL is indistinguishable from a missing key.
"""

import abc


class StateBackendError(Exception):
    """Raised when the underlying store cannot be reached."""


class StateBackend(abc.ABC):
    """Async key/value, list and hash operations with optional TTLs."""

    # ------------------------------------------------------------------
    # Plain keys
    # ------------------------------------------------------------------
    @abc.abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the value stored at *key*, or ``None`` if absent/expired."""

    @abc.abstractmethod
    async def set(self, key: str, value: str, ttl: int | None = None) -> None:
        """Store *value* at *key*, expiring after *ttl* seconds when given."""

    @abc.abstractmethod
    async def delete(self, *keys: str) -> int:
        """Delete *keys* of any type. Returns the number actually removed."""

    @abc.abstractmethod
    async def incr(self, key: str, ttl: int) -> int:
        """Atomically increment the counter at *key* and return the new count.

        A missing or expired counter starts at 1 and expires after *ttl*
        seconds. Increments inside a live window do not move its expiry.
        """

    # ------------------------------------------------------------------
    # Lists
    # ------------------------------------------------------------------
    @abc.abstractmethod
    async def push_capped(self, key: str, value: str, max_len: int) -> None:
        """Prepend *value* to the list at *key*, keeping the first *max_len* items."""

    @abc.abstractmethod
    async def list_range(self, key: str) -> list[str]:
        """Return the whole list at *key*, head first (empty if absent)."""

    # ------------------------------------------------------------------
    # Hashes
    # ------------------------------------------------------------------
    @abc.abstractmethod
    async def hash_set(self, key: str, field: str, value: str) -> None: ...

    @abc.abstractmethod
    async def hash_get(self, key: str, field: str) -> str | None: ...

    @abc.abstractmethod
    async def hash_delete(self, key: str, field: str) -> bool:
        """Remove *field* from the hash. Returns False if it was not present."""

    @abc.abstractmethod
    async def hash_values(self, key: str) -> list[str]: ...

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------
    @abc.abstractmethod
    async def delete_prefix(self, prefix: str) -> int:
        """Delete every key starting with *prefix*. Returns the count removed."""

    @abc.abstractmethod
    async def ping(self) -> bool: ...

    async def aclose(self) -> None:
        """Release connections. No-op for backends that hold none."""
