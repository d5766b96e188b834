"""State backend package.

Exports:
- ``StateBackend`` -- abstract async key/value, list and hash store
- ``StateBackendError`` -- raised when the store cannot be reached
- ``MemoryBackend`` -- in-process implementation with lazy expiry
- ``RedisBackend`` -- Redis implementation
- ``create_backend`` -- builds the backend selected by ``settings.state_backend``
"""

from src.core.config import Settings
from src.core.enums import StateBackendKind
from src.store.base import StateBackend, StateBackendError
from src.store.memory import MemoryBackend
from src.store.redis_backend import RedisBackend


def create_backend(settings: Settings) -> StateBackend:
    """Return the state backend configured in *settings*.

    Raises:
        ValueError: If ``settings.state_backend`` names no known backend.
    """
    kind = StateBackendKind(settings.state_backend.lower())
    if kind is StateBackendKind.REDIS:
        from src.core.redis import create_redis

        return RedisBackend(create_redis(settings))
    return MemoryBackend()


__all__ = [
    "MemoryBackend",
    "RedisBackend",
    "StateBackend",
    "StateBackendError",
    "create_backend",
]
