"""Root pytest configuration and shared fixtures.

Provides common test fixtures used across all test modules:
- clock: controllable epoch-seconds clock (advance it to expire TTLs)
- backend: in-memory state backend driven by ``clock``
- test_settings: Settings isolated from the environment's .env file
- services: fully wired fetch pipeline over ``backend``
"""

from __future__ import annotations

import pytest

from src.core.config import Settings
from src.fetch.services import FetchServices, build_services
from src.store.memory import MemoryBackend

START_TIME = 1_750_000_000.0  # 2025-06-15T15:06:40Z


class FakeClock:
    """Callable clock returning a settable epoch-seconds value."""

    def __init__(self, start: float = START_TIME) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def backend(clock: FakeClock) -> MemoryBackend:
    return MemoryBackend(clock=clock)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        debug=False,
        state_backend="memory",
        key_prefix="fetch:",
        secret_key="test-secret",
        jwt_secret_key="test-jwt-secret-with-enough-length-for-hs256",
        rate_limit_per_minute=30,
        rate_limit_window_seconds=60,
        stale_ttl_seconds=86400,
        max_errors=50,
    )


@pytest.fixture
def services(
    test_settings: Settings, backend: MemoryBackend, clock: FakeClock
) -> FetchServices:
    return build_services(test_settings, backend=backend, clock=clock)
