"""Tests for the fixed-window RateLimiter."""

from __future__ import annotations

import pytest

from src.fetch.rate_limiter import RateLimiter


@pytest.fixture
def limiter(backend) -> RateLimiter:
    return RateLimiter(backend, "fetch:", default_limit=3, window_seconds=60)


@pytest.mark.asyncio
async def test_allows_until_limit_reached(limiter: RateLimiter):
    for expected in (1, 2, 3):
        assert await limiter.allow("wx")
        assert await limiter.record("wx") == expected
    assert not await limiter.allow("wx")


@pytest.mark.asyncio
async def test_window_resets_after_expiry(limiter: RateLimiter, clock):
    for _ in range(3):
        await limiter.record("wx")
    assert not await limiter.allow("wx")

    clock.advance(60)
    assert await limiter.get_count("wx") == 0
    assert await limiter.allow("wx")
    assert await limiter.record("wx") == 1


@pytest.mark.asyncio
async def test_counters_are_per_source(limiter: RateLimiter):
    for _ in range(3):
        await limiter.record("wx")
    assert not await limiter.allow("wx")
    assert await limiter.allow("news")


@pytest.mark.asyncio
async def test_set_limit_overrides_default(limiter: RateLimiter):
    assert await limiter.get_limit() == 3
    await limiter.set_limit(5)
    assert await limiter.get_limit() == 5

    for _ in range(3):
        await limiter.record("wx")
    assert await limiter.allow("wx")


@pytest.mark.asyncio
async def test_set_limit_rejects_below_one(limiter: RateLimiter):
    with pytest.raises(ValueError, match="must be >= 1"):
        await limiter.set_limit(0)


@pytest.mark.asyncio
async def test_invalid_stored_limit_uses_default(limiter: RateLimiter, backend):
    await backend.set("fetch:settings:rate_limit", "lots")
    assert await limiter.get_limit() == 3


@pytest.mark.asyncio
async def test_reset_drops_window(limiter: RateLimiter):
    for _ in range(3):
        await limiter.record("wx")
    await limiter.reset("wx")
    assert await limiter.get_count("wx") == 0
