"""Tests for per-source health classification."""

from __future__ import annotations

import pytest

from src.core.enums import HealthStatus
from src.fetch.health import check_source
from src.sources.models import Source

SOURCE = Source(name="weather", url="https://api.example.com/weather")


@pytest.mark.asyncio
async def test_ok_when_cached_and_no_errors(services):
    await services.cache.set(SOURCE.cache_key, {"t": 1}, ttl=60)
    health = await check_source(SOURCE, services.cache, services.error_log)
    assert health.status is HealthStatus.OK
    assert health.cached is True
    assert health.error_count == 0


@pytest.mark.asyncio
async def test_stale_when_recent_errors(services):
    await services.cache.set(SOURCE.cache_key, {"t": 1}, ttl=60)
    await services.error_log.log("weather", "HTTP 500 error.")
    health = await check_source(SOURCE, services.cache, services.error_log)
    assert health.status is HealthStatus.STALE
    assert health.error_count == 1


@pytest.mark.asyncio
async def test_stale_when_primary_expired(services, clock):
    await services.cache.set(SOURCE.cache_key, {"t": 1}, ttl=60)
    clock.advance(61)
    health = await check_source(SOURCE, services.cache, services.error_log)
    assert health.status is HealthStatus.STALE
    assert health.cached is False


@pytest.mark.asyncio
async def test_error_when_nothing_cached(services):
    health = await check_source(SOURCE, services.cache, services.error_log)
    assert health.status is HealthStatus.ERROR
    assert health.to_dict() == {
        "name": "weather",
        "status": "error",
        "cached": False,
        "error_count": 0,
    }


@pytest.mark.asyncio
async def test_services_health_lists_every_source(services):
    await services.registry.upsert(SOURCE)
    await services.registry.upsert(Source(name="news", url="https://news.example.com"))
    names = sorted(h.name for h in await services.health())
    assert names == ["news", "weather"]


@pytest.mark.asyncio
async def test_forget_source_clears_state(services):
    await services.registry.upsert(SOURCE)
    await services.cache.set(SOURCE.cache_key, 1, ttl=60)
    await services.error_log.log("weather", "boom")
    await services.limiter.record("weather")

    assert await services.forget_source("weather") is True
    assert await services.registry.get("weather") is None
    assert await services.cache.get_stale(SOURCE.cache_key) is None
    assert await services.error_log.get_errors("weather") == []
    assert await services.limiter.get_count("weather") == 0
    assert await services.forget_source("weather") is False


@pytest.mark.asyncio
async def test_purge_removes_all_prefixed_state(services, backend):
    await services.registry.upsert(SOURCE)
    await services.limiter.set_limit(10)
    await backend.set("unrelated", "1")

    assert await services.purge() == 2
    assert await services.registry.list() == []
    assert await backend.get("unrelated") == "1"
