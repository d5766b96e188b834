"""Tests for TwoTierCache primary/stale slots."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from src.cache.two_tier import STALE_TTL, TwoTierCache
from src.store.base import StateBackendError


@pytest.fixture
def cache(backend) -> TwoTierCache:
    return TwoTierCache(backend, "fetch:")


@pytest.mark.asyncio
async def test_set_writes_both_slots(cache: TwoTierCache):
    await cache.set("source_wx", {"temp": 21}, ttl=60)
    assert await cache.get("source_wx") == {"temp": 21}
    assert await cache.get_stale("source_wx") == {"temp": 21}


@pytest.mark.asyncio
async def test_primary_expires_before_stale(cache: TwoTierCache, clock):
    await cache.set("source_wx", [1, 2, 3], ttl=60)
    clock.advance(61)
    assert await cache.get("source_wx") is None
    assert await cache.get_stale("source_wx") == [1, 2, 3]

    clock.advance(STALE_TTL)
    assert await cache.get_stale("source_wx") is None


@pytest.mark.asyncio
async def test_stale_holds_latest_payload(cache: TwoTierCache):
    await cache.set("source_wx", "old", ttl=60)
    await cache.set("source_wx", "new", ttl=60)
    assert await cache.get_stale("source_wx") == "new"


@pytest.mark.asyncio
async def test_keys_are_namespaced(cache: TwoTierCache, backend):
    await cache.set("source_wx", 1, ttl=60)
    assert await backend.get("fetch:cache:source_wx") == "1"
    assert await backend.get("fetch:stale:source_wx") == "1"


@pytest.mark.asyncio
async def test_delete_removes_both_slots(cache: TwoTierCache):
    await cache.set("source_wx", {"a": 1}, ttl=60)
    await cache.delete("source_wx")
    assert await cache.get("source_wx") is None
    assert await cache.get_stale("source_wx") is None


@pytest.mark.asyncio
async def test_backend_errors_are_misses():
    backend = AsyncMock()
    backend.get.side_effect = StateBackendError("down")
    backend.set.side_effect = StateBackendError("down")
    cache = TwoTierCache(backend)

    await cache.set("source_wx", {"a": 1}, ttl=60)
    assert await cache.get("source_wx") is None
    assert await cache.get_stale("source_wx") is None
