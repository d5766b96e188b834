"""Tests for MemoryBackend lazy expiry, counters, lists and hashes."""

from __future__ import annotations

import pytest

from src.store.memory import MemoryBackend


@pytest.mark.asyncio
async def test_set_get_without_ttl(backend: MemoryBackend, clock):
    await backend.set("k", "v")
    clock.advance(10**9)
    assert await backend.get("k") == "v"


@pytest.mark.asyncio
async def test_value_expires_lazily(backend: MemoryBackend, clock):
    await backend.set("k", "v", ttl=10)
    clock.advance(9)
    assert await backend.get("k") == "v"
    clock.advance(1)
    assert await backend.get("k") is None
    # Expired entry was dropped on read
    assert await backend.delete("k") == 0


@pytest.mark.asyncio
async def test_delete_counts_only_live_keys(backend: MemoryBackend):
    await backend.set("a", "1")
    await backend.set("b", "2")
    assert await backend.delete("a", "b", "missing") == 2
    assert await backend.get("a") is None


@pytest.mark.asyncio
async def test_incr_opens_fixed_window(backend: MemoryBackend, clock):
    assert await backend.incr("rl", 60) == 1
    clock.advance(30)
    assert await backend.incr("rl", 60) == 2
    # Second increment must not extend the window
    clock.advance(30)
    assert await backend.get("rl") is None
    assert await backend.incr("rl", 60) == 1


@pytest.mark.asyncio
async def test_push_capped_keeps_newest_first(backend: MemoryBackend):
    for i in range(5):
        await backend.push_capped("log", str(i), max_len=3)
    assert await backend.list_range("log") == ["4", "3", "2"]


@pytest.mark.asyncio
async def test_list_range_missing_key(backend: MemoryBackend):
    assert await backend.list_range("nothing") == []


@pytest.mark.asyncio
async def test_hash_operations_preserve_insertion_order(backend: MemoryBackend):
    await backend.hash_set("h", "b", "2")
    await backend.hash_set("h", "a", "1")
    await backend.hash_set("h", "b", "3")

    assert await backend.hash_get("h", "b") == "3"
    assert await backend.hash_values("h") == ["3", "1"]
    assert await backend.hash_delete("h", "b") is True
    assert await backend.hash_delete("h", "b") is False
    assert await backend.hash_values("h") == ["1"]


@pytest.mark.asyncio
async def test_delete_prefix(backend: MemoryBackend):
    await backend.set("fetch:a", "1")
    await backend.hash_set("fetch:sources", "x", "{}")
    await backend.push_capped("fetch:errors:x", "e", 5)
    await backend.set("other:a", "1")

    assert await backend.delete_prefix("fetch:") == 3
    assert await backend.get("fetch:a") is None
    assert await backend.get("other:a") == "1"


@pytest.mark.asyncio
async def test_get_on_non_string_key_is_none(backend: MemoryBackend):
    await backend.hash_set("h", "f", "v")
    assert await backend.get("h") is None


@pytest.mark.asyncio
async def test_ping(backend: MemoryBackend):
    assert await backend.ping() is True
