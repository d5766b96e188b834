"""Tests for SourceRegistry CRUD and credential encryption at rest."""

from __future__ import annotations

import json

import pytest

from src.core.utils.crypto import SecretCipher
from src.sources.models import Source
from src.sources.registry import SourceRegistry
from src.store.memory import MemoryBackend


@pytest.fixture
def registry(backend: MemoryBackend) -> SourceRegistry:
    return SourceRegistry(backend, SecretCipher("test-secret"), "fetch:")


def _weather(**overrides) -> Source:
    data = {
        "name": "weather",
        "url": "https://api.example.com/weather",
        "auth_type": "bearer",
        "auth_value": "tok-123",
        "cache_ttl": 600,
    }
    data.update(overrides)
    return Source(**data)


@pytest.mark.asyncio
async def test_upsert_then_get(registry: SourceRegistry):
    assert await registry.upsert(_weather()) is True

    loaded = await registry.get("weather")
    assert loaded == _weather()
    assert loaded.auth_value == "tok-123"


@pytest.mark.asyncio
async def test_upsert_rejects_missing_name_or_url(registry: SourceRegistry, backend):
    assert await registry.upsert(Source(url="https://api.example.com")) is False
    assert await registry.upsert(Source(name="weather")) is False
    assert await backend.hash_values("fetch:sources") == []


@pytest.mark.asyncio
async def test_upsert_is_full_replace(registry: SourceRegistry):
    await registry.upsert(_weather(transform="data.items", fallback="<p>x</p>"))
    await registry.upsert(Source(name="weather", url="https://new.example.com"))

    loaded = await registry.get("weather")
    assert loaded.url == "https://new.example.com"
    assert loaded.transform == ""
    assert loaded.fallback == ""
    assert loaded.auth_value == ""


@pytest.mark.asyncio
async def test_credential_encrypted_at_rest(registry: SourceRegistry, backend):
    await registry.upsert(_weather())

    raw = json.loads(await backend.hash_get("fetch:sources", "weather"))
    assert raw["auth_value"]
    assert raw["auth_value"] != "tok-123"


@pytest.mark.asyncio
async def test_decrypt_failure_yields_empty_credential(backend: MemoryBackend):
    await SourceRegistry(backend, SecretCipher("old-key")).upsert(_weather())

    loaded = await SourceRegistry(backend, SecretCipher("new-key")).get("weather")
    assert loaded is not None
    assert loaded.auth_value == ""
    assert loaded.url == "https://api.example.com/weather"


@pytest.mark.asyncio
async def test_delete(registry: SourceRegistry):
    await registry.upsert(_weather())
    assert await registry.delete("weather") is True
    assert await registry.get("weather") is None
    assert await registry.delete("weather") is False


@pytest.mark.asyncio
async def test_list_returns_all_sources(registry: SourceRegistry):
    await registry.upsert(_weather())
    await registry.upsert(Source(name="news", url="https://news.example.com"))

    names = sorted(s.name for s in await registry.list())
    assert names == ["news", "weather"]


@pytest.mark.asyncio
async def test_get_missing(registry: SourceRegistry):
    assert await registry.get("nope") is None
