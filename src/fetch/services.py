"""Composition root for the fetch pipeline.

Builds the state backend, registry, cache, rate limiter, error log and
fetcher exactly once and hands them to whichever entry point needs them (the
FastAPI lifespan, the CLI script, tests). There is no global instance.

Usage::

    services = build_services(settings)
    try:
        result = await services.fetcher.fetch("weather")
    finally:
        await services.aclose()
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

import httpx
import structlog

from src.cache.two_tier import TwoTierCache
from src.core.config import Settings
from src.core.utils.crypto import SecretCipher
from src.fetch.error_log import ErrorLog
from src.fetch.health import SourceHealth, source_health
from src.fetch.orchestrator import SourceFetcher
from src.fetch.rate_limiter import RateLimiter
from src.sources.registry import SourceRegistry
from src.store import StateBackend, create_backend

logger = structlog.get_logger()


@dataclass
class FetchServices:
    """Every component of the pipeline, wired to one backend."""

    settings: Settings
    backend: StateBackend
    registry: SourceRegistry
    cache: TwoTierCache
    limiter: RateLimiter
    error_log: ErrorLog
    fetcher: SourceFetcher

    async def health(self) -> list[SourceHealth]:
        return await source_health(self.registry, self.cache, self.error_log)

    async def forget_source(self, name: str) -> bool:
        """Delete a source together with its cache, errors and rate window."""
        source = await self.registry.get(name)
        if source is None:
            return False
        await self.registry.delete(name)
        await self.cache.delete(source.cache_key)
        await self.error_log.clear(name)
        await self.limiter.reset(name)
        return True

    async def purge(self) -> int:
        """Remove all state under the key prefix. Returns keys removed."""
        removed = await self.backend.delete_prefix(self.settings.key_prefix)
        logger.warning("state_purged", prefix=self.settings.key_prefix, keys=removed)
        return removed

    async def aclose(self) -> None:
        await self.fetcher.aclose()
        await self.backend.aclose()


def build_services(
    settings: Settings,
    backend: StateBackend | None = None,
    client: httpx.AsyncClient | None = None,
    clock: Callable[[], float] = time.time,
) -> FetchServices:
    """Wire the pipeline for *settings*.

    Args:
        settings: Application settings.
        backend: Pre-built state backend; defaults to ``create_backend``.
        client: Shared HTTP client; the fetcher creates its own when omitted.
        clock: Epoch-seconds clock used for error timestamps.
    """
    backend = backend or create_backend(settings)
    prefix = settings.key_prefix

    registry = SourceRegistry(backend, SecretCipher(settings.secret_key), prefix)
    cache = TwoTierCache(backend, prefix, stale_ttl=settings.stale_ttl_seconds)
    limiter = RateLimiter(
        backend,
        prefix,
        default_limit=settings.rate_limit_per_minute,
        window_seconds=settings.rate_limit_window_seconds,
    )
    error_log = ErrorLog(backend, prefix, max_errors=settings.max_errors, clock=clock)
    fetcher = SourceFetcher(
        registry,
        cache,
        limiter,
        error_log,
        client=client,
        timeout=settings.http_timeout_seconds,
    )
    return FetchServices(
        settings=settings,
        backend=backend,
        registry=registry,
        cache=cache,
        limiter=limiter,
        error_log=error_log,
        fetcher=fetcher,
    )
