"""Fetch orchestration for named API sources.

:class:`SourceFetcher` is the single entry point used by every surface (REST
routes, CLI, admin "test connection" and dashboard "refresh" actions). For one
source name it walks this ladder and always returns a :class:`FetchResult`:

1. resolve the source from the registry (missing -> failure)
2. primary cache hit -> success, ``cached=True`` (skipped on force refresh)
3. rate limit exhausted -> stale cache, else log + failure
4. record the attempt against the limiter
5. live HTTP request -> decode, transform, cache -> success
6. on transport / HTTP status failure: log, then stale cache, then the
   source's static fallback (``success=False`` with data), then failure

One outbound request at most, no retries. Nothing raises out of
:meth:`SourceFetcher.fetch`.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from typing import Any

import httpx
import structlog

from src.cache.two_tier import TwoTierCache
from src.core.enums import AuthType
from src.core.errors import (
    HttpStatusError,
    RateLimitExceededError,
    SourceFetchError,
    SourceNotFoundError,
    TransportError,
)
from src.fetch.error_log import ErrorLog
from src.fetch.rate_limiter import RateLimiter
from src.fetch.transform import apply_transform
from src.sources.models import Source
from src.sources.registry import SourceRegistry

logger = structlog.get_logger()

TIMEOUT_SECONDS = 15.0


@dataclass
class FetchResult:
    """Uniform outcome of a fetch.

    ``success=False`` may still carry ``data`` (the source's static fallback),
    so callers must check both fields.
    """

    success: bool
    data: Any = None
    status_code: int = 0
    error: str = ""
    cached: bool = False

    @property
    def has_data(self) -> bool:
        return self.data is not None and self.data != ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def decode_body(text: str) -> Any:
    """Decode a response body as JSON, falling back to the raw text.

    A body that is not JSON (including the empty body), or is the JSON literal
    ``null``, is returned as text, so a successful fetch never yields ``None``.
    """
    try:
        decoded = json.loads(text)
    except ValueError:
        return text
    return text if decoded is None else decoded


def build_headers(source: Source) -> dict[str, str]:
    """Source headers plus the credential header for its auth type."""
    headers = dict(source.headers)
    if source.auth_type is AuthType.BEARER:
        headers["Authorization"] = f"Bearer {source.auth_value}"
    elif source.auth_type is AuthType.API_KEY:
        headers["X-API-Key"] = source.auth_value
    return headers


class SourceFetcher:
    """Cache-aware, rate-limited fetcher with stale and static fallbacks.

    Parameters
    ----------
    registry, cache, limiter, error_log
        Independently owned stores composed on every call; the fetcher itself
        keeps no per-source state.
    client : httpx.AsyncClient, optional
        Shared HTTP client. When omitted the fetcher creates one and closes it
        in :meth:`aclose`.
    timeout : float
        Per-request timeout in seconds.

    Usage::

        async with SourceFetcher(registry, cache, limiter, errors) as fetcher:
            result = await fetcher.fetch("weather")
    """

    def __init__(
        self,
        registry: SourceRegistry,
        cache: TwoTierCache,
        limiter: RateLimiter,
        error_log: ErrorLog,
        client: httpx.AsyncClient | None = None,
        timeout: float = TIMEOUT_SECONDS,
    ) -> None:
        self.registry = registry
        self.cache = cache
        self.limiter = limiter
        self.error_log = error_log
        self._timeout = httpx.Timeout(timeout)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=self._timeout)

    async def __aenter__(self) -> "SourceFetcher":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this fetcher created it."""
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # Public entry point
    # ------------------------------------------------------------------
    async def fetch(self, name: str, force_refresh: bool = False) -> FetchResult:
        """Fetch *name*, serving cache or fallbacks whenever possible.

        Args:
            name: Source slug.
            force_refresh: Skip the primary cache and go to the network
                (still subject to the rate limit).
        """
        log = logger.bind(source=name, force_refresh=force_refresh)
        try:
            return await self._fetch(name, force_refresh, log)
        except Exception as exc:
            log.exception("fetch_unexpected_error")
            return FetchResult(success=False, error=f"Unexpected error: {exc}")

    async def _fetch(
        self, name: str, force_refresh: bool, log: structlog.BoundLogger
    ) -> FetchResult:
        source = await self.registry.get(name)
        if source is None:
            log.info("fetch_source_not_found")
            return FetchResult(success=False, error=str(SourceNotFoundError(name)))

        if not force_refresh:
            cached = await self.cache.get(source.cache_key)
            if cached is not None:
                log.debug("fetch_cache_hit")
                return FetchResult(success=True, data=cached, cached=True)

        if not await self.limiter.allow(name):
            stale = await self.cache.get_stale(source.cache_key)
            if stale is not None:
                log.info("fetch_rate_limited_served_stale")
                return FetchResult(success=True, data=stale, cached=True)
            error = RateLimitExceededError(name, await self.limiter.get_limit())
            await self.error_log.log(name, str(error))
            log.warning("fetch_rate_limited")
            return FetchResult(success=False, error=str(error))

        await self.limiter.record(name)

        try:
            status_code, data = await self._request(source)
        except (TransportError, HttpStatusError) as exc:
            return await self._fallback(source, exc, log)

        if source.transform and isinstance(data, (dict, list)):
            data = apply_transform(data, source.transform)

        if source.cache_ttl > 0:
            await self.cache.set(source.cache_key, data, source.cache_ttl)

        log.info("fetch_succeeded", status_code=status_code, ttl=source.cache_ttl)
        return FetchResult(success=True, data=data, status_code=status_code)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    async def _request(self, source: Source) -> tuple[int, Any]:
        """Perform the single outbound request for *source*.

        Raises:
            TransportError: The request could not be completed.
            HttpStatusError: The response status is outside 2xx.
        """
        try:
            response = await self._client.request(
                source.method.value,
                source.url,
                headers=build_headers(source),
                timeout=self._timeout,
                follow_redirects=True,
            )
        # Headers that cannot be encoded fail while the request is built
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
            raise TransportError(str(exc) or type(exc).__name__) from exc

        if not response.is_success:
            raise HttpStatusError(response.status_code)
        return response.status_code, decode_body(response.text)

    async def _fallback(
        self, source: Source, exc: SourceFetchError, log: structlog.BoundLogger
    ) -> FetchResult:
        status_code = getattr(exc, "status_code", 0)
        await self.error_log.log(source.name, str(exc))
        log.warning("fetch_failed", error=str(exc), status_code=status_code)

        stale = await self.cache.get_stale(source.cache_key)
        if stale is not None:
            log.info("fetch_failed_served_stale")
            return FetchResult(success=True, data=stale, cached=True)

        if source.fallback:
            return FetchResult(
                success=False,
                data=source.fallback,
                status_code=status_code,
                error=str(exc),
            )
        return FetchResult(success=False, status_code=status_code, error=str(exc))
