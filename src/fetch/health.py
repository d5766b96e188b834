"""Per-source health view for status dashboards.

Computed fresh on every call from the cache and the error log:

- ok     -- no errors in the last 24h and a live primary cache entry
- stale  -- otherwise, if a stale cache entry exists
- error  -- otherwise
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from src.cache.two_tier import TwoTierCache
from src.core.enums import HealthStatus
from src.fetch.error_log import ErrorLog
from src.sources.models import Source
from src.sources.registry import SourceRegistry


@dataclass
class SourceHealth:
    name: str
    status: HealthStatus
    cached: bool
    error_count: int

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        return data


async def check_source(
    source: Source, cache: TwoTierCache, error_log: ErrorLog
) -> SourceHealth:
    has_cache = await cache.get(source.cache_key) is not None
    error_count = await error_log.count_recent(source.name)

    if error_count == 0 and has_cache:
        status = HealthStatus.OK
    elif await cache.get_stale(source.cache_key) is not None:
        status = HealthStatus.STALE
    else:
        status = HealthStatus.ERROR

    return SourceHealth(
        name=source.name,
        status=status,
        cached=has_cache,
        error_count=error_count,
    )


async def source_health(
    registry: SourceRegistry, cache: TwoTierCache, error_log: ErrorLog
) -> list[SourceHealth]:
    """Health of every configured source, in registry order."""
    return [
        await check_source(source, cache, error_log)
        for source in await registry.list()
    ]
