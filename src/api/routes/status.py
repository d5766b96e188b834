"""Status and settings endpoints.

Provides:
- GET /status                -- per-source health (ok / stale / error)
- GET /settings/rate-limit   -- current global rate limit
- PUT /settings/rate-limit   -- override the global rate limit (admin)
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from src.api.auth import require_admin, require_viewer
from src.api.deps import get_services
from src.api.schemas.source_schemas import (
    RateLimitRequest,
    RateLimitResponse,
    SourceStatusResponse,
)
from src.fetch.services import FetchServices

router = APIRouter(tags=["Status"])


@router.get(
    "/status",
    response_model=list[SourceStatusResponse],
    dependencies=[Depends(require_viewer)],
)
async def get_status(services: FetchServices = Depends(get_services)):
    """Health of every configured source, computed fresh per request."""
    return [health.to_dict() for health in await services.health()]


@router.get(
    "/settings/rate-limit",
    response_model=RateLimitResponse,
    dependencies=[Depends(require_viewer)],
)
async def get_rate_limit(services: FetchServices = Depends(get_services)):
    return RateLimitResponse(
        limit=await services.limiter.get_limit(),
        window_seconds=services.limiter.window_seconds,
    )


@router.put(
    "/settings/rate-limit",
    response_model=RateLimitResponse,
    dependencies=[Depends(require_admin)],
)
async def set_rate_limit(
    body: RateLimitRequest, services: FetchServices = Depends(get_services)
):
    await services.limiter.set_limit(body.limit)
    return RateLimitResponse(
        limit=body.limit,
        window_seconds=services.limiter.window_seconds,
    )
