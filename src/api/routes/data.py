"""Data endpoints.

Provides:
- GET  /data/{source}     -- cached fetch (public); optional ``field`` and
                             ``limit`` re-slice the shared payload per view
- POST /refresh/{source}  -- force a live fetch (admin)
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from src.api.auth import require_admin
from src.api.deps import get_fetcher
from src.api.schemas.source_schemas import (
    DataResponse,
    ErrorResponse,
    RefreshResponse,
)
from src.fetch.orchestrator import SourceFetcher
from src.fetch.transform import apply_transform
from src.sources.models import slugify_name

router = APIRouter(tags=["Data"])

UPSTREAM_FAILURE_STATUS = 502


@router.get(
    "/data/{source}",
    response_model=DataResponse,
    responses={UPSTREAM_FAILURE_STATUS: {"model": ErrorResponse}},
)
async def get_data(
    source: str,
    field: str = Query("", description="Dot path applied on top of the payload"),
    limit: int = Query(0, ge=0, description="Truncate list payloads (0 = all)"),
    fetcher: SourceFetcher = Depends(get_fetcher),
):
    """Serve a source's data, preferring the cache.

    A soft failure (fallback content with ``success=False``) is still served
    as data; only a failure with nothing to show becomes an error response.
    """
    name = slugify_name(source)
    result = await fetcher.fetch(name)

    if not result.success and not result.has_data:
        return JSONResponse(
            ErrorResponse(error=result.error).model_dump(),
            status_code=result.status_code or UPSTREAM_FAILURE_STATUS,
        )

    data = result.data
    if field and isinstance(data, (dict, list)):
        data = apply_transform(data, field)
    if limit > 0 and isinstance(data, list):
        data = data[:limit]

    return DataResponse(source=name, data=data, cached=result.cached)


@router.post(
    "/refresh/{source}",
    response_model=RefreshResponse,
    dependencies=[Depends(require_admin)],
)
async def refresh_data(source: str, fetcher: SourceFetcher = Depends(get_fetcher)):
    """Bypass the primary cache and fetch live (still rate limited)."""
    name = slugify_name(source)
    result = await fetcher.fetch(name, force_refresh=True)
    body = RefreshResponse(
        source=name,
        success=result.success,
        data=result.data,
        error=result.error,
    )
    if result.success:
        return body
    return JSONResponse(
        body.model_dump(mode="json"),
        status_code=result.status_code or UPSTREAM_FAILURE_STATUS,
    )
