"""Source configuration endpoints (admin only).

Provides:
- GET    /sources               -- list configured sources
- GET    /sources/{name}        -- one source
- PUT    /sources/{name}        -- create or fully replace a source
- DELETE /sources/{name}        -- delete a source with its cache and errors
- POST   /sources/{name}/test   -- force a live fetch and report the outcome
- GET    /sources/{name}/errors -- recent failure log
- DELETE /sources/{name}/errors -- clear the failure log
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from src.api.auth import require_admin
from src.api.deps import get_services
from src.api.schemas.source_schemas import (
    ConnectionTestResponse,
    ErrorLogResponse,
    SourceRequest,
    SourceResponse,
)
from src.fetch.services import FetchServices
from src.sources.models import Source, slugify_name

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/sources",
    tags=["Sources"],
    dependencies=[Depends(require_admin)],
)


async def _require_source(services: FetchServices, name: str) -> Source:
    source = await services.registry.get(slugify_name(name))
    if source is None:
        raise HTTPException(status_code=404, detail=f'Source "{name}" not found.')
    return source


@router.get("", response_model=list[SourceResponse])
async def list_sources(services: FetchServices = Depends(get_services)):
    """Return every configured source without its credential."""
    return [source.public_dict() for source in await services.registry.list()]


@router.get("/{name}", response_model=SourceResponse)
async def get_source(name: str, services: FetchServices = Depends(get_services)):
    source = await _require_source(services, name)
    return source.public_dict()


@router.put("/{name}", response_model=SourceResponse)
async def save_source(
    name: str,
    body: SourceRequest,
    services: FetchServices = Depends(get_services),
):
    """Create or replace the source at *name* (full replace, no merge)."""
    source = Source(name=name, **body.model_dump())
    if not await services.registry.upsert(source):
        raise HTTPException(
            status_code=422,
            detail="Failed to save source. Name and URL are required.",
        )
    return source.public_dict()


@router.delete("/{name}")
async def delete_source(name: str, services: FetchServices = Depends(get_services)):
    slug = slugify_name(name)
    if not await services.forget_source(slug):
        raise HTTPException(status_code=404, detail=f'Source "{name}" not found.')
    return {"deleted": slug}


@router.post("/{name}/test", response_model=ConnectionTestResponse)
async def check_connection(name: str, services: FetchServices = Depends(get_services)):
    """Force a live fetch for *name* and report status code and message."""
    source = await _require_source(services, name)
    result = await services.fetcher.fetch(source.name, force_refresh=True)
    return ConnectionTestResponse(
        source=source.name,
        success=result.success,
        status_code=result.status_code,
        message="Connection successful." if result.success else result.error,
    )


@router.get("/{name}/errors", response_model=ErrorLogResponse)
async def get_source_errors(
    name: str, services: FetchServices = Depends(get_services)
):
    slug = slugify_name(name)
    return ErrorLogResponse(
        source=slug,
        recent_count=await services.error_log.count_recent(slug),
        errors=await services.error_log.get_errors(slug),
    )


@router.delete("/{name}/errors")
async def clear_source_errors(
    name: str, services: FetchServices = Depends(get_services)
):
    slug = slugify_name(name)
    await services.error_log.clear(slug)
    logger.info("Cleared error log for %s", slug)
    return {"cleared": slug}
