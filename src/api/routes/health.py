"""Health-check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from src.api.deps import get_services
from src.fetch.services import FetchServices

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(services: FetchServices = Depends(get_services)) -> dict:
    """Basic liveness probe -- verifies the state backend connection."""
    backend_status = "connected" if await services.backend.ping() else "disconnected"

    return {
        "status": "ok" if backend_status == "connected" else "degraded",
        "state_backend": backend_status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
