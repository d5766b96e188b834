"""FastAPI application entry-point for the source fetch API.

Configures CORS, lifespan startup/shutdown, and mounts all route modules.
Run with:  uvicorn src.api.main:app --reload --host 0.0.0.0 --port 8000
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.routes import data, health, sources, status
from src.core.config import Settings, settings as default_settings
from src.core.utils.logging_config import configure_logging
from src.fetch.services import FetchServices, build_services

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "Health", "description": "Health check endpoints"},
    {"name": "Sources", "description": "Source configuration and error logs"},
    {"name": "Data", "description": "Cached and forced source fetches"},
    {"name": "Status", "description": "Source health and global settings"},
]


def create_app(
    settings: Settings | None = None,
    services: FetchServices | None = None,
) -> FastAPI:
    """Build the API.

    Args:
        settings: Defaults to the module-level settings.
        services: Pre-built services (tests). When omitted the lifespan
            builds them from *settings* and closes them on shutdown.
    """
    settings = settings or default_settings

    # -----------------------------------------------------------------------
    # Lifespan -- run once at startup / shutdown
    # -----------------------------------------------------------------------
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(settings.debug)
        owned = services is None
        app.state.services = services or build_services(settings)
        if await app.state.services.backend.ping():
            logger.info("State backend reachable (%s)", settings.state_backend)
        else:
            logger.error("State backend unreachable (%s)", settings.state_backend)

        yield
        # Shutdown
        if owned:
            await app.state.services.aclose()
            logger.info("Fetch services closed")

    app = FastAPI(
        title=f"{settings.project_name} API",
        version="0.1.0",
        description=(
            "Fetches configured HTTP API sources with caching, per-source "
            "rate limiting, failure logging and stale/static fallbacks."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
        openapi_tags=openapi_tags,
    )
    app.state.settings = settings

    # -----------------------------------------------------------------------
    # Middleware
    # -----------------------------------------------------------------------
    allowed_origins = ["http://localhost:3000", "http://localhost:8000"]
    if settings.allowed_origins:
        allowed_origins.extend(
            o.strip() for o in settings.allowed_origins.split(",") if o.strip()
        )
    if settings.debug:
        allowed_origins = ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -----------------------------------------------------------------------
    # Routers
    # -----------------------------------------------------------------------
    # Health endpoint lives at the root (no prefix)
    app.include_router(health.router)

    # Everything else sits under /api/v1
    app.include_router(sources.router, prefix="/api/v1")
    app.include_router(data.router, prefix="/api/v1")
    app.include_router(status.router, prefix="/api/v1")

    return app


app = create_app()
