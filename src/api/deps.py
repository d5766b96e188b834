"""FastAPI dependency injection for the fetch services.

The services are built once by the application lifespan and stored on
``app.state.services``; these dependencies hand out the pieces routes need.
"""

from fastapi import Request

from src.fetch.orchestrator import SourceFetcher
from src.fetch.services import FetchServices


def get_services(request: Request) -> FetchServices:
    """Return the services built by the lifespan."""
    return request.app.state.services


def get_fetcher(request: Request) -> SourceFetcher:
    return get_services(request).fetcher
