"""Fetch pipeline package.

Re-exports the orchestrator, its collaborators, the exception hierarchy and
the composition root for convenient imports::

    from src.fetch import FetchResult, build_services
"""

from src.core.errors import (
    DecryptError,
    HttpStatusError,
    RateLimitExceededError,
    SourceFetchError,
    SourceNotFoundError,
    TransportError,
)

from .error_log import ErrorLog
from .health import SourceHealth, source_health
from .orchestrator import FetchResult, SourceFetcher
from .rate_limiter import RateLimiter
from .services import FetchServices, build_services
from .transform import apply_transform

__all__ = [
    "DecryptError",
    "ErrorLog",
    "FetchResult",
    "FetchServices",
    "HttpStatusError",
    "RateLimitExceededError",
    "RateLimiter",
    "SourceFetchError",
    "SourceFetcher",
    "SourceHealth",
    "SourceNotFoundError",
    "TransportError",
    "apply_transform",
    "build_services",
    "source_health",
]
