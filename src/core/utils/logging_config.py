"""Structured logging configuration for the source fetch gateway.

Uses structlog with context variables, ISO timestamps, and console rendering.
Provides configure_logging() for one-time setup by the API lifespan and the
CLI script.
"""

import logging
import sys

import structlog

_configured = False


def configure_logging(debug: bool = False) -> None:
    """Configure structlog processors once.

    Safe to call multiple times -- only the first invocation takes effect.

    Args:
        debug: Emit DEBUG events (cache hits/misses) when True, INFO and
            above otherwise.
    """
    global _configured
    if _configured:
        return

    level = logging.DEBUG if debug else logging.INFO
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )
    _configured = True
