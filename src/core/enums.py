"""Shared enumerations used across the source registry, fetcher and API.

All enums use the (str, Enum) mixin pattern so their values are
serializable strings, compatible with JSON storage and API output.
"""

from enum import Enum


class HttpMethod(str, Enum):
    """HTTP verbs a source may be fetched with."""

    GET = "GET"
    POST = "POST"


class AuthType(str, Enum):
    """How a source's credential is sent upstream."""

    NONE = "none"
    API_KEY = "api_key"
    BEARER = "bearer"


class HealthStatus(str, Enum):
    """Per-source health as shown on status dashboards."""

    OK = "ok"
    STALE = "stale"
    ERROR = "error"


class StateBackendKind(str, Enum):
    """Available state backend implementations."""

    MEMORY = "memory"
    REDIS = "redis"
