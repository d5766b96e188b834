"""Pydantic v2 request/response schemas for the source fetch API.

Request bodies are deliberately loose (strings instead of enums) because the
:class:`~src.sources.models.Source` model normalises unknown values the same
way the admin form always has.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


# =====================================================================
# REQUEST MODELS
# =====================================================================


class SourceRequest(BaseModel):
    """Request body for PUT /sources/{name}. The path supplies the name."""

    url: str
    method: str = "GET"
    headers: dict[str, str] | str = Field(default_factory=dict)
    auth_type: str = "none"
    auth_value: str = ""
    cache_ttl: int = 300
    transform: str = ""
    fallback: str = ""


class RateLimitRequest(BaseModel):
    """Request body for PUT /settings/rate-limit."""

    limit: int = Field(..., ge=1, le=1000, description="Requests per window")


# =====================================================================
# RESPONSE MODELS
# =====================================================================


class SourceResponse(BaseModel):
    name: str
    url: str
    method: str
    headers: dict[str, str]
    auth_type: str
    has_credential: bool
    cache_ttl: int
    transform: str
    fallback: str


class DataResponse(BaseModel):
    source: str
    data: Any = None
    cached: bool = False


class RefreshResponse(BaseModel):
    source: str
    success: bool
    data: Any = None
    error: str = ""


class ConnectionTestResponse(BaseModel):
    source: str
    success: bool
    status_code: int
    message: str


class SourceStatusResponse(BaseModel):
    name: str
    status: str
    cached: bool
    error_count: int


class ErrorEntryResponse(BaseModel):
    message: str
    time: str


class ErrorLogResponse(BaseModel):
    source: str
    recent_count: int
    errors: list[ErrorEntryResponse]


class RateLimitResponse(BaseModel):
    limit: int
    window_seconds: int


class ErrorResponse(BaseModel):
    """Body of a data request that failed with nothing to serve."""

    error: str
