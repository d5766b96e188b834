"""Source definition model.

A :class:`Source` is the immutable configuration of one external API
endpoint. Inputs are normalised on construction rather than rejected, so
admin forms and JSON bodies can be passed straight in:

- ``name`` is reduced to a slug (lowercase ``[a-z0-9_-]``)
- ``url`` keeps only http(s) URLs; anything else becomes ``""``
- ``method`` and ``auth_type`` fall back to GET / none on unknown values
- ``headers`` accepts a mapping or a JSON object string
- ``cache_ttl`` is coerced to a non-negative integer (0 disables caching)

Whether a source may be persisted (non-empty name and url) is checked by the
registry, not here.
"""

from __future__ import annotations

import json
import re
from typing import Any
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.core.enums import AuthType, HttpMethod

DEFAULT_CACHE_TTL = 300

_SLUG_STRIP = re.compile(r"[^a-z0-9_\-]")


def slugify_name(raw: Any) -> str:
    """Lowercase *raw* and drop every character outside ``[a-z0-9_-]``."""
    return _SLUG_STRIP.sub("", str(raw or "").lower())


class Source(BaseModel):
    """Configuration of a named external API source."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    url: str = ""
    method: HttpMethod = HttpMethod.GET
    headers: dict[str, str] = Field(default_factory=dict)
    auth_type: AuthType = AuthType.NONE
    auth_value: str = Field(default="", repr=False)
    cache_ttl: int = DEFAULT_CACHE_TTL
    transform: str = ""
    fallback: str = ""

    @field_validator("name", mode="before")
    @classmethod
    def _slug(cls, v: Any) -> str:
        return slugify_name(v)

    @field_validator("url", mode="before")
    @classmethod
    def _http_url(cls, v: Any) -> str:
        url = str(v or "").strip()
        if url and urlsplit(url).scheme.lower() not in ("http", "https"):
            return ""
        return url

    @field_validator("method", mode="before")
    @classmethod
    def _method(cls, v: Any) -> HttpMethod:
        try:
            return HttpMethod(str(v or "GET").strip().upper())
        except ValueError:
            return HttpMethod.GET

    @field_validator("auth_type", mode="before")
    @classmethod
    def _auth_type(cls, v: Any) -> AuthType:
        try:
            return AuthType(str(v or "none").strip())
        except ValueError:
            return AuthType.NONE

    @field_validator("headers", mode="before")
    @classmethod
    def _headers(cls, v: Any) -> dict[str, str]:
        if isinstance(v, str):
            try:
                v = json.loads(v) if v.strip() else {}
            except json.JSONDecodeError:
                v = {}
        if not isinstance(v, dict):
            return {}
        return {str(k).strip(): str(val).strip() for k, val in v.items()}

    @field_validator("cache_ttl", mode="before")
    @classmethod
    def _ttl(cls, v: Any) -> int:
        try:
            return abs(int(v))
        except (TypeError, ValueError):
            return 0

    @field_validator("auth_value", "transform", mode="before")
    @classmethod
    def _strip(cls, v: Any) -> str:
        return str(v or "").strip()

    @field_validator("fallback", mode="before")
    @classmethod
    def _fallback(cls, v: Any) -> str:
        return str(v or "")

    @property
    def cache_key(self) -> str:
        """Key under which this source's payload is cached."""
        return f"source_{self.name}"

    @property
    def is_persistable(self) -> bool:
        return bool(self.name and self.url)

    def public_dict(self) -> dict[str, Any]:
        """Serializable view without the credential."""
        data = self.model_dump(mode="json", exclude={"auth_value"})
        data["has_credential"] = bool(self.auth_value)
        return data
