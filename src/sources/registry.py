"""Durable registry of source definitions.

Sources are stored as JSON documents in a single backend hash keyed by source
name. Credentials are encrypted before they are written and decrypted on every
read; the registry keeps no in-memory copy, so each ``get`` reflects the
latest upsert.
"""

from __future__ import annotations

import json
from typing import Any

import structlog

from src.core.errors import DecryptError
from src.core.utils.crypto import SecretCipher
from src.sources.models import Source
from src.store.base import StateBackend

logger = structlog.get_logger()


class SourceRegistry:
    """CRUD over :class:`Source` definitions.

    Usage::

        registry = SourceRegistry(backend, SecretCipher(settings.secret_key))
        await registry.upsert(Source(name="weather", url="https://..."))
        source = await registry.get("weather")
    """

    def __init__(
        self,
        backend: StateBackend,
        cipher: SecretCipher,
        key_prefix: str = "fetch:",
    ) -> None:
        self._backend = backend
        self._cipher = cipher
        self._key = f"{key_prefix}sources"

    async def upsert(self, source: Source) -> bool:
        """Create or fully replace the source stored under ``source.name``.

        Returns:
            False without writing anything if the name or url is empty.
        """
        if not source.is_persistable:
            logger.warning(
                "source_rejected",
                source=source.name,
                reason="name and url are required",
            )
            return False

        await self._backend.hash_set(
            self._key, source.name, json.dumps(self._to_stored(source))
        )
        logger.info("source_saved", source=source.name)
        return True

    async def get(self, name: str) -> Source | None:
        raw = await self._backend.hash_get(self._key, name)
        if raw is None:
            return None
        return self._from_stored(json.loads(raw))

    async def delete(self, name: str) -> bool:
        deleted = await self._backend.hash_delete(self._key, name)
        if deleted:
            logger.info("source_deleted", source=name)
        return deleted

    async def list(self) -> list[Source]:
        """All sources in backend iteration order. Callers must not rely on it."""
        return [
            self._from_stored(json.loads(raw))
            for raw in await self._backend.hash_values(self._key)
        ]

    # ------------------------------------------------------------------
    # Storage mapping
    # ------------------------------------------------------------------
    def _to_stored(self, source: Source) -> dict[str, Any]:
        data = source.model_dump(mode="json")
        data["auth_value"] = self._cipher.encrypt(source.auth_value)
        return data

    def _from_stored(self, data: dict[str, Any]) -> Source:
        try:
            data["auth_value"] = self._cipher.decrypt(data.get("auth_value") or "")
        except DecryptError:
            # Indistinguishable from "no credential" for callers: no auth
            # header is sent.
            logger.warning("auth_decrypt_failed", source=data.get("name"))
            data["auth_value"] = ""
        return Source(**data)
