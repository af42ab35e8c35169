"""TTL-aware catalog persistence on top of a cache backend."""

import json
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import StrEnum

from loguru import logger
from pydantic import ValidationError

from src.core.config import settings
from src.core.infrastructure.logging import BusinessEvents
from src.modules.streams.domain.entities import VideoEntry
from src.modules.streams.domain.exceptions import (
    CacheNotFoundError,
    CacheReadError,
    CacheWriteError,
)
from src.modules.streams.domain.ports import CacheBackend


class CacheStatus(StrEnum):
    FRESH = "fresh"
    STALE = "stale"
    NOT_FOUND = "not_found"


@dataclass
class CacheLookup:
    """Outcome of a cache read."""

    status: CacheStatus
    entries: list[VideoEntry] = field(default_factory=list)
    age: timedelta | None = None

    @property
    def is_fresh(self) -> bool:
        return self.status == CacheStatus.FRESH


class CatalogCache:
    """Persist the non-manual part of the catalog with a freshness window."""

    def __init__(
        self,
        backend: CacheBackend,
        *,
        key: str | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.backend = backend
        self.key = key if key is not None else settings.CACHE_KEY
        self._clock = clock or (lambda: datetime.now(UTC))

    async def load_if_fresh(self, ttl: timedelta | None = None) -> CacheLookup:
        """Load cached entries unless they are older than ``ttl``.

        A missing, unreadable or corrupt cache is reported as NOT_FOUND. An
        age of exactly ``ttl`` counts as stale, and stale payloads are never
        decoded.
        """
        ttl = ttl if ttl is not None else timedelta(seconds=settings.CACHE_TTL_SEC)
        logger.info(f"Pulling catalog from {self.backend.name} cache")

        try:
            blob = await self.backend.get(self.key)
        except CacheNotFoundError:
            logger.info("No cache data found, fetching from web")
            return CacheLookup(status=CacheStatus.NOT_FOUND)
        except CacheReadError as e:
            logger.error(f"Failed to read from cache: {e.message}")
            BusinessEvents.cache_degraded(operation="read", reason=e.message)
            return CacheLookup(status=CacheStatus.NOT_FOUND)

        age = self._clock() - blob.last_modified
        if age >= ttl:
            logger.info(f"{self.backend.name.capitalize()} cache is stale, refreshing")
            return CacheLookup(status=CacheStatus.STALE, age=age)

        try:
            entries = self._decode(blob.data)
        except CacheReadError as e:
            logger.error(f"Failed to read from cache: {e.message}")
            BusinessEvents.cache_degraded(operation="decode", reason=e.message)
            return CacheLookup(status=CacheStatus.NOT_FOUND)

        expires_in = -(-(ttl - age).total_seconds() // 60)
        logger.info(
            f"{self.backend.name.capitalize()} cache is fresh, "
            f"expires in {int(expires_in):,} minutes"
        )
        return CacheLookup(status=CacheStatus.FRESH, entries=entries, age=age)

    async def save(self, entries: list[VideoEntry]) -> bool:
        """Write non-manual entries; failures are logged, never raised."""
        payload = [
            entry.to_cache_dict() for entry in entries if not entry.manually_added
        ]
        data = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        try:
            await self.backend.put(self.key, data)
        except CacheWriteError as e:
            logger.error(f"Failed to write to cache: {e.message}")
            BusinessEvents.cache_degraded(operation="write", reason=e.message)
            return False

        logger.debug(f"Saved {len(payload)} entries to {self.backend.name} cache")
        return True

    @staticmethod
    def _decode(data: bytes) -> list[VideoEntry]:
        try:
            payload = json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CacheReadError(f"Cache payload is not valid JSON: {e}") from e

        if not isinstance(payload, list):
            raise CacheReadError("Cache payload must be a JSON array")

        try:
            return [
                VideoEntry.model_validate({**raw, "manuallyAdded": False})
                for raw in payload
            ]
        except (TypeError, ValidationError) as e:
            raise CacheReadError(f"Cache payload has invalid entries: {e}") from e
