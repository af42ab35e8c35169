"""Redis client wrapper.

Provides:
- lazy connection setup
- health checks
- the hash operations the cache backend relies on
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import redis.asyncio as aioredis
from loguru import logger

if TYPE_CHECKING:
    from redis.asyncio import Redis

from src.core.config import settings
from src.core.infrastructure.health import HealthStatus, RedisHealthResult


class RedisClient:
    """Thin async Redis wrapper."""

    def __init__(self, url: str | None = None, client: Redis | None = None):
        """
        Args:
            url: Redis URL, defaults to REDIS_URL from settings
            client: pre-built client, mainly for tests
        """
        self._url = url or settings.REDIS_URL
        self._client: Redis | None = client

    @property
    def client(self) -> Redis:
        """Redis client instance, created on first use."""
        if self._client is None:
            self._client = aioredis.from_url(
                self._url,
                encoding="utf-8",
                decode_responses=True,
                socket_timeout=10.0,
                socket_connect_timeout=5.0,
                retry_on_timeout=True,
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def ping(self) -> bool:
        try:
            return await self.client.ping()
        except Exception as e:
            logger.warning(f"Redis ping failed: {e}")
            return False

    async def health_check(self) -> RedisHealthResult:
        try:
            is_connected = await self.ping()
            info = await self.client.info("server") if is_connected else {}
            return RedisHealthResult(
                status=HealthStatus.OK if is_connected else HealthStatus.ERROR,
                connected=is_connected,
                version=info.get("redis_version", "unknown"),
            )
        except Exception as e:
            return RedisHealthResult(
                status=HealthStatus.ERROR,
                connected=False,
                error=str(e),
            )

    # ============ Hashes ============

    async def hgetall(self, key: str) -> dict[str, str]:
        """Return every field of a hash; empty when the key is absent."""
        return await self.client.hgetall(key)

    async def hset_mapping(self, key: str, mapping: dict[str, str]) -> int:
        """Set several hash fields in one round trip."""
        return await self.client.hset(key, mapping=mapping)


redis_client = RedisClient()