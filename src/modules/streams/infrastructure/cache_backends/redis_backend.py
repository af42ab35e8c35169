"""Redis cache backend."""

from datetime import UTC, datetime

from redis.exceptions import RedisError

from src.core.infrastructure.redis import RedisClient, RedisKeys
from src.modules.streams.domain.exceptions import (
    CacheNotFoundError,
    CacheReadError,
    CacheWriteError,
)
from src.modules.streams.domain.ports import CacheBackend, CacheBlob


class RedisCacheBackend(CacheBackend):
    """Store each blob in a hash next to its write timestamp."""

    name = "redis"

    def __init__(self, redis_client: RedisClient) -> None:
        self.redis = redis_client

    async def get(self, key: str) -> CacheBlob:
        redis_key = RedisKeys.cache_blob(key)
        try:
            fields = await self.redis.hgetall(redis_key)
        except RedisError as e:
            raise CacheReadError(f"Cannot read {redis_key}: {e}") from e

        if not fields:
            raise CacheNotFoundError(redis_key)

        try:
            last_modified = datetime.fromisoformat(fields["modified_at"])
            data = fields["data"].encode("utf-8")
        except (KeyError, ValueError) as e:
            raise CacheReadError(f"Malformed cache hash {redis_key}: {e}") from e

        if last_modified.tzinfo is None:
            last_modified = last_modified.replace(tzinfo=UTC)
        return CacheBlob(data=data, last_modified=last_modified)

    async def put(self, key: str, data: bytes) -> None:
        redis_key = RedisKeys.cache_blob(key)
        try:
            await self.redis.hset_mapping(
                redis_key,
                {
                    "data": data.decode("utf-8"),
                    "modified_at": datetime.now(UTC).isoformat(),
                },
            )
        except (RedisError, UnicodeDecodeError) as e:
            raise CacheWriteError(f"Cannot write {redis_key}: {e}") from e
