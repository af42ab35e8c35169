"""Cache backend factory.

The medium is picked once, from configuration, when the object graph is
built. Nothing downstream branches on it.
"""

from pathlib import Path

from src.core.config import Settings, settings
from src.core.domain.exceptions import ConfigurationError
from src.core.infrastructure.redis import RedisClient
from src.modules.streams.domain.ports import CacheBackend
from src.modules.streams.infrastructure.cache_backends.file_backend import (
    FileCacheBackend,
)
from src.modules.streams.infrastructure.cache_backends.redis_backend import (
    RedisCacheBackend,
)
from src.modules.streams.infrastructure.cache_backends.s3_backend import (
    S3CacheBackend,
    create_s3_client,
)


def create_cache_backend(
    config: Settings | None = None,
    *,
    redis_client: RedisClient | None = None,
) -> CacheBackend:
    """Create the configured cache backend.

    Raises:
        ConfigurationError: the S3 medium is selected without a bucket
    """
    config = config or settings
    backend = config.resolved_cache_backend

    if backend == "s3":
        if not config.S3_BUCKET:
            raise ConfigurationError("CACHE_BACKEND=s3 requires S3_BUCKET")
        client = create_s3_client(
            endpoint_url=config.S3_ENDPOINT_URL,
            access_key=config.S3_ACCESS_KEY,
            secret_key=config.S3_SECRET_KEY,
            region=config.S3_REGION,
        )
        return S3CacheBackend(bucket=config.S3_BUCKET, client=client)

    if backend == "redis":
        return RedisCacheBackend(redis_client or RedisClient(url=config.REDIS_URL))

    return FileCacheBackend(Path(config.CACHE_PATH))
