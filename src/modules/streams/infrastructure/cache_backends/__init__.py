"""Catalog cache backends."""

from src.modules.streams.infrastructure.cache_backends.factory import (
    create_cache_backend,
)
from src.modules.streams.infrastructure.cache_backends.file_backend import (
    FileCacheBackend,
)
from src.modules.streams.infrastructure.cache_backends.redis_backend import (
    RedisCacheBackend,
)
from src.modules.streams.infrastructure.cache_backends.s3_backend import S3CacheBackend

__all__ = [
    "FileCacheBackend",
    "RedisCacheBackend",
    "S3CacheBackend",
    "create_cache_backend",
]
