"""Redis client wrapper."""

from src.core.infrastructure.redis.client import RedisClient, redis_client
from src.core.infrastructure.redis.keys import RedisKeys

__all__ = [
    "RedisClient",
    "RedisKeys",
    "redis_client",
]
