"""Redis key naming."""


class RedisKeys:
    """Redis key namespaces."""

    # cache:{key}
    CACHE_PREFIX = "cache"

    @classmethod
    def cache_blob(cls, key: str) -> str:
        """Hash holding a cached blob and its write timestamp."""
        return f"{cls.CACHE_PREFIX}:{key}"
