"""Application configuration."""

from typing import Annotated, Any, Literal

from pydantic import BeforeValidator, HttpUrl, computed_field
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# Source channels, sorted from high to low priority.
DEFAULT_SOURCE_CHANNELS = [
    "UCtI0Hodo5o5dUb67FeUjDeA",  # SpaceX
    "UCVxTHEKKLxNjGcvVaZindlg",  # Blue Origin
    "UCsWq7LZaizhIi-c-Yo_bcpw",  # Rocket Lab
    "UC6uKrU_WqJ1R2HMTY3LIx5Q",  # Everyday Astronaut
    "UCSUu1lih2RifWkKtDOJdsBA",  # NASASpaceflight
    "UCLA_DiR1FfKNvjuUpBHmylQ",  # NASA TV
]

DEFAULT_PRIORITY_RULES: list[tuple[str, int]] = [
    (r"Mission Control Audio", -1),
    (r"^NASA Live: Official Stream of NASA TV$", 1),
]


def parse_list(v: Any, separator: str = ",") -> list[str]:
    if v is None:
        return []
    if isinstance(v, str):
        return [i.strip() for i in v.split(separator) if i.strip()]
    if isinstance(v, list):
        return v
    raise ValueError(v)


def parse_video_urls(v: Any) -> list[str]:
    return parse_list(v, separator=";")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "launchwatch"
    SERVER_PORT: int = 8000
    ROOTPATH: str = ""
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"

    # Sentry
    SENTRY_DSN: HttpUrl | None = None

    # YouTube Data API
    API_KEY: str | None = None
    YOUTUBE_API_BASE_URL: str = "https://www.googleapis.com/youtube/v3"
    YOUTUBE_TIMEOUT_SEC: float = 15.0
    YOUTUBE_RETRY_ATTEMPTS: int = 3
    YOUTUBE_USER_AGENT: str = "launchwatch/0.1"

    # Catalog source
    SOURCE_CHANNELS: Annotated[list[str], NoDecode, BeforeValidator(parse_list)] = (
        DEFAULT_SOURCE_CHANNELS
    )
    SEARCH_MAX_RESULTS: int = 5
    SEARCH_LANGUAGE: str = "en"
    SEARCH_ORDER: str = "rating"
    PRIORITY_RULES: list[tuple[str, int]] = DEFAULT_PRIORITY_RULES

    # Manual entries (semicolon-delimited)
    VIDEO_URLS: Annotated[
        list[str], NoDecode, BeforeValidator(parse_video_urls)
    ] = []

    # Catalog cache
    CACHE_BACKEND: Literal["file", "s3", "redis"] | None = None
    CACHE_PATH: str = "db"
    CACHE_KEY: str = "cache.json"
    CACHE_TTL_SEC: int = 6 * 60 * 60  # 6 hours

    # S3-compatible object store
    S3_BUCKET: str | None = None
    S3_ENDPOINT_URL: str | None = None
    S3_ACCESS_KEY: str | None = None
    S3_SECRET_KEY: str | None = None
    S3_REGION: str | None = None

    # Redis
    REDIS_URL: str = "redis://localhost:6379/0"

    # Refresh & playback
    REFRESH_INTERVAL_SEC: int = 5 * 60
    BUTTON_WINDOW_MINUTES: int = 60
    DEFAULT_VOLUME: float = 0.2
    VOLUME_STEP: float = 0.1
    CONTROL_TOKEN: str | None = None
    PUBLIC_CONTROLS: bool = False

    @computed_field
    @property
    def resolved_cache_backend(self) -> str:
        """Cache medium, falling back to S3 when a bucket is configured."""
        if self.CACHE_BACKEND:
            return self.CACHE_BACKEND
        return "s3" if self.S3_BUCKET else "file"


settings = Settings()
