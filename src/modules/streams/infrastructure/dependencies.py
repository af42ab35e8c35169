"""Streams module dependencies.

The object graph is built once at startup and shared by the HTTP layer and
the refresh timer.
"""

from dataclasses import dataclass
from datetime import timedelta

from src.core.config import Settings, settings
from src.core.domain.events import EventBus, get_event_bus
from src.core.domain.exceptions import ConfigurationError
from src.core.infrastructure.redis import RedisClient
from src.modules.streams.application.catalog_cache import CatalogCache
from src.modules.streams.application.catalog_source import CatalogSource
from src.modules.streams.application.channel_manager import ChannelManager
from src.modules.streams.application.live_status import LiveStatusRefresher
from src.modules.streams.application.playback_controller import PlaybackController
from src.modules.streams.application.refresh_scheduler import RefreshScheduler
from src.modules.streams.domain.events import CatalogRefreshedEvent
from src.modules.streams.domain.ports import CacheBackend, MediaPlayer
from src.modules.streams.domain.priority import PriorityRule
from src.modules.streams.infrastructure.cache_backends import create_cache_backend
from src.modules.streams.infrastructure.media_player import InMemoryMediaPlayer
from src.modules.streams.infrastructure.youtube_client import YouTubeDataClient


@dataclass
class StreamsRuntime:
    client: YouTubeDataClient
    cache_backend: CacheBackend
    manager: ChannelManager
    playback: PlaybackController
    scheduler: RefreshScheduler
    owned_redis: RedisClient | None = None

    async def close(self) -> None:
        await self.scheduler.stop()
        await self.client.close()
        if self.owned_redis is not None:
            await self.owned_redis.close()


def build_streams_runtime(
    config: Settings | None = None,
    *,
    event_bus: EventBus | None = None,
    cache_backend: CacheBackend | None = None,
    client: YouTubeDataClient | None = None,
    player: MediaPlayer | None = None,
    redis_client: RedisClient | None = None,
) -> StreamsRuntime:
    """Wire the catalog, cache, refresher, playback and timer together.

    Raises:
        ConfigurationError: no API credential is configured
    """
    config = config or settings
    if client is None:
        if not config.API_KEY:
            raise ConfigurationError("API_KEY is required to query the video API")
        client = YouTubeDataClient(config.API_KEY)

    event_bus = event_bus or get_event_bus()
    owned_redis = None
    if cache_backend is None:
        if redis_client is None and config.resolved_cache_backend == "redis":
            redis_client = owned_redis = RedisClient(url=config.REDIS_URL)
        cache_backend = create_cache_backend(config, redis_client=redis_client)

    manager = ChannelManager(
        source=CatalogSource(
            client,
            channel_ids=list(config.SOURCE_CHANNELS),
            priority_rules=[
                PriorityRule.from_pair(pattern, priority)
                for pattern, priority in config.PRIORITY_RULES
            ],
            max_results=config.SEARCH_MAX_RESULTS,
            order=config.SEARCH_ORDER,
            language=config.SEARCH_LANGUAGE,
        ),
        cache=CatalogCache(cache_backend, key=config.CACHE_KEY),
        refresher=LiveStatusRefresher(client),
        event_bus=event_bus,
        manual_urls=list(config.VIDEO_URLS),
        cache_ttl=timedelta(seconds=config.CACHE_TTL_SEC),
    )
    playback = PlaybackController(
        manager,
        player or InMemoryMediaPlayer(),
        volume=config.DEFAULT_VOLUME,
        volume_step=config.VOLUME_STEP,
    )
    event_bus.subscribe(CatalogRefreshedEvent, playback)

    return StreamsRuntime(
        client=client,
        cache_backend=cache_backend,
        manager=manager,
        playback=playback,
        scheduler=RefreshScheduler(manager, interval_sec=config.REFRESH_INTERVAL_SEC),
        owned_redis=owned_redis,
    )


_runtime: StreamsRuntime | None = None


def set_streams_runtime(runtime: StreamsRuntime | None) -> None:
    global _runtime
    _runtime = runtime


def get_streams_runtime() -> StreamsRuntime:
    if _runtime is None:
        raise RuntimeError("Streams runtime has not been initialized")
    return _runtime


async def get_channel_manager() -> ChannelManager:
    return get_streams_runtime().manager


async def get_playback_controller() -> PlaybackController:
    return get_streams_runtime().playback
