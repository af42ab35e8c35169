"""Stream catalog ports: the cache medium and the external query API."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Protocol

EventType = Literal["live", "upcoming"]


@dataclass(frozen=True)
class CacheBlob:
    """A stored blob plus the medium's last-modified timestamp."""

    data: bytes
    last_modified: datetime


class CacheBackend(ABC):
    """Key/blob store holding the persisted catalog.

    Implementations raise CacheNotFoundError when the key is absent,
    CacheReadError for any other read failure and CacheWriteError when a
    write fails.
    """

    name: str = "cache"

    @abstractmethod
    async def get(self, key: str) -> CacheBlob: ...

    @abstractmethod
    async def put(self, key: str, data: bytes) -> None: ...


@dataclass(frozen=True)
class SearchResult:
    """One video returned by a channel search."""

    video_id: str
    title: str
    thumbnail_url: str | None
    live_broadcast_content: str


@dataclass(frozen=True)
class VideoStatus:
    """Current snippet and live-streaming details of one video."""

    video_id: str
    title: str
    live_broadcast_content: str
    actual_start_time: datetime | None = None
    scheduled_start_time: datetime | None = None

    @property
    def is_live(self) -> bool:
        return self.live_broadcast_content == "live"

    @property
    def start_time_ms(self) -> int | None:
        start = self.actual_start_time or self.scheduled_start_time
        if start is None:
            return None
        return int(start.timestamp() * 1000)


class VideoQueryClient(Protocol):
    """Port for the external video query API."""

    async def search_events(
        self,
        channel_id: str,
        event_type: EventType,
        *,
        max_results: int,
        order: str,
        language: str,
    ) -> list[SearchResult]: ...

    async def list_videos(self, video_ids: list[str]) -> list[VideoStatus]: ...


class MediaPlayer(Protocol):
    """Port for the media pipeline that actually plays a stream."""

    @property
    def active_url(self) -> str | None: ...

    def start(self, url: str, volume: float) -> None: ...

    def stop(self) -> None: ...

    def set_volume(self, volume: float) -> None: ...
