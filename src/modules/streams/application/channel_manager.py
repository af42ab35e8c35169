"""Owner of the authoritative in-memory stream catalog."""

import asyncio
from datetime import timedelta

from loguru import logger

from src.core.config import settings
from src.core.domain.events import EventBus
from src.core.infrastructure.logging import BusinessEvents
from src.modules.streams.application.catalog_cache import CatalogCache
from src.modules.streams.application.catalog_source import CatalogSource
from src.modules.streams.application.live_status import LiveStatusRefresher
from src.modules.streams.application.manual_entries import parse_manual_entries
from src.modules.streams.domain.entities import CatalogState, VideoEntry
from src.modules.streams.domain.events import CatalogReadyEvent, CatalogRefreshedEvent
from src.modules.streams.domain.exceptions import CatalogNotReadyError


class ChannelManager:
    """Load, persist and refresh the stream catalog.

    State machine: EMPTY -> LOADING -> READY, then READY -> REFRESHING ->
    READY on every refresh. All mutations run behind one lock, so a refresh
    requested while another cycle is in flight waits for it to finish.
    """

    def __init__(
        self,
        source: CatalogSource,
        cache: CatalogCache,
        refresher: LiveStatusRefresher,
        *,
        event_bus: EventBus,
        manual_urls: list[str] | None = None,
        cache_ttl: timedelta | None = None,
    ) -> None:
        self.source = source
        self.cache = cache
        self.refresher = refresher
        self.event_bus = event_bus
        self.manual_urls = (
            manual_urls if manual_urls is not None else list(settings.VIDEO_URLS)
        )
        self.cache_ttl = (
            cache_ttl
            if cache_ttl is not None
            else timedelta(seconds=settings.CACHE_TTL_SEC)
        )
        self.state = CatalogState.EMPTY
        self._entries: list[VideoEntry] = []
        self._lock = asyncio.Lock()

    @property
    def entries(self) -> list[VideoEntry]:
        return list(self._entries)

    @property
    def live_videos(self) -> list[VideoEntry]:
        return [entry for entry in self._entries if entry.live]

    @property
    def highest_priority_stream(self) -> VideoEntry | None:
        """First live entry; the catalog is already in priority order."""
        return next((entry for entry in self._entries if entry.live), None)

    def find(self, video_id: str) -> VideoEntry | None:
        return next((entry for entry in self._entries if entry.id == video_id), None)

    async def initialize(self, force: bool = False) -> list[VideoEntry]:
        """Load the catalog from a fresh cache, or rebuild it from the source."""
        async with self._lock:
            previous_state = self.state
            self.state = CatalogState.LOADING
            try:
                entries, loaded_from = await self._load(force)
            except BaseException:
                self.state = previous_state
                raise

            self._entries = entries
            self.state = CatalogState.READY

        logger.info(f"Videos found: {[entry.name for entry in entries]}")
        BusinessEvents.catalog_built(
            entries=len(entries),
            channels=len(self.source.channel_ids),
            loaded_from=loaded_from,
            forced=force,
        )
        await self.event_bus.publish(
            CatalogReadyEvent(entries=self._snapshot(), loaded_from=loaded_from)
        )
        return self.entries

    async def refresh(self) -> list[str]:
        """Re-poll live status and return the ids that just went live."""
        async with self._lock:
            if self.state != CatalogState.READY:
                raise CatalogNotReadyError(self.state.value)

            self.state = CatalogState.REFRESHING
            try:
                went_live = await self.refresher.refresh(self._entries)
            finally:
                self.state = CatalogState.READY

        if went_live:
            BusinessEvents.streams_went_live(video_ids=went_live)
        await self.event_bus.publish(
            CatalogRefreshedEvent(went_live=went_live, entries=self._snapshot())
        )
        return went_live

    async def _load(self, force: bool) -> tuple[list[VideoEntry], str]:
        if not force:
            lookup = await self.cache.load_if_fresh(self.cache_ttl)
            if lookup.is_fresh:
                entries = self._merge_manual(lookup.entries)
                await self.refresher.refresh(entries)
                return entries, "cache"

        entries = self._merge_manual(await self.source.build())
        await self.refresher.refresh(entries)
        await self.cache.save(entries)
        return entries, "source"

    def _merge_manual(self, entries: list[VideoEntry]) -> list[VideoEntry]:
        merged = list(entries)
        known_ids = {entry.id for entry in merged}
        for manual in parse_manual_entries(self.manual_urls):
            if manual.id in known_ids:
                logger.warning(f"Skipping manual video {manual.url}: id already listed")
                continue
            known_ids.add(manual.id)
            manual.index = len(merged)
            merged.append(manual)
        return merged

    def _snapshot(self) -> list[VideoEntry]:
        return [entry.model_copy() for entry in self._entries]
