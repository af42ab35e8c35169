"""Build the ranked stream catalog from the external query API."""

import asyncio

from loguru import logger

from src.core.config import settings
from src.core.infrastructure.logging import BusinessEvents
from src.modules.streams.domain.entities import VideoEntry
from src.modules.streams.domain.exceptions import TransientSourceError
from src.modules.streams.domain.ports import SearchResult, VideoQueryClient
from src.modules.streams.domain.priority import (
    PriorityRule,
    name_sort_key,
    resolve_priority,
)


class CatalogSource:
    """Query every configured channel and assemble the catalog.

    Each channel's results are ranked on their own; the channel list order
    then decides which channel's batch comes first. There is no global
    re-sort across channels.
    """

    def __init__(
        self,
        client: VideoQueryClient,
        *,
        channel_ids: list[str] | None = None,
        priority_rules: list[PriorityRule] | None = None,
        max_results: int | None = None,
        order: str | None = None,
        language: str | None = None,
    ) -> None:
        self.client = client
        self.channel_ids = (
            channel_ids if channel_ids is not None else list(settings.SOURCE_CHANNELS)
        )
        self.priority_rules = (
            priority_rules
            if priority_rules is not None
            else [PriorityRule.from_pair(p, v) for p, v in settings.PRIORITY_RULES]
        )
        self.max_results = (
            max_results if max_results is not None else settings.SEARCH_MAX_RESULTS
        )
        self.order = order if order is not None else settings.SEARCH_ORDER
        self.language = language if language is not None else settings.SEARCH_LANGUAGE

    async def build(self) -> list[VideoEntry]:
        """Return the ordered catalog with indexes 0..N-1."""
        batches = await asyncio.gather(
            *(self._build_channel(channel_id) for channel_id in self.channel_ids)
        )

        entries: list[VideoEntry] = []
        seen_ids: set[str] = set()
        for batch in batches:
            for entry in batch:
                if entry.id in seen_ids:
                    continue
                seen_ids.add(entry.id)
                entries.append(entry)

        for i, entry in enumerate(entries):
            entry.index = i

        logger.info(
            f"Built catalog from {len(self.channel_ids)} channels: "
            f"{len(entries)} videos"
        )
        return entries

    async def _build_channel(self, channel_id: str) -> list[VideoEntry]:
        try:
            results = await self._query_channel(channel_id)
        except TransientSourceError as e:
            logger.error(f"Failed to query channel {channel_id}: {e.message}")
            BusinessEvents.source_query_failed(channel_id=channel_id, error=e.message)
            return []

        batch = [self._to_entry(result) for result in results]
        batch.sort(key=lambda entry: (entry.priority, name_sort_key(entry.name)))
        return batch

    async def _query_channel(self, channel_id: str) -> list[SearchResult]:
        results: list[SearchResult] = []
        for event_type in ("live", "upcoming"):
            found = await self.client.search_events(
                channel_id,
                event_type,
                max_results=self.max_results,
                order=self.order,
                language=self.language,
            )
            results.extend(found[: self.max_results])
        return results

    def _to_entry(self, result: SearchResult) -> VideoEntry:
        return VideoEntry(
            id=result.video_id,
            name=result.title,
            url=f"youtube://{result.video_id}",
            thumbnail_url=result.thumbnail_url,
            live=result.live_broadcast_content == "live",
            priority=resolve_priority(result.title, self.priority_rules),
            manually_added=False,
        )
