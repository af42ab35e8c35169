"""Re-poll known entries and detect streams that just went live."""

from loguru import logger

from src.modules.streams.domain.entities import LiveStatusUpdate, VideoEntry
from src.modules.streams.domain.exceptions import TransientSourceError
from src.modules.streams.domain.ports import VideoQueryClient


class LiveStatusRefresher:
    """Update live/start-time/name of queried entries in place."""

    def __init__(self, client: VideoQueryClient) -> None:
        self.client = client

    async def refresh(self, entries: list[VideoEntry]) -> list[str]:
        """Refresh ``entries`` and return the ids that switched to live.

        Only an entry whose previous ``live`` was exactly False counts as
        newly live. Manual entries are neither queried nor touched. When the
        query fails nothing is modified and no ids are returned.
        """
        queried = [entry for entry in entries if not entry.manually_added]
        if not queried:
            return []

        try:
            statuses = await self.client.list_videos([entry.id for entry in queried])
        except TransientSourceError as e:
            logger.error(f"Failed to refresh live status: {e.message}")
            return []

        updates = {
            status.video_id: LiveStatusUpdate(
                name=status.title,
                live=status.is_live,
                start_time=status.start_time_ms,
            )
            for status in statuses
        }

        went_live = [
            entry.id
            for entry in queried
            if entry.id in updates
            and entry.live is False
            and updates[entry.id].live is True
        ]

        for entry in queried:
            update = updates.get(entry.id)
            if update is not None:
                entry.apply_status(update)

        if went_live:
            logger.info(f"Streams went live: {went_live}")
        return went_live
