"""Periodic driver of catalog refreshes."""

import asyncio

from loguru import logger

from src.core.config import settings
from src.modules.streams.application.channel_manager import ChannelManager


class RefreshScheduler:
    """Call ``ChannelManager.refresh`` on a fixed period until stopped.

    Ticks run one after another inside a single task, so a slow refresh
    delays the next tick instead of overlapping it.
    """

    def __init__(
        self,
        manager: ChannelManager,
        interval_sec: float | None = None,
    ) -> None:
        self.manager = manager
        self.interval_sec = (
            interval_sec if interval_sec is not None else settings.REFRESH_INTERVAL_SEC
        )
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task[None] | None = None
        self.ticks = 0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.is_running:
            return
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._run(), name="catalog-refresh")
        logger.info(f"Catalog refresh scheduled every {self.interval_sec}s")

    async def stop(self) -> None:
        """Stop ticking; a refresh already in flight is allowed to finish."""
        if self._task is None:
            return
        self._stop_event.set()
        await self._task
        self._task = None
        logger.info("Catalog refresh stopped")

    async def _run(self) -> None:
        while not self._stop_event.is_set():
            try:
                await asyncio.wait_for(self._stop_event.wait(), self.interval_sec)
                break
            except TimeoutError:
                pass

            try:
                await self.manager.refresh()
            except Exception as e:
                logger.exception(f"Catalog refresh tick failed: {e}")
            self.ticks += 1
