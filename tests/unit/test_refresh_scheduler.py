"""Tests for the periodic refresh driver."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.modules.streams.application.refresh_scheduler import RefreshScheduler
from src.modules.streams.domain.exceptions import CatalogNotReadyError

pytestmark = pytest.mark.anyio


def _manager(refresh: AsyncMock) -> MagicMock:
    manager = MagicMock()
    manager.refresh = refresh
    return manager


async def _wait_for_ticks(scheduler: RefreshScheduler, ticks: int) -> None:
    for _ in range(200):
        if scheduler.ticks >= ticks:
            return
        await asyncio.sleep(0.01)


class TestRefreshScheduler:
    async def test_refreshes_periodically(self) -> None:
        refresh = AsyncMock(return_value=[])
        scheduler = RefreshScheduler(_manager(refresh), interval_sec=0.01)

        scheduler.start()
        await _wait_for_ticks(scheduler, 3)
        await scheduler.stop()

        assert refresh.await_count >= 3
        assert not scheduler.is_running

    async def test_failed_tick_does_not_stop_timer(self) -> None:
        refresh = AsyncMock(side_effect=[CatalogNotReadyError("loading"), [], []])
        scheduler = RefreshScheduler(_manager(refresh), interval_sec=0.01)

        scheduler.start()
        await _wait_for_ticks(scheduler, 2)
        await scheduler.stop()

        assert scheduler.ticks >= 2

    async def test_stop_before_first_tick(self) -> None:
        refresh = AsyncMock(return_value=[])
        scheduler = RefreshScheduler(_manager(refresh), interval_sec=60)

        scheduler.start()
        assert scheduler.is_running
        await scheduler.stop()

        refresh.assert_not_awaited()
        assert not scheduler.is_running

    async def test_start_twice_keeps_one_task(self) -> None:
        scheduler = RefreshScheduler(_manager(AsyncMock()), interval_sec=60)

        scheduler.start()
        task = scheduler._task
        scheduler.start()

        assert scheduler._task is task
        await scheduler.stop()

    async def test_stop_without_start(self) -> None:
        scheduler = RefreshScheduler(_manager(AsyncMock()), interval_sec=60)

        await scheduler.stop()

        assert not scheduler.is_running
