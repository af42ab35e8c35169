"""Playback and button-selection policy.

Everything here is pure: decisions are computed from the catalog, the
current selection and the latest went-live ids, and applied elsewhere.
"""

import asyncio
import time
from collections.abc import AsyncIterator, Callable, Iterator
from dataclasses import dataclass, field
from enum import StrEnum

from src.core.config import settings
from src.modules.streams.domain.entities import VideoEntry

FLASH_TIMES = 5
FLASH_ON_MS = 200
FLASH_PERIOD_MS = 1000


class PlaybackAction(StrEnum):
    PLAY = "play"
    STOP = "stop"
    COUNTDOWN = "countdown"
    KEEP = "keep"


@dataclass(frozen=True)
class PlaybackDecision:
    """What the player and the UI should do next."""

    action: PlaybackAction
    entry: VideoEntry | None = None
    flash_ids: list[str] = field(default_factory=list)
    chime: bool = False


@dataclass(frozen=True)
class FlashFrame:
    lit: bool
    hold_ms: int


def now_ms() -> int:
    return int(time.time() * 1000)


def visible_buttons(
    entries: list[VideoEntry],
    current_ms: int,
    window_minutes: int | None = None,
) -> list[VideoEntry]:
    """Entries that get a button: live now, or starting within the window."""
    minutes = (
        window_minutes
        if window_minutes is not None
        else settings.BUTTON_WINDOW_MINUTES
    )
    window_ms = minutes * 60 * 1000
    return [
        entry
        for entry in entries
        if entry.live or entry.starts_within(current_ms, window_ms)
    ]


def format_countdown(remaining_ms: int) -> str:
    """Format a remaining duration as H:MM:SS."""
    total = max(0, remaining_ms // 1000)
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours}:{minutes:02d}:{seconds:02d}"


def flash_frames(
    times: int = FLASH_TIMES,
    on_ms: int = FLASH_ON_MS,
    period_ms: int = FLASH_PERIOD_MS,
) -> Iterator[FlashFrame]:
    """Frames of a button flash: lit for ``on_ms``, then dark until the next."""
    for _ in range(times):
        yield FlashFrame(lit=True, hold_ms=on_ms)
        yield FlashFrame(lit=False, hold_ms=period_ms - on_ms)


async def countdown_ticks(
    start_time_ms: int,
    *,
    clock: Callable[[], int] = now_ms,
    interval_sec: float = 1.0,
) -> AsyncIterator[str]:
    """Yield the countdown label once per interval until the start time.

    The consumer stops the sequence by closing the generator, or by
    cancelling the task that iterates it.
    """
    while True:
        remaining = start_time_ms - clock()
        yield format_countdown(remaining)
        if remaining <= 0:
            return
        await asyncio.sleep(interval_sec)


class PlaybackSelector:
    """Decide playback changes from user clicks and refresh results."""

    @staticmethod
    def is_same_selection(current: VideoEntry | None, entry: VideoEntry) -> bool:
        """Same id and same live flag as when the current entry was selected."""
        return (
            current is not None
            and current.id == entry.id
            and current.live == entry.live
        )

    def on_select(
        self,
        current: VideoEntry | None,
        entry: VideoEntry,
        went_live: set[str] | frozenset[str] = frozenset(),
    ) -> PlaybackDecision:
        """A button was clicked."""
        if self.is_same_selection(current, entry):
            return PlaybackDecision(action=PlaybackAction.STOP)

        if not entry.live:
            return PlaybackDecision(action=PlaybackAction.COUNTDOWN, entry=entry)

        just_went_live = entry.id in went_live
        return PlaybackDecision(
            action=PlaybackAction.PLAY,
            entry=entry,
            flash_ids=[entry.id] if just_went_live else [],
            chime=just_went_live,
        )

    def on_refresh(
        self,
        current: VideoEntry | None,
        entries: list[VideoEntry],
        went_live: list[str],
        buttons: list[VideoEntry],
    ) -> PlaybackDecision:
        """A refresh finished; flash new streams and resume a waiting selection."""
        went_live_ids = set(went_live)
        flashed = [button for button in buttons if button.id in went_live_ids]
        chime = current is not None and any(
            button.index <= current.index for button in flashed
        )
        flash_ids = [button.id for button in flashed]

        if current is not None and not current.live and current.id in went_live_ids:
            fresh = next((entry for entry in entries if entry.id == current.id), None)
            if fresh is not None:
                return PlaybackDecision(
                    action=PlaybackAction.PLAY,
                    entry=fresh,
                    flash_ids=flash_ids,
                    chime=chime,
                )

        return PlaybackDecision(
            action=PlaybackAction.KEEP,
            entry=current,
            flash_ids=flash_ids,
            chime=chime,
        )
