"""Player-side state: what is shown, at which volume, with which cues."""

import secrets
from collections.abc import Callable
from dataclasses import dataclass, field

from loguru import logger

from src.core.config import settings
from src.core.domain.events import DomainEvent, DomainEventHandler
from src.core.infrastructure.logging import BusinessEvents
from src.modules.streams.application.channel_manager import ChannelManager
from src.modules.streams.application.playback import (
    PlaybackAction,
    PlaybackDecision,
    PlaybackSelector,
    format_countdown,
    now_ms,
    visible_buttons,
)
from src.modules.streams.domain.entities import VideoEntry
from src.modules.streams.domain.events import CatalogRefreshedEvent
from src.modules.streams.domain.exceptions import (
    ControlNotAllowedError,
    VideoNotFoundError,
)
from src.modules.streams.domain.ports import MediaPlayer

NO_STREAMS_LABEL = "No livestreams found"


@dataclass
class UiCues:
    """Affordances the presentation layer should trigger."""

    flash_ids: list[str] = field(default_factory=list)
    chime: bool = False


class PlaybackController(DomainEventHandler):
    """Apply PlaybackSelector decisions to the media player."""

    def __init__(
        self,
        manager: ChannelManager,
        player: MediaPlayer,
        *,
        selector: PlaybackSelector | None = None,
        volume: float | None = None,
        volume_step: float | None = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.manager = manager
        self.player = player
        self.selector = selector or PlaybackSelector()
        self.volume = volume if volume is not None else settings.DEFAULT_VOLUME
        self.volume_step = (
            volume_step if volume_step is not None else settings.VOLUME_STEP
        )
        self.current: VideoEntry | None = None
        self.last_went_live: set[str] = set()
        self.cues = UiCues()
        self._clock = clock

    @property
    def is_counting_down(self) -> bool:
        return self.current is not None and not self.current.live

    def buttons(self) -> list[VideoEntry]:
        return visible_buttons(self.manager.entries, self._clock())

    def label(self) -> str:
        if not self.manager.entries:
            return NO_STREAMS_LABEL
        if self.is_counting_down and self.current.start_time is not None:
            return format_countdown(self.current.start_time - self._clock())
        return ""

    def is_authorized(self, token: str | None) -> bool:
        if settings.PUBLIC_CONTROLS:
            return True
        if not settings.CONTROL_TOKEN or not token:
            return False
        return secrets.compare_digest(token, settings.CONTROL_TOKEN)

    def require_control(self, token: str | None) -> None:
        if not self.is_authorized(token):
            raise ControlNotAllowedError()

    def start_default(self) -> PlaybackDecision:
        """Play the highest priority live stream, or nothing."""
        entry = self.manager.highest_priority_stream
        if entry is None:
            decision = PlaybackDecision(action=PlaybackAction.STOP)
        else:
            decision = PlaybackDecision(action=PlaybackAction.PLAY, entry=entry)
        self._apply(decision)
        return decision

    def select(self, video_id: str, token: str | None = None) -> PlaybackDecision:
        """Toggle the stream behind a button.

        Only entries that currently have a button can be selected.
        """
        self.require_control(token)
        entry = next((e for e in self.buttons() if e.id == video_id), None)
        if entry is None:
            raise VideoNotFoundError(video_id)

        decision = self.selector.on_select(self.current, entry, self.last_went_live)
        self._apply(decision)
        return decision

    def adjust_volume(self, delta: float, token: str | None = None) -> float:
        self.require_control(token)
        self.volume = round(min(1.0, max(0.0, self.volume + delta)), 2)
        if self.player.active_url is not None:
            self.player.set_volume(self.volume)
        BusinessEvents.volume_changed(volume=self.volume)
        return self.volume

    def step_volume(self, steps: int, token: str | None = None) -> float:
        """Move the volume by whole steps; negative steps turn it down."""
        return self.adjust_volume(steps * self.volume_step, token)

    async def handle(self, event: DomainEvent) -> None:
        if not isinstance(event, CatalogRefreshedEvent):
            return

        self.last_went_live = set(event.went_live)
        buttons = visible_buttons(event.entries, self._clock())
        decision = self.selector.on_refresh(
            self.current, event.entries, event.went_live, buttons
        )
        if decision.action == PlaybackAction.PLAY:
            logger.info(f"Selected stream {decision.entry.id} went live, starting it")
        self._apply(decision)

    def _apply(self, decision: PlaybackDecision) -> None:
        self.cues = UiCues(flash_ids=list(decision.flash_ids), chime=decision.chime)

        if decision.action == PlaybackAction.KEEP:
            return

        if decision.action == PlaybackAction.STOP:
            self.current = None
            self.player.stop()
        elif decision.action == PlaybackAction.COUNTDOWN:
            self.current = decision.entry.model_copy()
            self.player.stop()
        else:
            self.current = decision.entry.model_copy()
            self.player.start(decision.entry.url, self.volume)

        BusinessEvents.playback_changed(
            video_id=self.current.id if self.current else None,
            action=decision.action.value,
        )
