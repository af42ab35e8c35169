"""Tests for the playback controller."""

import pytest

from src.core.config import settings
from src.modules.streams.application.playback import PlaybackAction
from src.modules.streams.application.playback_controller import (
    NO_STREAMS_LABEL,
    PlaybackController,
)
from src.modules.streams.domain.events import CatalogRefreshedEvent
from src.modules.streams.domain.exceptions import (
    ControlNotAllowedError,
    VideoNotFoundError,
)
from src.modules.streams.infrastructure.media_player import InMemoryMediaPlayer
from tests.fakes import search_result, video_status

pytestmark = pytest.mark.anyio

NOW = 1_700_000_000_000
TOKEN = "moderator-token"


@pytest.fixture(autouse=True)
def restricted_controls(monkeypatch) -> None:
    monkeypatch.setattr(settings, "CONTROL_TOKEN", TOKEN)
    monkeypatch.setattr(settings, "PUBLIC_CONTROLS", False)


@pytest.fixture
async def manager(build_manager, fake_client):
    fake_client.searches = {
        ("channel-a", "live"): [search_result("live-1", "Falcon 9 Launch")],
        ("channel-a", "upcoming"): [search_result("42", "Starship Flight", "upcoming")],
    }
    fake_client.statuses = {
        "live-1": video_status("live-1", "Falcon 9 Launch"),
        "42": video_status("42", "Starship Flight", "upcoming"),
    }
    manager = build_manager()
    await manager.initialize()
    manager.find("42").start_time = NOW + 90 * 1000
    return manager


@pytest.fixture
def player() -> InMemoryMediaPlayer:
    return InMemoryMediaPlayer()


@pytest.fixture
def controller(manager, player, event_bus) -> PlaybackController:
    controller = PlaybackController(manager, player, volume=0.2, clock=lambda: NOW)
    event_bus.subscribe(CatalogRefreshedEvent, controller)
    return controller


class TestStartDefault:
    async def test_plays_highest_priority_live_stream(
        self, controller, player
    ) -> None:
        decision = controller.start_default()

        assert decision.action == PlaybackAction.PLAY
        assert player.active_url == "youtube://live-1"
        assert player.volume == 0.2

    async def test_no_live_stream_stops(self, build_manager, player) -> None:
        empty = build_manager()
        await empty.initialize()
        controller = PlaybackController(empty, player, clock=lambda: NOW)

        decision = controller.start_default()

        assert decision.action == PlaybackAction.STOP
        assert player.active_url is None
        assert controller.label() == NO_STREAMS_LABEL


class TestSelect:
    async def test_requires_moderator_token(self, controller) -> None:
        with pytest.raises(ControlNotAllowedError):
            controller.select("live-1", "wrong-token")
        with pytest.raises(ControlNotAllowedError):
            controller.select("live-1", None)

    async def test_public_controls_skip_token(self, controller, monkeypatch) -> None:
        monkeypatch.setattr(settings, "PUBLIC_CONTROLS", True)

        assert controller.select("live-1").action == PlaybackAction.PLAY

    async def test_unknown_video(self, controller) -> None:
        with pytest.raises(VideoNotFoundError):
            controller.select("missing", TOKEN)

    async def test_stream_without_button_cannot_be_selected(
        self, controller, manager, player
    ) -> None:
        manager.find("42").start_time = NOW + 3 * 60 * 60 * 1000

        with pytest.raises(VideoNotFoundError):
            controller.select("42", TOKEN)
        assert player.active_url is None
        assert controller.current is None

    async def test_clicking_playing_stream_stops_it(self, controller, player) -> None:
        controller.select("live-1", TOKEN)

        decision = controller.select("live-1", TOKEN)

        assert decision.action == PlaybackAction.STOP
        assert player.active_url is None
        assert controller.current is None

    async def test_upcoming_stream_shows_countdown(self, controller, player) -> None:
        controller.start_default()

        decision = controller.select("42", TOKEN)

        assert decision.action == PlaybackAction.COUNTDOWN
        assert player.active_url is None
        assert controller.is_counting_down
        assert controller.label() == "0:01:30"


class TestRefreshHandling:
    async def test_waiting_selection_plays_when_live(
        self, controller, manager, fake_client, player
    ) -> None:
        controller.select("42", TOKEN)

        fake_client.statuses["42"] = video_status("42", "Starship Flight")
        await manager.refresh()

        assert player.active_url == "youtube://42"
        assert controller.current.live is True
        assert "42" in controller.cues.flash_ids
        assert controller.cues.chime is True

    async def test_other_stream_going_live_keeps_playback(
        self, controller, manager, fake_client, player
    ) -> None:
        controller.start_default()

        fake_client.statuses["42"] = video_status("42", "Starship Flight")
        await manager.refresh()

        assert player.active_url == "youtube://live-1"
        assert controller.cues.flash_ids == ["42"]
        assert controller.cues.chime is False


class TestVolume:
    async def test_adjusts_and_applies_to_active_stream(
        self, controller, player
    ) -> None:
        controller.start_default()

        assert controller.adjust_volume(0.1, TOKEN) == 0.3
        assert player.volume == 0.3

    async def test_volume_is_clamped(self, controller) -> None:
        assert controller.adjust_volume(-0.5, TOKEN) == 0.0
        assert controller.adjust_volume(2.0, TOKEN) == 1.0

    async def test_step_volume(self, controller) -> None:
        assert controller.step_volume(1, TOKEN) == 0.3
        assert controller.step_volume(-3, TOKEN) == 0.0

    async def test_requires_moderator_token(self, controller) -> None:
        with pytest.raises(ControlNotAllowedError):
            controller.adjust_volume(0.1, None)
        assert controller.volume == 0.2
