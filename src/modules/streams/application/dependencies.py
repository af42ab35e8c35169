"""Streams module application dependencies."""

from typing import NoReturn

from src.modules.streams.application.channel_manager import ChannelManager
from src.modules.streams.application.playback_controller import PlaybackController


def _missing_dependency(name: str) -> NoReturn:
    raise RuntimeError(f"Missing dependency override for {name}")


async def get_channel_manager() -> ChannelManager:
    _missing_dependency("ChannelManager")


async def get_playback_controller() -> PlaybackController:
    _missing_dependency("PlaybackController")
