"""Media player adapter that tracks the active stream in memory."""

from loguru import logger


class InMemoryMediaPlayer:
    """Keeps the active stream and its volume for the presentation layer.

    The rendering runtime reads this state through the HTTP surface and
    drives the real video pipeline itself.
    """

    def __init__(self) -> None:
        self._active_url: str | None = None
        self.volume: float | None = None

    @property
    def active_url(self) -> str | None:
        return self._active_url

    def start(self, url: str, volume: float) -> None:
        if self._active_url is not None:
            logger.debug(f"Stopping {self._active_url} before starting {url}")
        self._active_url = url
        self.volume = volume

    def stop(self) -> None:
        self._active_url = None

    def set_volume(self, volume: float) -> None:
        if self._active_url is not None:
            self.volume = volume
