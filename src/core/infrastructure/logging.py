"""Logging configuration with structlog integration.

Two logging channels:
1. loguru: operational and debug logs
2. structlog: structured business events (catalog built, streams went live, ...)
"""

import sys
from typing import Any

import structlog
from loguru import logger

from src.core.config import settings


def setup_logging() -> None:
    """Configure application logging with structlog and loguru."""
    _configure_structlog()
    _configure_loguru()

    logger.info(f"Logging configured with level: {settings.LOG_LEVEL}")


def _configure_structlog() -> None:
    # Human readable locally, JSON everywhere else
    if settings.ENVIRONMENT == "local":
        renderer = structlog.dev.ConsoleRenderer(colors=True)
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.CallsiteParameterAdder(
                [
                    structlog.processors.CallsiteParameter.MODULE,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                    structlog.processors.CallsiteParameter.LINENO,
                ]
            ),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            _get_log_level_number(settings.LOG_LEVEL)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def _configure_loguru() -> None:
    logger.remove()

    logger.add(
        sys.stderr,
        level=settings.LOG_LEVEL,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
    )

    if settings.ENVIRONMENT != "local":
        logger.add(
            "logs/launchwatch_{time:YYYY-MM-DD}.log",
            rotation="00:00",
            retention="30 days",
            level="INFO",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        )


def _get_log_level_number(level: str) -> int:
    levels = {
        "DEBUG": 10,
        "INFO": 20,
        "WARNING": 30,
        "ERROR": 40,
        "CRITICAL": 50,
    }
    return levels.get(level.upper(), 20)


# ============================================================================
# Business event logging
# ============================================================================


class BusinessEvents:
    """Helpers that keep business event names and fields consistent."""

    _log = structlog.get_logger("business.events")

    @classmethod
    def catalog_built(
        cls,
        entries: int,
        channels: int,
        loaded_from: str,
        **extra: Any,
    ) -> None:
        """Catalog became ready, either from cache or from the source API."""
        cls._log.info(
            "catalog_built",
            event_type="catalog",
            entries=entries,
            channels=channels,
            loaded_from=loaded_from,
            **extra,
        )

    @classmethod
    def streams_went_live(
        cls,
        video_ids: list[str],
        **extra: Any,
    ) -> None:
        cls._log.info(
            "streams_went_live",
            event_type="refresh",
            video_ids=video_ids,
            count=len(video_ids),
            **extra,
        )

    @classmethod
    def source_query_failed(
        cls,
        channel_id: str,
        error: str,
        **extra: Any,
    ) -> None:
        cls._log.warning(
            "source_query_failed",
            event_type="source_error",
            channel_id=channel_id,
            error=error,
            **extra,
        )

    @classmethod
    def cache_degraded(
        cls,
        operation: str,
        reason: str,
        **extra: Any,
    ) -> None:
        """Cache read or write failed and the catalog carried on without it."""
        cls._log.warning(
            "cache_degraded",
            event_type="degradation",
            operation=operation,
            reason=reason,
            **extra,
        )

    @classmethod
    def playback_changed(
        cls,
        video_id: str | None,
        action: str,
        **extra: Any,
    ) -> None:
        cls._log.info(
            "playback_changed",
            event_type="playback",
            video_id=video_id,
            action=action,
            **extra,
        )

    @classmethod
    def volume_changed(
        cls,
        volume: float,
        **extra: Any,
    ) -> None:
        cls._log.info(
            "volume_changed",
            event_type="playback",
            volume=round(volume, 2),
            **extra,
        )
