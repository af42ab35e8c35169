"""
pytest configuration and shared fixtures.

Every test under unit/ runs without network access: the video API, the cache
medium and the media player are replaced by in-memory fakes.

Usage:
    # run every test
    uv run pytest

    # run with coverage
    uv run pytest --cov=src --cov-report=html
"""

from datetime import timedelta

import pytest

from src.core.config import Settings
from src.core.domain.events import EventBus
from src.modules.streams.application.catalog_cache import CatalogCache
from src.modules.streams.application.catalog_source import CatalogSource
from src.modules.streams.application.channel_manager import ChannelManager
from src.modules.streams.application.live_status import LiveStatusRefresher
from src.modules.streams.domain.priority import PriorityRule
from tests.fakes import FakeQueryClient, MemoryCacheBackend

# ============================================
# Async Backend
# ============================================


@pytest.fixture
def anyio_backend() -> str:
    """The application is built on asyncio; run anyio tests on it only."""
    return "asyncio"


# ============================================
# Settings Fixtures
# ============================================


@pytest.fixture
def test_settings() -> Settings:
    """Settings for tests: no credentials needed beyond a dummy key."""
    return Settings(
        ENVIRONMENT="local",
        API_KEY="test-api-key",
        SOURCE_CHANNELS=["channel-a", "channel-b"],
        VIDEO_URLS=[],
        CACHE_BACKEND="file",
        REDIS_URL="redis://localhost:6379/1",
        CONTROL_TOKEN="moderator-token",
        PUBLIC_CONTROLS=False,
    )


# ============================================
# Component Fixtures
# ============================================


@pytest.fixture
def fake_client() -> FakeQueryClient:
    return FakeQueryClient()


@pytest.fixture
def memory_backend() -> MemoryCacheBackend:
    return MemoryCacheBackend()


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def build_manager(fake_client, memory_backend, event_bus):
    """Factory for a ChannelManager over the fakes."""

    def _build(
        channel_ids: list[str] | None = None,
        manual_urls: list[str] | None = None,
        cache_ttl: timedelta | None = None,
    ) -> ChannelManager:
        source = CatalogSource(
            fake_client,
            channel_ids=channel_ids or ["channel-a"],
            priority_rules=[
                PriorityRule.from_pair(r"Mission Control Audio", -1),
                PriorityRule.from_pair(r"^NASA Live: Official Stream of NASA TV$", 1),
            ],
            max_results=5,
            order="rating",
            language="en",
        )
        return ChannelManager(
            source=source,
            cache=CatalogCache(memory_backend, key="cache.json"),
            refresher=LiveStatusRefresher(fake_client),
            event_bus=event_bus,
            manual_urls=manual_urls or [],
            cache_ttl=cache_ttl,
        )

    return _build
