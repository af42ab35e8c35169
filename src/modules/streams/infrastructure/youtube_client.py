"""YouTube Data API v3 client."""

from __future__ import annotations

from datetime import datetime
from typing import Any

import httpx
from loguru import logger
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from src.core.config import settings
from src.modules.streams.domain.exceptions import TransientSourceError
from src.modules.streams.domain.ports import EventType, SearchResult, VideoStatus

# videos.list accepts at most 50 ids per call
MAX_IDS_PER_REQUEST = 50


def _is_retryable(exc: BaseException) -> bool:
    if isinstance(exc, httpx.HTTPStatusError):
        status_code = exc.response.status_code
        return status_code == 429 or status_code >= 500
    return isinstance(exc, httpx.TransportError)


class YouTubeDataClient:
    """Query live/upcoming events and live-streaming details over HTTPS."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str | None = None,
        timeout_sec: float | None = None,
        retry_attempts: int | None = None,
        retry_wait: wait_base | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = (base_url or settings.YOUTUBE_API_BASE_URL).rstrip("/")
        self.timeout_sec = (
            timeout_sec if timeout_sec is not None else settings.YOUTUBE_TIMEOUT_SEC
        )
        self.retry_attempts = (
            retry_attempts
            if retry_attempts is not None
            else settings.YOUTUBE_RETRY_ATTEMPTS
        )
        self.retry_wait = retry_wait or wait_exponential(multiplier=1, min=1, max=10)
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Shared HTTP client, created on first use."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout_sec,
                follow_redirects=False,
                transport=self._transport,
                headers={
                    "User-Agent": settings.YOUTUBE_USER_AGENT,
                    "Accept": "application/json",
                },
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def search_events(
        self,
        channel_id: str,
        event_type: EventType,
        *,
        max_results: int,
        order: str,
        language: str,
    ) -> list[SearchResult]:
        payload = await self._get(
            "/search",
            {
                "part": "snippet",
                "channelId": channel_id,
                "type": "video",
                "eventType": event_type,
                "order": order,
                "relevanceLanguage": language,
                "maxResults": max_results,
            },
        )
        return self._parse_search_items(payload)[:max_results]

    async def list_videos(self, video_ids: list[str]) -> list[VideoStatus]:
        """Fetch snippet and live-streaming details for the given ids."""
        statuses: list[VideoStatus] = []
        for start in range(0, len(video_ids), MAX_IDS_PER_REQUEST):
            chunk = video_ids[start : start + MAX_IDS_PER_REQUEST]
            payload = await self._get(
                "/videos",
                {
                    "part": "snippet,liveStreamingDetails",
                    "id": ",".join(chunk),
                    "maxResults": len(chunk),
                },
            )
            statuses.extend(self._parse_video_items(payload))
        return statuses

    async def _get(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        params = {**params, "key": self.api_key}
        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_exception(_is_retryable),
                stop=stop_after_attempt(self.retry_attempts),
                wait=self.retry_wait,
                reraise=True,
            ):
                with attempt:
                    response = await self.client.get(path, params=params)
                    response.raise_for_status()
                    payload = response.json()
        except httpx.TimeoutException as exc:
            logger.warning(f"YouTube API timeout on {path}: {exc}")
            raise TransientSourceError(f"Timeout: {exc}") from exc
        except httpx.HTTPStatusError as exc:
            logger.warning(
                f"YouTube API HTTP error on {path}: {exc.response.status_code}"
            )
            raise TransientSourceError(f"HTTP {exc.response.status_code}") from exc
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning(f"YouTube API error on {path}: {exc}")
            raise TransientSourceError(str(exc)) from exc

        if not isinstance(payload, dict):
            raise TransientSourceError("Response payload must be an object")
        return payload

    @staticmethod
    def _items(payload: dict[str, Any]) -> list[dict[str, Any]]:
        items = payload.get("items")
        if not isinstance(items, list):
            raise TransientSourceError("Response missing items list")
        return [item for item in items if isinstance(item, dict)]

    @classmethod
    def _parse_search_items(cls, payload: dict[str, Any]) -> list[SearchResult]:
        results: list[SearchResult] = []
        for item in cls._items(payload):
            id_value = item.get("id")
            video_id = id_value.get("videoId") if isinstance(id_value, dict) else None
            snippet = item.get("snippet")
            if not isinstance(video_id, str) or not isinstance(snippet, dict):
                continue

            title = snippet.get("title")
            if not isinstance(title, str):
                continue

            results.append(
                SearchResult(
                    video_id=video_id,
                    title=title,
                    thumbnail_url=cls._default_thumbnail(snippet),
                    live_broadcast_content=str(
                        snippet.get("liveBroadcastContent") or "none"
                    ),
                )
            )
        return results

    @classmethod
    def _parse_video_items(cls, payload: dict[str, Any]) -> list[VideoStatus]:
        statuses: list[VideoStatus] = []
        for item in cls._items(payload):
            video_id = item.get("id")
            snippet = item.get("snippet")
            if not isinstance(video_id, str) or not isinstance(snippet, dict):
                continue

            title = snippet.get("title")
            if not isinstance(title, str):
                continue

            details = item.get("liveStreamingDetails")
            if not isinstance(details, dict):
                details = {}

            statuses.append(
                VideoStatus(
                    video_id=video_id,
                    title=title,
                    live_broadcast_content=str(
                        snippet.get("liveBroadcastContent") or "none"
                    ),
                    actual_start_time=cls._parse_datetime(
                        details.get("actualStartTime")
                    ),
                    scheduled_start_time=cls._parse_datetime(
                        details.get("scheduledStartTime")
                    ),
                )
            )
        return statuses

    @staticmethod
    def _default_thumbnail(snippet: dict[str, Any]) -> str | None:
        thumbnails = snippet.get("thumbnails")
        if not isinstance(thumbnails, dict):
            return None
        default = thumbnails.get("default")
        if not isinstance(default, dict):
            return None
        url = default.get("url")
        return url if isinstance(url, str) else None

    @staticmethod
    def _parse_datetime(value: object) -> datetime | None:
        if not isinstance(value, str) or not value:
            return None
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
