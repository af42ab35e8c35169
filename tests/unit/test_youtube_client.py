"""Tests for the YouTube Data API client."""

from datetime import UTC, datetime

import httpx
import pytest
from tenacity import wait_none

from src.modules.streams.domain.exceptions import TransientSourceError
from src.modules.streams.infrastructure.youtube_client import YouTubeDataClient

pytestmark = pytest.mark.anyio


def _client(handler, attempts: int = 3) -> YouTubeDataClient:
    return YouTubeDataClient(
        "secret-key",
        base_url="https://yt.test/v3",
        retry_attempts=attempts,
        retry_wait=wait_none(),
        transport=httpx.MockTransport(handler),
    )


def _search_item(video_id: str, title: str, content: str = "live") -> dict:
    return {
        "id": {"kind": "youtube#video", "videoId": video_id},
        "snippet": {
            "title": title,
            "liveBroadcastContent": content,
            "thumbnails": {"default": {"url": f"https://img.test/{video_id}.jpg"}},
        },
    }


class TestSearchEvents:
    async def test_sends_query_and_parses_items(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={
                    "items": [
                        _search_item("abc", "Falcon 9 Launch"),
                        {"id": {"kind": "youtube#channel"}, "snippet": {}},
                    ]
                },
            )

        client = _client(handler)
        results = await client.search_events(
            "UC123", "live", max_results=5, order="rating", language="en"
        )
        await client.close()

        params = seen[0].url.params
        assert seen[0].url.path == "/v3/search"
        assert params["channelId"] == "UC123"
        assert params["eventType"] == "live"
        assert params["type"] == "video"
        assert params["order"] == "rating"
        assert params["relevanceLanguage"] == "en"
        assert params["maxResults"] == "5"
        assert params["key"] == "secret-key"

        assert len(results) == 1
        assert results[0].video_id == "abc"
        assert results[0].thumbnail_url == "https://img.test/abc.jpg"
        assert results[0].live_broadcast_content == "live"

    async def test_truncates_to_max_results(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            items = [_search_item(f"v{i}", f"Video {i}") for i in range(7)]
            return httpx.Response(200, json={"items": items})

        results = await _client(handler).search_events(
            "UC123", "upcoming", max_results=5, order="rating", language="en"
        )

        assert len(results) == 5

    async def test_retries_server_errors(self) -> None:
        calls = {"count": 0}

        def handler(request: httpx.Request) -> httpx.Response:
            calls["count"] += 1
            if calls["count"] < 3:
                return httpx.Response(503)
            return httpx.Response(200, json={"items": []})

        results = await _client(handler).search_events(
            "UC123", "live", max_results=5, order="rating", language="en"
        )

        assert results == []
        assert calls["count"] == 3

    async def test_client_error_is_not_retried(self) -> None:
        calls = {"count": 0}

        def handler(request: httpx.Request) -> httpx.Response:
            calls["count"] += 1
            return httpx.Response(403, json={"error": {"message": "quota"}})

        with pytest.raises(TransientSourceError, match="HTTP 403"):
            await _client(handler).search_events(
                "UC123", "live", max_results=5, order="rating", language="en"
            )
        assert calls["count"] == 1

    async def test_exhausted_retries_raise(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        with pytest.raises(TransientSourceError):
            await _client(handler, attempts=2).search_events(
                "UC123", "live", max_results=5, order="rating", language="en"
            )

    async def test_malformed_payload_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"kind": "youtube#searchListResponse"})

        with pytest.raises(TransientSourceError, match="items"):
            await _client(handler).search_events(
                "UC123", "live", max_results=5, order="rating", language="en"
            )

    async def test_non_json_payload_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>")

        with pytest.raises(TransientSourceError):
            await _client(handler).search_events(
                "UC123", "live", max_results=5, order="rating", language="en"
            )


class TestListVideos:
    async def test_parses_live_streaming_details(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["part"] == "snippet,liveStreamingDetails"
            return httpx.Response(
                200,
                json={
                    "items": [
                        {
                            "id": "abc",
                            "snippet": {
                                "title": "Falcon 9 Launch",
                                "liveBroadcastContent": "upcoming",
                            },
                            "liveStreamingDetails": {
                                "scheduledStartTime": "2025-03-01T18:00:00Z",
                            },
                        }
                    ]
                },
            )

        statuses = await _client(handler).list_videos(["abc"])

        assert len(statuses) == 1
        status = statuses[0]
        assert status.is_live is False
        assert status.scheduled_start_time == datetime(2025, 3, 1, 18, 0, tzinfo=UTC)
        assert status.start_time_ms == int(
            datetime(2025, 3, 1, 18, 0, tzinfo=UTC).timestamp() * 1000
        )

    async def test_chunks_ids_by_fifty(self) -> None:
        chunks: list[list[str]] = []

        def handler(request: httpx.Request) -> httpx.Response:
            ids = request.url.params["id"].split(",")
            chunks.append(ids)
            items = [
                {"id": i, "snippet": {"title": i, "liveBroadcastContent": "live"}}
                for i in ids
            ]
            return httpx.Response(200, json={"items": items})

        ids = [f"v{i}" for i in range(120)]
        statuses = await _client(handler).list_videos(ids)

        assert [len(chunk) for chunk in chunks] == [50, 50, 20]
        assert [status.video_id for status in statuses] == ids

    async def test_any_failed_chunk_fails_whole_call(self) -> None:
        calls = {"count": 0}

        def handler(request: httpx.Request) -> httpx.Response:
            calls["count"] += 1
            if calls["count"] == 2:
                return httpx.Response(400)
            return httpx.Response(200, json={"items": []})

        with pytest.raises(TransientSourceError):
            await _client(handler).list_videos([f"v{i}" for i in range(60)])

    async def test_empty_ids_makes_no_request(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("unexpected request")

        assert await _client(handler).list_videos([]) == []
