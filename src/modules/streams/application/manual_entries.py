"""Operator-configured streams that bypass the query API."""

from src.modules.streams.domain.entities import VideoEntry

YOUTUBE_SCHEME = "youtube://"


def parse_manual_entries(urls: list[str]) -> list[VideoEntry]:
    """Turn configured URLs into always-live, never-persisted entries."""
    urls = [url.strip() for url in urls if url and url.strip()]
    return [
        VideoEntry(
            index=i,
            id=url.removeprefix(YOUTUBE_SCHEME),
            name=f"Manual Video {i}",
            url=url,
            thumbnail_url=None,
            live=True,
            manually_added=True,
        )
        for i, url in enumerate(urls)
    ]
