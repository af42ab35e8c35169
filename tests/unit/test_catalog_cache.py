"""Tests for TTL-aware catalog persistence."""

import json
from datetime import UTC, datetime, timedelta

import pytest

from src.modules.streams.application.catalog_cache import CacheStatus, CatalogCache
from src.modules.streams.domain.exceptions import CacheReadError
from src.modules.streams.domain.ports import CacheBlob
from tests.fakes import MemoryCacheBackend, make_entry

pytestmark = pytest.mark.anyio

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)
SIX_HOURS = timedelta(hours=6)


def _cache(backend: MemoryCacheBackend) -> CatalogCache:
    return CatalogCache(backend, key="cache.json", clock=lambda: NOW)


def _store(backend: MemoryCacheBackend, payload: object, age: timedelta) -> None:
    backend.blobs["cache.json"] = CacheBlob(
        data=json.dumps(payload).encode("utf-8"),
        last_modified=NOW - age,
    )


class TestLoadIfFresh:
    async def test_missing_cache_is_not_found(self) -> None:
        lookup = await _cache(MemoryCacheBackend()).load_if_fresh(SIX_HOURS)

        assert lookup.status == CacheStatus.NOT_FOUND
        assert lookup.entries == []

    async def test_seven_hour_old_cache_is_stale(self) -> None:
        backend = MemoryCacheBackend()
        _store(backend, [make_entry("a").to_cache_dict()], timedelta(hours=7))

        lookup = await _cache(backend).load_if_fresh(SIX_HOURS)

        assert lookup.status == CacheStatus.STALE
        assert lookup.entries == []
        assert lookup.age == timedelta(hours=7)

    async def test_age_equal_to_ttl_is_stale(self) -> None:
        backend = MemoryCacheBackend()
        _store(backend, [make_entry("a").to_cache_dict()], SIX_HOURS)

        lookup = await _cache(backend).load_if_fresh(SIX_HOURS)

        assert lookup.status == CacheStatus.STALE

    async def test_fresh_cache_decodes_entries(self) -> None:
        backend = MemoryCacheBackend()
        payload = [
            make_entry("a", index=0, live=True, priority=-1).to_cache_dict(),
            make_entry("b", index=1, live=False, start_time=1_700_000_000_000)
            .to_cache_dict(),
        ]
        _store(backend, payload, timedelta(hours=1))

        lookup = await _cache(backend).load_if_fresh(SIX_HOURS)

        assert lookup.is_fresh
        assert [entry.id for entry in lookup.entries] == ["a", "b"]
        assert lookup.entries[0].priority == -1
        assert lookup.entries[1].start_time == 1_700_000_000_000
        assert all(not entry.manually_added for entry in lookup.entries)

    async def test_stale_payload_is_not_decoded(self) -> None:
        backend = MemoryCacheBackend()
        backend.blobs["cache.json"] = CacheBlob(
            data=b"not json", last_modified=NOW - timedelta(hours=8)
        )

        lookup = await _cache(backend).load_if_fresh(SIX_HOURS)

        assert lookup.status == CacheStatus.STALE

    async def test_corrupt_payload_is_not_found(self) -> None:
        backend = MemoryCacheBackend()
        backend.blobs["cache.json"] = CacheBlob(
            data=b"{broken", last_modified=NOW - timedelta(minutes=5)
        )

        lookup = await _cache(backend).load_if_fresh(SIX_HOURS)

        assert lookup.status == CacheStatus.NOT_FOUND

    async def test_non_array_payload_is_not_found(self) -> None:
        backend = MemoryCacheBackend()
        _store(backend, {"id": "a"}, timedelta(minutes=5))

        lookup = await _cache(backend).load_if_fresh(SIX_HOURS)

        assert lookup.status == CacheStatus.NOT_FOUND

    async def test_read_error_is_not_found(self) -> None:
        class BrokenBackend(MemoryCacheBackend):
            async def get(self, key: str) -> CacheBlob:
                raise CacheReadError("disk on fire")

        lookup = await _cache(BrokenBackend()).load_if_fresh(SIX_HOURS)

        assert lookup.status == CacheStatus.NOT_FOUND


class TestSave:
    async def test_round_trip_drops_manual_entries(self) -> None:
        backend = MemoryCacheBackend()
        writer = CatalogCache(backend, key="cache.json")
        entries = [
            make_entry("a", index=0, name="Alpha", live=True),
            make_entry("b", index=1, name="Bravo", live=False, start_time=42),
            make_entry("m", index=2, manually_added=True),
        ]

        assert await writer.save(entries) is True
        lookup = await writer.load_if_fresh(SIX_HOURS)

        assert lookup.is_fresh
        assert [entry.id for entry in lookup.entries] == ["a", "b"]
        assert lookup.entries[1].start_time == 42

    async def test_persisted_form_uses_camel_case(self) -> None:
        backend = MemoryCacheBackend()

        await CatalogCache(backend, key="cache.json").save(
            [make_entry("a", start_time=7)]
        )

        stored = json.loads(backend.blobs["cache.json"].data)
        assert stored[0]["startTime"] == 7
        assert "thumbnailUrl" in stored[0]
        assert "manuallyAdded" not in stored[0]

    async def test_write_failure_returns_false(self) -> None:
        backend = MemoryCacheBackend()
        backend.fail_writes = True

        assert await _cache(backend).save([make_entry("a")]) is False
