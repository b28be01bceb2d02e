"""Tests for LocationCache — TTL validity, lazy purge, and fail-open behaviour."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from countrygate.domain.errors import StorageError
from countrygate.infrastructure.cache import DEFAULT_CACHE_KEY, LocationCache
from countrygate.infrastructure.storage import JsonFileStore, MemoryStore
from tests.conftest import DAY_MS, NOW_MS, FakeClock, stored_record


class BrokenStore:
    """Store whose every operation fails."""

    def get(self, key: str) -> str | None:
        raise StorageError("storage unavailable")

    def set(self, key: str, value: str) -> None:
        raise StorageError("quota exceeded")

    def delete(self, key: str) -> None:
        raise StorageError("storage unavailable")


class TestRead:
    def test_empty_is_miss(self, cache: LocationCache) -> None:
        assert cache.read() is None

    def test_fresh_record_hits(self, store: MemoryStore, cache: LocationCache) -> None:
        store.set(DEFAULT_CACHE_KEY, stored_record("CN", NOW_MS - 1000))
        record = cache.read()
        assert record is not None
        assert record.country_code == "CN"

    def test_expired_record_purged(self, store: MemoryStore, cache: LocationCache) -> None:
        store.set(DEFAULT_CACHE_KEY, stored_record("CN", NOW_MS - DAY_MS))
        assert cache.read() is None
        assert DEFAULT_CACHE_KEY not in store

    def test_expires_as_clock_advances(
        self, store: MemoryStore, cache: LocationCache, clock: FakeClock
    ) -> None:
        cache.write("RU")
        assert cache.read() is not None
        clock.advance(DAY_MS)
        assert cache.read() is None
        assert DEFAULT_CACHE_KEY not in store

    def test_future_record_purged(self, store: MemoryStore, cache: LocationCache) -> None:
        store.set(DEFAULT_CACHE_KEY, stored_record("CN", NOW_MS + 60_000))
        assert cache.read() is None
        assert DEFAULT_CACHE_KEY not in store

    @pytest.mark.parametrize("ttl", [0, -1])
    def test_disabled_ttl_is_miss(self, store: MemoryStore, clock: FakeClock, ttl: int) -> None:
        store.set(DEFAULT_CACHE_KEY, stored_record("CN", NOW_MS))
        cache = LocationCache(store, ttl_ms=ttl, clock=clock)
        assert cache.read() is None

    @pytest.mark.parametrize(
        "raw",
        ["{broken", "[]", json.dumps({"countryCode": "China", "timestamp": NOW_MS})],
    )
    def test_malformed_record_is_miss(
        self, store: MemoryStore, cache: LocationCache, raw: str
    ) -> None:
        store.set(DEFAULT_CACHE_KEY, raw)
        assert cache.read() is None

    def test_storage_failure_is_miss(self, clock: FakeClock) -> None:
        cache = LocationCache(BrokenStore(), ttl_ms=DAY_MS, clock=clock)
        assert cache.read() is None

    def test_undecodable_storage_file_is_miss(self, tmp_path: Path, clock: FakeClock) -> None:
        path = tmp_path / "storage.json"
        path.write_bytes(b'{"visitor_country_data": "\xff\xfe"}')
        cache = LocationCache(JsonFileStore(path), ttl_ms=DAY_MS, clock=clock)
        assert cache.read() is None
        assert cache.peek() is None

    def test_infinite_timestamp_is_miss(self, store: MemoryStore, cache: LocationCache) -> None:
        store.set(DEFAULT_CACHE_KEY, '{"countryCode": "US", "timestamp": Infinity}')
        assert cache.read() is None
        assert cache.write("CN") is not None
        record = cache.read()
        assert record is not None
        assert record.country_code == "CN"

    def test_custom_key(self, store: MemoryStore, clock: FakeClock) -> None:
        cache = LocationCache(store, ttl_ms=DAY_MS, key="geo", clock=clock)
        cache.write("DE")
        assert "geo" in store
        assert DEFAULT_CACHE_KEY not in store


class TestWrite:
    def test_writes_storage_shape(self, store: MemoryStore, cache: LocationCache) -> None:
        record = cache.write("de")
        assert record is not None
        assert record.country_code == "DE"
        assert json.loads(store.get(DEFAULT_CACHE_KEY) or "") == {
            "countryCode": "DE",
            "timestamp": NOW_MS,
        }

    def test_replaces_wholesale(
        self, store: MemoryStore, cache: LocationCache, clock: FakeClock
    ) -> None:
        cache.write("DE")
        clock.advance(500)
        cache.write("FR")
        record = cache.read()
        assert record is not None
        assert record.country_code == "FR"
        assert record.resolved_at == NOW_MS + 500

    def test_zero_ttl_never_writes(self, store: MemoryStore, clock: FakeClock) -> None:
        cache = LocationCache(store, ttl_ms=0, clock=clock)
        assert cache.write("CN") is None
        assert DEFAULT_CACHE_KEY not in store

    def test_storage_failure_swallowed(self, clock: FakeClock) -> None:
        cache = LocationCache(BrokenStore(), ttl_ms=DAY_MS, clock=clock)
        assert cache.write("CN") is None

    def test_invalid_code_not_written(self, store: MemoryStore, cache: LocationCache) -> None:
        assert cache.write("???") is None
        assert DEFAULT_CACHE_KEY not in store


class TestInspection:
    def test_peek_ignores_ttl(self, store: MemoryStore, cache: LocationCache) -> None:
        store.set(DEFAULT_CACHE_KEY, stored_record("CN", NOW_MS - 2 * DAY_MS))
        record = cache.peek()
        assert record is not None
        assert cache.is_valid(record) is False
        assert cache.age_ms(record) == 2 * DAY_MS
        assert DEFAULT_CACHE_KEY in store

    def test_clear(self, store: MemoryStore, cache: LocationCache) -> None:
        cache.write("CN")
        assert cache.clear() is True
        assert DEFAULT_CACHE_KEY not in store

    def test_clear_failure(self, clock: FakeClock) -> None:
        cache = LocationCache(BrokenStore(), ttl_ms=DAY_MS, clock=clock)
        assert cache.clear() is False
