"""LocationCache — the single persisted ``(country_code, timestamp)`` record.

INVARIANT: The cache fails open.  Storage and parse errors are logged and
treated as a miss; a failed write never fails the resolution pipeline.

A record is valid only while ``0 <= now - resolved_at < ttl``.  With
``ttl <= 0`` caching is disabled: every read is a miss and nothing is
written.  Invalid records are deleted lazily on read and replaced
wholesale on write.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable

from countrygate.domain.errors import CacheFault, StorageError
from countrygate.domain.models import CachedLocation
from countrygate.infrastructure.storage import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_CACHE_KEY = "visitor_country_data"


def now_ms() -> int:
    """Wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


class LocationCache:
    """Read-through / write-through cache over any :class:`KeyValueStore`."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        ttl_ms: int,
        key: str = DEFAULT_CACHE_KEY,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._store = store
        self.ttl_ms = ttl_ms
        self.key = key
        self._clock = clock

    @property
    def enabled(self) -> bool:
        return self.ttl_ms > 0

    def _load(self) -> CachedLocation | None:
        """Fetch and parse the stored record.

        Raises:
            CacheFault: If storage fails or the record is malformed.
        """
        try:
            raw = self._store.get(self.key)
        except (StorageError, OSError) as exc:
            raise CacheFault(str(exc)) from exc
        if raw is None:
            return None
        try:
            return CachedLocation.from_storage(json.loads(raw))
        except ValueError as exc:
            msg = f"Malformed cache record under {self.key!r}: {exc}"
            raise CacheFault(msg) from exc

    def read(self) -> CachedLocation | None:
        """Return the cached location if present and still valid."""
        try:
            record = self._load()
        except CacheFault as exc:
            logger.warning("Cache read failed, treating as miss: %s", exc)
            return None
        if record is None:
            return None

        if record.is_valid(self._clock(), self.ttl_ms):
            logger.debug("Cache hit: %s", record.country_code)
            return record

        logger.debug("Cache record expired or disabled, purging: %s", record.country_code)
        self._purge()
        return None

    def peek(self) -> CachedLocation | None:
        """Return the stored record without TTL checks or purging."""
        try:
            return self._load()
        except CacheFault as exc:
            logger.warning("Cache peek failed: %s", exc)
            return None

    def write(self, country_code: str) -> CachedLocation | None:
        """Replace the stored record with *country_code* stamped now.

        Returns the stored record, or None when caching is disabled or the
        write failed.
        """
        if not self.enabled:
            return None
        try:
            record = CachedLocation(country_code=country_code, resolved_at=self._clock())
            self._store.set(self.key, json.dumps(record.to_storage()))
        except (StorageError, OSError, ValueError) as exc:
            logger.warning("Cache write failed for %s: %s", country_code, exc)
            return None
        logger.info("Cached country code %s", record.country_code)
        return record

    def clear(self) -> bool:
        """Delete the stored record. Returns False if storage failed."""
        return self._purge()

    def age_ms(self, record: CachedLocation) -> int:
        return record.age_ms(self._clock())

    def is_valid(self, record: CachedLocation) -> bool:
        return record.is_valid(self._clock(), self.ttl_ms)

    def _purge(self) -> bool:
        try:
            self._store.delete(self.key)
        except (StorageError, OSError) as exc:
            logger.warning("Cache purge failed: %s", exc)
            return False
        return True
