"""CacheService — inspect and clear the stored location record."""

from __future__ import annotations

from typing import TYPE_CHECKING

from countrygate.services.base import BaseService
from countrygate.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from countrygate.infrastructure.cache import LocationCache


class CacheService(BaseService):
    def __init__(self, cache: LocationCache) -> None:
        super().__init__()
        self._cache = cache

    def show(self) -> ServiceResult:
        """Report the stored record, its age, and whether it is still valid."""
        record = self._cache.peek()
        if record is None:
            return ServiceResult(
                ok=True,
                op="cache_show",
                data={"cached": False, "key": self._cache.key, "ttl_ms": self._cache.ttl_ms},
            )
        return ServiceResult(
            ok=True,
            op="cache_show",
            data={
                "cached": True,
                "key": self._cache.key,
                "country_code": record.country_code,
                "resolved_at": record.resolved_at,
                "age_ms": self._cache.age_ms(record),
                "ttl_ms": self._cache.ttl_ms,
                "valid": self._cache.is_valid(record),
            },
        )

    def clear(self) -> ServiceResult:
        if not self._cache.clear():
            return ServiceResult(
                ok=False,
                op="cache_clear",
                error=ServiceError(
                    code="STORAGE_ERROR",
                    message=f"Could not delete cache record {self._cache.key!r}",
                ),
            )
        return ServiceResult(ok=True, op="cache_clear", data={"key": self._cache.key})
