"""Gate data models: the cached location record and per-run decision types.

``CachedLocation`` is the only state that outlives a single page load.
Everything else here is computed once per run and discarded.
"""

from __future__ import annotations

import math
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, field_validator

from countrygate.domain.country import normalize_country_code


class GateOutcome(StrEnum):
    """Terminal result of one gate run."""

    ALLOWED = "allowed"
    BLOCKED = "blocked"
    ALLOWED_ON_FAILURE = "allowed_on_failure"


class GateState(StrEnum):
    """Per-run state machine: idle -> resolving -> one terminal outcome."""

    IDLE = "idle"
    RESOLVING = "resolving"
    ALLOWED = "allowed"
    BLOCKED = "blocked"
    ALLOWED_ON_FAILURE = "allowed_on_failure"

    @property
    def is_terminal(self) -> bool:
        return self not in (GateState.IDLE, GateState.RESOLVING)


class ResolutionSource(StrEnum):
    """Where a resolved country code came from."""

    CACHE = "cache"
    PRIMARY = "primary"
    FALLBACK = "fallback"


class CachedLocation(BaseModel):
    """A persisted ``(country_code, resolved_at)`` record.

    Attributes:
        country_code: Uppercase ISO 3166-1 alpha-2 code.
        resolved_at: Acquisition time in epoch milliseconds.
    """

    model_config = {"frozen": True}

    country_code: str
    resolved_at: int

    @field_validator("country_code")
    @classmethod
    def _normalize_code(cls, value: str) -> str:
        code = normalize_country_code(value)
        if code is None:
            msg = f"not a country code: {value!r}"
            raise ValueError(msg)
        return code

    def age_ms(self, now_ms: int) -> int:
        return now_ms - self.resolved_at

    def is_valid(self, now_ms: int, ttl_ms: int) -> bool:
        """True only while ``0 <= now - resolved_at < ttl``.

        A non-positive TTL disables caching, and a record stamped in the
        future (clock skew) is never trusted.
        """
        if ttl_ms <= 0:
            return False
        age = self.age_ms(now_ms)
        return 0 <= age < ttl_ms

    def to_storage(self) -> dict[str, Any]:
        """Serialized storage shape: ``{"countryCode", "timestamp"}``."""
        return {"countryCode": self.country_code, "timestamp": self.resolved_at}

    @classmethod
    def from_storage(cls, data: Any) -> CachedLocation:
        """Parse the storage shape.

        Raises:
            ValueError: If *data* is not a well-formed record.
        """
        if not isinstance(data, dict):
            msg = f"expected an object, got {type(data).__name__}"
            raise ValueError(msg)
        timestamp = data.get("timestamp")
        if (
            isinstance(timestamp, bool)
            or not isinstance(timestamp, int | float)
            or (isinstance(timestamp, float) and not math.isfinite(timestamp))
        ):
            msg = f"invalid timestamp: {timestamp!r}"
            raise ValueError(msg)
        return cls(country_code=data.get("countryCode"), resolved_at=int(timestamp))


class BlockDecision(BaseModel):
    """Evaluator verdict for one resolved code."""

    model_config = {"frozen": True}

    country_code: str
    blocked: bool
