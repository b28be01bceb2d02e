"""Fault taxonomy for the gate pipeline.

Only ``ResolutionFailure`` crosses a component boundary, and it stops at
the decision executor.  Cache and provider faults are recovered where they
occur.
"""

from __future__ import annotations


class GateError(Exception):
    """Base class for countrygate errors."""


class StorageError(GateError):
    """The key-value store could not be read or written."""


class CacheFault(GateError):
    """A cached record could not be read, parsed, or persisted."""


class ProviderFault(GateError):
    """A geolocation provider call failed.

    Covers transport errors, timeouts, non-2xx statuses, and payloads
    without a usable country field.
    """

    def __init__(self, provider: str, reason: str) -> None:
        super().__init__(f"{provider}: {reason}")
        self.provider = provider
        self.reason = reason


class ResolutionFailure(GateError):
    """Both providers failed and there was no usable cached value."""

    def __init__(self, primary_fault: ProviderFault, fallback_fault: ProviderFault) -> None:
        super().__init__(f"all providers failed ({primary_fault}; {fallback_fault})")
        self.primary_fault = primary_fault
        self.fallback_fault = fallback_fault


class PageHalted(GateError):
    """Activity was attempted on a page after the block action stopped it."""
