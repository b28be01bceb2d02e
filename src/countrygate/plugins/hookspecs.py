"""Pluggy hook specifications for gate lifecycle events.

Hooks are observers: they are called synchronously after the fact and
cannot change a decision.
"""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("countrygate")
hookimpl = pluggy.HookimplMarker("countrygate")


class CountryGateHookSpec:
    """Hook specifications for the countrygate plugin system."""

    @hookspec
    def post_resolve(self, country_code: str, source: str) -> None:
        """Called after a country code is resolved (source: cache, primary, fallback)."""

    @hookspec
    def post_decision(self, outcome: str, country_code: str | None) -> None:
        """Called once the gate reaches a terminal outcome."""
