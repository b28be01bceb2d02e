"""BaseService — shared plumbing for gate services.

Services receive an optional :class:`PluginManager` at construction time
and use it to announce lifecycle events.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from countrygate.plugins.manager import PluginManager


class BaseService:
    """Base for service-layer classes that emit plugin events."""

    def __init__(self, *, plugins: PluginManager | None = None) -> None:
        self._plugins = plugins

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str] | None = None,
    ) -> None:
        """Dispatch a lifecycle event. No-op without a plugin manager.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        if self._plugins is None:
            return
        if not self._plugins.dispatch(hook_name, **payload) and warnings is not None:
            warnings.append(f"Event dispatch failed for {hook_name}")
