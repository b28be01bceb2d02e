"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy plugin loading, cache construction,
and centralized result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from countrygate.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from countrygate.config.settings import GateSettings
    from countrygate.infrastructure.cache import LocationCache
    from countrygate.plugins.manager import PluginManager
    from countrygate.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Plugins are discovered lazily on first use so ``--help`` and
    ``--version`` never import plugin code.
    """

    def __init__(self, settings: GateSettings) -> None:
        self.settings = settings
        self._plugins: PluginManager | None = None

        from countrygate.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def plugins(self) -> PluginManager:
        """The plugin manager (discovered lazily on first access)."""
        if self._plugins is None:
            from countrygate.plugins.manager import PluginManager

            self._plugins = PluginManager()
            local_dir = self.settings.root / ".countrygate" / "plugins"
            self._plugins.discover_and_load(local_dir=local_dir)
        return self._plugins

    def build_cache(self) -> LocationCache:
        """Location cache over the configured JSON storage file."""
        from countrygate.infrastructure.cache import LocationCache
        from countrygate.infrastructure.storage import JsonFileStore

        return LocationCache(
            JsonFileStore(self.settings.storage_path),
            ttl_ms=self.settings.gate.cache_ttl_ms,
            key=self.settings.cache.key,
        )

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
