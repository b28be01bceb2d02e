"""Subcommand modules for countrygate.

Provides register_commands() which uses deferred imports to keep
``countrygate --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the cache group and the standalone commands on the root group."""
    # --- Groups ---
    from countrygate.commands.cache import cache

    cli.add_command(cache)

    # --- Standalone commands ---
    from countrygate.commands.check import check
    from countrygate.commands.lookup import lookup

    cli.add_command(check)
    cli.add_command(lookup)
