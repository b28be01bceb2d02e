"""Command group: inspect and clear the cached country record."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from countrygate.commands._base import GateGroup

if TYPE_CHECKING:
    from countrygate.commands._context import AppContext


@click.group(
    cls=GateGroup,
    examples="""\
  countrygate cache show
  countrygate cache clear""",
)
def cache() -> None:
    """Inspect or clear the cached country code."""


@cache.command()
@click.pass_obj
def show(app: AppContext) -> None:
    """Show the cached record and whether it is still valid."""
    from countrygate.services.cache import CacheService

    app.emit(CacheService(app.build_cache()).show())


@cache.command()
@click.pass_obj
def clear(app: AppContext) -> None:
    """Delete the cached record so the next check queries the providers."""
    from countrygate.services.cache import CacheService

    app.emit(CacheService(app.build_cache()).clear())
