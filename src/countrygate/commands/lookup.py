"""Command: resolve the visitor's country without blocking."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import click

from countrygate.commands._base import GateCommand

if TYPE_CHECKING:
    from countrygate.commands._context import AppContext


def _refuse_block(country_code: str) -> None:
    msg = f"lookup must not block (got {country_code})"
    raise RuntimeError(msg)


@click.command(
    cls=GateCommand,
    examples="""\
  countrygate lookup
  countrygate --json lookup""",
)
@click.pass_obj
def lookup(app: AppContext) -> None:
    """Resolve the visitor's country code (cache first, then providers)."""
    from countrygate.services.gate import GateService

    gate = GateService.from_settings(app.settings, on_block=_refuse_block, plugins=app.plugins)
    app.emit(asyncio.run(gate.lookup()))
