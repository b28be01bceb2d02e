"""Command: run the gate once against a simulated page load."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING

import click

from countrygate.commands._base import GateCommand

if TYPE_CHECKING:
    from countrygate.commands._context import AppContext
    from countrygate.services.result import ServiceResult


@click.command(
    cls=GateCommand,
    examples="""\
  countrygate check
  countrygate check --page-out notice.html
  countrygate --json check""",
)
@click.option(
    "--page-out",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    default=None,
    help="Write the block notice here when the visitor is blocked.",
)
@click.pass_obj
def check(app: AppContext, page_out: Path | None) -> None:
    """Detect the visitor's country and apply the blocklist."""
    from countrygate.infrastructure.block_page import HtmlBlockRenderer
    from countrygate.infrastructure.page import PageDocument
    from countrygate.services.bootstrap import GateBootstrap
    from countrygate.services.gate import GateService

    document = PageDocument()
    renderer = HtmlBlockRenderer(document, app.settings.block_page, root=app.settings.root)
    gate = GateService.from_settings(app.settings, on_block=renderer, plugins=app.plugins)

    async def _page_load() -> ServiceResult:
        bootstrap = GateBootstrap(gate)
        bootstrap.install(document)
        document.mark_interactive()
        return await bootstrap.wait()

    result = asyncio.run(_page_load())
    if page_out is not None and document.halted:
        page_out.parent.mkdir(parents=True, exist_ok=True)
        page_out.write_text(document.content, encoding="utf-8")
    app.emit(result)
