"""Block action — replace the page with the block notice and halt it.

The gate core only ever calls a :class:`BlockRenderer`.  This module holds
the markup-producing implementation used by real hosts.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from countrygate.infrastructure.templates import build_template_environment

if TYPE_CHECKING:
    from countrygate.config.models import BlockPageConfig
    from countrygate.infrastructure.page import PageDocument

logger = logging.getLogger(__name__)

NOTICE_TEMPLATE = "notice.html.j2"


class BlockRenderer(Protocol):
    """Block action contract.

    Called at most once per page load with the resolved country code.
    After it returns, the page performs no further activity.
    """

    def __call__(self, country_code: str) -> None: ...


class HtmlBlockRenderer:
    """Render the notice template into a :class:`PageDocument`, then stop it."""

    def __init__(
        self,
        document: PageDocument,
        page: BlockPageConfig,
        *,
        root: Path | None = None,
    ) -> None:
        self._document = document
        self._page = page
        self._env = build_template_environment("block", root=root)

    def render_html(self, country_code: str) -> str:
        template = self._env.get_template(NOTICE_TEMPLATE)
        return template.render(page=self._page, country_code=country_code)

    def __call__(self, country_code: str) -> None:
        logger.info("Replacing page with block notice for %s", country_code)
        html = self.render_html(country_code)
        self._document.replace_content(html)
        self._document.stop()
