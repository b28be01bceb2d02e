"""Shared Jinja2 template loading with per-project override support."""

from __future__ import annotations

from pathlib import Path

from jinja2 import (
    BaseLoader,
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    PackageLoader,
    select_autoescape,
)


def build_template_environment(group: str, *, root: Path | None = None) -> Environment:
    """Build a Jinja2 environment with user overrides before packaged defaults.

    User overrides are loaded from ``.countrygate/templates/`` inside the
    project root.  Both a namespaced directory (for example
    ``.countrygate/templates/block/``) and the shared root are supported.
    """

    loaders: list[BaseLoader] = []
    if root is not None:
        template_root = root / ".countrygate" / "templates"
        loaders.append(FileSystemLoader([str(template_root / group), str(template_root)]))

    loaders.append(PackageLoader("countrygate", f"templates/{group}"))
    return Environment(
        loader=ChoiceLoader(loaders),
        autoescape=select_autoescape(["html", "html.j2"]),
        keep_trailing_newline=True,
    )
