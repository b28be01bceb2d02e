"""Rich/JSON output helpers.

The CLI renders ServiceResult for humans (Rich text, colors) or machines
(--json).  The formatter layer adapts ServiceResult to the requested
output mode.
"""

from __future__ import annotations

import json as _json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from rich.text import Text

from countrygate.output.console import create_console, get_output, style_for_outcome

if TYPE_CHECKING:
    from countrygate.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def _format_value(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return _json.dumps(value, separators=(",", ":"))
    if value is None:
        return "-"
    return str(value)


def _render_human(result: ServiceResult) -> str:
    console = create_console()
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        console.print(Text("ERROR", style="gate.error"), Text(f"  {result.op} — {msg}"))
        return get_output(console).rstrip("\n")

    console.print(Text("OK", style="gate.ok"), Text(f"  {result.op}", style="gate.op"))
    for key, value in result.data.items():
        style = style_for_outcome(str(value)) if key == "outcome" else ""
        console.print(Text(f"  {key}: ", style="gate.key"), Text(_format_value(value), style=style))
    return get_output(console).rstrip("\n")


def _render_quiet(result: ServiceResult) -> str:
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"
    outcome = result.data.get("outcome")
    if outcome is not None:
        return str(outcome)
    code = result.data.get("country_code")
    return str(code) if code else f"OK: {result.op}"


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display.

    Args:
        result: The service result to format.
        settings: Output mode flags; defaults to human output.
    """
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)
    if settings.quiet:
        return _render_quiet(result)
    return _render_human(result)
