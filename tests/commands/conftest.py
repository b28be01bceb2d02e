"""Fixtures for CLI command tests."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator
from pathlib import Path

import pytest
import structlog

from countrygate.infrastructure.cache import DEFAULT_CACHE_KEY, now_ms


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Each CLI invocation reconfigures logging; undo it after the test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    logging.getLogger("countrygate").setLevel(logging.NOTSET)
    structlog.reset_defaults()


def write_config(root: Path, blocked: list[str], **sections: str) -> Path:
    """Write a countrygate.toml with providers pointed at unroutable test hosts."""
    lines = [
        "[gate]",
        f"blocked_countries = {json.dumps(blocked)}",
        "[providers.primary]",
        'url = "https://primary.test/json/"',
        'kind = "ipapi"',
        "[providers.fallback]",
        'url = "https://fallback.test/json/"',
        'kind = "ip-api"',
    ]
    for name, body in sections.items():
        header = f"[{name}]"
        if header in lines:
            lines.insert(lines.index(header) + 1, body)
        else:
            lines.extend([header, body])
    path = root / "countrygate.toml"
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def seed_cache(root: Path, country_code: str, *, age_ms: int = 1000) -> Path:
    """Store a cached record so commands never reach the network."""
    path = root / ".countrygate" / "storage.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    record = json.dumps({"countryCode": country_code, "timestamp": now_ms() - age_ms})
    path.write_text(json.dumps({DEFAULT_CACHE_KEY: record}), encoding="utf-8")
    return path
