"""Tests for the cache CLI group."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from countrygate.cli import cli
from tests.commands.conftest import seed_cache, write_config


@pytest.mark.usefixtures("project_root")
class TestCacheShow:
    def test_empty(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "cache", "show"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["data"]["cached"] is False

    def test_seeded_record(self, cli_runner: CliRunner, project_root: Path) -> None:
        seed_cache(project_root, "ID", age_ms=60_000)
        result = cli_runner.invoke(cli, ["--json", "cache", "show"])
        data = json.loads(result.stdout)["data"]
        assert data["cached"] is True
        assert data["country_code"] == "ID"
        assert data["valid"] is True
        assert data["age_ms"] >= 60_000

    def test_respects_configured_ttl(self, cli_runner: CliRunner, project_root: Path) -> None:
        write_config(project_root, ["ID"], gate="cache_ttl_ms = 1000")
        seed_cache(project_root, "ID", age_ms=60_000)
        result = cli_runner.invoke(cli, ["--json", "cache", "show"])
        assert json.loads(result.stdout)["data"]["valid"] is False

    def test_human_output(self, cli_runner: CliRunner, project_root: Path) -> None:
        seed_cache(project_root, "ID")
        result = cli_runner.invoke(cli, ["cache", "show"])
        assert result.exit_code == 0
        assert "cache_show" in result.stdout
        assert "country_code: ID" in result.stdout


@pytest.mark.usefixtures("project_root")
class TestCacheClear:
    def test_clear_removes_record(self, cli_runner: CliRunner, project_root: Path) -> None:
        path = seed_cache(project_root, "ID")
        result = cli_runner.invoke(cli, ["--json", "cache", "clear"])
        assert result.exit_code == 0
        assert json.loads(path.read_text(encoding="utf-8")) == {}

    def test_corrupted_storage_is_error(self, cli_runner: CliRunner, project_root: Path) -> None:
        path = project_root / ".countrygate" / "storage.json"
        path.parent.mkdir()
        path.write_text("{not json", encoding="utf-8")
        result = cli_runner.invoke(cli, ["--json", "cache", "clear"])
        assert result.exit_code == 1
        assert '"code": "STORAGE_ERROR"' in result.stderr
