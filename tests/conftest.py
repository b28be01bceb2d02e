"""Shared pytest fixtures and test helpers for countrygate tests."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import httpx
import pytest
from click.testing import CliRunner

from countrygate.config.models import EndpointConfig
from countrygate.infrastructure.cache import LocationCache
from countrygate.infrastructure.providers import IpApiComProvider, IpapiProvider
from countrygate.infrastructure.storage import MemoryStore

PRIMARY_URL = "https://primary.test/json/"
FALLBACK_URL = "https://fallback.test/json/"
NOW_MS = 1_700_000_000_000
DAY_MS = 86_400_000

Handler = Callable[[httpx.Request], httpx.Response]


class FakeClock:
    """Deterministic epoch-millisecond clock."""

    def __init__(self, now: int = NOW_MS) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class GeoServer:
    """Routes provider requests to per-host handlers and records every call."""

    def __init__(self, primary: Handler | None = None, fallback: Handler | None = None) -> None:
        self.primary = primary or unreachable
        self.fallback = fallback or unreachable
        self.calls: list[str] = []
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request.url.host)
        self.requests.append(request)
        if request.url.host == "primary.test":
            return self.primary(request)
        return self.fallback(request)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


def respond(payload: object, status: int = 200) -> Handler:
    """Handler returning *payload* as JSON."""

    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json=payload)

    return _handler


def unreachable(request: httpx.Request) -> httpx.Response:
    """Handler simulating a network failure."""
    raise httpx.ConnectError("connection refused", request=request)


def stored_record(country_code: str, timestamp: int) -> str:
    return json.dumps({"countryCode": country_code, "timestamp": timestamp})


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def cache(store: MemoryStore, clock: FakeClock) -> LocationCache:
    """Location cache with a one-day TTL over an in-memory store."""
    return LocationCache(store, ttl_ms=DAY_MS, clock=clock)


@pytest.fixture
def primary() -> IpapiProvider:
    return IpapiProvider(PRIMARY_URL)


@pytest.fixture
def fallback() -> IpApiComProvider:
    return IpApiComProvider(FALLBACK_URL)


@pytest.fixture
def endpoints() -> dict[str, EndpointConfig]:
    return {
        "primary": EndpointConfig(url=PRIMARY_URL, kind="ipapi"),
        "fallback": EndpointConfig(url=FALLBACK_URL, kind="ip-api"),
    }


@pytest.fixture
def project_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Temporary project directory as CWD, isolated from env-based config."""
    monkeypatch.chdir(tmp_path)
    for var in ("COUNTRYGATE_CONFIG", "COUNTRYGATE_GATE__BLOCKED_COUNTRIES"):
        monkeypatch.delenv(var, raising=False)
    return tmp_path
