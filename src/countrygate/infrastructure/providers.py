"""Geolocation providers — look up the caller's own country over HTTP.

Each provider owns its success criteria.  Anything short of a 2xx JSON
payload with a usable country field raises :class:`ProviderFault`.
Codes are normalized to uppercase at the point of extraction.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar

import httpx

from countrygate.config.models import DEFAULT_PROVIDER_TIMEOUT, EndpointConfig
from countrygate.domain.country import normalize_country_code
from countrygate.domain.errors import ProviderFault

logger = logging.getLogger(__name__)


class GeoProvider(ABC):
    """One geolocation endpoint with its own response schema."""

    kind: ClassVar[str]
    country_field: ClassVar[str]

    def __init__(self, url: str, *, timeout: float = DEFAULT_PROVIDER_TIMEOUT) -> None:
        self.url = url
        self.timeout = timeout

    @property
    def name(self) -> str:
        return f"{self.kind} ({self.url})"

    async def fetch_country(self, client: httpx.AsyncClient) -> str:
        """GET the endpoint and extract an uppercase country code.

        Raises:
            ProviderFault: On transport error, timeout, non-2xx status,
                non-JSON body, or missing country field.
        """
        try:
            response = await client.get(
                self.url,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except httpx.TimeoutException as exc:
            raise ProviderFault(self.name, f"timed out after {self.timeout}s") from exc
        except httpx.HTTPError as exc:
            raise ProviderFault(self.name, f"request failed: {exc}") from exc

        if not response.is_success:
            raise ProviderFault(self.name, f"HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise ProviderFault(self.name, "response is not JSON") from exc
        if not isinstance(payload, dict):
            raise ProviderFault(self.name, "response is not a JSON object")

        self._check_failure(payload)

        code = normalize_country_code(payload.get(self.country_field))
        if code is None:
            raise ProviderFault(self.name, f"no usable {self.country_field!r} in response")
        logger.debug("%s reported country %s", self.name, code)
        return code

    @abstractmethod
    def _check_failure(self, payload: dict[str, Any]) -> None:
        """Raise ProviderFault if *payload* carries the provider's error signal."""


class IpapiProvider(GeoProvider):
    """ipapi.co — ``country_code`` field, ``{"error": true, "reason": ...}`` on failure."""

    kind = "ipapi"
    country_field = "country_code"

    def _check_failure(self, payload: dict[str, Any]) -> None:
        if payload.get("error"):
            reason = payload.get("reason") or "provider reported an error"
            raise ProviderFault(self.name, str(reason))


class IpApiComProvider(GeoProvider):
    """ip-api.com — ``countryCode`` field, ``{"status": "fail", "message": ...}`` on failure."""

    kind = "ip-api"
    country_field = "countryCode"

    def _check_failure(self, payload: dict[str, Any]) -> None:
        status = payload.get("status")
        if status is not None and status != "success":
            message = payload.get("message") or f"status {status!r}"
            raise ProviderFault(self.name, str(message))


PROVIDER_REGISTRY: dict[str, type[GeoProvider]] = {
    IpapiProvider.kind: IpapiProvider,
    IpApiComProvider.kind: IpApiComProvider,
}


def build_provider(endpoint: EndpointConfig) -> GeoProvider:
    """Instantiate the provider class matching ``endpoint.kind``."""
    try:
        provider_cls = PROVIDER_REGISTRY[endpoint.kind]
    except KeyError:
        msg = f"Unknown provider kind: {endpoint.kind!r}"
        raise ValueError(msg) from None
    return provider_cls(endpoint.url, timeout=endpoint.timeout_seconds)
