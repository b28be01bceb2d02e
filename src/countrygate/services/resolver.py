"""CountryResolver — cache, then primary provider, then fallback.

The primary call is fully settled before the fallback starts; the two
providers never race.  Neither provider is retried.  A successful lookup
is written through to the cache before it is returned.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import structlog

from countrygate.domain.country import normalize_country_code
from countrygate.domain.errors import ProviderFault, ResolutionFailure
from countrygate.domain.models import ResolutionSource
from countrygate.services.base import BaseService

if TYPE_CHECKING:
    from countrygate.infrastructure.cache import LocationCache
    from countrygate.infrastructure.providers import GeoProvider
    from countrygate.plugins.manager import PluginManager

logger = structlog.get_logger(__name__)


class CountryResolver(BaseService):
    """Resolve the visitor's country code.

    Usage::

        resolver = CountryResolver(cache, primary, fallback)
        code = await resolver.resolve()  # raises ResolutionFailure
    """

    def __init__(
        self,
        cache: LocationCache,
        primary: GeoProvider,
        fallback: GeoProvider,
        *,
        client: httpx.AsyncClient | None = None,
        plugins: PluginManager | None = None,
    ) -> None:
        super().__init__(plugins=plugins)
        self._cache = cache
        self._primary = primary
        self._fallback = fallback
        self._client = client

    async def resolve(self) -> str:
        """Return the uppercase country code.

        Raises:
            ResolutionFailure: If the cache misses and both providers fail.
        """
        cached = self._cache.read()
        if cached is not None:
            logger.debug("country_from_cache", country_code=cached.country_code)
            return self._resolved(cached.country_code, ResolutionSource.CACHE)

        logger.debug("detecting_country")
        if self._client is not None:
            return await self._lookup(self._client)
        async with httpx.AsyncClient() as client:
            return await self._lookup(client)

    async def _lookup(self, client: httpx.AsyncClient) -> str:
        try:
            code = await self._primary.fetch_country(client)
        except ProviderFault as exc:
            logger.warning("primary_provider_failed", provider=exc.provider, reason=exc.reason)
            primary_fault = exc
        else:
            return self._store(code, ResolutionSource.PRIMARY)

        try:
            code = await self._fallback.fetch_country(client)
        except ProviderFault as fallback_fault:
            logger.warning(
                "fallback_provider_failed",
                provider=fallback_fault.provider,
                reason=fallback_fault.reason,
            )
            raise ResolutionFailure(primary_fault, fallback_fault) from fallback_fault
        return self._store(code, ResolutionSource.FALLBACK)

    def _store(self, code: str, source: ResolutionSource) -> str:
        normalized = normalize_country_code(code) or code.upper()
        logger.info("country_detected", country_code=normalized, source=source.value)
        self._cache.write(normalized)
        return self._resolved(normalized, source)

    def _resolved(self, code: str, source: ResolutionSource) -> str:
        self._dispatch_event("post_resolve", {"country_code": code, "source": source.value})
        return code
