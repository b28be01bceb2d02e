"""GateService — the decision executor.

State machine per page load::

    idle -> resolving -> allowed | blocked | allowed_on_failure

All three outcomes are terminal.  An empty blocklist skips resolution and
allows the page.  Any error while resolving fails open: the page is allowed
and the failure is logged, never raised.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from countrygate.domain.country import is_blocked
from countrygate.domain.errors import ResolutionFailure
from countrygate.domain.models import BlockDecision, GateOutcome, GateState
from countrygate.services.base import BaseService
from countrygate.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from collections.abc import Callable

    import httpx

    from countrygate.config.models import GateConfig
    from countrygate.config.settings import GateSettings
    from countrygate.infrastructure.storage import KeyValueStore
    from countrygate.plugins.manager import PluginManager
    from countrygate.services.resolver import CountryResolver

logger = structlog.get_logger(__name__)

OP_NAME = "check_country"


class GateService(BaseService):
    """Run the gate once and commit its decision."""

    def __init__(
        self,
        config: GateConfig,
        resolver: CountryResolver,
        *,
        plugins: PluginManager | None = None,
    ) -> None:
        super().__init__(plugins=plugins)
        self._config = config
        self._resolver = resolver
        self._state = GateState.IDLE
        self._result: ServiceResult | None = None

    @classmethod
    def from_settings(
        cls,
        settings: GateSettings,
        *,
        on_block: Callable[[str], None],
        client: httpx.AsyncClient | None = None,
        store: KeyValueStore | None = None,
        plugins: PluginManager | None = None,
    ) -> GateService:
        """Wire storage, cache, providers, and resolver from *settings*."""
        from countrygate.infrastructure.cache import LocationCache
        from countrygate.infrastructure.providers import build_provider
        from countrygate.infrastructure.storage import JsonFileStore
        from countrygate.services.resolver import CountryResolver

        config = settings.to_gate_config(on_block=on_block)
        cache = LocationCache(
            store if store is not None else JsonFileStore(settings.storage_path),
            ttl_ms=config.cache_ttl_ms,
            key=settings.cache.key,
        )
        resolver = CountryResolver(
            cache,
            build_provider(config.providers.primary),
            build_provider(config.providers.fallback),
            client=client,
            plugins=plugins,
        )
        return cls(config, resolver, plugins=plugins)

    @property
    def state(self) -> GateState:
        return self._state

    @property
    def config(self) -> GateConfig:
        return self._config

    def evaluate(self, country_code: str) -> BlockDecision:
        """Apply the blocklist to *country_code*."""
        return BlockDecision(
            country_code=country_code.upper(),
            blocked=is_blocked(country_code, self._config.blocked_countries),
        )

    async def run(self) -> ServiceResult:
        """Resolve, decide, and act. Idempotent once a terminal state is reached."""
        if self._result is not None:
            logger.debug("gate_already_decided", state=self._state.value)
            return self._result

        if not self._config.blocked_countries:
            logger.debug("blocklist_empty_allowing")
            return self._finish(GateOutcome.ALLOWED, None)

        self._state = GateState.RESOLVING
        try:
            decision = self.evaluate(await self._resolver.resolve())
        except ResolutionFailure as exc:
            logger.error("country_detection_failed_allowing", error=str(exc))
            return self._fail_open(exc)
        except Exception as exc:
            logger.exception("country_detection_crashed_allowing", error=str(exc))
            return self._fail_open(exc)

        if not decision.blocked:
            logger.info("access_allowed", country_code=decision.country_code)
            return self._finish(GateOutcome.ALLOWED, decision.country_code)

        logger.warning("access_blocked", country_code=decision.country_code)
        try:
            self._config.on_block(decision.country_code)
        finally:
            result = self._finish(GateOutcome.BLOCKED, decision.country_code)
        return result

    def _fail_open(self, exc: Exception) -> ServiceResult:
        return self._finish(
            GateOutcome.ALLOWED_ON_FAILURE,
            None,
            warnings=[f"Country detection failed: {exc}"],
        )

    def _finish(
        self,
        outcome: GateOutcome,
        country_code: str | None,
        *,
        warnings: list[str] | None = None,
    ) -> ServiceResult:
        warnings = list(warnings or [])
        self._state = GateState(outcome.value)
        self._dispatch_event(
            "post_decision",
            {"outcome": outcome.value, "country_code": country_code},
            warnings,
        )
        self._result = ServiceResult(
            ok=True,
            op=OP_NAME,
            data={
                "outcome": outcome.value,
                "blocked": outcome is GateOutcome.BLOCKED,
                "country_code": country_code,
            },
            warnings=warnings,
        )
        return self._result

    async def lookup(self) -> ServiceResult:
        """Resolve the country code without committing a decision."""
        try:
            country_code = await self._resolver.resolve()
        except ResolutionFailure as exc:
            return ServiceResult(
                ok=False,
                op="lookup_country",
                error=ServiceError(
                    code="RESOLUTION_FAILED",
                    message=str(exc),
                    detail={
                        "primary": str(exc.primary_fault),
                        "fallback": str(exc.fallback_fault),
                    },
                ),
            )
        decision = self.evaluate(country_code)
        return ServiceResult(
            ok=True,
            op="lookup_country",
            data={"country_code": decision.country_code, "blocked": decision.blocked},
        )
