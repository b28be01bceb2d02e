"""GateBootstrap — run the gate exactly once, synchronized to page readiness.

If the document is already interactive or complete the gate starts
immediately; otherwise it starts from the document's ready callback.
Never both, never zero times.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol

import structlog

if TYPE_CHECKING:
    from countrygate.services.gate import GateService
    from countrygate.services.result import ServiceResult

logger = structlog.get_logger(__name__)


class ReadinessSignal(Protocol):
    """Something that reports, or later announces, document readiness."""

    def is_ready(self) -> bool: ...

    def add_ready_callback(self, callback: Callable[[], None]) -> None: ...


class GateBootstrap:
    """Once-only trigger for :meth:`GateService.run`.

    Must be used from inside a running event loop; the pipeline is
    scheduled as an asyncio task.
    """

    def __init__(self, gate: GateService) -> None:
        self._gate = gate
        self._task: asyncio.Task[ServiceResult] | None = None
        self._installed = False
        self._triggered = asyncio.Event()

    @property
    def triggered(self) -> bool:
        return self._task is not None

    def install(self, signal: ReadinessSignal) -> None:
        """Arrange for the gate to run when *signal* is ready."""
        if self._installed:
            logger.debug("bootstrap_already_installed")
            return
        self._installed = True
        if signal.is_ready():
            self._trigger()
        else:
            signal.add_ready_callback(self._trigger)

    def _trigger(self) -> None:
        if self._task is not None:
            return
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._gate.run())
        self._triggered.set()
        logger.debug("gate_triggered")

    async def wait(self) -> ServiceResult:
        """Wait for the trigger, then for the gate's terminal result."""
        await self._triggered.wait()
        return await self.task

    @property
    def task(self) -> asyncio.Task[ServiceResult]:
        """The scheduled gate run.

        Raises:
            RuntimeError: If the gate has not been triggered yet.
        """
        if self._task is None:
            msg = "gate has not been triggered"
            raise RuntimeError(msg)
        return self._task
