"""PageDocument — the hosting page the gate guards.

Tracks readiness (``loading`` -> ``interactive`` -> ``complete``), holds the
renderable content, and supports a one-shot irreversible halt.  Once halted,
the document refuses further content swaps and resource loads.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import StrEnum

from countrygate.domain.errors import PageHalted

logger = logging.getLogger(__name__)


class ReadyState(StrEnum):
    LOADING = "loading"
    INTERACTIVE = "interactive"
    COMPLETE = "complete"


class PageDocument:
    """In-process model of a page load.

    Implements the ``ReadinessSignal`` protocol used by the bootstrap.
    """

    def __init__(
        self,
        content: str = "",
        *,
        ready_state: ReadyState = ReadyState.LOADING,
    ) -> None:
        self._content = content
        self._ready_state = ready_state
        self._ready_callbacks: list[Callable[[], None]] = []
        self._ready_fired = ready_state is not ReadyState.LOADING
        self._halted = False
        self.loaded_resources: list[str] = []

    # --- readiness ---

    @property
    def ready_state(self) -> ReadyState:
        return self._ready_state

    def is_ready(self) -> bool:
        return self._ready_state is not ReadyState.LOADING

    def add_ready_callback(self, callback: Callable[[], None]) -> None:
        """Run *callback* once the document leaves ``loading``.

        Callbacks registered after readiness are not replayed; callers
        check :meth:`is_ready` first.
        """
        self._ready_callbacks.append(callback)

    def mark_interactive(self) -> None:
        self._advance(ReadyState.INTERACTIVE)

    def mark_complete(self) -> None:
        self._advance(ReadyState.COMPLETE)

    def _advance(self, state: ReadyState) -> None:
        order = list(ReadyState)
        if order.index(state) <= order.index(self._ready_state):
            return
        self._ready_state = state
        if self._ready_fired:
            return
        self._ready_fired = True
        callbacks, self._ready_callbacks = self._ready_callbacks, []
        for callback in callbacks:
            callback()

    # --- content ---

    @property
    def content(self) -> str:
        return self._content

    @property
    def halted(self) -> bool:
        return self._halted

    def replace_content(self, html: str) -> None:
        """Swap the entire renderable content.

        Raises:
            PageHalted: If the document has been stopped.
        """
        if self._halted:
            raise PageHalted("page is halted; content can no longer change")
        self._content = html

    def load_resource(self, url: str) -> None:
        """Record a resource load requested by the page.

        Raises:
            PageHalted: If the document has been stopped.
        """
        if self._halted:
            raise PageHalted(f"page is halted; refusing to load {url}")
        self.loaded_resources.append(url)

    def stop(self) -> None:
        """Halt all further page activity. Irreversible."""
        if not self._halted:
            logger.debug("Page halted")
        self._halted = True
