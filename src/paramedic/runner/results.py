"""Terminal-result watcher turning server events into a pass/fail verdict."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

from pydantic import ValidationError

from paramedic.shared.enums import ServerEvent, WatchState
from paramedic.shared.exceptions import DisconnectError, ResultError
from paramedic.shared.models import SuiteSummary

logger = logging.getLogger(__name__)


class _EventSource(Protocol):
    def on(self, event: ServerEvent | str, handler: Any) -> None: ...


class ResultWatcher:
    """Watch for ``jasmineDone`` or ``disconnect``, whichever comes first.

    Subscribe before the tests can start so a terminal event that arrives
    early is kept until :meth:`wait` is called. Events after the first
    transition are ignored.
    """

    def __init__(self) -> None:
        self.state = WatchState.WAITING
        self.failed_specs: int | None = None
        self._error: Exception | None = None
        self._settled = asyncio.Event()

    def attach(self, server: _EventSource) -> ResultWatcher:
        server.on(ServerEvent.JASMINE_DONE, self._on_done)
        server.on(ServerEvent.DISCONNECT, self._on_disconnect)
        return self

    def _on_done(self, data: dict[str, Any]) -> None:
        if self.state != WatchState.WAITING:
            return
        try:
            summary = SuiteSummary.model_validate(data)
        except ValidationError as exc:
            self._error = ResultError(f"malformed jasmineDone payload: {exc}")
        else:
            self.failed_specs = summary.spec_results.spec_failed
        logger.info("tests have been completed")
        self.state = WatchState.COMPLETED
        self._settled.set()

    def _on_disconnect(self, _data: dict[str, Any]) -> None:
        if self.state != WatchState.WAITING:
            return
        logger.warning("device disconnected before reporting results")
        self._error = DisconnectError("device is disconnected before passing the tests")
        self.state = WatchState.DISCONNECTED
        self._settled.set()

    async def wait(self) -> bool:
        """Suspend until the watcher settles.

        Returns:
            True if no spec failed.

        Raises:
            DisconnectError: If the device dropped first.
            ResultError: If the terminal payload was malformed.
        """
        logger.info("waiting for test results")
        await self._settled.wait()
        if self._error is not None:
            raise self._error
        return self.failed_specs == 0
