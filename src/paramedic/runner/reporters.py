"""Reporter fan-out and passive device-output handlers."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from typing import Any, Protocol

from paramedic.shared.enums import LIFECYCLE_EVENTS, ServerEvent

logger = logging.getLogger(__name__)

# Reporter method invoked for each lifecycle event
REPORTER_METHODS: dict[ServerEvent, str] = {
    ServerEvent.JASMINE_STARTED: "jasmine_started",
    ServerEvent.SPEC_STARTED: "spec_started",
    ServerEvent.SPEC_DONE: "spec_done",
    ServerEvent.SUITE_STARTED: "suite_started",
    ServerEvent.SUITE_DONE: "suite_done",
    ServerEvent.JASMINE_DONE: "jasmine_done",
}


class _Subscribable(Protocol):
    def on(self, event: ServerEvent | str, handler: Any) -> None: ...


def subscribe_reporters(server: _Subscribable, reporters: Iterable[object]) -> int:
    """Subscribe every lifecycle method a reporter defines.

    Reporters implement any subset of :data:`REPORTER_METHODS`.

    Returns:
        Number of handlers subscribed.
    """
    count = 0
    for event in LIFECYCLE_EVENTS:
        for reporter in reporters:
            method = getattr(reporter, REPORTER_METHODS[event], None)
            if callable(method):
                server.on(event, method)
                count += 1
    return count


def subscribe_device_output(server: _Subscribable) -> None:
    server.on(ServerEvent.DEVICE_LOG, _log_device_line)
    server.on(ServerEvent.DEVICE_INFO, _log_device_info)


def _log_device_line(data: dict[str, Any]) -> None:
    msg = data.get("msg")
    line = msg[0] if isinstance(msg, list) and msg else msg
    logger.debug("device|console.%s: %s", data.get("type", "log"), line)


def _log_device_info(data: dict[str, Any]) -> None:
    logger.info("device info: %s", json.dumps(data, sort_keys=True))


class LoggingReporter:
    """Log suite progress and failed expectations."""

    def __init__(self) -> None:
        self.specs_done = 0
        self.specs_failed = 0

    def jasmine_started(self, data: dict[str, Any]) -> None:
        logger.info("test run started (%s specs defined)", data.get("totalSpecsDefined", "?"))

    def spec_done(self, data: dict[str, Any]) -> None:
        self.specs_done += 1
        if data.get("status") != "failed":
            return
        self.specs_failed += 1
        logger.warning("FAILED: %s", data.get("fullName", data.get("description", "<unnamed spec>")))
        for expectation in data.get("failedExpectations", []):
            logger.warning("    %s", expectation.get("message", ""))

    def jasmine_done(self, data: dict[str, Any]) -> None:
        failed = data.get("specResults", {}).get("specFailed", self.specs_failed)
        logger.info("test run finished: %d specs, %s failed", self.specs_done, failed)
