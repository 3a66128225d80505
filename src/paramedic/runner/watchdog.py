"""Connection watchdog bounding the wait for a device to attach."""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from paramedic.shared.exceptions import ConnectionTimeoutError

logger = logging.getLogger(__name__)


class _ConnectionProbe(Protocol):
    def is_device_connected(self) -> bool: ...


async def wait_for_connection(server: _ConnectionProbe, timeout: float) -> None:
    """Sleep for ``timeout`` seconds, then check once whether a device is attached.

    This is a single checkpoint at expiry, not a poll: a device that
    attached at any earlier point passes.

    Raises:
        ConnectionTimeoutError: If no device is attached at expiry.
    """
    logger.info("waiting %ss for a device to connect", _fmt(timeout))
    await asyncio.sleep(timeout)
    if not server.is_device_connected():
        raise ConnectionTimeoutError(
            f"device not connected to local server in {_fmt(timeout)} secs",
            timeout=timeout,
        )
    logger.info("device connection confirmed")


def _fmt(seconds: float) -> str:
    return f"{seconds:g}"
