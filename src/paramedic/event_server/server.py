"""In-process event server: uvicorn serving the harness routes plus an event fan-out."""

from __future__ import annotations

import asyncio
import logging
import socket
from collections import defaultdict
from collections.abc import Callable
from typing import Any
from urllib.parse import urlparse

import uvicorn

from paramedic.event_server.app import create_app
from paramedic.shared.enums import Platform, ServerEvent
from paramedic.shared.exceptions import ServerStartError

logger = logging.getLogger(__name__)

EventHandler = Callable[[dict[str, Any]], Any]

# Host loopback as seen from inside the Android emulator
_ANDROID_EMULATOR_HOST = "10.0.2.2"
_LOCAL_HOST = "127.0.0.1"


class LocalEventServer:
    """Receives events from the device-side harness and fans them out to subscribers.

    Handlers run synchronously on the event loop that serves the HTTP
    routes; a failing handler is logged and does not stop the others.
    """

    def __init__(self, *, port: int, external_server_url: str | None = None) -> None:
        self.port = port
        self._external_server_url = external_server_url
        self._handlers: dict[ServerEvent, list[EventHandler]] = defaultdict(list)
        self._connected = False
        self._uvicorn: uvicorn.Server | None = None
        self._serve_task: asyncio.Task[None] | None = None
        self._socket: socket.socket | None = None

    @classmethod
    async def start(
        cls,
        ports: tuple[int, int],
        *,
        host: str = "0.0.0.0",
        external_server_url: str | None = None,
        startup_timeout: float = 10.0,
    ) -> LocalEventServer:
        """Bind the first free port in ``ports`` and start serving.

        Raises:
            ServerStartError: If no port is free or uvicorn fails to start.
        """
        sock = _bind_first_free(host, *ports)
        server = cls(port=sock.getsockname()[1], external_server_url=external_server_url)
        server._socket = sock

        config = uvicorn.Config(create_app(server), lifespan="off", log_level="warning")
        server._uvicorn = uvicorn.Server(config)
        server._serve_task = asyncio.create_task(server._uvicorn.serve(sockets=[sock]))

        loop = asyncio.get_running_loop()
        deadline = loop.time() + startup_timeout
        while not server._uvicorn.started:
            if server._serve_task.done() or loop.time() >= deadline:
                await server.stop()
                raise ServerStartError(f"event server did not start on port {server.port}")
            await asyncio.sleep(0.05)

        logger.info("event server listening on %s:%d", host, server.port)
        return server

    async def stop(self) -> None:
        """Shut the HTTP server down. Safe to call more than once."""
        if self._uvicorn is not None:
            self._uvicorn.should_exit = True
        task, self._serve_task = self._serve_task, None
        if task is not None:
            try:
                await asyncio.wait_for(task, timeout=5)
            except asyncio.TimeoutError:
                task.cancel()
                logger.warning("event server on port %d did not shut down cleanly", self.port)
            except Exception as exc:
                logger.warning("event server on port %d exited with error: %s", self.port, exc)
        if self._socket is not None:
            self._socket.close()
            self._socket = None
            logger.info("event server on port %d stopped", self.port)

    def on(self, event: ServerEvent | str, handler: EventHandler) -> None:
        self._handlers[ServerEvent(event)].append(handler)

    def emit(self, event: ServerEvent | str, data: dict[str, Any]) -> None:
        """Dispatch ``data`` to every handler subscribed to ``event``."""
        event = ServerEvent(event)
        for handler in list(self._handlers[event]):
            try:
                handler(data)
            except Exception as exc:
                logger.warning("handler for %s failed: %s", event.value, exc)

    def mark_connected(self) -> None:
        if not self._connected:
            logger.info("device connected to event server on port %d", self.port)
        self._connected = True

    def is_device_connected(self) -> bool:
        return self._connected

    def connection_url(self, platform_id: str) -> str:
        """URL the harness on ``platform_id`` should post to."""
        if self._external_server_url:
            base = self._external_server_url.rstrip("/")
            if urlparse(base).port is None:
                return f"{base}:{self.port}"
            return base
        host = _ANDROID_EMULATOR_HOST if platform_id == Platform.ANDROID.value else _LOCAL_HOST
        return f"http://{host}:{self.port}"


def _bind_first_free(host: str, start: int, end: int) -> socket.socket:
    for port in range(start, end + 1):
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((host, port))
        except OSError as exc:
            sock.close()
            logger.debug("port %d unavailable: %s", port, exc)
            continue
        return sock
    raise ServerStartError(f"no free port in range {start}-{end}")
