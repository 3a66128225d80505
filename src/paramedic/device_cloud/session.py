"""Remote WebDriver session on a Sauce Labs device."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from paramedic.shared.exceptions import SessionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SessionHandle:
    """Identifies one live remote driver session."""

    session_id: str
    hub_url: str


class RemoteDeviceSession:
    """Open and release exactly one remote device through the Appium hub.

    Speaks the WebDriver wire protocol directly: ``POST /session`` to
    provision, ``DELETE /session/{id}`` to quit.
    """

    def __init__(self, user: str, access_key: str, *, hub_url: str, timeout: int = 300) -> None:
        self._user = user
        self._access_key = access_key
        self._hub_url = hub_url.rstrip("/")
        self._timeout = timeout
        self.handle: SessionHandle | None = None

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout, auth=(self._user, self._access_key))

    async def open(self, capabilities: dict[str, str]) -> SessionHandle:
        """Start a driver session with ``capabilities``.

        Raises:
            SessionError: If the hub refuses or the response has no session id.
        """
        if self.handle is not None:
            raise RuntimeError(f"remote session {self.handle.session_id} is already open")

        logger.info("starting appium session on %s (%s)", capabilities.get("deviceName"), self._hub_url)
        try:
            async with self._client() as client:
                resp = await client.post(f"{self._hub_url}/session", json={"desiredCapabilities": capabilities})
                resp.raise_for_status()
                body = resp.json()
                # Hold the id before the next await so close() can quit it
                session_id = _session_id(body)
                if session_id:
                    self.handle = SessionHandle(session_id=session_id, hub_url=self._hub_url)
        except httpx.HTTPStatusError as exc:
            raise SessionError(
                f"error starting appium web driver: hub returned {exc.response.status_code}: "
                f"{exc.response.text[:200]}"
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise SessionError(f"error starting appium web driver: {exc}") from exc

        if self.handle is None:
            raise SessionError(f"error starting appium web driver: no session id in {body!r:.200}")

        logger.info("remote session %s started", self.handle.session_id)
        return self.handle

    async def close(self) -> None:
        """Quit the session if one is open. Errors are logged, never raised."""
        handle, self.handle = self.handle, None
        if handle is None:
            return
        try:
            async with self._client() as client:
                resp = await client.delete(f"{handle.hub_url}/session/{handle.session_id}")
                resp.raise_for_status()
            logger.info("remote session %s closed", handle.session_id)
        except Exception as exc:
            logger.warning("failed to quit remote session %s: %s", handle.session_id, exc)


def _session_id(body: Any) -> str | None:
    """Read the session id from a JSON-wire or W3C new-session response."""
    if not isinstance(body, dict):
        return None
    session_id = body.get("sessionId")
    value = body.get("value")
    if not session_id and isinstance(value, dict):
        session_id = value.get("sessionId")
    return str(session_id) if session_id else None
