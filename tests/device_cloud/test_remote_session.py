"""Tests for RemoteDeviceSession."""

from __future__ import annotations

import asyncio
import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest
import respx

from paramedic.device_cloud.session import RemoteDeviceSession
from paramedic.shared.exceptions import SessionError

_HUB = "https://ondemand.saucelabs.com/wd/hub"
_CAPS = {"deviceName": "Android Emulator", "platformName": "Android", "app": "sauce-storage:android-debug.apk"}


@pytest.fixture
def remote() -> RemoteDeviceSession:
    return RemoteDeviceSession("paramedic", "s3cr3t", hub_url=_HUB)


class TestOpen:
    @respx.mock
    async def test_open_json_wire(self, remote: RemoteDeviceSession) -> None:
        route = respx.post(f"{_HUB}/session").mock(
            return_value=httpx.Response(200, json={"sessionId": "abc123", "status": 0, "value": {}})
        )

        handle = await remote.open(_CAPS)

        assert handle.session_id == "abc123"
        assert remote.handle == handle
        assert json.loads(route.calls.last.request.content) == {"desiredCapabilities": _CAPS}

    @respx.mock
    async def test_open_w3c_response(self, remote: RemoteDeviceSession) -> None:
        respx.post(f"{_HUB}/session").mock(
            return_value=httpx.Response(200, json={"value": {"sessionId": "w3c-1", "capabilities": {}}})
        )

        handle = await remote.open(_CAPS)

        assert handle.session_id == "w3c-1"

    @respx.mock
    async def test_open_refused(self, remote: RemoteDeviceSession) -> None:
        respx.post(f"{_HUB}/session").mock(return_value=httpx.Response(500, text="no devices"))

        with pytest.raises(SessionError, match="error starting appium web driver"):
            await remote.open(_CAPS)
        assert remote.handle is None

    @respx.mock
    async def test_open_without_session_id(self, remote: RemoteDeviceSession) -> None:
        respx.post(f"{_HUB}/session").mock(return_value=httpx.Response(200, json={"value": {}}))

        with pytest.raises(SessionError, match="no session id"):
            await remote.open(_CAPS)

    @respx.mock
    async def test_second_open_is_a_programming_error(self, remote: RemoteDeviceSession) -> None:
        respx.post(f"{_HUB}/session").mock(return_value=httpx.Response(200, json={"sessionId": "abc123"}))
        await remote.open(_CAPS)

        with pytest.raises(RuntimeError, match="already open"):
            await remote.open(_CAPS)

    @respx.mock
    async def test_cancelled_open_keeps_created_session(self, remote: RemoteDeviceSession) -> None:
        respx.post(f"{_HUB}/session").mock(return_value=httpx.Response(200, json={"sessionId": "abc123"}))
        quit_route = respx.delete(f"{_HUB}/session/abc123").mock(return_value=httpx.Response(200))

        # Cancelled while the client shuts down, after the hub created the session
        with patch.object(httpx.AsyncClient, "__aexit__", AsyncMock(side_effect=asyncio.CancelledError)):
            with pytest.raises(asyncio.CancelledError):
                await remote.open(_CAPS)

        assert remote.handle is not None
        await remote.close()
        assert quit_route.call_count == 1


class TestClose:
    @respx.mock
    async def test_close_quits_session(self, remote: RemoteDeviceSession) -> None:
        respx.post(f"{_HUB}/session").mock(return_value=httpx.Response(200, json={"sessionId": "abc123"}))
        quit_route = respx.delete(f"{_HUB}/session/abc123").mock(return_value=httpx.Response(200))
        await remote.open(_CAPS)

        await remote.close()
        await remote.close()

        assert quit_route.call_count == 1
        assert remote.handle is None

    @respx.mock
    async def test_close_swallows_errors(self, remote: RemoteDeviceSession) -> None:
        respx.post(f"{_HUB}/session").mock(return_value=httpx.Response(200, json={"sessionId": "abc123"}))
        respx.delete(f"{_HUB}/session/abc123").mock(side_effect=httpx.ConnectError("gone"))
        await remote.open(_CAPS)

        await remote.close()

        assert remote.handle is None

    async def test_close_without_open_is_noop(self, remote: RemoteDeviceSession) -> None:
        await remote.close()
