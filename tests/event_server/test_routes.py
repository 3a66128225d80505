"""Tests for the event server HTTP routes."""

from __future__ import annotations

from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from paramedic.event_server.app import create_app
from paramedic.event_server.server import LocalEventServer
from paramedic.shared.enums import ServerEvent


@pytest.fixture
def received(event_server: LocalEventServer) -> list[tuple[str, dict[str, Any]]]:
    seen: list[tuple[str, dict[str, Any]]] = []
    for event in ServerEvent:
        event_server.on(event, lambda data, name=event.value: seen.append((name, data)))
    return seen


@pytest.fixture
async def client(event_server: LocalEventServer):
    transport = ASGITransport(app=create_app(event_server))
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


async def test_health_reports_connection(client: AsyncClient, event_server: LocalEventServer) -> None:
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "connected": False}

    event_server.mark_connected()
    response = await client.get("/health")
    assert response.json()["connected"] is True


async def test_connect_marks_device_and_emits_info(
    client: AsyncClient, event_server: LocalEventServer, received: list[tuple[str, dict[str, Any]]]
) -> None:
    response = await client.post("/medic/connect", json={"model": "iPhone", "version": "9.2"})

    assert response.status_code == 202
    assert event_server.is_device_connected() is True
    assert received == [("deviceInfo", {"model": "iPhone", "version": "9.2"})]


async def test_connect_without_body(
    client: AsyncClient, event_server: LocalEventServer, received: list[tuple[str, dict[str, Any]]]
) -> None:
    response = await client.post("/medic/connect")

    assert response.status_code == 202
    assert event_server.is_device_connected() is True
    assert received == []


async def test_event_is_dispatched(
    client: AsyncClient, event_server: LocalEventServer, received: list[tuple[str, dict[str, Any]]]
) -> None:
    response = await client.post(
        "/medic/event",
        json={"event": "jasmineDone", "data": {"specResults": {"specFailed": 0}}},
    )

    assert response.status_code == 202
    assert received == [("jasmineDone", {"specResults": {"specFailed": 0}})]
    assert event_server.is_device_connected() is True


async def test_unknown_event_is_rejected(client: AsyncClient, received: list[tuple[str, dict[str, Any]]]) -> None:
    response = await client.post("/medic/event", json={"event": "specExploded", "data": {}})

    assert response.status_code == 422
    assert received == []


async def test_disconnect_is_dispatched(
    client: AsyncClient, event_server: LocalEventServer, received: list[tuple[str, dict[str, Any]]]
) -> None:
    response = await client.post("/medic/disconnect")

    assert response.status_code == 202
    assert received == [("disconnect", {})]
    assert event_server.is_device_connected() is False
