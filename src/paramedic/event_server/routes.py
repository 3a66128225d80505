"""HTTP routes the device-side harness posts its events to."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from paramedic.shared.enums import ServerEvent

router = APIRouter()


class DeviceEvent(BaseModel):
    """Envelope for one harness event."""

    event: ServerEvent
    data: dict[str, Any] = Field(default_factory=dict)


def _get_server(request: Request) -> Any:
    server = getattr(request.app.state, "server", None)
    if server is None or not hasattr(server, "emit"):
        raise HTTPException(status_code=503, detail="event server unavailable")
    return server


@router.post("/medic/connect", status_code=202)
async def device_connect(request: Request, device_info: dict[str, Any] | None = None) -> dict[str, str]:
    """Register the device as attached; an optional body is its device info."""
    server = _get_server(request)
    server.mark_connected()
    if device_info:
        server.emit(ServerEvent.DEVICE_INFO, device_info)
    return {"status": "connected"}


@router.post("/medic/event", status_code=202)
async def device_event(event: DeviceEvent, request: Request) -> dict[str, str]:
    server = _get_server(request)
    if event.event != ServerEvent.DISCONNECT:
        server.mark_connected()
    server.emit(event.event, event.data)
    return {"status": "accepted"}


@router.post("/medic/disconnect", status_code=202)
async def device_disconnect(request: Request) -> dict[str, str]:
    server = _get_server(request)
    server.emit(ServerEvent.DISCONNECT, {})
    return {"status": "disconnected"}


@router.get("/health")
async def health_check(request: Request) -> dict[str, object]:
    """Health check endpoint.

    Returns:
        Status dictionary with the device attachment flag
    """
    server = _get_server(request)
    return {"status": "ok", "connected": server.is_device_connected()}
