"""Mutable state of one orchestration pass."""

from __future__ import annotations

from dataclasses import dataclass

from paramedic.runner.interfaces import DeviceSession, EventServer
from paramedic.runner.project import ProjectHandle


@dataclass(slots=True)
class RunSession:
    """Handles acquired during one run; released once by teardown."""

    project: ProjectHandle | None = None
    server: EventServer | None = None
    remote: DeviceSession | None = None
    torn_down: bool = False

    def attach_server(self, server: EventServer) -> EventServer:
        if self.server is not None:
            raise RuntimeError("run session already holds a live event server")
        self.server = server
        return server

    def attach_remote(self, remote: DeviceSession) -> DeviceSession:
        if self.remote is not None:
            raise RuntimeError("run session already holds a live remote device session")
        self.remote = remote
        return remote
