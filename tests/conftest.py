"""Shared pytest fixtures for the paramedic test suite."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from pydantic import SecretStr

from paramedic.event_server.server import LocalEventServer
from paramedic.runner.cordova import CommandResult, CordovaCli
from paramedic.runner.project import ProjectHandle
from paramedic.shared.enums import CordovaAction
from paramedic.shared.models import ExecutionContext


@pytest.fixture()
def context(tmp_path: Path) -> ExecutionContext:
    """A local-device run with short waits."""
    return ExecutionContext(
        platform="android",
        action=CordovaAction.RUN,
        working_dir=tmp_path,
        connection_timeout=0.01,
        run_timeout=5,
    )


@pytest.fixture()
def sauce_context(context: ExecutionContext) -> ExecutionContext:
    return context.model_copy(
        update={
            "use_sauce": True,
            "sauce_user": "paramedic",
            "sauce_key": SecretStr("s3cr3t"),
            "external_server_url": "http://medic.example.test",
        }
    )


@pytest.fixture()
def project(tmp_path: Path) -> ProjectHandle:
    path = tmp_path / "project"
    path.mkdir()
    return ProjectHandle(path=path)


@pytest.fixture()
def event_server() -> LocalEventServer:
    """An event server that is not bound to a socket; tests emit events directly."""
    server = LocalEventServer(port=8008)
    server.stop = AsyncMock()  # type: ignore[method-assign]
    return server


@pytest.fixture()
def mock_scaffolder(project: ProjectHandle) -> AsyncMock:
    mock = AsyncMock()
    mock.create.return_value = project
    mock.write_connection_url.return_value = None
    mock.remove.return_value = None
    return mock


@pytest.fixture()
def mock_cordova() -> CordovaCli:
    """Real exit-code checking with the subprocess-backed commands mocked out."""
    cordova = CordovaCli()
    cordova.start_tests = AsyncMock(  # type: ignore[method-assign]
        return_value=CommandResult(command="cordova run android", returncode=0, output="")
    )
    cordova.build = AsyncMock(  # type: ignore[method-assign]
        return_value=CommandResult(command="cordova build android", returncode=0, output="")
    )
    return cordova
