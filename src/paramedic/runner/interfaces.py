"""Protocol interfaces for runner dependency injection."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from paramedic.shared.enums import ServerEvent
from paramedic.shared.models import ExecutionContext

if TYPE_CHECKING:
    from paramedic.runner.cordova import CommandResult
    from paramedic.runner.project import ProjectHandle


@runtime_checkable
class ProjectScaffolder(Protocol):
    """Protocol for creating and removing the throwaway test project."""

    async def create(self, context: ExecutionContext) -> ProjectHandle:
        """Create a project ready to build for ``context.platform``.

        Raises:
            ScaffoldError: If the project cannot be prepared
        """
        ...

    async def write_connection_url(self, handle: ProjectHandle, url: str) -> None: ...

    async def remove(self, handle: ProjectHandle) -> None: ...


@runtime_checkable
class BuildTool(Protocol):
    """Protocol for the platform build/run command line."""

    async def build(self, project_dir: Path, platform_id: str) -> CommandResult: ...

    async def start_tests(self, project_dir: Path, action: str, platform_id: str, args: str = "") -> CommandResult:
        """Launch the app so the tests start on a device.

        Returns:
            Exit status and output; a non-zero status is not raised here
        """
        ...

    def check(self, result: CommandResult) -> CommandResult:
        """Raise ExecutionError unless ``result`` succeeded."""
        ...


@runtime_checkable
class EventServer(Protocol):
    """Protocol for the local server the device-side harness reports to."""

    def on(self, event: ServerEvent | str, handler: Any) -> None: ...

    def is_device_connected(self) -> bool: ...

    def connection_url(self, platform_id: str) -> str: ...

    async def stop(self) -> None: ...


@runtime_checkable
class ArtifactUploader(Protocol):
    """Protocol for pushing the built binary to device-cloud storage."""

    async def upload(self, binary_path: Path, filename: str) -> None:
        """Upload (overwriting) ``binary_path`` as ``filename``.

        Raises:
            UploadError: If the upload fails
        """
        ...


@runtime_checkable
class DeviceSession(Protocol):
    """Protocol for one remote device driver session."""

    async def open(self, capabilities: dict[str, str]) -> Any:
        """Provision a device matching ``capabilities``.

        Raises:
            SessionError: If the remote driver cannot be initialised
        """
        ...

    async def close(self) -> None:
        """Release the device; never raises."""
        ...
