"""Async wrapper around the ``cordova`` CLI."""

from __future__ import annotations

import asyncio
import logging
import shlex
from dataclasses import dataclass
from pathlib import Path

from paramedic.shared.exceptions import ExecutionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Exit status and combined output of one CLI call."""

    command: str
    returncode: int
    output: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CordovaCli:
    """Runs cordova commands through async subprocess calls.

    In verbose mode every command's output is logged as soon as it
    finishes, so error messages leave it out to avoid printing it twice.
    """

    def __init__(self, *, cordova_bin: str = "cordova", verbose: bool = False) -> None:
        self._cordova_bin = cordova_bin
        self.verbose = verbose

    async def create(self, project_dir: Path) -> CommandResult:
        return await self.run_command("create", str(project_dir), cwd=project_dir.parent)

    async def plugin_add(self, project_dir: Path, plugin: str) -> CommandResult:
        return await self.run_command("plugin", "add", plugin, cwd=project_dir)

    async def platform_add(self, project_dir: Path, platform: str) -> CommandResult:
        return await self.run_command("platform", "add", platform, cwd=project_dir)

    async def requirements(self, project_dir: Path, platform_id: str) -> CommandResult:
        return await self.run_command("requirements", platform_id, cwd=project_dir)

    async def build(self, project_dir: Path, platform_id: str) -> CommandResult:
        return await self.run_command("build", platform_id, cwd=project_dir)

    async def start_tests(self, project_dir: Path, action: str, platform_id: str, args: str = "") -> CommandResult:
        """Run ``cordova <action> <platform_id> [args]``."""
        return await self.run_command(action, platform_id, *shlex.split(args), cwd=project_dir)

    def check(self, result: CommandResult) -> CommandResult:
        """Raise :class:`ExecutionError` for a non-zero exit.

        The captured output goes into the message unless verbose mode has
        already logged it.
        """
        if result.ok:
            return result
        message = f"{result.command} returned error code {result.returncode}"
        if not self.verbose and result.output:
            message = f"{message}\n{result.output}"
        raise ExecutionError(message, returncode=result.returncode, output=result.output)

    async def run_command(self, *args: str, cwd: Path) -> CommandResult:
        """Run a cordova command and return its exit status and output."""
        cmd = [self._cordova_bin, *args]
        command = shlex.join(cmd)
        logger.info("running command %s", command)
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                cwd=str(cwd),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except FileNotFoundError as exc:
            raise ExecutionError(f"cordova binary not found: {self._cordova_bin}", returncode=127) from exc

        try:
            stdout_b, _ = await proc.communicate()
        except asyncio.CancelledError:
            if proc.returncode is None:
                proc.kill()
                await asyncio.shield(proc.wait())
                logger.warning("killed abandoned command %s", command)
            raise

        output = stdout_b.decode(errors="replace").strip()
        if self.verbose and output:
            logger.info("%s output:\n%s", command, output)
        return CommandResult(command=command, returncode=proc.returncode or 0, output=output)
