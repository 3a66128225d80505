"""Disposable cordova project scaffolding."""

from __future__ import annotations

import asyncio
import json
import logging
import shutil
import tempfile
from dataclasses import dataclass
from functools import partial
from pathlib import Path

import aiofiles  # type: ignore[import-untyped]

from paramedic.runner.cordova import CordovaCli
from paramedic.shared.exceptions import ExecutionError, ScaffoldError
from paramedic.shared.models import ExecutionContext

logger = logging.getLogger(__name__)

# Plugins every test project needs besides the ones under test
_SUPPORT_PLUGINS = ("cordova-plugin-test-framework", "cordova-plugin-device")

_START_PAGE = 'src="index.html"'
_TEST_START_PAGE = 'src="cdvtests/index.html"'

MEDIC_CONFIG = Path("www") / "medic.json"


@dataclass(frozen=True, slots=True)
class ProjectHandle:
    """A scaffolded project on disk."""

    path: Path


class CordovaProjectScaffolder:
    """Create, prepare and delete throwaway cordova projects."""

    def __init__(self, cordova: CordovaCli, *, temp_root: Path | None = None) -> None:
        self._cordova = cordova
        self._temp_root = temp_root

    async def create(self, context: ExecutionContext) -> ProjectHandle:
        """Create a project with the plugins under test and the target platform.

        A project that fails or is cancelled half way is removed before the
        error propagates.

        Raises:
            ScaffoldError: If any cordova step or file edit fails.
        """
        path = Path(tempfile.mkdtemp(prefix="paramedic-", dir=self._temp_root))
        handle = ProjectHandle(path=path)
        logger.info("creating temp project at %s", path)
        created = False
        try:
            self._cordova.check(await self._cordova.create(path))
            await self._install_plugins(path, context)
            await _set_start_page(path)
            logger.info("adding platform %s", context.platform)
            self._cordova.check(await self._cordova.platform_add(path, context.platform))
            result = await self._cordova.requirements(path, context.platform_id)
            if not result.ok:
                raise ScaffoldError(f"platform requirements check for {context.platform_id} has failed")
            created = True
        except (ExecutionError, OSError) as exc:
            raise ScaffoldError(f"failed to prepare project at {path}: {exc}") from exc
        finally:
            # The caller never receives the handle of a failed or cancelled scaffold
            if not created:
                await asyncio.shield(self.remove(handle))
        return handle

    async def _install_plugins(self, path: Path, context: ExecutionContext) -> None:
        logger.info("installing plugins")
        for plugin in context.plugins:
            await self._add_plugin(path, _resolve_plugin(plugin, context.working_dir))
        for tests_dir in _plugin_test_dirs(path):
            await self._add_plugin(path, str(tests_dir))
        for plugin in _SUPPORT_PLUGINS:
            await self._add_plugin(path, plugin)
        await self._add_plugin(path, _resolve_plugin(context.harness_plugin, context.working_dir))

    async def _add_plugin(self, path: Path, plugin: str) -> None:
        logger.info("installing plugin %s", plugin)
        self._cordova.check(await self._cordova.plugin_add(path, plugin))

    async def write_connection_url(self, handle: ProjectHandle, url: str) -> None:
        """Write ``www/medic.json`` so the harness knows where to report."""
        logger.info("writing medic log url to project %s", url)
        target = handle.path / MEDIC_CONFIG
        target.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(target, "w") as f:
            await f.write(json.dumps({"logurl": url}))

    async def remove(self, handle: ProjectHandle) -> None:
        logger.info("deleting the application at %s", handle.path)
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, partial(shutil.rmtree, handle.path, ignore_errors=True))


def _resolve_plugin(plugin: str, working_dir: Path) -> str:
    """Resolve local plugin paths against the caller's working directory."""
    candidate = working_dir / plugin
    if candidate.exists():
        return str(candidate.resolve())
    return plugin


def _plugin_test_dirs(path: Path) -> list[Path]:
    """``tests`` sub-plugins shipped by the plugins installed so far."""
    plugins_dir = path / "plugins"
    if not plugins_dir.is_dir():
        return []
    return sorted(p.parent for p in plugins_dir.glob("*/tests/plugin.xml"))


async def _set_start_page(path: Path) -> None:
    logger.info("setting app start page to test page")
    config = path / "config.xml"
    async with aiofiles.open(config) as f:
        content = await f.read()
    async with aiofiles.open(config, "w") as f:
        await f.write(content.replace(_START_PAGE, _TEST_START_PAGE))
