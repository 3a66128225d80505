"""Command-line entry point wiring a run from environment settings."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

from paramedic.config import Settings, get_settings
from paramedic.runner.cordova import CordovaCli
from paramedic.runner.orchestrator import ParamedicRunner
from paramedic.runner.project import CordovaProjectScaffolder
from paramedic.runner.reporters import LoggingReporter
from paramedic.shared.exceptions import ParamedicError

logger = logging.getLogger(__name__)


async def run_from_settings(settings: Settings, *, working_dir: Path | None = None) -> int:
    """Run once with collaborators built from ``settings``.

    Returns:
        Process exit code: 0 when every spec passed, 1 otherwise.
    """
    context = settings.to_context(working_dir or Path.cwd())
    cordova = CordovaCli(verbose=context.verbose)
    runner = ParamedicRunner(
        scaffolder=CordovaProjectScaffolder(cordova),
        cordova=cordova,
        reporters=[LoggingReporter()],
    )
    try:
        outcome = await runner.run(context)
    except ParamedicError as exc:
        logger.error("run failed: %s", exc)
        return 1

    if outcome.passed:
        logger.info("all tests passed (%s)", outcome.mode.value)
        return 0
    logger.error("%d spec(s) failed", outcome.failed_specs)
    return 1


def main() -> None:
    settings = get_settings()
    level = logging.DEBUG if settings.verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    sys.exit(asyncio.run(run_from_settings(settings)))


if __name__ == "__main__":
    main()
