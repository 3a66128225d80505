"""Run orchestrator: scaffold -> serve -> run -> wait -> teardown."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable

from paramedic.device_cloud.capabilities import binary_path_for, capabilities_for, profile_for
from paramedic.device_cloud.session import RemoteDeviceSession
from paramedic.device_cloud.storage import SauceStorageUploader
from paramedic.event_server.server import LocalEventServer
from paramedic.runner.interfaces import ArtifactUploader, BuildTool, DeviceSession, EventServer, ProjectScaffolder
from paramedic.runner.reporters import subscribe_device_output, subscribe_reporters
from paramedic.runner.results import ResultWatcher
from paramedic.runner.session import RunSession
from paramedic.runner.watchdog import wait_for_connection
from paramedic.shared.enums import CordovaAction, ExecutionMode
from paramedic.shared.exceptions import ConfigurationError, MissingCredentialsError, RunTimeoutError
from paramedic.shared.models import ExecutionContext, RunOutcome

logger = logging.getLogger(__name__)

SAUCE_USER_ENV_VAR = "SAUCE_USER"
SAUCE_KEY_ENV_VAR = "SAUCE_ACCESS_KEY"


def validate(context: ExecutionContext) -> None:
    """Reject unusable configurations before anything is acquired.

    Raises:
        ConfigurationError: On incompatible options, an unsupported sauce
            platform, missing sauce credentials or a sauce run without an
            external server url.
    """
    if context.connection_timeout <= 0 or context.run_timeout <= 0:
        raise ConfigurationError("connection and run timeouts must be positive")
    if not context.use_sauce:
        return
    profile_for(context.platform_id)
    if context.sauce_key is None or not context.sauce_key.get_secret_value():
        raise MissingCredentialsError(f"{SAUCE_KEY_ENV_VAR} environment variable not set")
    if not context.sauce_user:
        raise MissingCredentialsError(f"{SAUCE_USER_ENV_VAR} environment variable not set")
    if context.action == CordovaAction.BUILD:
        raise ConfigurationError("build-only mode cannot be used with sauce labs")
    if not context.external_server_url:
        # A cloud device cannot reach this host through the emulator loopback
        raise ConfigurationError("sauce labs runs need an external server url the remote device can reach")


async def start_event_server(context: ExecutionContext) -> EventServer:
    return await LocalEventServer.start(context.ports, external_server_url=context.external_server_url)


def sauce_uploader(context: ExecutionContext) -> ArtifactUploader:
    return SauceStorageUploader(
        context.sauce_user or "",
        context.sauce_key.get_secret_value() if context.sauce_key else "",
        base_url=context.sauce_storage_url,
    )


def sauce_session(context: ExecutionContext) -> DeviceSession:
    return RemoteDeviceSession(
        context.sauce_user or "",
        context.sauce_key.get_secret_value() if context.sauce_key else "",
        hub_url=context.sauce_hub_url,
    )


class ParamedicRunner:
    """Sequence one test run and guarantee its teardown.

    Each stage reads and extends an explicit :class:`RunSession`; teardown
    releases whatever the session holds, exactly once, on every exit path
    including the overall run timeout and outer cancellation.
    """

    def __init__(
        self,
        *,
        scaffolder: ProjectScaffolder,
        cordova: BuildTool,
        server_factory: Callable[[ExecutionContext], Awaitable[EventServer]] = start_event_server,
        uploader_factory: Callable[[ExecutionContext], ArtifactUploader] = sauce_uploader,
        session_factory: Callable[[ExecutionContext], DeviceSession] = sauce_session,
        reporters: Iterable[object] = (),
    ) -> None:
        self._scaffolder = scaffolder
        self._cordova = cordova
        self._server_factory = server_factory
        self._uploader_factory = uploader_factory
        self._session_factory = session_factory
        self._reporters = tuple(reporters)

    async def run(self, context: ExecutionContext) -> RunOutcome:
        """Run the tests described by ``context``.

        Returns:
            The aggregated outcome; failed specs give ``passed=False``.

        Raises:
            ParamedicError: The first error hit, after teardown has finished.
        """
        session = RunSession()
        outcome: RunOutcome | None = None
        try:
            validate(context)
            outcome = await asyncio.wait_for(self._pipeline(context, session), timeout=context.run_timeout)
            return outcome
        except asyncio.TimeoutError as exc:
            logger.error("run timed out after %ss", context.run_timeout)
            raise RunTimeoutError(
                f"test run seems to be blocked: timeout of {context.run_timeout:g}s exceeded",
                timeout=context.run_timeout,
            ) from exc
        finally:
            await self._teardown(context, session, succeeded=outcome is not None and outcome.passed)

    async def _pipeline(self, context: ExecutionContext, session: RunSession) -> RunOutcome:
        session.project = await self._scaffolder.create(context)
        server = session.attach_server(await self._server_factory(context))

        # Everything listening must be in place before the app can start.
        subscribe_reporters(server, self._reporters)
        subscribe_device_output(server)
        watcher = ResultWatcher().attach(server)

        await self._scaffolder.write_connection_url(session.project, server.connection_url(context.platform_id))

        if context.mode == ExecutionMode.RUN_REMOTE:
            return await self._run_remote(context, session, watcher)
        return await self._run_local(context, session, watcher)

    async def _run_local(self, context: ExecutionContext, session: RunSession, watcher: ResultWatcher) -> RunOutcome:
        assert session.project is not None and session.server is not None
        result = await self._cordova.start_tests(
            session.project.path, context.action.value, context.platform_id, context.args
        )
        if not result.ok:
            logger.error("unable to run tests; command log is available above")
        self._cordova.check(result)

        if context.mode == ExecutionMode.BUILD_ONLY:
            logger.info("build-only run, not waiting for test results")
            return RunOutcome(passed=True, mode=context.mode, waited=False)
        return await self._await_results(context, session.server, watcher)

    async def _run_remote(self, context: ExecutionContext, session: RunSession, watcher: ResultWatcher) -> RunOutcome:
        assert session.project is not None and session.server is not None
        logger.info("running sauce tests")
        self._cordova.check(await self._cordova.build(session.project.path, context.platform_id))

        profile = profile_for(context.platform_id)
        uploader = self._uploader_factory(context)
        await uploader.upload(binary_path_for(context.platform_id, session.project.path), profile.app_name)

        remote = session.attach_remote(self._session_factory(context))
        await remote.open(capabilities_for(context.platform_id, context))
        return await self._await_results(context, session.server, watcher)

    async def _await_results(
        self, context: ExecutionContext, server: EventServer, watcher: ResultWatcher
    ) -> RunOutcome:
        await wait_for_connection(server, context.connection_timeout)
        passed = await watcher.wait()
        return RunOutcome(passed=passed, failed_specs=watcher.failed_specs or 0, mode=context.mode)

    async def _teardown(self, context: ExecutionContext, session: RunSession, *, succeeded: bool) -> None:
        """Release the remote device, the server and (per policy) the project.

        Failures here are logged so they never mask the run's own result.
        """
        if session.torn_down:
            return
        session.torn_down = True

        remote, session.remote = session.remote, None
        if remote is not None:
            try:
                await remote.close()
            except Exception as exc:
                logger.error("failed to close remote session: %s", exc)

        server, session.server = session.server, None
        if server is not None:
            try:
                await server.stop()
            except Exception as exc:
                logger.error("failed to stop event server: %s", exc)

        project, session.project = session.project, None
        if project is None:
            return
        cleanup = context.cleanup_on_success if succeeded else context.cleanup_on_failure
        if not cleanup:
            logger.info("keeping project at %s", project.path)
            return
        try:
            await self._scaffolder.remove(project)
        except Exception as exc:
            logger.error("failed to remove project %s: %s", project.path, exc)
