"""Hierarchical exception types for a paramedic run."""

from __future__ import annotations


class ParamedicError(Exception):
    """Base exception for all paramedic errors."""


# ── Configuration ───────────────────────────────────────────────


class ConfigurationError(ParamedicError):
    """Invalid or incompatible run configuration."""


class UnsupportedPlatformError(ConfigurationError):
    """Platform has no device-cloud profile."""


class MissingCredentialsError(ConfigurationError):
    """A required Sauce Labs credential is not set."""


# ── Provisioning ────────────────────────────────────────────────


class ProvisionError(ParamedicError):
    """Failed to acquire a resource needed by the run."""


class ScaffoldError(ProvisionError):
    """Temporary cordova project could not be prepared."""


class ServerStartError(ProvisionError):
    """Local test event server failed to start."""


class UploadError(ProvisionError):
    """App binary upload to Sauce storage failed."""


class SessionError(ProvisionError):
    """Remote driver session could not be started."""


# ── Execution ───────────────────────────────────────────────────


class ExecutionError(ParamedicError):
    """A cordova command exited with a non-zero status."""

    def __init__(self, message: str, *, returncode: int, output: str = "") -> None:
        super().__init__(message)
        self.returncode = returncode
        self.output = output


# ── Waiting ─────────────────────────────────────────────────────


class ParamedicTimeoutError(ParamedicError):
    """A bounded wait expired."""

    def __init__(self, message: str, *, timeout: float) -> None:
        super().__init__(message)
        self.timeout = timeout


class ConnectionTimeoutError(ParamedicTimeoutError):
    """Device did not attach to the event server in time."""


class RunTimeoutError(ParamedicTimeoutError):
    """The whole run exceeded its time budget."""


class DisconnectError(ParamedicError):
    """Device dropped before reporting a terminal result."""


class ResultError(ParamedicError):
    """Terminal event payload could not be interpreted."""
