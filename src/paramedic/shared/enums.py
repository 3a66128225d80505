"""Domain enumerations used across all modules."""

from __future__ import annotations

from enum import Enum, unique


@unique
class ExecutionMode(str, Enum):
    """How a run exercises the built app."""

    BUILD_ONLY = "build-only"
    RUN_LOCAL = "run-local"
    RUN_REMOTE = "run-remote"


@unique
class CordovaAction(str, Enum):
    """Cordova CLI verb used to start the tests."""

    RUN = "run"
    EMULATE = "emulate"
    BUILD = "build"


@unique
class Platform(str, Enum):
    """Platforms with a Sauce Labs device profile."""

    ANDROID = "android"
    IOS = "ios"


@unique
class ServerEvent(str, Enum):
    """Events emitted by the local test event server."""

    JASMINE_STARTED = "jasmineStarted"
    SPEC_STARTED = "specStarted"
    SPEC_DONE = "specDone"
    SUITE_STARTED = "suiteStarted"
    SUITE_DONE = "suiteDone"
    JASMINE_DONE = "jasmineDone"
    DEVICE_LOG = "deviceLog"
    DEVICE_INFO = "deviceInfo"
    DISCONNECT = "disconnect"


# Jasmine reporter callbacks, in the order a suite emits them.
LIFECYCLE_EVENTS: tuple[ServerEvent, ...] = (
    ServerEvent.JASMINE_STARTED,
    ServerEvent.SPEC_STARTED,
    ServerEvent.SPEC_DONE,
    ServerEvent.SUITE_STARTED,
    ServerEvent.SUITE_DONE,
    ServerEvent.JASMINE_DONE,
)


@unique
class WatchState(str, Enum):
    """States of the terminal-result watcher."""

    WAITING = "waiting"
    COMPLETED = "completed"
    DISCONNECTED = "disconnected"
