"""Tests for shared enum definitions."""

from __future__ import annotations

from paramedic.shared.enums import LIFECYCLE_EVENTS, CordovaAction, ExecutionMode, ServerEvent, WatchState


class TestServerEvent:
    def test_wire_names(self) -> None:
        assert ServerEvent("jasmineDone") == ServerEvent.JASMINE_DONE
        assert ServerEvent.DEVICE_LOG == "deviceLog"
        assert ServerEvent.DISCONNECT == "disconnect"

    def test_lifecycle_excludes_device_events(self) -> None:
        assert len(LIFECYCLE_EVENTS) == 6
        assert LIFECYCLE_EVENTS[-1] == ServerEvent.JASMINE_DONE
        assert ServerEvent.DEVICE_LOG not in LIFECYCLE_EVENTS
        assert ServerEvent.DISCONNECT not in LIFECYCLE_EVENTS


def test_cordova_actions() -> None:
    assert {a.value for a in CordovaAction} == {"run", "emulate", "build"}


def test_execution_modes() -> None:
    assert ExecutionMode.BUILD_ONLY.value == "build-only"
    assert {s.value for s in WatchState} == {"waiting", "completed", "disconnected"}
