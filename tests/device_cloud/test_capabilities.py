"""Tests for device profiles and capability construction."""

from __future__ import annotations

from pathlib import Path

import pytest

from paramedic.device_cloud.capabilities import binary_path_for, capabilities_for, profile_for
from paramedic.shared.exceptions import UnsupportedPlatformError
from paramedic.shared.models import ExecutionContext


class TestCapabilities:
    def test_android(self, context: ExecutionContext) -> None:
        caps = capabilities_for("android", context)

        assert caps["deviceName"] == "Android Emulator"
        assert caps["platformName"] == "Android"
        assert caps["platformVersion"] == "4.4"
        assert caps["app"] == "sauce-storage:android-debug.apk"
        assert caps["appPackage"] == "io.cordova.hellocordova"
        assert caps["appActivity"] == "io.cordova.hellocordova.MainActivity"
        assert caps["deviceOrientation"] == "portrait"
        assert caps["deviceType"] == "phone"

    def test_ios_has_no_activity(self, context: ExecutionContext) -> None:
        caps = capabilities_for("ios", context.model_copy(update={"platform": "ios"}))

        assert caps["deviceName"] == "iPhone Simulator"
        assert caps["platformName"] == "iOS"
        assert caps["platformVersion"] == "9.2"
        assert caps["app"] == "sauce-storage:mobilespec.ipa"
        assert "appPackage" not in caps
        assert "appActivity" not in caps

    def test_custom_app_identity(self, context: ExecutionContext) -> None:
        custom = context.model_copy(update={"app_package": "org.example.app", "app_activity": "org.example.Main"})

        caps = capabilities_for("android", custom)

        assert caps["appPackage"] == "org.example.app"
        assert caps["appActivity"] == "org.example.Main"

    @pytest.mark.parametrize("platform_id", ["windows", "browser", ""])
    def test_unsupported_platform(self, platform_id: str, context: ExecutionContext) -> None:
        with pytest.raises(UnsupportedPlatformError, match="only android and ios"):
            capabilities_for(platform_id, context)


class TestProfiles:
    def test_fixed_upload_names(self) -> None:
        assert profile_for("android").app_name == "android-debug.apk"
        assert profile_for("ios").app_name == "mobilespec.ipa"

    def test_binary_paths(self, tmp_path: Path) -> None:
        assert binary_path_for("android", tmp_path) == (
            tmp_path / "platforms" / "android" / "build" / "outputs" / "apk" / "android-debug.apk"
        )
        ipa = tmp_path / "platforms" / "ios" / "build" / "device" / "mobilespec.ipa"
        assert binary_path_for("ios", tmp_path) == ipa
