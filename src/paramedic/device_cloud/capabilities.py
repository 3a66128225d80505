"""Per-platform Sauce Labs device profiles and capability construction."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from paramedic.shared.enums import Platform
from paramedic.shared.exceptions import UnsupportedPlatformError
from paramedic.shared.models import ExecutionContext

_APPIUM_VERSION = "1.5.1"


@dataclass(frozen=True, slots=True)
class DeviceProfile:
    """What Sauce Labs needs to know about one platform."""

    platform: Platform
    device_name: str
    platform_name: str
    platform_version: str
    # Fixed storage filename; re-uploads overwrite it in place
    app_name: str
    # Build output location relative to the project root
    binary_parts: tuple[str, ...]
    launches_activity: bool = False


_PROFILES: dict[Platform, DeviceProfile] = {
    Platform.ANDROID: DeviceProfile(
        platform=Platform.ANDROID,
        device_name="Android Emulator",
        platform_name="Android",
        platform_version="4.4",
        app_name="android-debug.apk",
        binary_parts=("platforms", "android", "build", "outputs", "apk", "android-debug.apk"),
        launches_activity=True,
    ),
    Platform.IOS: DeviceProfile(
        platform=Platform.IOS,
        device_name="iPhone Simulator",
        platform_name="iOS",
        platform_version="9.2",
        app_name="mobilespec.ipa",
        binary_parts=("platforms", "ios", "build", "device", "mobilespec.ipa"),
    ),
}


def profile_for(platform_id: str) -> DeviceProfile:
    """Look up the device profile for ``platform_id``.

    Raises:
        UnsupportedPlatformError: If Sauce Labs testing is not supported for it.
    """
    try:
        return _PROFILES[Platform(platform_id)]
    except ValueError as exc:
        raise UnsupportedPlatformError(
            f"unsupported platform for sauce labs testing: {platform_id!r} (only android and ios)"
        ) from exc


def binary_path_for(platform_id: str, project_dir: Path) -> Path:
    return project_dir.joinpath(*profile_for(platform_id).binary_parts)


def capabilities_for(platform_id: str, context: ExecutionContext) -> dict[str, str]:
    """Build the desired capabilities for a remote session on ``platform_id``."""
    profile = profile_for(platform_id)
    caps = {
        "name": f"Paramedic Sauce test ({profile.platform.value})",
        "browserName": "",
        "appiumVersion": _APPIUM_VERSION,
        "deviceOrientation": "portrait",
        "deviceType": "phone",
        "app": f"sauce-storage:{profile.app_name}",
        "deviceName": profile.device_name,
        "platformName": profile.platform_name,
        "platformVersion": profile.platform_version,
    }
    if profile.launches_activity:
        caps["appPackage"] = context.app_package
        caps["appActivity"] = context.app_activity
    return caps
