"""Centralised configuration via Pydantic Settings."""

from __future__ import annotations

from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

from paramedic.shared.enums import CordovaAction
from paramedic.shared.models import ExecutionContext


class Settings(BaseSettings):
    """Run configuration loaded from environment variables."""

    model_config = {"env_prefix": "PARAMEDIC_", "frozen": True, "populate_by_name": True}

    # Target
    # Cordova platform spec, optionally versioned: "android", "ios@4.1.0"
    platform: str = "android"
    action: CordovaAction = CordovaAction.RUN
    args: str = ""
    # Format: "path/to/plugin,cordova-plugin-foo@1.2.0"
    plugins: str = ""
    harness_plugin: str = "paramedic-plugin"

    # Local event server
    port_start: int = 8008
    port_end: int = 8009
    external_server_url: str = ""

    # Timeouts (seconds)
    connection_timeout: float = 300.0
    run_timeout: float = 600.0

    # Cleanup policy
    cleanup_on_success: bool = True
    cleanup_on_failure: bool = True

    verbose: bool = False

    # Sauce Labs
    use_sauce: bool = False
    sauce_user: str = Field("", validation_alias=AliasChoices("SAUCE_USER", "sauce_user"))
    sauce_access_key: str = Field("", validation_alias=AliasChoices("SAUCE_ACCESS_KEY", "sauce_access_key"))
    sauce_storage_url: str = "https://saucelabs.com/rest/v1/storage"
    sauce_hub_url: str = "https://ondemand.saucelabs.com/wd/hub"
    app_package: str = "io.cordova.hellocordova"
    app_activity: str = "io.cordova.hellocordova.MainActivity"

    @property
    def plugin_list(self) -> tuple[str, ...]:
        return tuple(p.strip() for p in self.plugins.split(",") if p.strip())

    def to_context(self, working_dir: Path) -> ExecutionContext:
        """Freeze these settings into the context for one run.

        ``working_dir`` is captured once by the caller; relative plugin
        paths are resolved against it.
        """
        return ExecutionContext(
            platform=self.platform,
            action=self.action,
            use_sauce=self.use_sauce,
            args=self.args,
            plugins=self.plugin_list,
            harness_plugin=self.harness_plugin,
            working_dir=working_dir,
            ports=(self.port_start, self.port_end),
            external_server_url=self.external_server_url or None,
            connection_timeout=self.connection_timeout,
            run_timeout=self.run_timeout,
            cleanup_on_success=self.cleanup_on_success,
            cleanup_on_failure=self.cleanup_on_failure,
            verbose=self.verbose,
            sauce_user=self.sauce_user or None,
            sauce_key=self.sauce_access_key or None,
            sauce_storage_url=self.sauce_storage_url,
            sauce_hub_url=self.sauce_hub_url,
            app_package=self.app_package,
            app_activity=self.app_activity,
        )


def get_settings() -> Settings:
    """Factory — allows overriding in tests."""
    return Settings()
