"""Frozen Pydantic domain models shared by all modules."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, SecretStr, field_validator

from paramedic.shared.enums import CordovaAction, ExecutionMode


class ExecutionContext(BaseModel):
    """Configuration of one run, resolved once before it starts."""

    model_config = {"frozen": True}

    platform: str
    action: CordovaAction = CordovaAction.RUN
    use_sauce: bool = False
    args: str = ""
    plugins: tuple[str, ...] = ()
    harness_plugin: str = "paramedic-plugin"
    working_dir: Path = Field(default_factory=Path.cwd)

    # Event server
    ports: tuple[int, int] = (8008, 8009)
    external_server_url: str | None = None

    # Seconds
    connection_timeout: float = 300.0
    run_timeout: float = 600.0

    cleanup_on_success: bool = True
    cleanup_on_failure: bool = True
    verbose: bool = False

    # Sauce Labs
    sauce_user: str | None = None
    sauce_key: SecretStr | None = None
    sauce_storage_url: str = "https://saucelabs.com/rest/v1/storage"
    sauce_hub_url: str = "https://ondemand.saucelabs.com/wd/hub"
    app_package: str = "io.cordova.hellocordova"
    app_activity: str = "io.cordova.hellocordova.MainActivity"

    @field_validator("ports")
    @classmethod
    def _check_ports(cls, value: tuple[int, int]) -> tuple[int, int]:
        start, end = value
        if start > end:
            raise ValueError(f"port range start {start} is after end {end}")
        return value

    @property
    def platform_id(self) -> str:
        """Platform name without a version spec (``android@5.1.1`` -> ``android``)."""
        return self.platform.split("@", 1)[0].strip().lower()

    @property
    def mode(self) -> ExecutionMode:
        if self.action == CordovaAction.BUILD:
            return ExecutionMode.BUILD_ONLY
        if self.use_sauce:
            return ExecutionMode.RUN_REMOTE
        return ExecutionMode.RUN_LOCAL

    @property
    def has_sauce_credentials(self) -> bool:
        return bool(self.sauce_user) and self.sauce_key is not None and bool(self.sauce_key.get_secret_value())


class RunOutcome(BaseModel):
    """Aggregated pass/fail result of one run."""

    model_config = {"frozen": True}

    passed: bool
    failed_specs: int = 0
    mode: ExecutionMode
    waited: bool = True


class SpecResults(BaseModel):
    model_config = {"frozen": True, "populate_by_name": True}

    spec_failed: int = Field(alias="specFailed", ge=0)


class SuiteSummary(BaseModel):
    """Payload of the terminal ``jasmineDone`` event."""

    model_config = {"frozen": True, "populate_by_name": True}

    spec_results: SpecResults = Field(alias="specResults")
