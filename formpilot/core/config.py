"""Application configuration using pydantic-settings."""
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BrowserConfig(BaseModel):
    """Browser session configuration.

    With ``cdp_port`` set, an already running Chrome is attached over CDP;
    otherwise a local Chromium is launched.
    """

    model_config = ConfigDict(validate_assignment=True)

    cdp_port: Optional[int] = None
    connect_retries: int = 5
    retry_delay: float = 2.0
    headless: bool = False
    channel: Optional[str] = None
    maximize: bool = True
    viewport_width: int = 1280
    viewport_height: int = 800
    timeout: int = 30000
    wait_until: str = "networkidle"


class FillConfig(BaseModel):
    """Pacing and retry budget for field filling. Times are milliseconds."""

    model_config = ConfigDict(validate_assignment=True)

    max_attempts: int = Field(default=3, ge=1)
    visible_timeout_ms: int = 10000
    pre_focus_wait_ms: int = 1000
    focus_wait_ms: int = 500
    select_wait_ms: int = 300
    clear_wait_ms: int = 500
    key_delay_ms: int = 150
    char_pause_ms: int = 200
    progress_every: int = Field(default=3, ge=1)
    settle_ms: int = 1000
    verify_settle_ms: int = 1000
    retry_backoff_ms: int = 2000


class RunConfig(BaseModel):
    """Per-run behaviour of the orchestrator."""

    model_config = ConfigDict(validate_assignment=True)

    discovery: bool = True
    base_url: Optional[str] = None
    submit_timeout_ms: int = 10000
    screenshot_dir: Optional[Path] = None
    run_log_path: Optional[Path] = None


class Settings(BaseSettings):
    """Application settings loaded from YAML or environment."""

    model_config = SettingsConfigDict(
        env_prefix="FORMPILOT_", env_nested_delimiter="__"
    )

    browser: BrowserConfig = BrowserConfig()
    fill: FillConfig = FillConfig()
    run: RunConfig = RunConfig()
    defaults: dict[str, str] = {}
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        """Load settings from a YAML file.

        Args:
            path: Path to the YAML configuration file.

        Returns:
            Settings instance with loaded configuration.
        """
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)
