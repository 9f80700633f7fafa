"""Env var config loading with pydantic-settings."""

from __future__ import annotations

from pathlib import Path

import structlog
from pydantic_settings import BaseSettings, SettingsConfigDict

from cspkit.models import Mode, OutputMode

logger = structlog.get_logger()

_PRESETS_PATH = Path(__file__).parent / "presets.yaml"


class CspSettings(BaseSettings):
    """Defaults for the CLI and middleware, overridden by ``CSP_*`` env vars."""

    model_config = SettingsConfigDict(
        env_prefix="CSP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    mode: Mode = Mode.STRICT
    output_mode: OutputMode = OutputMode.FULL_HEADER
    report_only: bool = False

    # Named policy presets
    preset: str = "balanced"
    presets_file: str = str(_PRESETS_PATH)

    log_level: str = "info"
    log_json: bool = True


_settings: CspSettings | None = None


def get_settings() -> CspSettings:
    """Get or create the singleton settings instance."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def load_settings() -> CspSettings:
    """Load settings from env vars (env vars override model defaults)."""
    global _settings
    _settings = CspSettings()
    logger.info("config_loaded", mode=_settings.mode.value, preset=_settings.preset)
    return _settings
