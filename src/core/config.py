"""Pydantic settings loaded from YAML configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, SecretStr

_settings: Settings | None = None

_DEFAULT_CONFIG_PATH = Path("config/settings.yaml")


class OpsgenieConfig(BaseModel):
    """Opsgenie Alert API configuration."""

    api_key: SecretStr = SecretStr("")
    api_url: str = "https://api.opsgenie.com/v2/alerts"
    timeout_secs: float = 10.0


class AlertConfig(BaseModel):
    """Operator settings for turning events into alerts.

    Every field is optional; blank values fall back to defaults when the
    configuration is normalized on attach.
    """

    alert_message: str = ""
    alert_description: str = ""
    event_priority: str = ""
    responders: str = ""
    tags: str = ""
    add_event_tags: bool = False
    add_event_property: str = ""


class HostConfig(BaseModel):
    """Details of the host that delivers events."""

    base_uri: str = "http://localhost/"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "json"
    # Applied to the alert_log logger only; independent of ``level``.
    alert_level: str = "DEBUG"


class Settings(BaseModel):
    """Root settings container."""

    opsgenie: OpsgenieConfig = OpsgenieConfig()
    alerts: AlertConfig = AlertConfig()
    host: HostConfig = HostConfig()
    logging: LoggingConfig = LoggingConfig()


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from a YAML file and cache globally.

    Args:
        path: Path to YAML config. Defaults to config/settings.yaml.

    Returns:
        Parsed Settings instance.
    """
    global _settings  # noqa: PLW0603

    config_path = Path(path) if path else _DEFAULT_CONFIG_PATH

    data: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f)
            if isinstance(raw, dict):
                data = raw

    _settings = Settings(**data)
    return _settings


def get_settings() -> Settings:
    """Return the cached settings, loading defaults if not yet loaded."""
    global _settings  # noqa: PLW0603
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Reset the cached settings (useful for testing)."""
    global _settings  # noqa: PLW0603
    _settings = None
