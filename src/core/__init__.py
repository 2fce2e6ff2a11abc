"""Core module — config, types, logging."""

from src.core.config import (
    AlertConfig,
    HostConfig,
    LoggingConfig,
    OpsgenieConfig,
    Settings,
    get_settings,
    load_settings,
    reset_settings,
)
from src.core.logging import setup_logging
from src.core.types import LogEvent

__all__ = [
    "AlertConfig",
    "HostConfig",
    "LogEvent",
    "LoggingConfig",
    "OpsgenieConfig",
    "Settings",
    "get_settings",
    "load_settings",
    "reset_settings",
    "setup_logging",
]
