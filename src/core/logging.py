"""Structured logging setup using structlog."""

from __future__ import annotations

import logging
import sys

import structlog

from src.core.config import get_settings

ALERT_LOGGER_NAME = "alert_log"


def _parse_level(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)


def setup_logging(
    level: str | None = None,
    fmt: str | None = None,
    alert_level: str | None = None,
) -> None:
    """Configure structlog with JSON or console renderer.

    The ``alert_log`` logger gets its own level. Its records propagate to
    the root handler regardless of the root level, so the per-alert
    ``alert_sending`` / ``alert_sent`` debug records are kept under an
    ``INFO`` root unless ``alert_level`` says otherwise.

    Args:
        level: Log level override (e.g. "DEBUG"). Uses config if None.
        fmt: Renderer format override ("json" or "console"). Uses config if None.
        alert_level: Level override for ``alert_log``. Uses config if None.
    """
    settings = get_settings()
    log_level = _parse_level(level or settings.logging.level)
    log_format = fmt or settings.logging.format
    alert_log_level = _parse_level(alert_level or settings.logging.alert_level)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    logging.getLogger(ALERT_LOGGER_NAME).setLevel(alert_log_level)
