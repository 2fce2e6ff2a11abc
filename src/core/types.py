"""Domain types for incoming log events."""

from __future__ import annotations

import time
from typing import Any

from pydantic import BaseModel, Field


class LogEvent(BaseModel):
    """A single log/event record delivered by the host.

    ``properties`` holds the structured payload of the event. Values are
    whatever the host decoded: strings, lists, numbers or nested mappings.
    """

    id: str
    message: str = ""
    level: str = ""
    timestamp: float = Field(default_factory=time.time)
    properties: dict[str, Any] = Field(default_factory=dict)
    exception: str | None = None
