"""Resolve the configured alert priority."""

from __future__ import annotations

import re

from src.opsgenie.types import AlertPriority

_PRIORITY_RE = re.compile(r"P[1-5]", re.IGNORECASE)

DEFAULT_PRIORITY = AlertPriority.P3


def resolve_priority(raw: str | None) -> AlertPriority:
    """Return the priority named by *raw*, or P3 when blank or invalid."""
    if not raw or not _PRIORITY_RE.fullmatch(raw):
        return DEFAULT_PRIORITY
    return AlertPriority(raw.upper())
