"""Exception hierarchy for the Opsgenie Alert API client."""

from __future__ import annotations


class OpsgenieError(Exception):
    """Base exception for all Opsgenie client errors."""


class OpsgenieConnectionError(OpsgenieError):
    """Failed to reach the Opsgenie API (network error or timeout)."""


class OpsgenieApiError(OpsgenieError):
    """The Opsgenie API answered with a non-success status."""

    def __init__(self, status: int, body: str = "") -> None:
        super().__init__(f"Opsgenie API returned {status}: {body[:200]}")
        self.status = status
        self.body = body
