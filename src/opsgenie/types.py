"""Payload types for the Opsgenie Alert API."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ResponderType(StrEnum):
    """Kinds of responder Opsgenie can notify."""

    TEAM = "team"
    USER = "user"
    ESCALATION = "escalation"
    SCHEDULE = "schedule"


class AlertPriority(StrEnum):
    """Alert priority, P1 highest to P5 lowest."""

    P1 = "P1"
    P2 = "P2"
    P3 = "P3"
    P4 = "P4"
    P5 = "P5"


class Responder(BaseModel):
    """A team, user, escalation or schedule attached to an alert."""

    model_config = {"frozen": True}

    name: str = Field(min_length=1)
    type: ResponderType = ResponderType.TEAM


class OpsgenieAlert(BaseModel):
    """Create-alert request without responders."""

    message: str
    alias: str
    description: str
    priority: AlertPriority = AlertPriority.P3
    source: str
    tags: list[str] = Field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        """JSON body for the create-alert call."""
        return self.model_dump(mode="json")


class OpsgenieAlertWithResponders(OpsgenieAlert):
    """Create-alert request that routes to explicit responders."""

    responders: list[Responder]


class AlertResponse(BaseModel):
    """Result of a create-alert call.

    Opsgenie processes alert creation asynchronously; a 202 with a
    ``requestId`` only means the request was accepted.
    """

    status_code: int
    request_id: str = ""
    result: str = ""
