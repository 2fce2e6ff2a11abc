"""Opsgenie Alert API — payload types and clients."""

from src.opsgenie.client import HttpOpsgenieApiClient, OpsgenieApiClient
from src.opsgenie.exceptions import (
    OpsgenieApiError,
    OpsgenieConnectionError,
    OpsgenieError,
)
from src.opsgenie.types import (
    AlertPriority,
    AlertResponse,
    OpsgenieAlert,
    OpsgenieAlertWithResponders,
    Responder,
    ResponderType,
)

__all__ = [
    "AlertPriority",
    "AlertResponse",
    "HttpOpsgenieApiClient",
    "OpsgenieAlert",
    "OpsgenieAlertWithResponders",
    "OpsgenieApiClient",
    "OpsgenieApiError",
    "OpsgenieConnectionError",
    "OpsgenieError",
    "Responder",
    "ResponderType",
]
