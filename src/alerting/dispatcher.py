"""Per-event alert dispatch — build, submit and log one Opsgenie alert."""

from __future__ import annotations

import json

import structlog

from src.alerting.snapshot import AlertSnapshot
from src.alerting.tags import build_tags
from src.alerting.templates import AlertMessageContext
from src.core.logging import ALERT_LOGGER_NAME
from src.core.types import LogEvent
from src.opsgenie.client import OpsgenieApiClient
from src.opsgenie.types import OpsgenieAlert, OpsgenieAlertWithResponders

# Dedicated structured logger for alert records; each carries enough
# context to re-fire the alert elsewhere.
alert_logger = structlog.get_logger(ALERT_LOGGER_NAME)

logger = structlog.get_logger(__name__)


class AlertDispatcher:
    """Turns events into Opsgenie alerts.

    - Every attempt is logged on *alert_logger* before and after submission.
    - Failures while building or submitting an alert are logged and
      swallowed, so one bad event never stops the stream.
    - Only a missing event (a host bug) raises.

    Safe to call concurrently: all per-event state is local and the
    snapshot is immutable.
    """

    def __init__(self, snapshot: AlertSnapshot, client: OpsgenieApiClient) -> None:
        self._snapshot = snapshot
        self._client = client

    @property
    def snapshot(self) -> AlertSnapshot:
        return self._snapshot

    async def handle(self, event: LogEvent | None) -> None:
        if event is None:
            raise ValueError("event must not be None")

        snap = self._snapshot
        tags = list(snap.static_tags)
        message = ""
        description = ""

        try:
            tags = self._tags_for(event)
            context = AlertMessageContext(event=event, base_uri=snap.base_uri)
            message = snap.message_template.render(context)
            description = snap.description_template.render(context)

            alert_logger.debug(
                "alert_sending",
                event_id=event.id,
                message=message,
                description=description,
                priority=str(snap.priority),
                responders=snap.responders_summary,
                tags=tags,
            )

            alert = self._build_alert(event, message, description, tags)
            logger.debug("alert_payload", payload=json.dumps(alert.to_payload()))

            response = await self._client.create(alert)

            alert_logger.debug(
                "alert_sent",
                event_id=event.id,
                status=response.status_code,
                request_id=response.request_id,
                message=message,
                description=description,
                priority=str(snap.priority),
                responders=snap.responders_summary,
                tags=tags,
            )
        except Exception as exc:
            alert_logger.exception(
                "alert_failed",
                event_id=event.id,
                error=str(exc),
                message=message,
                description=description,
                priority=str(snap.priority),
                responders=snap.responders_summary,
                tags=tags,
            )

    # ── Internal helpers ────────────────────────────────────────

    def _tags_for(self, event: LogEvent) -> list[str]:
        snap = self._snapshot
        if snap.include_event_tags and snap.event_tag_property in event.properties:
            return build_tags(snap.static_tags, event.properties[snap.event_tag_property])
        return build_tags(snap.static_tags)

    def _build_alert(
        self,
        event: LogEvent,
        message: str,
        description: str,
        tags: list[str],
    ) -> OpsgenieAlert:
        snap = self._snapshot
        if snap.responders:
            return OpsgenieAlertWithResponders(
                message=message,
                alias=event.id,
                description=description,
                priority=snap.priority,
                responders=list(snap.responders),
                source=snap.base_uri,
                tags=tags,
            )
        return OpsgenieAlert(
            message=message,
            alias=event.id,
            description=description,
            priority=snap.priority,
            source=snap.base_uri,
            tags=tags,
        )
