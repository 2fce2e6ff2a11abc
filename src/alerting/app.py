"""Attach/detach lifecycle for the Opsgenie alerting integration."""

from __future__ import annotations

from types import TracebackType

import structlog

from src.alerting.dispatcher import AlertDispatcher
from src.alerting.snapshot import AlertSnapshot, normalize
from src.core.config import AlertConfig, HostConfig, OpsgenieConfig
from src.core.types import LogEvent
from src.opsgenie.client import HttpOpsgenieApiClient, OpsgenieApiClient

logger = structlog.get_logger(__name__)


class OpsgenieApp:
    """Owns one attachment: the settings snapshot, the dispatcher and the client.

    An injected *client* is used as-is and left open on detach; otherwise an
    HTTP client is created on attach and closed on detach.

    Usage::

        async with OpsgenieApp(alerts, opsgenie, host) as app:
            await app.on_event(event)
    """

    def __init__(
        self,
        alerts: AlertConfig,
        opsgenie: OpsgenieConfig,
        host: HostConfig,
        client: OpsgenieApiClient | None = None,
    ) -> None:
        self._alerts = alerts
        self._opsgenie = opsgenie
        self._host = host
        self._injected_client = client
        self._owned_client: OpsgenieApiClient | None = None
        self._dispatcher: AlertDispatcher | None = None

    @property
    def attached(self) -> bool:
        return self._dispatcher is not None

    @property
    def snapshot(self) -> AlertSnapshot | None:
        return self._dispatcher.snapshot if self._dispatcher else None

    def attach(self) -> None:
        """Normalize settings and bind the API client. No-op if attached."""
        if self._dispatcher is not None:
            return

        snapshot = normalize(self._alerts, self._host.base_uri)

        client = self._injected_client
        if client is None:
            client = HttpOpsgenieApiClient(self._opsgenie)
            self._owned_client = client

        self._dispatcher = AlertDispatcher(snapshot, client)
        logger.info(
            "opsgenie_app_attached",
            priority=str(snapshot.priority),
            responders=snapshot.responders_summary,
            tags=list(snapshot.static_tags),
            include_event_tags=snapshot.include_event_tags,
            event_tag_property=snapshot.event_tag_property,
        )

    async def detach(self) -> None:
        """Drop the snapshot and close the client if this app created it."""
        self._dispatcher = None
        client, self._owned_client = self._owned_client, None
        if client is not None:
            try:
                await client.close()
            except Exception:
                logger.exception("opsgenie_client_close_error")
        logger.info("opsgenie_app_detached")

    async def on_event(self, event: LogEvent | None) -> None:
        """Raise an alert for *event*. Never raises once attached."""
        if self._dispatcher is None:
            raise RuntimeError("OpsgenieApp is not attached")
        await self._dispatcher.handle(event)

    async def __aenter__(self) -> OpsgenieApp:
        self.attach()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.detach()
