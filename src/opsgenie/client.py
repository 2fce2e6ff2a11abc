"""Opsgenie Alert API clients — abstract interface and aiohttp transport."""

from __future__ import annotations

import abc
import asyncio
from typing import Any

import aiohttp
import structlog

from src.core.config import OpsgenieConfig
from src.opsgenie.exceptions import OpsgenieApiError, OpsgenieConnectionError
from src.opsgenie.types import AlertResponse, OpsgenieAlert

logger = structlog.get_logger(__name__)


class OpsgenieApiClient(abc.ABC):
    """Submits alerts to Opsgenie.

    Implementations raise :class:`~src.opsgenie.exceptions.OpsgenieError`
    subclasses when an alert cannot be created.
    """

    @abc.abstractmethod
    async def create(self, alert: OpsgenieAlert) -> AlertResponse:
        """Create an alert and return the API response."""

    @abc.abstractmethod
    async def close(self) -> None:
        """Release resources (HTTP sessions, etc.)."""


class HttpOpsgenieApiClient(OpsgenieApiClient):
    """Creates alerts through the Opsgenie REST API using ``GenieKey`` auth."""

    def __init__(self, config: OpsgenieConfig) -> None:
        self._api_key = config.api_key.get_secret_value()
        self._api_url = config.api_url
        self._timeout = aiohttp.ClientTimeout(total=config.timeout_secs)
        self._session: aiohttp.ClientSession | None = None

    @property
    def closed(self) -> bool:
        return self._session is None or self._session.closed

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self._timeout,
                headers={"Authorization": f"GenieKey {self._api_key}"},
            )
        return self._session

    async def create(self, alert: OpsgenieAlert) -> AlertResponse:
        payload = alert.to_payload()
        try:
            session = self._get_session()
            async with session.post(self._api_url, json=payload) as resp:
                if not 200 <= resp.status < 300:
                    body = await resp.text()
                    logger.warning(
                        "opsgenie_create_failed",
                        status=resp.status,
                        alias=alert.alias,
                        body=body[:200],
                    )
                    raise OpsgenieApiError(resp.status, body)
                data = await _read_json(resp)
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise OpsgenieConnectionError(
                f"Opsgenie API request failed: {exc!r}"
            ) from exc

        return AlertResponse(
            status_code=resp.status,
            request_id=str(data.get("requestId", "")),
            result=str(data.get("result", "")),
        )

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None


async def _read_json(resp: aiohttp.ClientResponse) -> dict[str, Any]:
    """Decode a success body, tolerating empty or non-JSON responses."""
    try:
        data = await resp.json(content_type=None)
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}
