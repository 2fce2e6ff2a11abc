"""Tests for AlertDispatcher — payload shape, tags, logging, failure isolation."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from src.alerting.dispatcher import AlertDispatcher
from src.alerting.snapshot import normalize
from src.core.config import AlertConfig
from src.core.types import LogEvent
from src.opsgenie.client import OpsgenieApiClient
from src.opsgenie.exceptions import OpsgenieConnectionError
from src.opsgenie.types import (
    AlertPriority,
    AlertResponse,
    OpsgenieAlert,
    OpsgenieAlertWithResponders,
)

BASE_URI = "https://logs.example.com/"


# ── Helpers ─────────────────────────────────────────────────────


class FakeClient(OpsgenieApiClient):
    """In-memory client for testing."""

    def __init__(self, fail: BaseException | None = None, status: int = 202) -> None:
        self.sent: list[OpsgenieAlert] = []
        self._fail = fail
        self._status = status
        self.closed = False

    async def create(self, alert: OpsgenieAlert) -> AlertResponse:
        if self._fail is not None:
            raise self._fail
        self.sent.append(alert)
        return AlertResponse(status_code=self._status, request_id="req-1")

    async def close(self) -> None:
        self.closed = True


def _dispatcher(client: OpsgenieApiClient, **kw: object) -> AlertDispatcher:
    return AlertDispatcher(normalize(AlertConfig(**kw), BASE_URI), client)  # type: ignore[arg-type]


def _event(**kw: object) -> LogEvent:
    defaults: dict[str, object] = {
        "id": "evt-1",
        "message": "Disk full on db-01",
        "level": "Error",
        "timestamp": 1000.0,
        "properties": {"Host": "db-01"},
    }
    defaults.update(kw)
    return LogEvent(**defaults)  # type: ignore[arg-type]


# ── Payload ─────────────────────────────────────────────────────


class TestPayload:
    async def test_scenario_a_with_responders(self) -> None:
        client = FakeClient()
        disp = _dispatcher(client, responders="platform,oncall=user", tags="infra, db")
        await disp.handle(_event())

        assert len(client.sent) == 1
        alert = client.sent[0]
        assert isinstance(alert, OpsgenieAlertWithResponders)
        payload = alert.to_payload()
        assert payload["responders"] == [
            {"name": "platform", "type": "team"},
            {"name": "oncall", "type": "user"},
        ]
        assert payload["tags"] == ["infra", "db"]
        assert payload["priority"] == "P3"

    async def test_scenario_b_dynamic_tags_no_responders(self) -> None:
        client = FakeClient()
        disp = _dispatcher(client, add_event_tags=True)
        await disp.handle(_event(properties={"Tags": ["Infra", "infra", "db"]}))

        alert = client.sent[0]
        assert type(alert) is OpsgenieAlert
        payload = alert.to_payload()
        assert "responders" not in payload
        assert payload["tags"] == ["Infra", "db"]

    async def test_fields(self) -> None:
        client = FakeClient()
        disp = _dispatcher(
            client,
            alert_message="{{ Host }}: {{ message }}",
            alert_description="Level {{ level }}",
            event_priority="p1",
        )
        await disp.handle(_event())

        payload = client.sent[0].to_payload()
        assert payload == {
            "message": "db-01: Disk full on db-01",
            "alias": "evt-1",
            "description": "Level Error",
            "priority": "P1",
            "source": BASE_URI,
            "tags": [],
        }

    async def test_dynamic_tags_disabled_ignores_property(self) -> None:
        client = FakeClient()
        disp = _dispatcher(client, tags="infra")
        await disp.handle(_event(properties={"Tags": ["db"]}))
        assert client.sent[0].tags == ["infra"]

    async def test_dynamic_tags_custom_property(self) -> None:
        client = FakeClient()
        disp = _dispatcher(
            client, tags="infra", add_event_tags=True, add_event_property="Labels"
        )
        await disp.handle(_event(properties={"Labels": "db, INFRA", "Tags": ["x"]}))
        assert client.sent[0].tags == ["infra", "db"]

    async def test_missing_tag_property(self) -> None:
        client = FakeClient()
        disp = _dispatcher(client, tags="infra", add_event_tags=True)
        await disp.handle(_event(properties={}))
        assert client.sent[0].tags == ["infra"]


# ── Contract violation ─────────────────────────────────────────


class TestContractViolation:
    async def test_scenario_d_none_event_raises(self) -> None:
        client = FakeClient()
        disp = _dispatcher(client)
        with patch("src.alerting.dispatcher.alert_logger") as mock_log:
            with pytest.raises(ValueError):
                await disp.handle(None)
            mock_log.debug.assert_not_called()
            mock_log.exception.assert_not_called()
        assert client.sent == []


# ── Failure isolation ──────────────────────────────────────────


class TestFailures:
    async def test_scenario_c_client_error_does_not_propagate(self) -> None:
        client = FakeClient(fail=OpsgenieConnectionError("connection refused"))
        disp = _dispatcher(client, tags="infra", event_priority="P2")
        with patch("src.alerting.dispatcher.alert_logger") as mock_log:
            await disp.handle(_event())  # should not raise
            mock_log.exception.assert_called_once()
            args, kwargs = mock_log.exception.call_args
            assert args[0] == "alert_failed"
            assert kwargs["message"] == "Disk full on db-01"
            assert BASE_URI in kwargs["description"]
            assert kwargs["priority"] == "P2"
            assert kwargs["tags"] == ["infra"]
            assert "connection refused" in kwargs["error"]

    async def test_render_error_does_not_propagate(self) -> None:
        client = FakeClient()
        disp = _dispatcher(client, alert_message="{{ Host.missing.deeper }}")
        with patch("src.alerting.dispatcher.alert_logger") as mock_log:
            await disp.handle(_event())
            mock_log.exception.assert_called_once()
            assert mock_log.exception.call_args[1]["message"] == ""
        assert client.sent == []

    async def test_unexpected_error_does_not_propagate(self) -> None:
        client = FakeClient(fail=RuntimeError("boom"))
        disp = _dispatcher(client)
        await disp.handle(_event())

    async def test_cancellation_propagates(self) -> None:
        client = FakeClient(fail=asyncio.CancelledError())
        disp = _dispatcher(client)
        with pytest.raises(asyncio.CancelledError):
            await disp.handle(_event())

    async def test_stream_continues_after_failure(self) -> None:
        client = FakeClient()
        client.create = AsyncMock(  # type: ignore[method-assign]
            side_effect=[
                OpsgenieConnectionError("down"),
                AlertResponse(status_code=202),
            ]
        )
        disp = _dispatcher(client)
        await disp.handle(_event(id="a"))
        await disp.handle(_event(id="b"))
        assert client.create.await_count == 2


# ── Diagnostics ────────────────────────────────────────────────


class TestDiagnostics:
    async def test_sending_and_sent_records(self) -> None:
        client = FakeClient(status=202)
        disp = _dispatcher(client, responders="platform", tags="infra")
        with patch("src.alerting.dispatcher.alert_logger") as mock_log:
            await disp.handle(_event())
            events = [c[0][0] for c in mock_log.debug.call_args_list]
            assert events == ["alert_sending", "alert_sent"]

            sending = mock_log.debug.call_args_list[0][1]
            assert sending["message"] == "Disk full on db-01"
            assert sending["priority"] == "P3"
            assert sending["responders"] == '[{"name":"platform","type":"team"}]'
            assert sending["tags"] == ["infra"]

            sent = mock_log.debug.call_args_list[1][1]
            assert sent["status"] == 202
            assert sent["request_id"] == "req-1"
            mock_log.exception.assert_not_called()


# ── Concurrency ────────────────────────────────────────────────


class TestConcurrency:
    async def test_concurrent_events_are_independent(self) -> None:
        client = FakeClient()
        disp = _dispatcher(client, tags="static", add_event_tags=True)
        events = [
            _event(id=f"evt-{i}", properties={"Tags": [f"t{i}"]})
            for i in range(10)
        ]
        await asyncio.gather(*(disp.handle(e) for e in events))

        by_alias = {a.alias: a.tags for a in client.sent}
        assert len(by_alias) == 10
        for i in range(10):
            assert by_alias[f"evt-{i}"] == ["static", f"t{i}"]
        assert disp.snapshot.static_tags == ("static",)

    async def test_priority_enum_in_model(self) -> None:
        client = FakeClient()
        disp = _dispatcher(client, event_priority="P5")
        await disp.handle(_event())
        assert client.sent[0].priority == AlertPriority.P5
