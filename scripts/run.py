#!/usr/bin/env python3
"""Relay entrypoint — reads JSON-lines events and raises Opsgenie alerts.

Each input line is one event object::

    {"id": "evt-1", "message": "Disk full", "properties": {"Tags": ["infra"]}}

Usage::

    # Events from stdin, default config
    tail -F events.jsonl | python scripts/run.py

    # Events from a file, custom config
    python scripts/run.py --config config/settings.yaml --events events.jsonl

    # Override log level
    python scripts/run.py --log-level DEBUG
"""

from __future__ import annotations

import argparse
import asyncio
import signal
import sys
from typing import TextIO

import structlog
from pydantic import ValidationError

from src.alerting.app import OpsgenieApp
from src.core.config import load_settings
from src.core.logging import setup_logging
from src.core.types import LogEvent

logger = structlog.get_logger(__name__)


async def _pump_events(
    app: OpsgenieApp,
    source: TextIO,
    stop_event: asyncio.Event | None = None,
) -> int:
    """Dispatch every event line concurrently; return the number dispatched.

    Reading stops at EOF or when *stop_event* is set. Alerts already in
    flight are always awaited, so each one ends with an outcome record
    before the caller detaches.
    """
    tasks: set[asyncio.Task[None]] = set()
    count = 0

    async def _read() -> None:
        nonlocal count
        while True:
            line = await asyncio.to_thread(source.readline)
            if not line:
                return
            line = line.strip()
            if not line:
                continue
            try:
                event = LogEvent.model_validate_json(line)
            except ValidationError as exc:
                logger.warning("event_parse_failed", error=str(exc), line=line[:200])
                continue

            task = asyncio.create_task(app.on_event(event))
            tasks.add(task)
            task.add_done_callback(tasks.discard)
            count += 1

    reader = asyncio.create_task(_read())
    waiters: set[asyncio.Task[object]] = {reader}
    stopper: asyncio.Task[object] | None = None
    if stop_event is not None:
        stopper = asyncio.create_task(stop_event.wait())
        waiters.add(stopper)

    try:
        await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)
    finally:
        if stopper is not None:
            stopper.cancel()

    if reader.done():
        reader.result()
        logger.info("relay_input_exhausted", events=count)
    else:
        # readline in a worker thread cannot be interrupted; stop waiting
        # for it but let dispatched alerts finish.
        reader.cancel()
        logger.info("relay_shutting_down", in_flight=len(tasks))

    if tasks:
        await asyncio.gather(*tasks)
    return count


async def run(args: argparse.Namespace) -> int:
    """Attach the app, pump events until EOF or a shutdown signal."""
    settings = load_settings(args.config)
    setup_logging(level=args.log_level)

    if not settings.opsgenie.api_key.get_secret_value():
        logger.error("opsgenie_api_key_missing")
        print(
            "No Opsgenie API key configured. Set opsgenie.api_key in config/settings.yaml.",
            file=sys.stderr,
        )
        return 1

    source: TextIO = open(args.events) if args.events else sys.stdin

    stop_event = asyncio.Event()

    def _signal_handler() -> None:
        logger.info("shutdown_signal_received")
        stop_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _signal_handler)
        except NotImplementedError:
            # Windows: signal handlers not supported on ProactorEventLoop
            pass

    try:
        async with OpsgenieApp(
            alerts=settings.alerts,
            opsgenie=settings.opsgenie,
            host=settings.host,
        ) as app:
            count = await _pump_events(app, source, stop_event)
            logger.info("relay_stopped", events=count)
    finally:
        if source is not sys.stdin:
            source.close()

    return 0


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Relay JSON-lines log events to Opsgenie as alerts.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to settings YAML (default: config/settings.yaml)",
    )
    parser.add_argument(
        "--events",
        default=None,
        help="Path to a JSON-lines event file (default: stdin)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level override: DEBUG, INFO, WARNING, ERROR",
    )
    args = parser.parse_args()

    code = asyncio.run(run(args))
    sys.exit(code)


if __name__ == "__main__":
    main()
