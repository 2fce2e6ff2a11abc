"""Parse the responders setting into Opsgenie responder specs."""

from __future__ import annotations

import json

import structlog

from src.opsgenie.types import Responder, ResponderType

logger = structlog.get_logger(__name__)


def parse_responders(raw: str | None) -> list[Responder]:
    """Parse a comma-delimited list of ``name`` or ``name=type`` tokens.

    A bare name is a team. Tokens with an unknown type (or no name) are
    skipped with a debug record rather than failing the whole setting.
    Duplicates are kept as given.
    """
    responders: list[Responder] = []
    if not raw:
        return responders

    for token in (t.strip() for t in raw.split(",")):
        if not token:
            continue

        if "=" not in token:
            responders.append(Responder(name=token))
            continue

        # Empty pieces are ignored, so "ops==user" reads as "ops=user".
        parts = [p.strip() for p in token.split("=") if p.strip()]
        if len(parts) < 2:
            logger.debug("responder_type_invalid", responder=token)
            continue
        try:
            responder_type = ResponderType(parts[1].lower())
        except ValueError:
            logger.debug("responder_type_invalid", responder=token)
            continue
        responders.append(Responder(name=parts[0], type=responder_type))

    return responders


def serialize_responders(responders: list[Responder]) -> str:
    """Compact JSON rendering of *responders* for log records."""
    return json.dumps(
        [r.model_dump(mode="json") for r in responders],
        separators=(",", ":"),
    )
