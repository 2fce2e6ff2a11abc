"""Jinja2 templates for alert message and description text."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from jinja2.sandbox import SandboxedEnvironment

from src.core.types import LogEvent

DEFAULT_MESSAGE_TEMPLATE = "{{ message }}"
DEFAULT_DESCRIPTION_TEMPLATE = "Generated by the event host running at {{ base_uri }}."

# Operator-supplied text, rendered as plain text (no HTML escaping).
_env = SandboxedEnvironment(autoescape=False, keep_trailing_newline=True)


@dataclass(frozen=True)
class AlertMessageContext:
    """The rendering environment for one event."""

    event: LogEvent
    base_uri: str

    def as_template_vars(self) -> dict[str, Any]:
        """Event properties as top-level names, plus the built-in fields.

        Built-in names (``message``, ``event_id``, ``timestamp``, ``level``,
        ``exception``, ``properties``, ``base_uri``) shadow properties of the
        same name; the property is still reachable via ``properties``.
        """
        return {
            **self.event.properties,
            "properties": self.event.properties,
            "message": self.event.message,
            "event_id": self.event.id,
            "timestamp": self.event.timestamp,
            "level": self.event.level,
            "exception": self.event.exception,
            "base_uri": self.base_uri,
        }


class AlertTemplate:
    """A compiled template. Syntax errors are raised at construction."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._template = _env.from_string(text)

    @property
    def text(self) -> str:
        return self._text

    def render(self, context: AlertMessageContext) -> str:
        return self._template.render(context.as_template_vars())

    def __repr__(self) -> str:
        return f"AlertTemplate({self._text!r})"
