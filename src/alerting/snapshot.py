"""Normalize alert settings once per attachment into an immutable snapshot."""

from __future__ import annotations

from dataclasses import dataclass

from src.alerting.priority import resolve_priority
from src.alerting.responders import parse_responders, serialize_responders
from src.alerting.tags import parse_tag_list
from src.alerting.templates import (
    DEFAULT_DESCRIPTION_TEMPLATE,
    DEFAULT_MESSAGE_TEMPLATE,
    AlertTemplate,
)
from src.core.config import AlertConfig
from src.opsgenie.types import AlertPriority, Responder

DEFAULT_TAG_PROPERTY = "Tags"


@dataclass(frozen=True)
class AlertSnapshot:
    """Resolved alert settings, shared read-only by every event handler."""

    message_template: AlertTemplate
    description_template: AlertTemplate
    priority: AlertPriority
    responders: tuple[Responder, ...]
    responders_summary: str
    static_tags: tuple[str, ...]
    include_event_tags: bool
    event_tag_property: str
    base_uri: str


def normalize(config: AlertConfig, base_uri: str) -> AlertSnapshot:
    """Resolve every default in *config* and compile its templates.

    Raises:
        jinja2.TemplateSyntaxError: A configured template does not compile.
    """
    message_text = config.alert_message if config.alert_message.strip() else DEFAULT_MESSAGE_TEMPLATE
    description_text = (
        config.alert_description
        if config.alert_description.strip()
        else DEFAULT_DESCRIPTION_TEMPLATE
    )

    responders = parse_responders(config.responders)

    return AlertSnapshot(
        message_template=AlertTemplate(message_text),
        description_template=AlertTemplate(description_text),
        priority=resolve_priority(config.event_priority),
        responders=tuple(responders),
        responders_summary=serialize_responders(responders),
        static_tags=tuple(parse_tag_list(config.tags)),
        include_event_tags=config.add_event_tags,
        event_tag_property=config.add_event_property.strip() or DEFAULT_TAG_PROPERTY,
        base_uri=base_uri,
    )
