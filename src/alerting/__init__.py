"""Event-to-alert pipeline: settings normalization and per-event dispatch."""

from src.alerting.app import OpsgenieApp
from src.alerting.dispatcher import AlertDispatcher
from src.alerting.priority import resolve_priority
from src.alerting.responders import parse_responders, serialize_responders
from src.alerting.snapshot import AlertSnapshot, normalize
from src.alerting.tags import build_tags, parse_tag_list
from src.alerting.templates import AlertMessageContext, AlertTemplate

__all__ = [
    "AlertDispatcher",
    "AlertMessageContext",
    "AlertSnapshot",
    "AlertTemplate",
    "OpsgenieApp",
    "build_tags",
    "normalize",
    "parse_responders",
    "parse_tag_list",
    "resolve_priority",
    "serialize_responders",
]
