"""Merge static and per-event tags into one case-insensitively unique list."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any


def parse_tag_list(raw: str | None) -> list[str]:
    """Split a comma-delimited tag setting into trimmed, non-empty tags."""
    if not raw:
        return []
    return [t.strip() for t in raw.split(",") if t.strip()]


def _dynamic_tags(value: Any) -> list[str]:
    """Candidate tags from an event property value.

    A string is treated as comma-delimited; a list or tuple contributes its
    string elements. Anything else contributes nothing.
    """
    if isinstance(value, str):
        return value.split(",")
    if isinstance(value, (list, tuple)):
        return [v for v in value if isinstance(v, str)]
    return []


def build_tags(static_tags: Iterable[str], dynamic: Any = None) -> list[str]:
    """Static tags first, then dynamic tags in source order.

    A tag is skipped when it is blank or already present in the
    accumulated list under case-insensitive comparison.
    """
    tags: list[str] = []
    seen: set[str] = set()
    for candidate in (*static_tags, *_dynamic_tags(dynamic)):
        tag = candidate.strip()
        key = tag.casefold()
        if not tag or key in seen:
            continue
        seen.add(key)
        tags.append(tag)
    return tags
