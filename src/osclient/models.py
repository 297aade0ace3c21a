from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Any

from osclient.errors import MalformedResponseError


@dataclass(frozen=True)
class Link:
    href: str
    rel: str | None = None
    type: str | None = None


def link_from_json(data: Any) -> Link:
    if not isinstance(data, dict) or not isinstance(data.get("href"), str):
        raise MalformedResponseError(f"Link without href: {data!r}")
    return Link(href=data["href"], rel=data.get("rel"), type=data.get("type"))


def links_from_json(data: Any) -> tuple[Link, ...]:
    if data is None:
        return ()
    if not isinstance(data, list):
        raise MalformedResponseError(f"Expected a list of links, got {type(data).__name__}")
    return tuple(link_from_json(d) for d in data)


def parse_timestamp(value: Any) -> dt.datetime | None:
    """Parse the ISO-8601 timestamps OpenStack emits, with or without a zone suffix."""
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise MalformedResponseError(f"Expected a timestamp string, got {value!r}")
    try:
        parsed = dt.datetime.fromisoformat(value)
    except ValueError as e:
        raise MalformedResponseError(f"Bad timestamp: {value!r}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt.timezone.utc)
    return parsed


def string_tuple(value: Any, *, field: str) -> tuple[str, ...]:
    """A JSON array of strings; absent or null reads as empty."""
    if value is None:
        return ()
    if not isinstance(value, list):
        raise MalformedResponseError(f"Expected {field!r} to be a list, got {type(value).__name__}")
    return tuple(str(v) for v in value)


def string_map(value: Any, *, field: str) -> dict[str, str]:
    """A JSON object of string values; absent or null reads as empty."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise MalformedResponseError(f"Expected {field!r} to be an object, got {type(value).__name__}")
    return {str(k): str(v) for k, v in value.items()}
