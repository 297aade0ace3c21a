from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass
from typing import Any


def _param_value(value: Any) -> Any:
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


@dataclass(frozen=True)
class PaginationOptions:
    """Query options shared by every paged collection: page size and marker.

    Subclasses add their own filter fields. Any field left as None is not sent.
    `with_marker` returns a copy so the options a listing started with are never
    mutated while it is being paged through.
    """

    limit: int | None = None
    marker: str | None = None

    def with_marker(self, marker: str) -> "PaginationOptions":
        return dataclasses.replace(self, marker=marker)

    def to_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {}
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            params[f.name] = _param_value(value)
        return params
