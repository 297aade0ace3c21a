from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from osclient.errors import MalformedResponseError
from osclient.models import Link, links_from_json, string_tuple


@dataclass(frozen=True)
class Network:
    id: str
    name: str | None = None
    status: str | None = None
    tenant_id: str | None = None
    admin_state_up: bool = True
    shared: bool = False
    external: bool = False
    subnets: tuple[str, ...] = ()
    links: tuple[Link, ...] = ()


def network_from_json(data: Any) -> Network:
    if not isinstance(data, dict) or data.get("id") is None:
        raise MalformedResponseError(f"Expected a network object with an id, got {data!r}")
    return Network(
        id=str(data["id"]),
        name=data.get("name"),
        status=data.get("status"),
        tenant_id=data.get("tenant_id"),
        admin_state_up=bool(data.get("admin_state_up", True)),
        shared=bool(data.get("shared", False)),
        external=bool(data.get("router:external", False)),
        subnets=string_tuple(data.get("subnets"), field="subnets"),
        links=links_from_json(data.get("links")),
    )
