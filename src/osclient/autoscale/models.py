from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

from osclient.errors import MalformedResponseError
from osclient.models import Link, links_from_json, string_map


class ScalingPolicyType(enum.Enum):
    WEBHOOK = "webhook"
    SCHEDULE = "schedule"


class ScalingPolicyTargetType(enum.Enum):
    # The value is also the JSON key the target is sent under.
    INCREMENTAL = "change"
    PERCENT_CHANGE = "changePercent"
    DESIRED_CAPACITY = "desiredCapacity"


@dataclass(frozen=True)
class CreateScalingPolicy:
    name: str
    type: ScalingPolicyType
    cooldown: int
    target: float
    target_type: ScalingPolicyTargetType
    scheduling_hints: dict[str, str] = field(default_factory=dict, hash=False)


@dataclass(frozen=True)
class ScalingPolicy:
    id: str
    name: str
    type: ScalingPolicyType
    cooldown: int
    target: float
    target_type: ScalingPolicyTargetType
    scheduling_hints: dict[str, str] = field(default_factory=dict, hash=False)
    links: tuple[Link, ...] = ()


def scaling_policy_from_json(data: Any) -> ScalingPolicy:
    if not isinstance(data, dict):
        raise MalformedResponseError(f"Expected a policy object, got {type(data).__name__}")
    for key in ("id", "name", "type"):
        if data.get(key) is None:
            raise MalformedResponseError(f"Scaling policy is missing {key!r}: {data.get('id')}")

    target_type = next((t for t in ScalingPolicyTargetType if data.get(t.value) is not None), None)
    if target_type is None:
        raise MalformedResponseError(f"Scaling policy {data['id']} has no change/changePercent/desiredCapacity")

    try:
        policy_type = ScalingPolicyType(data["type"])
    except ValueError as e:
        raise MalformedResponseError(f"Unknown scaling policy type: {data['type']!r}") from e

    try:
        cooldown = int(data.get("cooldown") or 0)
        target = float(data[target_type.value])
    except (TypeError, ValueError) as e:
        raise MalformedResponseError(f"Bad cooldown or target in scaling policy {data['id']}: {e}") from e

    return ScalingPolicy(
        id=str(data["id"]),
        name=str(data["name"]),
        type=policy_type,
        cooldown=cooldown,
        target=target,
        target_type=target_type,
        scheduling_hints=string_map(data.get("args"), field="args"),
        links=links_from_json(data.get("links")),
    )
