from __future__ import annotations

from typing import Any, Iterable

from osclient.autoscale.models import CreateScalingPolicy, ScalingPolicy, ScalingPolicyTargetType


def scaling_policy_to_json(policy: CreateScalingPolicy | ScalingPolicy) -> dict[str, Any]:
    """Wire map for one policy, decoupled from the record's field layout.

    The target goes under a key named after its type; percent changes stay
    fractional, the other two kinds are whole server counts.
    """
    body: dict[str, Any] = {
        "name": policy.name,
        "type": policy.type.value,
        "cooldown": policy.cooldown,
    }
    if policy.target_type is ScalingPolicyTargetType.PERCENT_CHANGE:
        body[policy.target_type.value] = float(policy.target)
    else:
        body[policy.target_type.value] = int(policy.target)
    if policy.scheduling_hints:
        body["args"] = dict(policy.scheduling_hints)
    return body


def scaling_policies_to_json(policies: Iterable[CreateScalingPolicy]) -> list[dict[str, Any]]:
    # Creation always takes a JSON array, even for a single policy.
    return [scaling_policy_to_json(p) for p in policies]
