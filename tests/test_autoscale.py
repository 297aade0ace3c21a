from __future__ import annotations

import sys
from pathlib import Path

_SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(_SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(_SRC_ROOT))

import json

import httpx
import pytest

from osclient.autoscale import (
    AutoscaleApi,
    CreateScalingPolicy,
    ScalingPolicyTargetType,
    ScalingPolicyType,
    scaling_policy_to_json,
)
from osclient.autoscale.models import scaling_policy_from_json
from osclient.errors import HttpResponseError, MalformedResponseError
from osclient.zones import ZoneConfig


ZONE = "DFW"
GROUP = "605e13f6-1452-4588-b5da-ac6bb468c5bf"


def _autoscale(handler, seen: list[httpx.Request], *, retry_attempts: int = 1) -> AutoscaleApi:
    def recording(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    zones = {ZONE: ZoneConfig(name=ZONE, endpoint="https://dfw.autoscale.example.com/v1.0/888888", retry_attempts=retry_attempts)}
    return AutoscaleApi(zones, transport=httpx.MockTransport(recording))


def _policy_json(policy_id: str, **overrides) -> dict:
    body = {
        "id": policy_id,
        "name": f"scale up {policy_id}",
        "type": "webhook",
        "cooldown": 1800,
        "change": 1,
        "links": [{"href": f"https://dfw.autoscale.example.com/v1.0/888888/groups/{GROUP}/policies/{policy_id}/", "rel": "self"}],
    }
    body.update(overrides)
    return body


# =============================================================================
# BINDER
# =============================================================================

def test_policy_json_uses_target_type_as_key() -> None:
    incremental = CreateScalingPolicy(
        name="scale up by one server",
        type=ScalingPolicyType.WEBHOOK,
        cooldown=1800,
        target=1,
        target_type=ScalingPolicyTargetType.INCREMENTAL,
    )
    assert scaling_policy_to_json(incremental) == {
        "name": "scale up by one server",
        "type": "webhook",
        "cooldown": 1800,
        "change": 1,
    }

    percent = CreateScalingPolicy(
        name="scale down 5%",
        type=ScalingPolicyType.SCHEDULE,
        cooldown=0,
        target=-5.5,
        target_type=ScalingPolicyTargetType.PERCENT_CHANGE,
        scheduling_hints={"cron": "23 * * * *"},
    )
    assert scaling_policy_to_json(percent) == {
        "name": "scale down 5%",
        "type": "schedule",
        "cooldown": 0,
        "changePercent": -5.5,
        "args": {"cron": "23 * * * *"},
    }


def test_policy_decodes_target_type_from_key() -> None:
    policy = scaling_policy_from_json(_policy_json("p1", change=None, desiredCapacity=3))
    assert policy.target_type is ScalingPolicyTargetType.DESIRED_CAPACITY
    assert policy.target == 3

    with pytest.raises(MalformedResponseError):
        scaling_policy_from_json(_policy_json("p2", change=None))


@pytest.mark.parametrize(
    "overrides",
    [
        {"cooldown": "soon"},
        {"change": "one"},
        {"args": ["23 * * * *"]},
    ],
)
def test_badly_typed_policy_fields_are_malformed(overrides: dict) -> None:
    with pytest.raises(MalformedResponseError):
        scaling_policy_from_json(_policy_json("p1", **overrides))


# =============================================================================
# API
# =============================================================================

def test_create_posts_array_and_returns_policies() -> None:
    seen: list[httpx.Request] = []
    api = _autoscale(lambda r: httpx.Response(201, json={"policies": [_policy_json("p1")]}), seen)

    created = api.policy_api(GROUP).create(
        [
            CreateScalingPolicy(
                name="scale up p1",
                type=ScalingPolicyType.WEBHOOK,
                cooldown=1800,
                target=1,
                target_type=ScalingPolicyTargetType.INCREMENTAL,
            )
        ]
    )

    assert [p.id for p in created] == ["p1"]
    assert seen[0].method == "POST"
    assert seen[0].url.path == f"/v1.0/888888/groups/{GROUP}/policies"
    assert json.loads(seen[0].content) == [{"name": "scale up p1", "type": "webhook", "cooldown": 1800, "change": 1}]


def test_list_policies_pages_through_links() -> None:
    pages = {
        None: {
            "policies": [_policy_json("p1")],
            "policies_links": [{"href": f"/v1.0/888888/groups/{GROUP}/policies?limit=1&marker=p1", "rel": "next"}],
        },
        "p1": {"policies": [_policy_json("p2")], "policies_links": []},
    }
    seen: list[httpx.Request] = []
    api = _autoscale(lambda r: httpx.Response(200, json=pages[r.url.params.get("marker")]), seen)

    assert [p.id for p in api.policy_api(GROUP).list()] == ["p1", "p2"]
    assert len(seen) == 2


def test_update_puts_single_object() -> None:
    seen: list[httpx.Request] = []
    api = _autoscale(lambda r: httpx.Response(204), seen)
    policy = scaling_policy_from_json(_policy_json("p1"))

    assert api.policy_api(GROUP).update("p1", policy) is True
    assert seen[0].method == "PUT"
    assert json.loads(seen[0].content) == {"name": "scale up p1", "type": "webhook", "cooldown": 1800, "change": 1}


def test_get_delete_execute_not_found_policies() -> None:
    seen: list[httpx.Request] = []
    policies = _autoscale(lambda r: httpx.Response(404), seen).policy_api(GROUP)

    assert policies.get("nope") is None
    assert policies.delete("nope") is False
    assert policies.execute("nope") is False
    assert policies.update("nope", scaling_policy_from_json(_policy_json("nope"))) is False


def test_get_and_execute_existing_policy() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/execute"):
            return httpx.Response(202, json={})
        return httpx.Response(200, json={"policy": _policy_json("p1")})

    policies = _autoscale(handler, seen).policy_api(GROUP)

    assert policies.get("p1").cooldown == 1800
    assert policies.execute("p1") is True
    assert seen[1].method == "POST"
    assert seen[1].url.path == f"/v1.0/888888/groups/{GROUP}/policies/p1/execute"


def test_execute_is_sent_once_on_server_error() -> None:
    seen: list[httpx.Request] = []
    responses = iter([httpx.Response(502), httpx.Response(202, json={})])
    policies = _autoscale(lambda r: next(responses), seen, retry_attempts=3).policy_api(GROUP)

    with pytest.raises(HttpResponseError) as excinfo:
        policies.execute("p1")
    assert excinfo.value.status_code == 502
    assert len(seen) == 1
