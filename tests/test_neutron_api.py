from __future__ import annotations

import sys
from pathlib import Path

_SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(_SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(_SRC_ROOT))

import httpx
import pytest

from osclient.errors import MalformedResponseError
from osclient.neutron import ListNetworkOptions, NeutronApi
from osclient.neutron.models import network_from_json
from osclient.pagination import SequenceState
from osclient.zones import ZoneConfig


ZONE = "region-one"


def _neutron(handler, seen: list[httpx.Request]) -> NeutronApi:
    def recording(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    zones = {ZONE: ZoneConfig(name=ZONE, endpoint="https://neutron.example.org:9696", retry_attempts=1)}
    return NeutronApi(zones, transport=httpx.MockTransport(recording))


def _network(net_id: str) -> dict:
    return {
        "id": net_id,
        "name": f"net-{net_id}",
        "status": "ACTIVE",
        "tenant_id": "t1",
        "admin_state_up": True,
        "shared": False,
        "router:external": net_id == "ext",
        "subnets": [f"sub-{net_id}"],
    }


def test_list_networks_across_pages_via_links_array() -> None:
    pages = {
        None: {
            "networks": [_network("a"), _network("b")],
            "networks_links": [{"href": "https://neutron.example.org:9696/v2.0/networks?limit=2&marker=b", "rel": "next"}],
        },
        "b": {
            "networks": [],
            "networks_links": [{"href": "/v2.0/networks?limit=2&marker=b2", "rel": "next"}],
        },
        "b2": {
            "networks": [_network("ext")],
            "networks_links": [{"href": "/v2.0/networks?limit=2&marker=a", "rel": "previous"}],
        },
    }
    seen: list[httpx.Request] = []
    api = _neutron(lambda r: httpx.Response(200, json=pages[r.url.params.get("marker")]), seen)

    seq = api.network_api().list(ListNetworkOptions(limit=2, shared=False))
    networks = seq.concat()

    assert [n.id for n in networks] == ["a", "b", "ext"]
    assert networks[-1].external is True
    assert networks[0].subnets == ("sub-a",)
    assert seq.pages_fetched == 3
    assert seq.state is SequenceState.EXHAUSTED
    assert all(r.url.params["shared"] == "false" for r in seen)


def test_get_network_unwraps_and_handles_404() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/missing"):
            return httpx.Response(404)
        return httpx.Response(200, json={"network": _network("a")})

    api = _neutron(handler, seen).network_api(ZONE)
    network = api.get("a")

    assert network is not None and network.name == "net-a"
    assert api.get("missing") is None
    assert seen[0].url.path == "/v2.0/networks/a"


def test_list_networks_404_is_empty() -> None:
    seen: list[httpx.Request] = []
    api = _neutron(lambda r: httpx.Response(404), seen)

    assert api.network_api().list().concat() == []
    assert api.network_api().list_page().items == ()


def test_network_subnets_must_be_a_list() -> None:
    assert network_from_json({"id": "a"}).subnets == ()
    assert network_from_json(_network("a")).subnets == ("sub-a",)

    with pytest.raises(MalformedResponseError):
        network_from_json({**_network("a"), "subnets": "sub-a"})


def test_bad_network_in_listing_raises_malformed() -> None:
    seen: list[httpx.Request] = []
    body = {"networks": [_network("a"), {**_network("b"), "subnets": {"id": "sub-b"}}]}
    api = _neutron(lambda r: httpx.Response(200, json=body), seen)

    with pytest.raises(MalformedResponseError):
        api.network_api().list()
