from __future__ import annotations

from dataclasses import dataclass

from osclient.errors import ResourceNotFoundError
from osclient.http import ApiClient, Request
from osclient.neutron.models import Network, network_from_json
from osclient.options import PaginationOptions
from osclient.pagination import Page, PagedSequence, decode_page, fetch_or_empty, paged
from osclient.zones import ZonedApi


NETWORKS_PATH = "/v2.0/networks"


@dataclass(frozen=True)
class ListNetworkOptions(PaginationOptions):
    name: str | None = None
    tenant_id: str | None = None
    shared: bool | None = None
    status: str | None = None


def list_networks_request(options: ListNetworkOptions) -> Request:
    return Request("GET", NETWORKS_PATH, params=options.to_params())


def get_network_request(network_id: str) -> Request:
    return Request("GET", f"{NETWORKS_PATH}/{network_id}")


@dataclass
class NetworkApi:
    client: ApiClient

    def _fetch_page(self, options: ListNetworkOptions) -> Page[Network]:
        body = self.client.send_json(list_networks_request(options))
        return decode_page(body, items_key="networks", item_decoder=network_from_json)

    def list(self, options: ListNetworkOptions | None = None) -> PagedSequence[Network]:
        return paged(self._fetch_page, options or ListNetworkOptions())

    def list_page(self, options: ListNetworkOptions | None = None) -> Page[Network]:
        return fetch_or_empty(self._fetch_page, options or ListNetworkOptions())

    def get(self, network_id: str) -> Network | None:
        try:
            body = self.client.send_json(get_network_request(network_id))
        except ResourceNotFoundError:
            return None
        return network_from_json(body.get("network") if isinstance(body, dict) else body)


class NeutronApi(ZonedApi):
    service = "neutron"

    def network_api(self, zone: str | None = None) -> NetworkApi:
        return NetworkApi(self.client_for_zone(zone))
