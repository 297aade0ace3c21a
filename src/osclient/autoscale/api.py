from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from osclient.autoscale.binders import scaling_policies_to_json, scaling_policy_to_json
from osclient.autoscale.models import CreateScalingPolicy, ScalingPolicy, scaling_policy_from_json
from osclient.errors import MalformedResponseError, ResourceNotFoundError
from osclient.http import ApiClient, Request
from osclient.options import PaginationOptions
from osclient.pagination import Page, PagedSequence, decode_page, paged
from osclient.zones import ZonedApi


log = logging.getLogger(__name__)


def _policies_path(group_id: str) -> str:
    return f"/groups/{group_id}/policies"


def create_policies_request(group_id: str, policies: Iterable[CreateScalingPolicy]) -> Request:
    return Request("POST", _policies_path(group_id), json=scaling_policies_to_json(policies))


def list_policies_request(group_id: str, options: PaginationOptions) -> Request:
    return Request("GET", _policies_path(group_id), params=options.to_params())


def get_policy_request(group_id: str, policy_id: str) -> Request:
    return Request("GET", f"{_policies_path(group_id)}/{policy_id}")


def update_policy_request(group_id: str, policy_id: str, policy: CreateScalingPolicy | ScalingPolicy) -> Request:
    # Update replaces one policy and takes a single object, not an array.
    return Request("PUT", f"{_policies_path(group_id)}/{policy_id}", json=scaling_policy_to_json(policy))


def delete_policy_request(group_id: str, policy_id: str) -> Request:
    return Request("DELETE", f"{_policies_path(group_id)}/{policy_id}")


def execute_policy_request(group_id: str, policy_id: str) -> Request:
    return Request("POST", f"{_policies_path(group_id)}/{policy_id}/execute")


@dataclass
class PolicyApi:
    """Scaling policies of one autoscale group."""

    client: ApiClient
    group_id: str

    def _fetch_page(self, options: PaginationOptions) -> Page[ScalingPolicy]:
        body = self.client.send_json(list_policies_request(self.group_id, options))
        return decode_page(body, items_key="policies", item_decoder=scaling_policy_from_json)

    def create(self, policies: Iterable[CreateScalingPolicy]) -> list[ScalingPolicy]:
        body = self.client.send_json(create_policies_request(self.group_id, policies))
        created = body.get("policies") if isinstance(body, dict) else None
        if not isinstance(created, list):
            raise MalformedResponseError("Create policies response has no 'policies' array")
        result = [scaling_policy_from_json(p) for p in created]
        log.info("POLICIES_CREATED group=%s count=%d", self.group_id, len(result))
        return result

    def list(self, options: PaginationOptions | None = None) -> PagedSequence[ScalingPolicy]:
        return paged(self._fetch_page, options or PaginationOptions())

    def get(self, policy_id: str) -> ScalingPolicy | None:
        try:
            body = self.client.send_json(get_policy_request(self.group_id, policy_id))
        except ResourceNotFoundError:
            return None
        return scaling_policy_from_json(body.get("policy") if isinstance(body, dict) else body)

    def update(self, policy_id: str, policy: CreateScalingPolicy | ScalingPolicy) -> bool:
        try:
            self.client.send(update_policy_request(self.group_id, policy_id, policy))
        except ResourceNotFoundError:
            return False
        return True

    def delete(self, policy_id: str) -> bool:
        try:
            self.client.send(delete_policy_request(self.group_id, policy_id))
        except ResourceNotFoundError:
            return False
        return True

    def execute(self, policy_id: str) -> bool:
        try:
            self.client.send(execute_policy_request(self.group_id, policy_id))
        except ResourceNotFoundError:
            return False
        log.info("POLICY_EXECUTED group=%s policy=%s", self.group_id, policy_id)
        return True


class AutoscaleApi(ZonedApi):
    service = "autoscale"

    def policy_api(self, group_id: str, zone: str | None = None) -> PolicyApi:
        return PolicyApi(self.client_for_zone(zone), group_id)
