# osclient.autoscale - Rackspace Autoscale v1 scaling policies

from osclient.autoscale.api import AutoscaleApi, PolicyApi
from osclient.autoscale.binders import scaling_policy_to_json
from osclient.autoscale.models import (
    CreateScalingPolicy,
    ScalingPolicy,
    ScalingPolicyTargetType,
    ScalingPolicyType,
)

__all__ = [
    "AutoscaleApi",
    "CreateScalingPolicy",
    "PolicyApi",
    "ScalingPolicy",
    "ScalingPolicyTargetType",
    "ScalingPolicyType",
    "scaling_policy_to_json",
]
