"""Split a template's resources into the ones we can recommend alarms for and the rest.

Membership in :data:`SUPPORTED_TYPES` is necessary but not sufficient. Two
CloudFormation types are broader than what the catalog covers and are
narrowed by a refinement rule:

* ``AWS::ECS::Service`` is accepted only for Fargate services. The catalog
  describes Fargate task metrics; EC2-backed services and services without
  a launch type or capacity provider are reported as unsupported.
* ``AWS::ElasticLoadBalancingV2::LoadBalancer`` is accepted only for
  application load balancers. Network and gateway load balancers publish a
  different metric namespace.

Classification never raises. Entries that are not mappings or that lack a
string ``Type`` are counted as unsupported.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Mapping

from cfn_metrics_advisor.models import ExtractionResult, Resource

logger = logging.getLogger(__name__)

SUPPORTED_TYPES = frozenset({
    "AWS::RDS::DBInstance",
    "AWS::Lambda::Function",
    "AWS::Serverless::Function",
    "AWS::ECS::Service",
    "AWS::ElasticLoadBalancingV2::LoadBalancer",
    "AWS::DynamoDB::Table",
    "AWS::ApiGateway::RestApi",
    "AWS::Serverless::Api",
})

# Soft budget for one classification pass (a few hundred resources).
CLASSIFICATION_BUDGET_MS = 3000.0

FARGATE_CAPACITY_PROVIDERS = ("FARGATE", "FARGATE_SPOT")


# ──────────────────────────── Refinement Rules ────────────────────────────────


def is_fargate_service(resource: Resource) -> bool:
    """True when the service declares Fargate by launch type or capacity provider."""
    props = resource.properties
    if props.get("LaunchType") == "FARGATE":
        return True
    strategy = props.get("CapacityProviderStrategy")
    if not isinstance(strategy, list):
        return False
    return any(
        isinstance(item, dict) and item.get("CapacityProvider") in FARGATE_CAPACITY_PROVIDERS
        for item in strategy
    )


def is_application_load_balancer(resource: Resource) -> bool:
    """True for ``Type: application`` or when ``Type`` is omitted (the AWS default)."""
    lb_type = resource.properties.get("Type")
    return lb_type is None or lb_type == "application"


REFINEMENTS: Mapping[str, Callable[[Resource], bool]] = {
    "AWS::ECS::Service": is_fargate_service,
    "AWS::ElasticLoadBalancingV2::LoadBalancer": is_application_load_balancer,
}


def is_supported(resource: Resource) -> bool:
    if resource.type not in SUPPORTED_TYPES:
        return False
    refine = REFINEMENTS.get(resource.type)
    return refine is None or refine(resource)


# ──────────────────────────── Classification ──────────────────────────────────


def _to_resource(logical_id: Any, raw: Any) -> Resource | None:
    if not isinstance(raw, dict) or not isinstance(raw.get("Type"), str):
        return None
    return Resource.from_template_entry(str(logical_id), raw)


def classify_resources(resources: Mapping[str, Any] | None) -> ExtractionResult:
    """Partition a template ``Resources`` mapping in a single pass.

    Template order is preserved in both the supported list and the
    unsupported ids.
    """
    start = time.perf_counter()
    supported: list[Resource] = []
    unsupported: list[str] = []

    items = resources.items() if isinstance(resources, Mapping) else ()
    for logical_id, raw in items:
        resource = _to_resource(logical_id, raw)
        if resource is not None and is_supported(resource):
            supported.append(resource)
        else:
            unsupported.append(str(logical_id))

    elapsed_ms = (time.perf_counter() - start) * 1000
    total = len(supported) + len(unsupported)
    if elapsed_ms > CLASSIFICATION_BUDGET_MS:
        logger.warning(
            "Resource classification took %.0f ms for %d resources (budget %.0f ms)",
            elapsed_ms,
            total,
            CLASSIFICATION_BUDGET_MS,
        )
    logger.debug(
        "Classified %d resources: %d supported, %d unsupported",
        total,
        len(supported),
        len(unsupported),
    )
    return ExtractionResult(
        supported=supported,
        unsupported_ids=unsupported,
        total_count=total,
        elapsed_ms=elapsed_ms,
    )
