"""Scale-factor heuristics per resource type.

A scale factor is a dimensionless multiplier applied to every threshold
baseline of a resource: a ``db.r5.4xlarge`` tolerates far more connections
than a ``db.t3.micro``. Estimators are total functions: whatever the template
contains (missing properties, intrinsic functions, strings where numbers are
expected) they return a finite value greater than zero.
"""

from __future__ import annotations

import math
from types import MappingProxyType
from typing import Any, Callable, Mapping

from cfn_metrics_advisor.models import Resource

ScaleEstimator = Callable[[Resource], float]

DEFAULT_SCALE = 1.0


# ──────────────────────────── Property Helpers ────────────────────────────────


def as_number(value: Any, default: float) -> float:
    """Coerce a template value to a float, or return *default*.

    Numeric strings are accepted. Intrinsic functions (``{"Ref": ...}``)
    and anything else fall back.
    """
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return default
    else:
        return default
    return number if math.isfinite(number) else default


def _tag_value(properties: Mapping[str, Any], key: str) -> Any:
    """Look up a tag in either the ``[{Key, Value}]`` list or the SAM map form."""
    tags = properties.get("Tags")
    if isinstance(tags, dict):
        return tags.get(key)
    if isinstance(tags, list):
        for tag in tags:
            if isinstance(tag, dict) and tag.get("Key") == key:
                return tag.get("Value")
    return None


def _tiered(value: float, tiers: tuple[tuple[float, float], ...], top: float) -> float:
    """Return the scale of the first tier whose upper bound is >= *value*."""
    for upper, scale in tiers:
        if value <= upper:
            return scale
    return top


# ──────────────────────────── RDS ─────────────────────────────────────────────

RDS_DEFAULT_INSTANCE_CLASS = "db.t3.micro"

RDS_INSTANCE_CLASS_SCALES: Mapping[str, float] = MappingProxyType({
    # burstable
    "db.t3.micro": 0.5,
    "db.t3.small": 0.7,
    "db.t3.medium": 1.0,
    "db.t3.large": 1.2,
    "db.t3.xlarge": 1.5,
    "db.t3.2xlarge": 2.0,
    "db.t4g.micro": 0.5,
    "db.t4g.small": 0.7,
    "db.t4g.medium": 1.0,
    "db.t4g.large": 1.2,
    "db.t4g.xlarge": 1.5,
    "db.t4g.2xlarge": 2.0,
    # general purpose
    "db.m5.large": 1.5,
    "db.m5.xlarge": 2.0,
    "db.m5.2xlarge": 3.0,
    "db.m5.4xlarge": 4.0,
    "db.m5.8xlarge": 6.0,
    "db.m5.12xlarge": 8.0,
    "db.m5.16xlarge": 10.0,
    "db.m5.24xlarge": 14.0,
    "db.m6i.large": 1.5,
    "db.m6i.xlarge": 2.0,
    "db.m6i.2xlarge": 3.0,
    "db.m6i.4xlarge": 4.0,
    "db.m6i.8xlarge": 6.0,
    "db.m6i.12xlarge": 8.0,
    "db.m6i.16xlarge": 10.0,
    "db.m6i.24xlarge": 14.0,
    "db.m6i.32xlarge": 18.0,
    # memory optimised
    "db.r5.large": 1.8,
    "db.r5.xlarge": 2.5,
    "db.r5.2xlarge": 3.5,
    "db.r5.4xlarge": 5.0,
    "db.r5.8xlarge": 7.0,
    "db.r5.12xlarge": 9.0,
    "db.r5.16xlarge": 12.0,
    "db.r5.24xlarge": 16.0,
    "db.r6i.large": 1.8,
    "db.r6i.xlarge": 2.5,
    "db.r6i.2xlarge": 3.5,
    "db.r6i.4xlarge": 5.0,
    "db.r6i.8xlarge": 7.0,
    "db.r6i.12xlarge": 9.0,
    "db.r6i.16xlarge": 12.0,
    "db.r6i.24xlarge": 16.0,
    "db.r6i.32xlarge": 20.0,
    "db.x2iedn.large": 3.0,
    "db.x2iedn.xlarge": 4.0,
    "db.x2iedn.2xlarge": 6.0,
    "db.x2iedn.4xlarge": 9.0,
    "db.x2iedn.8xlarge": 14.0,
    "db.x2iedn.16xlarge": 20.0,
    "db.x2iedn.24xlarge": 28.0,
    "db.x2iedn.32xlarge": 35.0,
})


def rds_scale(resource: Resource) -> float:
    """Scale by ``DBInstanceClass``; unknown classes get 1.0."""
    instance_class = resource.properties.get("DBInstanceClass") or RDS_DEFAULT_INSTANCE_CLASS
    if not isinstance(instance_class, str):
        return DEFAULT_SCALE
    return RDS_INSTANCE_CLASS_SCALES.get(instance_class, DEFAULT_SCALE)


# ──────────────────────────── Lambda ──────────────────────────────────────────

LAMBDA_DEFAULT_MEMORY_MB = 128

_LAMBDA_MEMORY_TIERS = (
    (256, 0.5),
    (512, 0.7),
    (1024, 1.0),
    (1536, 1.3),
    (2048, 1.7),
    (3008, 2.0),
    (4096, 2.5),
    (6144, 3.0),
    (8192, 3.5),
)


def lambda_scale(resource: Resource) -> float:
    """Scale by ``MemorySize`` in MB (default 128)."""
    memory = as_number(resource.properties.get("MemorySize"), LAMBDA_DEFAULT_MEMORY_MB)
    return _tiered(memory, _LAMBDA_MEMORY_TIERS, 4.0)


# ──────────────────────────── ECS ─────────────────────────────────────────────

ECS_DEFAULT_DESIRED_COUNT = 1

_ECS_DESIRED_COUNT_TIERS = (
    (2, 0.7),
    (5, 1.0),
    (10, 1.3),
    (20, 1.7),
    (50, 2.0),
)


def ecs_scale(resource: Resource) -> float:
    desired = as_number(resource.properties.get("DesiredCount"), ECS_DEFAULT_DESIRED_COUNT)
    return _tiered(desired, _ECS_DESIRED_COUNT_TIERS, 2.5)


# ──────────────────────────── DynamoDB ────────────────────────────────────────

DYNAMODB_DEFAULT_CAPACITY = 5

_DYNAMODB_CAPACITY_TIERS = (
    (2, 0.5),
    (10, 0.8),
    (50, 1.0),
    (100, 1.5),
    (500, 2.0),
)


def dynamodb_scale(resource: Resource) -> float:
    """Scale by total provisioned capacity of the table and its GSIs.

    On-demand tables (``PAY_PER_REQUEST``) have no capacity to size by and
    get 1.0. Table read/write capacity default to 5 each; GSIs without a
    throughput block add nothing.
    """
    props = resource.properties
    if props.get("BillingMode") == "PAY_PER_REQUEST":
        return DEFAULT_SCALE

    throughput = props.get("ProvisionedThroughput")
    if not isinstance(throughput, dict):
        throughput = {}
    total = as_number(throughput.get("ReadCapacityUnits"), DYNAMODB_DEFAULT_CAPACITY)
    total += as_number(throughput.get("WriteCapacityUnits"), DYNAMODB_DEFAULT_CAPACITY)

    gsis = props.get("GlobalSecondaryIndexes")
    if isinstance(gsis, list):
        for gsi in gsis:
            gsi_throughput = gsi.get("ProvisionedThroughput") if isinstance(gsi, dict) else None
            if isinstance(gsi_throughput, dict):
                total += as_number(gsi_throughput.get("ReadCapacityUnits"), 0)
                total += as_number(gsi_throughput.get("WriteCapacityUnits"), 0)

    return _tiered(total, _DYNAMODB_CAPACITY_TIERS, 3.0)


# ──────────────────────────── Load Balancer ───────────────────────────────────


def alb_scale(resource: Resource) -> float:
    if _tag_value(resource.properties, "Scale") == "Large":
        return 1.5
    if resource.properties.get("Scheme") == "internet-facing":
        return 1.2
    return DEFAULT_SCALE


# ──────────────────────────── API Gateway ─────────────────────────────────────


def api_gateway_scale(resource: Resource) -> float:
    """Scale by environment tag, custom domain tag and resource policy, in that order."""
    environment = _tag_value(resource.properties, "Environment")
    if environment == "Production":
        return 1.5
    if environment == "Development":
        return 0.5
    if _tag_value(resource.properties, "HasCustomDomain") == "true":
        return 1.2
    if resource.properties.get("Policy"):
        return 1.1
    return DEFAULT_SCALE


# ──────────────────────────── Dispatch ────────────────────────────────────────

SCALE_ESTIMATORS: Mapping[str, ScaleEstimator] = MappingProxyType({
    "AWS::RDS::DBInstance": rds_scale,
    "AWS::Lambda::Function": lambda_scale,
    "AWS::Serverless::Function": lambda_scale,
    "AWS::ECS::Service": ecs_scale,
    "AWS::ElasticLoadBalancingV2::LoadBalancer": alb_scale,
    "AWS::DynamoDB::Table": dynamodb_scale,
    "AWS::ApiGateway::RestApi": api_gateway_scale,
    "AWS::Serverless::Api": api_gateway_scale,
})


def safe_scale(estimator: ScaleEstimator, resource: Resource) -> float:
    """Run *estimator* and clamp anything unusable to :data:`DEFAULT_SCALE`."""
    try:
        scale = float(estimator(resource))
    except (TypeError, ValueError, AttributeError):
        return DEFAULT_SCALE
    if not math.isfinite(scale) or scale <= 0:
        return DEFAULT_SCALE
    return scale


def estimate_scale(resource: Resource) -> float:
    """Return the scale factor for *resource*; 1.0 for types without an estimator."""
    estimator = SCALE_ESTIMATORS.get(resource.type)
    if estimator is None:
        return DEFAULT_SCALE
    return safe_scale(estimator, resource)
