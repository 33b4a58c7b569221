"""Per-resource alarm recommendation pipeline.

One generic pipeline serves every supported type; what differs per type
(which catalog to read, how to estimate scale and optional importance
tweaks) is captured in a :class:`ResourceTypeProfile` and looked up from
:data:`PROFILES`. The CloudWatch dimension naming the resource comes from
:data:`DIMENSION_NAMES`.

Pipeline for one resource::

    catalog entries -> importance adjustments -> applicability filter
        -> scale estimate -> thresholds -> MetricDefinition list -> limiter
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Callable, Mapping

from cfn_metrics_advisor import catalog as cat
from cfn_metrics_advisor.catalog import METRIC_CATALOG, MetricCatalogEntry, get_catalog_entries
from cfn_metrics_advisor.conditions import is_applicable
from cfn_metrics_advisor.errors import ResourceError
from cfn_metrics_advisor.limiter import limit_alarms
from cfn_metrics_advisor.models import (
    Dimension,
    Importance,
    MetricDefinition,
    Polarity,
    Resource,
)
from cfn_metrics_advisor.scaling import (
    ScaleEstimator,
    alb_scale,
    api_gateway_scale,
    as_number,
    dynamodb_scale,
    ecs_scale,
    lambda_scale,
    rds_scale,
    safe_scale,
)
from cfn_metrics_advisor.thresholds import compute_threshold

logger = logging.getLogger(__name__)

SLOW_GENERATION_MS = 1000.0

ImportanceAdjuster = Callable[[MetricCatalogEntry, Resource], MetricCatalogEntry]

DIMENSION_NAMES: Mapping[str, str] = MappingProxyType({
    "AWS::RDS::DBInstance": "DBInstanceIdentifier",
    "AWS::Lambda::Function": "FunctionName",
    "AWS::Serverless::Function": "FunctionName",
    "AWS::ECS::Service": "ServiceName",
    "AWS::ElasticLoadBalancingV2::LoadBalancer": "LoadBalancer",
    "AWS::DynamoDB::Table": "TableName",
    "AWS::ApiGateway::RestApi": "ApiName",
    "AWS::Serverless::Api": "ApiName",
})
FALLBACK_DIMENSION = "ResourceId"


def dimension_name_for(resource_type: str) -> str:
    return DIMENSION_NAMES.get(resource_type, FALLBACK_DIMENSION)


# ──────────────────────────── Importance Adjusters ────────────────────────────

ECS_HIGH_IMPORTANCE_DESIRED_COUNT = 10
_ECS_COUNT_METRICS = frozenset({"TaskCount", "RunningCount", "PendingCount"})


def _raise_to_high(entry: MetricCatalogEntry) -> MetricCatalogEntry:
    if entry.importance is Importance.HIGH:
        return entry
    return replace(entry, importance=Importance.HIGH)


def adjust_lambda_importance(entry: MetricCatalogEntry, resource: Resource) -> MetricCatalogEntry:
    """Container-image functions care about cold starts; provisioned ones about utilisation."""
    props = resource.properties
    if entry.name == "InitDuration" and props.get("PackageType") == "Image":
        return _raise_to_high(entry)
    if (
        entry.name == "ProvisionedConcurrencyUtilization"
        and as_number(props.get("ReservedConcurrentExecutions"), 0) > 0
    ):
        return _raise_to_high(entry)
    return entry


def adjust_ecs_importance(entry: MetricCatalogEntry, resource: Resource) -> MetricCatalogEntry:
    """Task-count metrics matter more for services running many tasks."""
    if entry.name in _ECS_COUNT_METRICS:
        desired = as_number(resource.properties.get("DesiredCount"), 0)
        if desired >= ECS_HIGH_IMPORTANCE_DESIRED_COUNT:
            return _raise_to_high(entry)
    return entry


# ──────────────────────────── Profiles ────────────────────────────────────────


@dataclass(frozen=True)
class ResourceTypeProfile:
    """Everything type-specific about generating metrics for a resource."""

    supported_types: tuple[str, ...]
    catalog_key: str
    scale_estimator: ScaleEstimator
    importance_adjuster: ImportanceAdjuster | None = None


RDS_PROFILE = ResourceTypeProfile(
    supported_types=("AWS::RDS::DBInstance",),
    catalog_key=cat.RDS_INSTANCE,
    scale_estimator=rds_scale,
)
LAMBDA_PROFILE = ResourceTypeProfile(
    supported_types=("AWS::Lambda::Function", "AWS::Serverless::Function"),
    catalog_key=cat.LAMBDA_FUNCTION,
    scale_estimator=lambda_scale,
    importance_adjuster=adjust_lambda_importance,
)
ECS_PROFILE = ResourceTypeProfile(
    supported_types=("AWS::ECS::Service",),
    catalog_key=cat.ECS_SERVICE,
    scale_estimator=ecs_scale,
    importance_adjuster=adjust_ecs_importance,
)
ALB_PROFILE = ResourceTypeProfile(
    supported_types=("AWS::ElasticLoadBalancingV2::LoadBalancer",),
    catalog_key=cat.LOAD_BALANCER,
    scale_estimator=alb_scale,
)
DYNAMODB_PROFILE = ResourceTypeProfile(
    supported_types=("AWS::DynamoDB::Table",),
    catalog_key=cat.DYNAMODB_TABLE,
    scale_estimator=dynamodb_scale,
)
API_GATEWAY_PROFILE = ResourceTypeProfile(
    supported_types=("AWS::ApiGateway::RestApi", "AWS::Serverless::Api"),
    catalog_key=cat.API_GATEWAY_REST_API,
    scale_estimator=api_gateway_scale,
)

PROFILES: tuple[ResourceTypeProfile, ...] = (
    RDS_PROFILE,
    LAMBDA_PROFILE,
    ECS_PROFILE,
    ALB_PROFILE,
    DYNAMODB_PROFILE,
    API_GATEWAY_PROFILE,
)

PROFILE_BY_TYPE: Mapping[str, ResourceTypeProfile] = MappingProxyType(
    {t: profile for profile in PROFILES for t in profile.supported_types}
)


# ──────────────────────────── Generator ───────────────────────────────────────


class MetricsGenerator:
    """Generate alarm recommendations for resources of one profile.

    Instances hold only immutable configuration, so a single generator can
    be shared across threads.
    """

    def __init__(
        self,
        profile: ResourceTypeProfile,
        catalog: Mapping[str, tuple[MetricCatalogEntry, ...]] = METRIC_CATALOG,
        max_alarms: int | str | None = None,
        honor_polarity: bool = False,
    ) -> None:
        self.profile = profile
        self.catalog = catalog
        self.max_alarms = max_alarms
        self.honor_polarity = honor_polarity

    def supports(self, resource_type: str) -> bool:
        return resource_type in self.profile.supported_types

    def generate(self, resource: Resource) -> list[MetricDefinition]:
        start = time.perf_counter()
        self._validate(resource)
        entries = self._catalog_entries()

        adjust = self.profile.importance_adjuster
        if adjust is not None:
            entries = tuple(adjust(entry, resource) for entry in entries)

        applicable = [entry for entry in entries if is_applicable(entry, resource)]
        scale = safe_scale(self.profile.scale_estimator, resource)
        dimension = Dimension(name=dimension_name_for(resource.type), value=resource.logical_id)
        definitions = [self._build(entry, scale, dimension) for entry in applicable]
        limited = limit_alarms(definitions, self.max_alarms)

        elapsed_ms = (time.perf_counter() - start) * 1000
        if elapsed_ms > SLOW_GENERATION_MS:
            logger.info(
                "Slow metrics generation resource=%s type=%s elapsed_ms=%.0f",
                resource.logical_id,
                resource.type,
                elapsed_ms,
            )
        else:
            logger.debug(
                "Generated %d metrics for %s in %.1f ms (scale %.2f)",
                len(limited),
                resource.logical_id,
                elapsed_ms,
                scale,
            )
        return limited

    def _validate(self, resource: Resource) -> None:
        if not isinstance(resource.type, str) or not resource.type:
            raise ResourceError(
                "Resource must have a valid Type",
                details={"resourceId": resource.logical_id},
            )
        if not self.supports(resource.type):
            raise ResourceError(
                f"Unsupported resource type: {resource.type}",
                details={
                    "resourceType": resource.type,
                    "supportedTypes": list(self.profile.supported_types),
                },
            )

    def _catalog_entries(self) -> tuple[MetricCatalogEntry, ...]:
        entries = get_catalog_entries(self.profile.catalog_key, self.catalog)
        if entries is None:
            raise ResourceError(
                f"No metric catalog entries for {self.profile.catalog_key}",
                details={
                    "resourceType": self.profile.catalog_key,
                    "supportedTypes": list(self.profile.supported_types),
                },
            )
        return entries

    def _build(self, entry: MetricCatalogEntry, scale: float, dimension: Dimension) -> MetricDefinition:
        polarity = entry.polarity if self.honor_polarity else Polarity.HIGHER_IS_WORSE
        threshold = compute_threshold(entry.threshold, scale, polarity, metric_name=entry.name)
        return MetricDefinition(
            metric_name=entry.name,
            namespace=entry.namespace,
            unit=entry.unit,
            description=entry.description,
            statistic=entry.statistic,
            evaluation_period=entry.evaluation_period,
            category=entry.category,
            importance=entry.importance,
            threshold=threshold,
            polarity=polarity,
            dimensions=[dimension],
        )


def generator_for(
    resource_type: str,
    max_alarms: int | str | None = None,
    honor_polarity: bool = False,
) -> MetricsGenerator:
    """Return a generator for *resource_type*, raising ResourceError if none exists."""
    profile = PROFILE_BY_TYPE.get(resource_type)
    if profile is None:
        raise ResourceError(
            f"Unsupported resource type: {resource_type}",
            details={"resourceType": resource_type, "supportedTypes": sorted(PROFILE_BY_TYPE)},
        )
    return MetricsGenerator(profile, max_alarms=max_alarms, honor_polarity=honor_polarity)


def generate_metrics(
    resource: Resource,
    max_alarms: int | str | None = None,
    honor_polarity: bool = False,
) -> list[MetricDefinition]:
    return generator_for(resource.type, max_alarms, honor_polarity).generate(resource)
