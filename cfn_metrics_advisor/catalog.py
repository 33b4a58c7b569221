"""Static catalog of CloudWatch metrics recommended per CloudFormation resource type.

Each resource type maps to an ordered tuple of :class:`MetricCatalogEntry`
records holding the metric identity, its alarm evaluation settings and the
baseline threshold parameters that the threshold calculator scales per
resource. The table is built once at import time and exposed read-only.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from functools import partial
from types import MappingProxyType
from typing import Any, Mapping

from cfn_metrics_advisor.conditions import (
    Condition,
    all_of,
    excludes_billing_mode,
    requires_backup_retention,
    requires_burstable_instance,
    requires_compatibility,
    requires_engine,
    requires_engine_prefix,
    requires_gsi,
    requires_single_az,
)
from cfn_metrics_advisor.models import Category, EvaluationPeriod, Importance, Polarity, Statistic

# Catalog keys. SAM types share the catalog of their plain CloudFormation type.
RDS_INSTANCE = "AWS::RDS::DBInstance"
LAMBDA_FUNCTION = "AWS::Lambda::Function"
ECS_SERVICE = "AWS::ECS::Service"
LOAD_BALANCER = "AWS::ElasticLoadBalancingV2::LoadBalancer"
DYNAMODB_TABLE = "AWS::DynamoDB::Table"
API_GATEWAY_REST_API = "AWS::ApiGateway::RestApi"


# ──────────────────────────── Entry Types ─────────────────────────────────────


@dataclass(frozen=True)
class ThresholdSpec:
    """Baseline threshold parameters; scaled per resource before use."""

    base: float
    warning_multiplier: float
    critical_multiplier: float

    def __post_init__(self) -> None:
        if not math.isfinite(self.base) or self.base < 0:
            raise ValueError(f"threshold base must be a finite number >= 0, got {self.base}")
        for label, value in (
            ("warning_multiplier", self.warning_multiplier),
            ("critical_multiplier", self.critical_multiplier),
        ):
            if not math.isfinite(value) or value <= 0:
                raise ValueError(f"{label} must be a finite number > 0, got {value}")


@dataclass(frozen=True)
class MetricCatalogEntry:
    """One candidate alarm for a resource type."""

    name: str
    namespace: str
    unit: str
    description: str
    statistic: Statistic
    evaluation_period: EvaluationPeriod
    category: Category
    importance: Importance
    threshold: ThresholdSpec
    polarity: Polarity = Polarity.HIGHER_IS_WORSE
    condition: Condition | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["statistic"] = self.statistic.value
        data["evaluation_period"] = self.evaluation_period.value
        data["category"] = self.category.value
        data["importance"] = self.importance.value
        data["polarity"] = self.polarity.value
        data["condition"] = self.condition.to_dict() if self.condition else None
        return data


def _metric(
    namespace: str,
    name: str,
    unit: str,
    description: str,
    statistic: Statistic,
    category: Category,
    importance: Importance,
    base: float,
    warning: float,
    critical: float,
    *,
    period: EvaluationPeriod = EvaluationPeriod.FIVE_MINUTES,
    polarity: Polarity = Polarity.HIGHER_IS_WORSE,
    condition: Condition | None = None,
) -> MetricCatalogEntry:
    return MetricCatalogEntry(
        name=name,
        namespace=namespace,
        unit=unit,
        description=description,
        statistic=statistic,
        evaluation_period=period,
        category=category,
        importance=importance,
        threshold=ThresholdSpec(base, warning, critical),
        polarity=polarity,
        condition=condition,
    )


AVG, SUM, MAX = Statistic.AVERAGE, Statistic.SUM, Statistic.MAXIMUM
PERF, ERR, SAT, LAT = Category.PERFORMANCE, Category.ERROR, Category.SATURATION, Category.LATENCY
HIGH, MEDIUM, LOW = Importance.HIGH, Importance.MEDIUM, Importance.LOW
LOWER = Polarity.LOWER_IS_WORSE

_GIB = 1_073_741_824
_MIB = 1_048_576


# ── RDS ───────────────────────────────────────────────────────────────────────

_rds = partial(_metric, "AWS/RDS")
_burstable = requires_burstable_instance()

_RDS_METRICS = (
    _rds("CPUUtilization", "Percent", "CPU utilisation of the DB instance",
         AVG, PERF, HIGH, 70, 1.0, 1.3),
    _rds("CPUCreditUsage", "Count", "CPU credits spent (burstable classes)",
         AVG, PERF, MEDIUM, 20, 1.0, 2.0, condition=_burstable),
    _rds("CPUCreditBalance", "Count", "CPU credits remaining (burstable classes)",
         AVG, PERF, MEDIUM, 30, 1.0, 0.5, polarity=LOWER, condition=_burstable),
    _rds("DatabaseConnections", "Count", "Open database connections",
         AVG, SAT, HIGH, 20, 1.0, 2.0),
    _rds("ReadLatency", "Seconds", "Average time per disk read",
         AVG, LAT, HIGH, 0.02, 1.0, 2.5),
    _rds("WriteLatency", "Seconds", "Average time per disk write",
         AVG, LAT, HIGH, 0.02, 1.0, 2.5),
    _rds("ReadThroughput", "Bytes/Second", "Bytes read from disk per second",
         AVG, PERF, MEDIUM, _MIB, 10.0, 20.0),
    _rds("WriteThroughput", "Bytes/Second", "Bytes written to disk per second",
         AVG, PERF, MEDIUM, _MIB, 10.0, 20.0),
    _rds("ReadIOPS", "Count/Second", "Disk read operations per second",
         AVG, PERF, MEDIUM, 100, 10.0, 15.0),
    _rds("WriteIOPS", "Count/Second", "Disk write operations per second",
         AVG, PERF, MEDIUM, 100, 10.0, 15.0),
    _rds("FreeableMemory", "Bytes", "Available RAM",
         AVG, SAT, HIGH, 128 * _MIB, 2.0, 1.0, polarity=LOWER),
    _rds("SwapUsage", "Bytes", "Swap space in use",
         AVG, SAT, MEDIUM, 0, 1.0, 1000.0),
    _rds("FreeStorageSpace", "Bytes", "Available storage space",
         AVG, SAT, HIGH, 2 * _GIB, 5.0, 1.0, polarity=LOWER),
    _rds("FreeLocalStorage", "Bytes", "Available local storage (Aurora)",
         AVG, SAT, MEDIUM, _GIB, 2.0, 1.0, polarity=LOWER,
         condition=requires_engine_prefix("aurora")),
    _rds("BinLogDiskUsage", "Bytes", "Disk used by binary logs (MySQL)",
         AVG, SAT, MEDIUM, _GIB, 1.0, 2.0,
         condition=all_of(requires_engine("mysql"), requires_backup_retention())),
    _rds("ReplicaLag", "Seconds", "Replication lag of a read replica",
         AVG, LAT, HIGH, 30, 1.0, 2.0, condition=requires_single_az()),
    _rds("CheckpointLag", "Seconds", "Time since the most recent checkpoint (PostgreSQL)",
         AVG, PERF, MEDIUM, 60, 1.0, 2.0, condition=requires_engine("postgresql")),
    _rds("MaximumUsedTransactionIDs", "Count", "Highest transaction ID in use (PostgreSQL)",
         MAX, SAT, HIGH, 1_000_000_000, 1.5, 1.8, condition=requires_engine("postgresql")),
    _rds("OldestReplicationSlotLag", "Bytes", "Lag of the most lagging replication slot (PostgreSQL)",
         MAX, LAT, MEDIUM, _GIB, 5.0, 10.0, condition=requires_engine("postgresql")),
    _rds("AuroraReplicaLag", "Milliseconds", "Lag of Aurora replicas behind the writer",
         AVG, LAT, HIGH, 1000, 1.0, 5.0, condition=requires_engine_prefix("aurora")),
    _rds("BufferCacheHitRatio", "Percent", "Requests served from the buffer cache",
         AVG, PERF, MEDIUM, 90, 0.95, 0.8, polarity=LOWER),
    _rds("ResultSetCacheHitRatio", "Percent", "Result set cache hit ratio (MySQL)",
         AVG, PERF, MEDIUM, 90, 0.9, 0.7, polarity=LOWER, condition=requires_engine("mysql")),
    _rds("DatabaseConnectionsBorrowCount", "Count/Second", "Connections borrowed from the pool",
         AVG, PERF, MEDIUM, 10, 10.0, 50.0),
    _rds("LoginFailures", "Count/Second", "Failed login attempts",
         AVG, ERR, HIGH, 1, 1.0, 5.0),
    _rds("SelectLatency", "Seconds", "Average SELECT statement latency",
         AVG, LAT, MEDIUM, 0.1, 5.0, 20.0),
    _rds("DiskQueueDepth", "Count", "Outstanding disk I/O requests",
         AVG, SAT, MEDIUM, 10, 2.0, 5.0),
)


# ── Lambda ────────────────────────────────────────────────────────────────────

_lambda = partial(_metric, "AWS/Lambda")

_LAMBDA_METRICS = (
    _lambda("Duration", "Milliseconds", "Function execution time",
            AVG, PERF, HIGH, 5000, 0.8, 1.0),
    _lambda("Invocations", "Count", "Function invocations",
            SUM, PERF, MEDIUM, 1000, 10.0, 20.0),
    _lambda("Errors", "Count", "Invocations that ended in a function error",
            SUM, ERR, HIGH, 5, 1.0, 2.0),
    _lambda("DeadLetterErrors", "Count", "Failures sending events to the dead-letter queue",
            SUM, ERR, HIGH, 1, 1.0, 5.0),
    _lambda("DestinationDeliveryFailures", "Count", "Failures delivering to an async destination",
            SUM, ERR, MEDIUM, 1, 1.0, 10.0),
    _lambda("Throttles", "Count", "Throttled invocation requests",
            SUM, SAT, HIGH, 1, 1.0, 5.0),
    _lambda("ConcurrentExecutions", "Count", "Instances processing events concurrently",
            MAX, SAT, HIGH, 100, 0.8, 1.0),
    _lambda("UnreservedConcurrentExecutions", "Count", "Concurrency used by functions without reservations",
            MAX, SAT, MEDIUM, 900, 0.8, 0.9),
    _lambda("ProvisionedConcurrencyInvocations", "Count", "Invocations served by provisioned concurrency",
            SUM, PERF, MEDIUM, 100, 10.0, 50.0),
    _lambda("ProvisionedConcurrencyUtilization", "Percent", "Share of provisioned concurrency in use",
            MAX, SAT, MEDIUM, 80, 1.0, 1.25),
    _lambda("ProvisionedConcurrencySpilloverInvocations", "Count", "Invocations above provisioned concurrency",
            SUM, SAT, MEDIUM, 10, 1.0, 10.0),
    _lambda("IteratorAge", "Milliseconds", "Age of the last record processed from a stream",
            MAX, LAT, MEDIUM, 60000, 5.0, 10.0),
    _lambda("InitDuration", "Milliseconds", "Initialisation time on cold start",
            AVG, PERF, MEDIUM, 3000, 1.0, 2.0),
    _lambda("PostRuntimeExtensionsDuration", "Milliseconds", "Time spent in extensions after the handler",
            AVG, PERF, LOW, 1000, 2.0, 5.0),
    _lambda("OfflineTime", "Milliseconds", "Time the function was unavailable",
            AVG, PERF, LOW, 1000, 10.0, 30.0),
    _lambda("ClaimedAccountConcurrency", "Count", "Account concurrency claimed by on-demand and provisioned use",
            MAX, SAT, LOW, 800, 1.0, 1.25),
    _lambda("AsyncEventAge", "Milliseconds", "Time asynchronous events wait before invocation",
            AVG, LAT, MEDIUM, 60000, 5.0, 10.0),
    _lambda("ResponseStreamingDuration", "Milliseconds", "Time spent streaming responses",
            AVG, PERF, LOW, 30000, 0.8, 1.0),
)


# ── ECS (Fargate) ─────────────────────────────────────────────────────────────

_ecs = partial(_metric, "AWS/ECS")
_gpu = requires_compatibility("GPU")

_ECS_METRICS = (
    _ecs("CPUUtilization", "Percent", "Task CPU utilisation",
         AVG, PERF, HIGH, 70, 1.0, 1.3),
    _ecs("MemoryUtilization", "Percent", "Task memory utilisation",
         AVG, PERF, HIGH, 80, 1.0, 1.125),
    _ecs("CPUReservation", "Percent", "Share of cluster CPU reserved by tasks",
         AVG, SAT, MEDIUM, 70, 1.0, 1.2),
    _ecs("MemoryReservation", "Percent", "Share of cluster memory reserved by tasks",
         AVG, SAT, MEDIUM, 70, 1.0, 1.2),
    _ecs("EphemeralStorageUtilization", "Percent", "Fargate ephemeral storage utilisation",
         AVG, SAT, MEDIUM, 80, 1.0, 1.125),
    _ecs("TaskCount", "Count", "Tasks running in the service",
         AVG, PERF, MEDIUM, 1, 0.5, 0.1, polarity=LOWER),
    _ecs("ServiceCPUUtilization", "Percent", "Service CPU utilisation",
         AVG, PERF, HIGH, 70, 1.0, 1.3),
    _ecs("ServiceMemoryUtilization", "Percent", "Service memory utilisation",
         AVG, PERF, HIGH, 80, 1.0, 1.125),
    _ecs("PendingCount", "Count", "Tasks waiting to start",
         AVG, PERF, MEDIUM, 0, 1.0, 10.0),
    _ecs("RunningCount", "Count", "Tasks in the RUNNING state",
         AVG, PERF, HIGH, 1, 0.5, 0.1, polarity=LOWER),
    _ecs("DesiredCount", "Count", "Tasks the service is asked to run",
         AVG, PERF, LOW, 2, 5.0, 10.0),
    _ecs("NetworkRxBytes", "Bytes", "Bytes received by tasks",
         SUM, PERF, LOW, 10 * _MIB, 100.0, 1000.0),
    _ecs("NetworkTxBytes", "Bytes", "Bytes sent by tasks",
         SUM, PERF, LOW, 10 * _MIB, 100.0, 1000.0),
    _ecs("StorageReadBytes", "Bytes", "Bytes read from storage",
         SUM, PERF, LOW, 100 * _MIB, 10.0, 50.0),
    _ecs("StorageWriteBytes", "Bytes", "Bytes written to storage",
         SUM, PERF, LOW, 100 * _MIB, 10.0, 50.0),
    _ecs("GPUUtilization", "Percent", "GPU utilisation of GPU tasks",
         AVG, PERF, MEDIUM, 70, 1.0, 1.3, condition=_gpu),
    _ecs("GPUMemoryUtilization", "Percent", "GPU memory utilisation of GPU tasks",
         AVG, PERF, MEDIUM, 80, 1.0, 1.125, condition=_gpu),
)


# ── Application Load Balancer ─────────────────────────────────────────────────

_alb = partial(_metric, "AWS/ApplicationELB")

_ALB_METRICS = (
    _alb("RequestCount", "Count", "Requests processed",
         SUM, PERF, MEDIUM, 1000, 10.0, 50.0),
    _alb("NewConnectionCount", "Count", "New client connections",
         SUM, PERF, MEDIUM, 100, 10.0, 50.0),
    _alb("ActiveConnectionCount", "Count", "Concurrent client connections",
         AVG, SAT, MEDIUM, 1000, 5.0, 10.0),
    _alb("ProcessedBytes", "Bytes", "Bytes processed by the load balancer",
         SUM, PERF, LOW, 100 * _MIB, 100.0, 1000.0),
    _alb("ConsumedLCUs", "Count", "Load balancer capacity units consumed",
         AVG, SAT, MEDIUM, 100, 10.0, 50.0),
    _alb("TargetResponseTime", "Seconds", "Time for targets to respond",
         AVG, LAT, HIGH, 1.0, 1.0, 3.0),
    _alb("HTTPCode_Target_2XX_Count", "Count", "Successful responses from targets",
         SUM, PERF, MEDIUM, 100, 0.1, 0.01, polarity=LOWER),
    _alb("HTTPCode_Target_4XX_Count", "Count", "Client errors returned by targets",
         SUM, ERR, HIGH, 10, 1.0, 5.0),
    _alb("HTTPCode_Target_5XX_Count", "Count", "Server errors returned by targets",
         SUM, ERR, HIGH, 5, 1.0, 3.0),
    _alb("HTTPCode_ELB_4XX_Count", "Count", "Client errors generated by the load balancer",
         SUM, ERR, MEDIUM, 10, 1.0, 5.0),
    _alb("HTTPCode_ELB_5XX_Count", "Count", "Server errors generated by the load balancer",
         SUM, ERR, HIGH, 1, 1.0, 10.0),
    _alb("UnHealthyHostCount", "Count", "Targets failing health checks",
         AVG, ERR, HIGH, 0, 1.0, 2.0),
    _alb("HealthyHostCount", "Count", "Targets passing health checks",
         AVG, PERF, HIGH, 2, 0.5, 0.25, polarity=LOWER),
    _alb("RejectedConnectionCount", "Count", "Connections rejected at the connection limit",
         SUM, ERR, MEDIUM, 10, 1.0, 5.0),
    _alb("TargetConnectionErrorCount", "Count", "Failed connections to targets",
         SUM, ERR, HIGH, 5, 1.0, 3.0),
    _alb("TargetTLSNegotiationTime", "Milliseconds", "TLS handshake time with targets",
         AVG, LAT, MEDIUM, 1000, 2.0, 5.0),
    _alb("ResponseTime", "Seconds", "End-to-end load balancer response time",
         AVG, LAT, HIGH, 0.1, 5.0, 10.0),
    _alb("RequestCountPerTarget", "Count", "Requests per registered target",
         SUM, PERF, MEDIUM, 100, 10.0, 100.0),
    _alb("TargetTLSNegotiationErrorCount", "Count", "Failed TLS handshakes with targets",
         SUM, ERR, MEDIUM, 1, 1.0, 10.0),
    _alb("ClientTLSNegotiationErrorCount", "Count", "Failed TLS handshakes with clients",
         SUM, ERR, MEDIUM, 1, 1.0, 10.0),
)


# ── DynamoDB ──────────────────────────────────────────────────────────────────

_ddb = partial(_metric, "AWS/DynamoDB")
_gsi = requires_gsi()
_provisioned_only = excludes_billing_mode("PAY_PER_REQUEST")

_DYNAMODB_METRICS = (
    _ddb("ConsumedReadCapacityUnits", "Count", "Read capacity units consumed",
         SUM, SAT, HIGH, 80, 1.0, 1.25),
    _ddb("ConsumedWriteCapacityUnits", "Count", "Write capacity units consumed",
         SUM, SAT, HIGH, 80, 1.0, 1.25),
    _ddb("ReadThrottles", "Count", "Throttled read requests",
         SUM, ERR, HIGH, 1, 1.0, 10.0),
    _ddb("WriteThrottles", "Count", "Throttled write requests",
         SUM, ERR, HIGH, 1, 1.0, 10.0),
    _ddb("SystemErrors", "Count", "Requests failing with a server error",
         SUM, ERR, HIGH, 1, 1.0, 5.0),
    _ddb("UserErrors", "Count", "Requests failing with a client error",
         SUM, ERR, MEDIUM, 10, 1.0, 5.0),
    _ddb("ConsumedReadCapacityUnits.GlobalSecondaryIndexes", "Count",
         "Read capacity units consumed by global secondary indexes",
         SUM, SAT, HIGH, 80, 1.0, 1.25, condition=_gsi),
    _ddb("ConsumedWriteCapacityUnits.GlobalSecondaryIndexes", "Count",
         "Write capacity units consumed by global secondary indexes",
         SUM, SAT, HIGH, 80, 1.0, 1.25, condition=_gsi),
    _ddb("ReadThrottles.GlobalSecondaryIndexes", "Count", "Throttled reads on global secondary indexes",
         SUM, ERR, HIGH, 1, 1.0, 5.0, condition=_gsi),
    _ddb("WriteThrottles.GlobalSecondaryIndexes", "Count", "Throttled writes on global secondary indexes",
         SUM, ERR, HIGH, 1, 1.0, 5.0, condition=_gsi),
    _ddb("OnlineIndexPercentageProgress", "Percent", "Progress of an online index build",
         AVG, PERF, LOW, 50, 1.0, 2.0),
    _ddb("OnlineIndexThrottleEvents", "Count", "Throttle events during an online index build",
         SUM, ERR, MEDIUM, 1, 1.0, 5.0),
    _ddb("OnlineIndexConsumedWriteCapacity", "Count", "Write capacity consumed by an online index build",
         AVG, SAT, LOW, 10, 10.0, 50.0),
    _ddb("PendingReplicationCount", "Count", "Items waiting to replicate (global tables)",
         AVG, PERF, MEDIUM, 0, 1.0, 100.0),
    _ddb("SuccessfulRequestLatency", "Milliseconds", "Latency of successful requests",
         AVG, LAT, HIGH, 100, 2.0, 5.0),
    _ddb("TransactionConflict", "Count", "Transactional requests rejected by conflicts",
         SUM, ERR, MEDIUM, 5, 1.0, 5.0),
    _ddb("AccountProvisionedReadCapacityUtilization", "Percent", "Account read capacity in use",
         MAX, SAT, MEDIUM, 80, 1.0, 1.125),
    _ddb("AccountProvisionedWriteCapacityUtilization", "Percent", "Account write capacity in use",
         MAX, SAT, MEDIUM, 80, 1.0, 1.125),
    _ddb("AccountMaxReads", "Count", "Maximum read capacity available to the account",
         MAX, PERF, LOW, 40000, 1.0, 1.25),
    _ddb("AccountMaxWrites", "Count", "Maximum write capacity available to the account",
         MAX, PERF, LOW, 40000, 1.0, 1.25),
    _ddb("MaxProvisionedTableReadCapacityUtilization", "Percent",
         "Highest provisioned read capacity utilisation of the table or its indexes",
         MAX, SAT, HIGH, 80, 1.0, 1.25, condition=_provisioned_only),
    _ddb("MaxProvisionedTableWriteCapacityUtilization", "Percent",
         "Highest provisioned write capacity utilisation of the table or its indexes",
         MAX, SAT, HIGH, 80, 1.0, 1.25, condition=_provisioned_only),
)


# ── API Gateway ───────────────────────────────────────────────────────────────

_api = partial(_metric, "AWS/ApiGateway")

_API_GATEWAY_METRICS = (
    _api("Count", "Count", "API requests",
         SUM, PERF, MEDIUM, 1000, 10.0, 100.0),
    _api("4XXError", "Count", "Client-side errors",
         SUM, ERR, HIGH, 10, 1.0, 5.0),
    _api("5XXError", "Count", "Server-side errors",
         SUM, ERR, HIGH, 1, 1.0, 10.0),
    _api("Latency", "Milliseconds", "Time from request receipt to response",
         AVG, LAT, HIGH, 1000, 1.0, 3.0),
    _api("IntegrationLatency", "Milliseconds", "Time spent waiting on the backend integration",
         AVG, LAT, HIGH, 500, 1.0, 6.0),
    _api("CacheHitCount", "Count", "Requests served from the API cache",
         SUM, PERF, LOW, 100, 0.1, 0.01, polarity=LOWER),
    _api("CacheMissCount", "Count", "Requests served from the backend with caching enabled",
         SUM, PERF, LOW, 100, 10.0, 100.0),
    _api("DataProcessed", "Bytes", "Data processed",
         SUM, PERF, LOW, 10 * _MIB, 100.0, 1000.0),
    _api("ThrottleCount", "Count", "Throttled requests",
         SUM, ERR, HIGH, 1, 1.0, 10.0),
    _api("WafDeniedCount", "Count", "Requests denied by AWS WAF",
         SUM, PERF, MEDIUM, 10, 10.0, 100.0),
    _api("ExecutionError", "Count", "Errors while executing requests",
         SUM, ERR, HIGH, 1, 1.0, 5.0),
    _api("ClientError", "Count", "Client errors",
         SUM, ERR, MEDIUM, 10, 1.0, 5.0),
    _api("ServerError", "Count", "Server errors",
         SUM, ERR, HIGH, 1, 1.0, 10.0),
    _api("ResponseSize", "Bytes", "Response payload size",
         AVG, PERF, LOW, _MIB, 5.0, 10.0),
)


# ──────────────────────────── Catalog Table ───────────────────────────────────

METRIC_CATALOG: Mapping[str, tuple[MetricCatalogEntry, ...]] = MappingProxyType({
    RDS_INSTANCE: _RDS_METRICS,
    LAMBDA_FUNCTION: _LAMBDA_METRICS,
    ECS_SERVICE: _ECS_METRICS,
    LOAD_BALANCER: _ALB_METRICS,
    DYNAMODB_TABLE: _DYNAMODB_METRICS,
    API_GATEWAY_REST_API: _API_GATEWAY_METRICS,
})


def get_catalog_entries(
    catalog_key: str,
    catalog: Mapping[str, tuple[MetricCatalogEntry, ...]] = METRIC_CATALOG,
) -> tuple[MetricCatalogEntry, ...] | None:
    """Return the entries registered under *catalog_key*, or None."""
    return catalog.get(catalog_key)


def catalog_statistics(
    catalog: Mapping[str, tuple[MetricCatalogEntry, ...]] = METRIC_CATALOG,
) -> dict[str, Any]:
    """Count catalog entries by resource type, category and importance."""
    entries = [e for group in catalog.values() for e in group]
    by_category: dict[str, int] = {c.value: 0 for c in Category}
    by_importance: dict[str, int] = {i.value: 0 for i in Importance}
    for e in entries:
        by_category[e.category.value] += 1
        by_importance[e.importance.value] += 1
    return {
        "total_count": len(entries),
        "conditional_count": sum(1 for e in entries if e.condition is not None),
        "by_resource_type": {key: len(group) for key, group in catalog.items()},
        "by_category": by_category,
        "by_importance": by_importance,
    }
