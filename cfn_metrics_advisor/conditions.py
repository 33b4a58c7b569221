"""Applicability conditions for catalog entries.

A catalog entry may only make sense for some shapes of a resource: credit
metrics exist only on burstable RDS classes, GSI metrics only on tables that
declare global secondary indexes, and so on. Conditions are plain data (a
``ConditionKind`` tag plus an optional argument) so the catalog stays
serialisable and comparable; :func:`evaluate_condition` is the only place
that interprets them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from cfn_metrics_advisor.models import Resource

if TYPE_CHECKING:
    from cfn_metrics_advisor.catalog import MetricCatalogEntry

logger = logging.getLogger(__name__)

BURSTABLE_INSTANCE_PREFIXES = ("db.t3.", "db.t4g.")


class ConditionKind(str, Enum):
    REQUIRES_GSI = "RequiresGSI"
    REQUIRES_ENGINE = "RequiresEngine"
    REQUIRES_ENGINE_PREFIX = "RequiresEnginePrefix"
    REQUIRES_BURSTABLE_INSTANCE = "RequiresBurstableInstance"
    REQUIRES_BACKUP_RETENTION = "RequiresBackupRetention"
    REQUIRES_SINGLE_AZ = "RequiresSingleAZ"
    EXCLUDES_BILLING_MODE = "ExcludesBillingMode"
    REQUIRES_COMPATIBILITY = "RequiresCompatibility"
    ALL_OF = "AllOf"


@dataclass(frozen=True)
class Condition:
    """A tagged applicability predicate.

    ``argument`` carries the engine name, engine prefix, billing mode or
    compatibility for the kinds that need one; ``conditions`` holds the
    children of an ``ALL_OF``.
    """

    kind: ConditionKind
    argument: str = ""
    conditions: tuple[Condition, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"kind": self.kind.value}
        if self.argument:
            data["argument"] = self.argument
        if self.conditions:
            data["conditions"] = [c.to_dict() for c in self.conditions]
        return data


# ── Constructors ──────────────────────────────────────────────────────────────


def requires_gsi() -> Condition:
    return Condition(ConditionKind.REQUIRES_GSI)


def requires_engine(engine: str) -> Condition:
    return Condition(ConditionKind.REQUIRES_ENGINE, engine)


def requires_engine_prefix(prefix: str) -> Condition:
    return Condition(ConditionKind.REQUIRES_ENGINE_PREFIX, prefix)


def requires_burstable_instance() -> Condition:
    return Condition(ConditionKind.REQUIRES_BURSTABLE_INSTANCE)


def requires_backup_retention() -> Condition:
    return Condition(ConditionKind.REQUIRES_BACKUP_RETENTION)


def requires_single_az() -> Condition:
    return Condition(ConditionKind.REQUIRES_SINGLE_AZ)


def excludes_billing_mode(mode: str) -> Condition:
    return Condition(ConditionKind.EXCLUDES_BILLING_MODE, mode)


def requires_compatibility(compatibility: str) -> Condition:
    return Condition(ConditionKind.REQUIRES_COMPATIBILITY, compatibility)


def all_of(*conditions: Condition) -> Condition:
    return Condition(ConditionKind.ALL_OF, conditions=tuple(conditions))


# ── Matcher ───────────────────────────────────────────────────────────────────


def evaluate_condition(condition: Condition, resource: Resource) -> bool:
    """Evaluate *condition* against *resource*.

    Property values are used as found in the template; a value of the wrong
    shape (for example an intrinsic function where a string is expected)
    makes this function raise, and :func:`is_applicable` turns that into
    "not applicable".
    """
    props = resource.properties
    kind = condition.kind

    if kind is ConditionKind.REQUIRES_GSI:
        gsis = props.get("GlobalSecondaryIndexes")
        return isinstance(gsis, list) and len(gsis) > 0

    if kind is ConditionKind.REQUIRES_ENGINE:
        return props.get("Engine", "").lower() == condition.argument

    if kind is ConditionKind.REQUIRES_ENGINE_PREFIX:
        return props.get("Engine", "").lower().startswith(condition.argument)

    if kind is ConditionKind.REQUIRES_BURSTABLE_INSTANCE:
        return props.get("DBInstanceClass", "").startswith(BURSTABLE_INSTANCE_PREFIXES)

    if kind is ConditionKind.REQUIRES_BACKUP_RETENTION:
        return int(props.get("BackupRetentionPeriod", 0)) > 0

    if kind is ConditionKind.REQUIRES_SINGLE_AZ:
        multi_az = props.get("MultiAZ", False)
        if isinstance(multi_az, str):
            return multi_az.lower() != "true"
        return not multi_az

    if kind is ConditionKind.EXCLUDES_BILLING_MODE:
        return props.get("BillingMode", "PROVISIONED") != condition.argument

    if kind is ConditionKind.REQUIRES_COMPATIBILITY:
        return condition.argument in (props.get("RequiresCompatibilities") or [])

    if kind is ConditionKind.ALL_OF:
        return all(evaluate_condition(child, resource) for child in condition.conditions)

    raise ValueError(f"Unknown condition kind: {kind!r}")


def is_applicable(entry: MetricCatalogEntry, resource: Resource) -> bool:
    """Return True if the catalog *entry* applies to *resource*.

    Entries without a condition always apply. A condition that fails to
    evaluate is logged and treated as not applicable; the remaining entries
    of the resource are still evaluated.
    """
    if entry.condition is None:
        return True
    try:
        return bool(evaluate_condition(entry.condition, resource))
    except Exception as exc:
        logger.warning(
            "Failed to evaluate condition %s for metric %s on %s: %s",
            entry.condition.kind.value,
            entry.name,
            resource.logical_id,
            exc,
        )
        return False
