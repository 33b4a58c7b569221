"""Pydantic models for template resources and metric recommendations."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator


# ──────────────────────────── Enumerations ────────────────────────────────────


class Statistic(str, Enum):
    AVERAGE = "Average"
    SUM = "Sum"
    MAXIMUM = "Maximum"
    MINIMUM = "Minimum"


class EvaluationPeriod(int, Enum):
    """CloudWatch evaluation windows, in seconds."""

    ONE_MINUTE = 60
    FIVE_MINUTES = 300
    FIFTEEN_MINUTES = 900
    ONE_HOUR = 3600


class Category(str, Enum):
    PERFORMANCE = "Performance"
    ERROR = "Error"
    SATURATION = "Saturation"
    LATENCY = "Latency"


class Importance(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @property
    def tier(self) -> int:
        """Rank used when capping recommendations: High=2, Medium=1, Low=0."""
        return _IMPORTANCE_TIERS[self]


_IMPORTANCE_TIERS = {Importance.HIGH: 2, Importance.MEDIUM: 1, Importance.LOW: 0}


class Polarity(str, Enum):
    """Which direction of a metric is bad."""

    HIGHER_IS_WORSE = "HigherIsWorse"
    LOWER_IS_WORSE = "LowerIsWorse"


# ──────────────────────────── Template Resources ──────────────────────────────


class Resource(BaseModel):
    """A single resource declaration taken from a template's ``Resources`` map."""

    logical_id: str
    type: str
    properties: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_template_entry(cls, logical_id: str, raw: dict[str, Any]) -> Resource:
        props = raw.get("Properties")
        return cls(
            logical_id=logical_id,
            type=raw["Type"],
            properties=props if isinstance(props, dict) else {},
        )


class ExtractionResult(BaseModel):
    """Partition of a template's resources into supported and unsupported ids."""

    supported: list[Resource] = Field(default_factory=list)
    unsupported_ids: list[str] = Field(default_factory=list)
    total_count: int = 0
    elapsed_ms: float = 0.0

    @model_validator(mode="after")
    def check_partition(self) -> ExtractionResult:
        if len(self.supported) + len(self.unsupported_ids) != self.total_count:
            raise ValueError(
                f"incomplete partition: {len(self.supported)} supported + "
                f"{len(self.unsupported_ids)} unsupported != {self.total_count} total"
            )
        return self

    @property
    def supported_ids(self) -> list[str]:
        return [r.logical_id for r in self.supported]


# ──────────────────────────── Recommendations ─────────────────────────────────


class Threshold(BaseModel):
    warning: int
    critical: int


class Dimension(BaseModel):
    name: str
    value: str


class MetricDefinition(BaseModel):
    """A recommended CloudWatch alarm for one metric of one resource."""

    metric_name: str
    namespace: str
    unit: str
    description: str = ""
    statistic: Statistic
    evaluation_period: EvaluationPeriod
    category: Category
    importance: Importance
    threshold: Threshold
    polarity: Polarity = Polarity.HIGHER_IS_WORSE
    dimensions: list[Dimension] = Field(default_factory=list)


class ResourceWithMetrics(BaseModel):
    logical_id: str
    resource_type: str
    resource_properties: dict[str, Any] = Field(default_factory=dict)
    metrics: list[MetricDefinition] = Field(default_factory=list)


class AnalysisError(BaseModel):
    """A resource that failed metric generation while the run continued."""

    resource_id: str
    resource_type: str
    error: str


class AnalysisMetadata(BaseModel):
    version: str = ""
    generated_at: str = ""
    template_path: str = ""
    total_resources: int = 0
    supported_resources: int = 0
    processing_time_ms: int = 0


class AnalysisResult(BaseModel):
    """Everything produced for one template."""

    metadata: AnalysisMetadata = Field(default_factory=AnalysisMetadata)
    resources: list[ResourceWithMetrics] = Field(default_factory=list)
    unsupported_resources: list[str] = Field(default_factory=list)
    errors: list[AnalysisError] = Field(default_factory=list)

    @property
    def metric_count(self) -> int:
        return sum(len(r.metrics) for r in self.resources)

    def summary(self) -> dict[str, int]:
        """Count analysed resources by CloudFormation type."""
        counts: dict[str, int] = {}
        for r in self.resources:
            counts[r.resource_type] = counts.get(r.resource_type, 0) + 1
        return counts
