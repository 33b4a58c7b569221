"""Analyze a whole CloudFormation template and collect alarm recommendations."""

from __future__ import annotations

import logging
import re
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from cfn_metrics_advisor import __version__
from cfn_metrics_advisor.classifier import classify_resources
from cfn_metrics_advisor.config import Settings
from cfn_metrics_advisor.generator import generator_for
from cfn_metrics_advisor.models import (
    AnalysisError,
    AnalysisMetadata,
    AnalysisResult,
    Importance,
    MetricDefinition,
    Resource,
    ResourceWithMetrics,
)
from cfn_metrics_advisor.parser import load_template, validate_template

logger = logging.getLogger(__name__)

REDACTED = "REDACTED"
_SENSITIVE_KEY = re.compile(r"password|secret|token|credential|api_?key", re.IGNORECASE)


def redact_secrets(value: Any) -> Any:
    """Return a copy of *value* with values under sensitive-looking keys replaced."""
    if isinstance(value, dict):
        return {
            k: REDACTED if _SENSITIVE_KEY.search(str(k)) else redact_secrets(v)
            for k, v in value.items()
        }
    if isinstance(value, list):
        return [redact_secrets(v) for v in value]
    return value


def _filter_by_type(resources: dict[str, Any], resource_types: list[str]) -> dict[str, Any]:
    if not resource_types:
        return resources
    wanted = set(resource_types)
    return {
        lid: raw
        for lid, raw in resources.items()
        if isinstance(raw, dict) and raw.get("Type") in wanted
    }


def _generate(resource: Resource, settings: Settings) -> list[MetricDefinition]:
    generator = generator_for(
        resource.type,
        max_alarms=settings.max_alarms_per_resource,
        honor_polarity=settings.honor_polarity,
    )
    return generator.generate(resource)


def analyze_template(
    template: dict[str, Any],
    settings: Settings | None = None,
    template_path: str = "",
) -> AnalysisResult:
    """Classify the template's resources and generate metrics for the supported ones.

    Resources are processed concurrently but reported in template order.
    With ``settings.continue_on_error`` a failing resource is recorded in
    ``errors`` and the rest still run; otherwise the first failure (in
    template order) propagates.
    """
    settings = settings or Settings()
    start = time.perf_counter()
    template = validate_template(template, template_path)
    resources: dict[str, Any] = template["Resources"]

    logger.info("Analyzing %s (%d resources)", template_path or "template", len(resources))

    extraction = classify_resources(_filter_by_type(resources, settings.resource_types))
    supported_ids = set(extraction.supported_ids)

    with ThreadPoolExecutor(max_workers=settings.concurrency) as pool:
        futures = [
            (resource, pool.submit(_generate, resource, settings))
            for resource in extraction.supported
        ]

        analysed: list[ResourceWithMetrics] = []
        errors: list[AnalysisError] = []
        for resource, future in futures:
            try:
                metrics = future.result()
            except Exception as exc:
                if not settings.continue_on_error:
                    raise
                logger.warning("Failed to generate metrics for %s: %s", resource.logical_id, exc)
                errors.append(
                    AnalysisError(
                        resource_id=resource.logical_id,
                        resource_type=resource.type,
                        error=str(exc),
                    )
                )
                continue
            if not settings.include_low_importance:
                metrics = [m for m in metrics if m.importance is not Importance.LOW]
            analysed.append(
                ResourceWithMetrics(
                    logical_id=resource.logical_id,
                    resource_type=resource.type,
                    resource_properties=redact_secrets(resource.properties),
                    metrics=metrics,
                )
            )

    unsupported = [lid for lid in resources if lid not in supported_ids]
    elapsed_ms = int((time.perf_counter() - start) * 1000)
    result = AnalysisResult(
        metadata=AnalysisMetadata(
            version=__version__,
            generated_at=datetime.now(timezone.utc).isoformat(),
            template_path=template_path,
            total_resources=len(resources),
            supported_resources=len(extraction.supported),
            processing_time_ms=elapsed_ms,
        ),
        resources=analysed,
        unsupported_resources=unsupported if settings.include_unsupported else [],
        errors=errors,
    )
    logger.info(
        "Analysis finished: %d resources analysed, %d metrics, %d unsupported, %d errors in %d ms",
        len(analysed),
        result.metric_count,
        len(unsupported),
        len(errors),
        elapsed_ms,
    )
    return result


def analyze_file(path: str | Path, settings: Settings | None = None) -> AnalysisResult:
    template = load_template(path)
    return analyze_template(template, settings, template_path=str(path))


def analysis_report(result: AnalysisResult) -> str:
    """Return a human-readable text summary of an analysis."""
    meta = result.metadata
    lines: list[str] = []
    lines.append("=" * 60)
    lines.append("CLOUDWATCH ALARM RECOMMENDATIONS")
    lines.append("=" * 60)
    lines.append(f"Template   : {meta.template_path or '(in memory)'}")
    lines.append(f"Resources  : {meta.total_resources} total, {meta.supported_resources} supported")
    lines.append(f"Metrics    : {result.metric_count}")
    lines.append(f"Time       : {meta.processing_time_ms} ms")
    lines.append("")

    for rtype, count in sorted(result.summary().items()):
        lines.append(f"  {rtype:<45s} {count}")

    for res in result.resources:
        lines.append("")
        lines.append("-" * 60)
        lines.append(f"{res.logical_id}  ({res.resource_type})  {len(res.metrics)} metrics")
        lines.append("-" * 60)
        for m in res.metrics:
            lines.append(
                f"  [{m.importance.value:<6s}] {m.metric_name:<45s} "
                f"{m.statistic.value:<8s} warn={m.threshold.warning} crit={m.threshold.critical} "
                f"{m.unit}"
            )

    if result.unsupported_resources:
        lines.append("")
        lines.append("-" * 60)
        lines.append("UNSUPPORTED RESOURCES")
        lines.append("-" * 60)
        for lid in result.unsupported_resources:
            lines.append(f"  {lid}")

    if result.errors:
        lines.append("")
        lines.append("-" * 60)
        lines.append("ERRORS")
        lines.append("-" * 60)
        for err in result.errors:
            lines.append(f"  ⚠ {err.resource_id} ({err.resource_type}): {err.error}")

    lines.append("")
    return "\n".join(lines)
