"""Render analysis results as JSON, HTML or a CloudWatch alarm template."""

from __future__ import annotations

import json
import logging
import re
from importlib.resources import files as importlib_files
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, TemplateError as JinjaTemplateError, select_autoescape

from cfn_metrics_advisor.errors import OutputError
from cfn_metrics_advisor.models import AnalysisResult, MetricDefinition, Polarity, ResourceWithMetrics

logger = logging.getLogger(__name__)

_TEMPLATES_REF = importlib_files("cfn_metrics_advisor") / "templates"

COMPARISON_OPERATORS = {
    Polarity.HIGHER_IS_WORSE: "GreaterThanOrEqualToThreshold",
    Polarity.LOWER_IS_WORSE: "LessThanOrEqualToThreshold",
}

_NON_ALPHANUMERIC = re.compile(r"[^A-Za-z0-9]")
# CloudFormation logical ids are limited to 255 alphanumeric characters.
MAX_LOGICAL_ID_LENGTH = 255


def _get_jinja_env() -> Environment:
    templates_dir = str(_TEMPLATES_REF)
    return Environment(
        loader=FileSystemLoader(templates_dir),
        autoescape=select_autoescape(enabled_extensions=("html", "html.j2"), default=False),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def render_json(result: AnalysisResult) -> str:
    return json.dumps(result.model_dump(mode="json"), indent=2, ensure_ascii=False)


def render_html(result: AnalysisResult) -> str:
    """Render a self-contained HTML report."""
    env = _get_jinja_env()
    template = env.get_template("report.html.j2")
    return template.render(result=result)


# ──────────────────────────── Alarm Template ──────────────────────────────────


def alarm_logical_id(*parts: str) -> str:
    """Join *parts* into a valid CloudFormation logical id."""
    return _NON_ALPHANUMERIC.sub("", "".join(parts))[:MAX_LOGICAL_ID_LENGTH]


def _alarm_rows(res: ResourceWithMetrics, metric: MetricDefinition) -> list[dict[str, Any]]:
    rows = []
    for severity, threshold in (
        ("Warning", metric.threshold.warning),
        ("Critical", metric.threshold.critical),
    ):
        rows.append({
            "logical_id": alarm_logical_id(res.logical_id, metric.metric_name, severity, "Alarm"),
            "name": f"{res.logical_id}-{metric.metric_name}-{severity.lower()}",
            "description": f"[{severity}] {metric.description or metric.metric_name} ({res.logical_id})",
            "namespace": metric.namespace,
            "metric_name": metric.metric_name,
            "dimensions": metric.dimensions,
            "statistic": metric.statistic.value,
            "period": metric.evaluation_period.value,
            "threshold": threshold,
            "comparison_operator": COMPARISON_OPERATORS[metric.polarity],
        })
    return rows


def build_alarms(result: AnalysisResult) -> list[dict[str, Any]]:
    """Flatten a result into one warning and one critical alarm per metric."""
    alarms: list[dict[str, Any]] = []
    seen: set[str] = set()
    for res in result.resources:
        for metric in res.metrics:
            for row in _alarm_rows(res, metric):
                base = row["logical_id"]
                suffix = 2
                while row["logical_id"] in seen:
                    row["logical_id"] = f"{base[:MAX_LOGICAL_ID_LENGTH - 4]}{suffix}"
                    suffix += 1
                seen.add(row["logical_id"])
                alarms.append(row)
    return alarms


def render_alarm_template(result: AnalysisResult) -> str:
    """Render a CloudFormation template with one ``AWS::CloudWatch::Alarm`` per threshold."""
    env = _get_jinja_env()
    template = env.get_template("cloudwatch_alarms.yml.j2")
    source = result.metadata.template_path or "template"
    return template.render(
        alarms=build_alarms(result),
        description=f"CloudWatch alarms recommended for {source}",
    )


# ──────────────────────────── Dispatch ────────────────────────────────────────

RENDERERS = {
    "json": render_json,
    "html": render_html,
    "yaml": render_alarm_template,
}


def render(result: AnalysisResult, fmt: str = "json") -> str:
    renderer = RENDERERS.get(fmt.lower())
    if renderer is None:
        raise OutputError(
            f"Unknown output format: {fmt}",
            details={"format": fmt, "supportedFormats": sorted(RENDERERS)},
        )
    try:
        return renderer(result)
    except JinjaTemplateError as exc:
        raise OutputError(f"Failed to render {fmt} output: {exc}", details={"format": fmt}) from exc


def write_output(content: str, path: Path) -> Path:
    """Write *content* to *path*, creating parent directories."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise OutputError(f"Failed to write {path}: {exc}", file_path=str(path)) from exc
    logger.info("Wrote %s", path)
    return path
