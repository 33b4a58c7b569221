"""CLI entry-point for cfn-metrics-advisor."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from cfn_metrics_advisor import __version__
from cfn_metrics_advisor.analyzer import analysis_report, analyze_file
from cfn_metrics_advisor.catalog import METRIC_CATALOG, catalog_statistics
from cfn_metrics_advisor.classifier import classify_resources
from cfn_metrics_advisor.config import OUTPUT_FORMATS, Settings
from cfn_metrics_advisor.errors import MetricsAdvisorError
from cfn_metrics_advisor.generator import PROFILE_BY_TYPE
from cfn_metrics_advisor.renderer import render, write_output
from cfn_metrics_advisor.scanner import scan_directory

console = Console()
# Status output goes to stderr; rendered results go to stdout.
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
        datefmt="%H:%M:%S",
    )


def _fail(exc: MetricsAdvisorError) -> None:
    err_console.print(f"[red bold]Error ({exc.error_type.value}):[/red bold] {escape(exc.message)}")
    if exc.file_path:
        err_console.print(f"  file: {escape(exc.file_path)}")
    for key, value in exc.details.items():
        err_console.print(f"  {key}: {escape(str(value))}")
    sys.exit(1)


def _split_types(value: str) -> list[str]:
    return [t.strip() for t in value.split(",") if t.strip()]


@click.group()
@click.version_option(version=__version__, prog_name="cfn-metrics")
def main() -> None:
    """CloudFormation metrics advisor: recommend CloudWatch alarms for a template."""


@main.command()
@click.argument("template", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--output", "-o", "output_format",
    type=click.Choice(OUTPUT_FORMATS, case_sensitive=False),
    default="json",
    help="json report, html report, or yaml CloudWatch alarm template.",
)
@click.option("--file", "output_file", default="", help="Write output to this file instead of stdout.")
@click.option(
    "--max-alarms", type=int, default=None,
    help="Maximum alarms per resource (or set CFN_METRICS_MAX_ALARMS).",
)
@click.option("--resource-types", default="", help="Comma-separated resource types to analyse.")
@click.option("--no-unsupported", is_flag=True, help="Omit unsupported resource ids from the output.")
@click.option("--exclude-low", is_flag=True, help="Drop Low importance metrics.")
@click.option("--honor-polarity", is_flag=True, help="Put critical below warning for lower-is-worse metrics.")
@click.option("--fail-fast", is_flag=True, help="Stop at the first resource that fails.")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging and a text summary on stderr.")
def analyze(
    template: Path,
    output_format: str,
    output_file: str,
    max_alarms: int | None,
    resource_types: str,
    no_unsupported: bool,
    exclude_low: bool,
    honor_polarity: bool,
    fail_fast: bool,
    verbose: bool,
) -> None:
    """Analyse TEMPLATE and print recommended CloudWatch alarms."""
    _configure_logging(verbose)

    overrides: dict[str, Any] = {}
    if max_alarms is not None:
        overrides["max_alarms_per_resource"] = max_alarms
    settings = Settings(
        template_path=str(template),
        output_format=output_format,
        output_file=output_file,
        resource_types=_split_types(resource_types),
        include_unsupported=not no_unsupported,
        include_low_importance=not exclude_low,
        honor_polarity=honor_polarity,
        continue_on_error=not fail_fast,
        verbose=verbose,
        **overrides,
    )

    try:
        result = analyze_file(settings.template_path, settings)
        content = render(result, settings.output_format)
        if settings.resolved_output_file:
            written = write_output(content, settings.resolved_output_file)
        else:
            written = None
    except MetricsAdvisorError as exc:
        _fail(exc)
        return

    if verbose:
        err_console.print(analysis_report(result), markup=False, highlight=False)

    if written is None:
        click.echo(content, nl=not content.endswith("\n"))
        return

    err_console.print(
        Panel(
            f"{len(result.resources)} resources, {result.metric_count} metrics, "
            f"{len(result.unsupported_resources)} unsupported, {len(result.errors)} errors",
            title="Analysis complete",
            style="bold cyan",
        )
    )
    err_console.print(f"[green bold]Done![/green bold] Written to {written}")


@main.command()
@click.argument("directory", default=".", type=click.Path(file_okay=False, path_type=Path))
@click.option("--verbose", "-v", is_flag=True, help="Debug logging.")
def scan(directory: Path, verbose: bool) -> None:
    """Find CloudFormation templates under DIRECTORY and classify their resources."""
    _configure_logging(verbose)

    try:
        templates, errors = scan_directory(directory, Settings())
    except MetricsAdvisorError as exc:
        _fail(exc)
        return

    if not templates:
        console.print("[yellow]No CloudFormation templates found.[/yellow]")
    else:
        table = Table(title=f"CloudFormation templates in {directory}")
        table.add_column("Template")
        table.add_column("Resources", justify="right")
        table.add_column("Supported", justify="right", style="green")
        table.add_column("Unsupported", justify="right", style="yellow")
        for rel, doc in templates.items():
            extraction = classify_resources(doc["Resources"])
            table.add_row(
                rel,
                str(extraction.total_count),
                str(len(extraction.supported)),
                str(len(extraction.unsupported_ids)),
            )
        console.print(table)

    for err in errors:
        console.print(f"[red]⚠ {escape(err)}[/red]")


@main.command("catalog")
@click.option("--type", "resource_type", default="", help="Only show metrics for this resource type.")
def show_catalog(resource_type: str) -> None:
    """Print the metric catalog."""
    if resource_type:
        profile = PROFILE_BY_TYPE.get(resource_type)
        if profile is None:
            err_console.print(f"[red bold]Error:[/red bold] Unsupported resource type: {resource_type}")
            err_console.print(f"  supported: {', '.join(sorted(PROFILE_BY_TYPE))}")
            sys.exit(1)
        keys = [profile.catalog_key]
    else:
        keys = list(METRIC_CATALOG)

    for key in keys:
        table = Table(title=key)
        table.add_column("Metric")
        table.add_column("Statistic")
        table.add_column("Period", justify="right")
        table.add_column("Category")
        table.add_column("Importance")
        table.add_column("Base", justify="right")
        table.add_column("Warn x", justify="right")
        table.add_column("Crit x", justify="right")
        table.add_column("Condition")
        for entry in METRIC_CATALOG[key]:
            table.add_row(
                entry.name,
                entry.statistic.value,
                str(entry.evaluation_period.value),
                entry.category.value,
                entry.importance.value,
                f"{entry.threshold.base:g}",
                f"{entry.threshold.warning_multiplier:g}",
                f"{entry.threshold.critical_multiplier:g}",
                entry.condition.kind.value if entry.condition else "",
            )
        console.print(table)

    if not resource_type:
        stats = catalog_statistics()
        console.print(
            f"{stats['total_count']} metrics across {len(stats['by_resource_type'])} resource types "
            f"({stats['conditional_count']} conditional)"
        )


if __name__ == "__main__":
    main()
