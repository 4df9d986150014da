"""Validate command - run every area and print the go/no-go report."""

from __future__ import annotations

from pathlib import Path

import typer

from ra.checks.base import CheckOptions
from ra.checks.registry import build_checkers, disabled_areas
from ra.checks.release import normalize_version
from ra.cli.commands._helpers import echo_json, exit_with_code, fail
from ra.cli.context import CLIContext, build_context
from ra.core.errors import ErrorCode
from ra.output.console import Style
from ra.output.report import print_report
from ra.validation.aggregator import build_report, run_areas
from ra.validation.areas import DEFAULT_AREAS, DOCS, PM, QA, RELEASE, SECURITY
from ra.validation.model import Report
from ra.validation.ordering import DependencyCycleError, order_report

_FORMATS = ("text", "json")


def validate(
    directory: Path = typer.Argument(Path("."), help="Project directory."),
    version: str = typer.Option("", "--version", help="Target release version (e.g. v0.2.0)."),
    skip_pm: bool = typer.Option(False, "--skip-pm", help="Skip PM validation."),
    skip_qa: bool = typer.Option(False, "--skip-qa", help="Skip QA checks."),
    skip_docs: bool = typer.Option(False, "--skip-docs", help="Skip documentation checks."),
    skip_release: bool = typer.Option(False, "--skip-release", help="Skip release checks."),
    skip_security: bool = typer.Option(False, "--skip-security", help="Skip security checks."),
    output_format: str = typer.Option("text", "--format", help="Output format: text or json."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Keep full command output."),
) -> None:
    """Run validation checks and report GO / NO-GO per team."""
    ctx = build_context(directory)
    if output_format not in _FORMATS:
        fail(
            ctx,
            f"unknown format: {output_format}",
            code=ErrorCode.USER_ERROR,
            hint="use text or json",
        )

    flags = {
        PM.key: skip_pm,
        QA.key: skip_qa,
        DOCS.key: skip_docs,
        RELEASE.key: skip_release,
        SECURITY.key: skip_security,
    }
    skip = disabled_areas(ctx.config) | {key for key, on in flags.items() if on}

    report = run_validation(
        ctx,
        version=version,
        skip=frozenset(skip),
        verbose=verbose,
        show_progress=output_format == "text",
    )

    if output_format == "json":
        echo_json(report.to_dict())
    else:
        print_report(ctx.console, report)

    exit_with_code(ErrorCode.OK if report.is_go else ErrorCode.VALIDATION_FAILED)


def run_validation(
    ctx: CLIContext,
    *,
    version: str,
    skip: frozenset[str],
    verbose: bool,
    show_progress: bool,
) -> Report:
    """Run the default areas and return the report in dependency order."""
    target = normalize_version(version) if version else ""
    checkers = build_checkers(ctx.config, ctx.repository)

    def on_area(area_title: str) -> None:
        if show_progress:
            ctx.console.print(f"Checking {area_title}...", Style.DIM)

    teams = run_areas(
        DEFAULT_AREAS,
        checkers,
        ctx.directory,
        CheckOptions(version=target, verbose=verbose),
        skip=skip,
        on_area=lambda area: on_area(area.title),
    )
    report = build_report(teams, project=ctx.project_name(), version=target)
    try:
        return order_report(report)
    except DependencyCycleError as e:
        fail(ctx, str(e), code=ErrorCode.CONFIG_ERROR)
