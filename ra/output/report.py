"""Render validation reports and workflow results through a console."""

from __future__ import annotations

from ra.output.console import ConsoleProtocol, Style
from ra.validation.model import Report, Team
from ra.validation.status import Status
from ra.workflow.engine import WorkflowResult

__all__ = ["format_team", "print_report", "print_workflow_result", "style_for_status"]

_ID_WIDTH = 24


def style_for_status(status: Status) -> Style:
    if status is Status.GO:
        return Style.SUCCESS
    if status is Status.WARN:
        return Style.WARNING
    if status is Status.NO_GO:
        return Style.ERROR
    return Style.DIM


def format_team(team: Team) -> list[str]:
    """Header line plus one row per check."""
    lines = [f"{team.name} ({team.id}): {team.status.icon} {team.status}"]
    if not team.checks:
        lines.append("  (no checks)")
    for check in team.checks:
        row = f"  {check.status.icon} {check.id:<{_ID_WIDTH}} {check.status.value:<6}"
        if check.detail:
            row = f"{row} {check.detail}"
        lines.append(row.rstrip())
    return lines


def print_report(console: ConsoleProtocol, report: Report) -> None:
    """Print teams in the order given. Callers order them first."""
    if report.project:
        console.print(f"Project: {report.project}", Style.DIM)
    if report.target:
        console.print(f"Target:  {report.target}", Style.DIM)
    if report.phase:
        console.header(report.phase)

    for team in report.teams:
        header, *rows = format_team(team)
        console.newline()
        console.print(header, style_for_status(team.status))
        styles = [style_for_status(c.status) for c in team.checks] or [Style.DIM]
        for row, style in zip(rows, styles, strict=True):
            console.print(row, style)

    console.newline()
    if report.is_go:
        console.success(report.final_message())
    else:
        console.error(report.final_message())


def print_workflow_result(
    console: ConsoleProtocol,
    result: WorkflowResult,
    *,
    show_output: bool = True,
) -> None:
    if show_output:
        for line in result.output:
            console.print(line)
        console.newline()

    for line in result.summary().rstrip("\n").splitlines():
        console.print(line, Style.DIM)

    failed = result.failed_step()
    if result.success:
        for step in result.steps:
            if step.failed:
                console.warning(f"optional step failed: {step.name}")
        console.success(f"{result.name} completed")
    elif failed is not None:
        console.error(f"{result.name} failed at step: {failed.name}")
        if failed.error is not None and failed.error.hint:
            console.print(f"hint: {failed.error.hint}", Style.DIM)
