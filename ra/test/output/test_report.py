"""Tests for ra.output.report module."""

from __future__ import annotations

from ra.output.console import MockConsole, Style
from ra.output.report import format_team, print_report, print_workflow_result, style_for_status
from ra.validation.model import Check, Report, Team
from ra.validation.status import Status
from ra.workflow.engine import StepError, StepResult, WorkflowResult


def _report(*teams: Team) -> Report:
    return Report(
        teams=teams,
        project="github.com/acme/widget",
        version="v1.2.0",
        target="v1.2.0",
        phase="PHASE 1: REVIEW",
    )


def test_style_for_status() -> None:
    assert style_for_status(Status.GO) is Style.SUCCESS
    assert style_for_status(Status.WARN) is Style.WARNING
    assert style_for_status(Status.NO_GO) is Style.ERROR
    assert style_for_status(Status.SKIP) is Style.DIM


def test_format_team_rows() -> None:
    team = Team(
        id="qa-validation",
        name="qa",
        checks=(Check.go("tests", "12 passed"), Check.warn("lint")),
    )
    lines = format_team(team)
    assert lines[0].startswith("qa (qa-validation):")
    assert lines[0].endswith("WARN")
    assert "tests" in lines[1] and "GO" in lines[1] and lines[1].endswith("12 passed")
    assert lines[2].rstrip() == lines[2]


def test_format_empty_team() -> None:
    assert format_team(Team(id="x", name="x"))[1] == "  (no checks)"


def test_print_go_report() -> None:
    console = MockConsole()
    print_report(console, _report(Team(id="pm-validation", name="pm", checks=(Check.go("v"),))))
    assert console.find("Project: github.com/acme/widget")
    assert console.find("PHASE 1: REVIEW")
    assert console.find("TEAM: GO for v1.2.0")
    assert not console.has_error()


def test_print_no_go_report() -> None:
    console = MockConsole()
    print_report(
        console,
        _report(
            Team(id="qa-validation", name="qa", checks=(Check.no_go("tests", "exit 1"),)),
            Team(id="docs-validation", name="documentation"),
        ),
    )
    assert console.find("TEAM: NO-GO for v1.2.0")
    assert console.find("(no checks)")[0].style is Style.DIM
    assert console.has_error()


def test_print_workflow_result_failure_shows_hint() -> None:
    console = MockConsole()
    result = WorkflowResult(
        name="Release v1.0.0",
        success=False,
        steps=(
            StepResult(name="Validate version", success=True),
            StepResult(
                name="Check working directory",
                error=StepError(kind="git", message="dirty", hint="Commit or stash them first"),
            ),
        ),
        output=("=== Release v1.0.0 ===",),
    )
    print_workflow_result(console, result)
    assert console.messages[0] == "=== Release v1.0.0 ==="
    assert console.find("failed at step: Check working directory")
    assert console.find("hint: Commit or stash them first")


def test_print_workflow_result_without_output() -> None:
    console = MockConsole()
    result = WorkflowResult(name="Release v1.0.0", success=True, output=("hidden",))
    print_workflow_result(console, result, show_output=False)
    assert not console.find("hidden")
    assert console.find("OK Release v1.0.0 completed")


def test_print_workflow_result_warns_about_optional_failures() -> None:
    console = MockConsole()
    result = WorkflowResult(
        name="Release v1.0.0",
        success=True,
        steps=(
            StepResult(
                name="Generate changelog",
                success=False,
                error=StepError(kind="command", message="git-cliff failed (exit 1)"),
            ),
            StepResult(name="Create tag", success=True),
        ),
    )
    print_workflow_result(console, result, show_output=False)
    assert console.messages[-2:] == [
        "warning: optional step failed: Generate changelog",
        "OK Release v1.0.0 completed",
    ]
    assert not console.has_error()
