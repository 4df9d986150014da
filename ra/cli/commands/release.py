"""Release command - run the release workflow for a version."""

from __future__ import annotations

from pathlib import Path

import typer

from ra.checks.registry import build_checkers, disabled_areas
from ra.cli.commands._helpers import echo_json, exit_with_code
from ra.cli.context import CLIContext, build_context
from ra.core.errors import ErrorCode
from ra.git.ci import CIStatus, GitHubCIStatus
from ra.output.console import Style
from ra.output.report import print_workflow_result
from ra.workflow.ci_wait import CIWaiter
from ra.workflow.engine import Context, Runner, run_workflow
from ra.workflow.release import ReleaseActions, release_workflow


def release(
    version: str = typer.Argument(..., help="Version to release (e.g. v1.2.3)."),
    directory: Path = typer.Option(Path("."), "--dir", "-C", help="Project directory."),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Preview what would be done without making changes."
    ),
    skip_checks: bool = typer.Option(False, "--skip-checks", help="Skip validation checks."),
    skip_ci: bool = typer.Option(False, "--skip-ci", help="Don't wait for CI before tagging."),
    json_output: bool = typer.Option(False, "--json", help="Print the result as JSON."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show step descriptions."),
) -> None:
    """Validate, commit, push, wait for CI and tag a release."""
    ctx = build_context(directory)

    actions = ReleaseActions(
        repository=ctx.repository,
        config=ctx.config,
        checkers=build_checkers(ctx.config, ctx.repository),
        waiter=_ci_waiter(ctx, quiet=json_output),
        skip_areas=disabled_areas(ctx.config),
    )
    workflow = release_workflow(version, actions)
    context = Context(
        directory=ctx.directory,
        version=version,
        skip_checks=skip_checks,
        skip_ci=skip_ci,
    )
    result = run_workflow(
        workflow,
        context,
        runner=Runner(dry_run=dry_run, verbose=verbose),
    )

    if json_output:
        echo_json(result.to_dict())
    else:
        print_workflow_result(ctx.console, result)

    exit_with_code(ErrorCode.OK if result.success else ErrorCode.RELEASE_FAILED)


def _ci_waiter(ctx: CLIContext, *, quiet: bool) -> CIWaiter | None:
    if not ctx.config.ci.enabled:
        return None
    source = GitHubCIStatus(repository=ctx.repository, cwd=ctx.directory)
    if not source.available():
        return None

    def on_poll(status: CIStatus) -> None:
        if not quiet:
            ctx.console.print(
                f"  CI {status.state}: {status.total_count} checks, "
                f"{len(status.pending())} pending",
                Style.DIM,
            )

    return CIWaiter(source, on_poll=on_poll)
