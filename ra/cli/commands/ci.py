"""CI command - show or wait for the CI status of a commit."""

from __future__ import annotations

from pathlib import Path

import typer

from ra.cli.commands._helpers import echo_json, fail
from ra.cli.context import CLIContext, build_context
from ra.core.errors import ErrorCode
from ra.core.result import Err
from ra.git.ci import CIState, CIStatus, GitHubCIStatus
from ra.output.console import Style
from ra.workflow.ci_wait import CIWaiter

_STATE_STYLES = {
    CIState.SUCCESS: Style.SUCCESS,
    CIState.PENDING: Style.WARNING,
    CIState.FAILURE: Style.ERROR,
}


def ci(
    directory: Path = typer.Argument(Path("."), help="Project directory."),
    ref: str = typer.Option("", "--ref", help="Commit or branch (default: HEAD)."),
    wait: bool = typer.Option(False, "--wait", help="Poll until CI succeeds or fails."),
    timeout: float | None = typer.Option(None, "--timeout", help="Wait timeout in seconds."),
    poll_interval: float | None = typer.Option(
        None, "--interval", help="Seconds between polls."
    ),
    json_output: bool = typer.Option(False, "--json", help="Print the status as JSON."),
) -> None:
    """Show CI checks for a commit, optionally waiting for them to finish."""
    ctx = build_context(directory)
    source = GitHubCIStatus(repository=ctx.repository, cwd=ctx.directory)

    if not wait:
        result = source.get(ref)
        if isinstance(result, Err):
            gh_missing = result.error.kind == "gh_missing"
            code = ErrorCode.ENV_ERROR if gh_missing else ErrorCode.USER_ERROR
            fail(ctx, result.error.message, code=code, hint=result.error.hint)
        _show(ctx, result.value, json_output=json_output)
        return

    interval = ctx.config.ci.poll_interval if poll_interval is None else poll_interval
    limit = ctx.config.ci.timeout if timeout is None else timeout
    if interval <= 0 or limit <= 0:
        fail(ctx, "--interval and --timeout must be positive", code=ErrorCode.USER_ERROR)

    def on_poll(status: CIStatus) -> None:
        if not json_output:
            ctx.console.print(
                f"CI {status.state}: {status.total_count} checks, {len(status.pending())} pending",
                Style.DIM,
            )

    waited = CIWaiter(source, on_poll=on_poll).wait_for_completion(ref, interval, limit)
    if isinstance(waited, Err):
        e = waited.error
        if e.status is not None:
            _show(ctx, e.status, json_output=json_output)
        code = ErrorCode.ENV_ERROR if e.kind == "query" else ErrorCode.RELEASE_FAILED
        fail(ctx, e.message, code=code, hint=e.hint)
    _show(ctx, waited.value, json_output=json_output)


def _show(ctx: CLIContext, status: CIStatus, *, json_output: bool) -> None:
    if json_output:
        echo_json(
            {
                "reference": status.reference,
                "state": status.state.value,
                "total_count": status.total_count,
                "statuses": [
                    {"name": c.name, "state": c.state.value, "description": c.description}
                    for c in status.statuses
                ],
            }
        )
        return

    ctx.console.header(f"CI {status.reference[:12]}: {status.state}")
    if not status.statuses:
        ctx.console.print("no checks reported yet", Style.DIM)
    for check in status.statuses:
        line = f"  {check.state.value:<8} {check.name}"
        if check.description:
            line = f"{line} ({check.description})"
        ctx.console.print(line, _STATE_STYLES[check.state])
