"""The release workflow: validate, commit, push, wait for CI, tag.

Steps, in order (optional ones marked):

1. Validate version
2. Check working directory
3. Run validation checks
4. Generate changelog (optional)
5. Update roadmap (optional)
6. Create release commit
7. Push to remote
8. Wait for CI (optional)
9. Create tag

With ``dry_run`` set on the runner, no step mutates the repository; each
mutating step logs what it would do instead.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ra.checks.base import Checker, CheckOptions
from ra.checks.release import normalize_version
from ra.core.config import Config
from ra.core.result import Err, Ok, Result
from ra.platform.process import run as run_process
from ra.validation.aggregator import build_report, run_areas
from ra.validation.areas import DOCS, PM, QA, SECURITY, ValidationArea
from ra.validation.status import Status
from ra.workflow.ci_wait import CIWaiter
from ra.workflow.engine import Context, Step, StepError, Workflow

if TYPE_CHECKING:
    from ra.git.repository import VersionControl

__all__ = ["RELEASE_AREAS", "ReleaseActions", "release_workflow"]

# Release management itself is carried out by the workflow steps.
RELEASE_AREAS: tuple[ValidationArea, ...] = (PM, QA, DOCS, SECURITY)

_COMMAND_TIMEOUT_SECONDS = 10 * 60.0


def _no_checkers() -> dict[str, list[Checker]]:
    return {}


@dataclass(frozen=True, slots=True)
class ReleaseActions:
    """Step actions bound to the collaborators of one release.

    Attributes:
        repository: Version control for the project directory
        config: Loaded project configuration
        checkers: Checkers per area key for the validation step
        waiter: CI waiter; None when no CI status source is available
        areas: Areas run by the validation step
        skip_areas: Area keys left out of the validation step
    """

    repository: VersionControl
    config: Config = field(default_factory=Config)
    checkers: Mapping[str, Sequence[Checker]] = field(default_factory=_no_checkers)
    waiter: CIWaiter | None = None
    areas: tuple[ValidationArea, ...] = RELEASE_AREAS
    skip_areas: frozenset[str] = frozenset()

    def validate_version(self, ctx: Context) -> Result[None, StepError]:
        if not ctx.version.strip():
            return Err(StepError(kind="invalid_input", message="version is required"))

        ctx.version = normalize_version(ctx.version)
        tags = self.repository.all_tags()
        if isinstance(tags, Ok) and ctx.version in tags.value:
            return Err(
                StepError(
                    kind="invalid_input",
                    message=f"tag {ctx.version} already exists",
                    hint="Choose a new version or delete the existing tag",
                )
            )

        ctx.log(f"  Version: {ctx.version}")
        return Ok(None)

    def check_working_directory(self, ctx: Context) -> Result[None, StepError]:
        match self.repository.is_dirty():
            case Err(e):
                message = f"failed to check git status: {e.message}"
                return Err(StepError(kind="git", message=message))
            case Ok(True) if ctx.dry_run:
                ctx.log("  Warning: working directory has uncommitted changes")
                return Ok(None)
            case Ok(True):
                return Err(
                    StepError(
                        kind="git",
                        message="working directory has uncommitted changes",
                        hint="Commit or stash them first",
                    )
                )
            case Ok(_):
                ctx.log("  Working directory is clean")
                return Ok(None)

    def run_validation_checks(self, ctx: Context) -> Result[None, StepError]:
        if ctx.skip_checks:
            ctx.log("  Skipping validation checks (--skip-checks)")
            return Ok(None)

        options = CheckOptions(version=ctx.version, verbose=ctx.verbose)
        teams = run_areas(
            self.areas,
            self.checkers,
            ctx.directory,
            options,
            skip=self.skip_areas,
            on_area=lambda area: ctx.log(f"  Checking {area.title}..."),
        )
        report = build_report(teams, version=ctx.version)
        ctx.data["validation_status"] = report.status.value

        failed = 0
        for team in report.teams:
            for check in team.failing():
                failed += 1
                ctx.log(f"    ✗ {check.id}: {check.detail}")

        if failed:
            return Err(StepError(kind="validation", message=f"{failed} checks failed"))

        if report.status is Status.WARN:
            ctx.log("  All checks passed (with warnings)")
        else:
            ctx.log("  All checks passed")
        return Ok(None)

    def generate_changelog(self, ctx: Context) -> Result[None, StepError]:
        command = self.config.release.changelog_command
        if not command:
            return Ok(None)
        since = self.repository.latest_tag()
        env = {"RA_VERSION": ctx.version, "RA_SINCE": since or ""}
        return self._run_command(ctx, command, env=env, done="Changelog updated")

    def update_roadmap(self, ctx: Context) -> Result[None, StepError]:
        command = self.config.release.roadmap_command
        if not command:
            return Ok(None)
        env = {"RA_VERSION": ctx.version}
        return self._run_command(ctx, command, env=env, done="Roadmap updated")

    def create_release_commit(self, ctx: Context) -> Result[None, StepError]:
        dirty = self.repository.is_dirty()
        if isinstance(dirty, Err):
            return Err(StepError(kind="git", message=dirty.error.message))
        if not dirty.value:
            ctx.log("  No changes to commit")
            return Ok(None)

        message = self.config.release.commit_message.format(version=ctx.version)
        if ctx.dry_run:
            ctx.log(f"  [Dry run] Would create commit: {message}")
            return Ok(None)

        committed = self.repository.commit_all(message)
        if isinstance(committed, Err):
            return Err(
                StepError(kind="git", message=f"failed to create commit: {committed.error.message}")
            )
        ctx.log(f"  Created commit: {message}")
        return Ok(None)

    def push_to_remote(self, ctx: Context) -> Result[None, StepError]:
        remote = self.config.release.remote
        if ctx.dry_run:
            ctx.log(f"  [Dry run] Would push to {remote}")
            return Ok(None)

        status = self.repository.status()
        if isinstance(status, Err):
            return Err(StepError(kind="git", message=status.error.message))
        if status.value.ahead == 0:
            ctx.log("  Already up to date with remote")
            return Ok(None)

        pushed = self.repository.push()
        if isinstance(pushed, Err):
            return Err(StepError(kind="git", message=f"failed to push: {pushed.error.message}"))
        ctx.log(f"  Pushed to {remote}")
        return Ok(None)

    def wait_for_ci(self, ctx: Context) -> Result[None, StepError]:
        if ctx.skip_ci:
            ctx.log("  Skipping CI wait (--skip-ci)")
            return Ok(None)
        if self.waiter is None:
            ctx.log("  CI status unavailable, skipping CI wait")
            return Ok(None)

        ci = self.config.ci
        if ctx.dry_run:
            ctx.log("  [Dry run] Would wait for CI")
            return Ok(None)

        commit = self.repository.current_commit()
        if isinstance(commit, Err):
            return Err(StepError(kind="git", message=commit.error.message))

        ctx.log(f"  Waiting for CI (timeout: {ci.timeout:g}s)...")
        waited = self.waiter.wait_for_completion(commit.value, ci.poll_interval, ci.timeout)
        if isinstance(waited, Err):
            e = waited.error
            return Err(StepError(kind="ci", message=f"CI {e.kind}: {e.message}", hint=e.hint))

        ctx.log(f"  CI passed ({waited.value.total_count} checks)")
        return Ok(None)

    def create_tag(self, ctx: Context) -> Result[None, StepError]:
        tag = ctx.version
        if ctx.dry_run:
            ctx.log(f"  [Dry run] Would create tag: {tag}")
            return Ok(None)

        created = self.repository.create_tag(tag, f"Release {tag}")
        if isinstance(created, Err):
            return Err(
                StepError(kind="git", message=f"failed to create tag: {created.error.message}")
            )
        ctx.log(f"  Created tag: {tag}")

        pushed = self.repository.push_tag(tag)
        if isinstance(pushed, Err):
            self.repository.delete_tag(tag)
            return Err(
                StepError(
                    kind="git",
                    message=f"failed to push tag: {pushed.error.message}",
                    hint=f"Local tag {tag} was removed",
                )
            )
        ctx.log(f"  Pushed tag: {tag}")
        return Ok(None)

    def _run_command(
        self,
        ctx: Context,
        command: tuple[str, ...],
        *,
        env: dict[str, str],
        done: str,
    ) -> Result[None, StepError]:
        shown = " ".join(command)
        if ctx.dry_run:
            ctx.log(f"  [Dry run] Would run: {shown}")
            return Ok(None)

        result = run_process(
            list(command),
            cwd=ctx.directory,
            env=env,
            timeout=_COMMAND_TIMEOUT_SECONDS,
        )
        if isinstance(result, Err):
            e = result.error
            return Err(
                StepError(
                    kind="command",
                    message=f"{shown} failed (exit {e.returncode})",
                    hint=e.output.strip() or None,
                )
            )
        if ctx.verbose and result.value.strip():
            for line in result.value.strip().splitlines():
                ctx.log(f"    {line}")
        ctx.log(f"  {done}")
        return Ok(None)


def release_workflow(version: str, actions: ReleaseActions) -> Workflow:
    """Build the release workflow for ``version``.

    The changelog and roadmap steps only get an action when a command is
    configured for them; otherwise the runner reports them as skipped.
    """
    release = actions.config.release
    return Workflow(
        name=f"Release {version}",
        description=f"Prepare and create release {version}",
        steps=(
            Step(
                "Validate version",
                "Check version format and ensure it doesn't exist",
                action=actions.validate_version,
            ),
            Step(
                "Check working directory",
                "Ensure no uncommitted changes",
                action=actions.check_working_directory,
            ),
            Step(
                "Run validation checks",
                "Run every enabled validation area",
                action=actions.run_validation_checks,
            ),
            Step(
                "Generate changelog",
                "Update the changelog with new entries",
                required=False,
                action=actions.generate_changelog if release.changelog_command else None,
            ),
            Step(
                "Update roadmap",
                "Regenerate the roadmap",
                required=False,
                action=actions.update_roadmap if release.roadmap_command else None,
            ),
            Step(
                "Create release commit",
                "Commit all changes with release message",
                action=actions.create_release_commit,
            ),
            Step(
                "Push to remote",
                f"Push commits to {release.remote}",
                action=actions.push_to_remote,
            ),
            Step(
                "Wait for CI",
                "Wait for CI checks to pass",
                required=False,
                action=actions.wait_for_ci,
            ),
            Step(
                "Create tag",
                "Create and push release tag",
                action=actions.create_tag,
            ),
        ),
    )
