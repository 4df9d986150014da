"""Continuous-integration status for a commit.

``CIStatus`` is an immutable snapshot; its overall ``state`` is always
derived from the individual checks. ``GitHubCIStatus`` builds snapshots from
the GitHub commit status and check-runs APIs through the ``gh`` CLI.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Literal, Protocol

from ra.core.result import Err, Ok, Result
from ra.core.structured import StrDict, as_obj_list, as_str_dict, get_list, get_str, get_table
from ra.git.repository import VersionControl
from ra.platform.process import run as run_process
from ra.platform.process import which

__all__ = [
    "CICheck",
    "CIError",
    "CIState",
    "CIStatus",
    "ContinuousIntegrationStatus",
    "GitHubCIStatus",
    "normalize_state",
    "overall_state",
    "parse_github_slug",
]

_GH_TIMEOUT_SECONDS = 60.0

_SUCCESS_STATES = frozenset({"success", "skipped", "neutral"})
_FAILURE_STATES = frozenset({"failure", "error", "timed_out", "cancelled", "action_required"})

_SSH_REMOTE = re.compile(r"^git@github\.com:([^/]+)/(.+?)(?:\.git)?$")
_HTTPS_REMOTE = re.compile(r"^https://github\.com/([^/]+)/(.+?)(?:\.git)?/?$")


class CIState(Enum):
    SUCCESS = "success"
    PENDING = "pending"
    FAILURE = "failure"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class CICheck:
    """One named CI check (a commit status context or a check run)."""

    name: str
    state: CIState
    description: str = ""


@dataclass(frozen=True, slots=True)
class CIStatus:
    """Snapshot of every CI check reported for a reference."""

    reference: str
    statuses: tuple[CICheck, ...] = ()

    @property
    def state(self) -> CIState:
        return overall_state(self.statuses)

    @property
    def total_count(self) -> int:
        return len(self.statuses)

    def failing(self) -> list[CICheck]:
        return [c for c in self.statuses if c.state is CIState.FAILURE]

    def pending(self) -> list[CICheck]:
        return [c for c in self.statuses if c.state is CIState.PENDING]


@dataclass(frozen=True, slots=True)
class CIError:
    kind: Literal["gh_missing", "invalid_remote", "git_failed", "query_failed"]
    message: str
    hint: str | None = None


class ContinuousIntegrationStatus(Protocol):
    """Source of CI snapshots for a commit reference."""

    def get(self, reference: str) -> Result[CIStatus, CIError]: ...


def overall_state(checks: tuple[CICheck, ...] | list[CICheck]) -> CIState:
    """Reduce per-check states: any failure, else any pending, else success.

    No checks at all means CI has not picked the commit up yet, which is
    reported as pending.
    """
    if not checks:
        return CIState.PENDING
    states = {c.state for c in checks}
    if CIState.FAILURE in states:
        return CIState.FAILURE
    if CIState.PENDING in states:
        return CIState.PENDING
    return CIState.SUCCESS


def normalize_state(raw: str | None) -> CIState:
    """Map GitHub status/conclusion strings onto the three CI states."""
    value = (raw or "").strip().lower()
    if value in _SUCCESS_STATES:
        return CIState.SUCCESS
    if value in _FAILURE_STATES:
        return CIState.FAILURE
    return CIState.PENDING


def parse_github_slug(remote_url: str) -> str | None:
    """Return ``owner/repo`` for SSH or HTTPS GitHub remotes."""
    url = remote_url.strip()
    for pattern in (_SSH_REMOTE, _HTTPS_REMOTE):
        m = pattern.match(url)
        if m:
            return f"{m.group(1)}/{m.group(2)}"
    return None


class GitHubCIStatus:
    """CI status from GitHub via ``gh api``.

    Combines legacy commit statuses and GitHub Actions check runs into a
    single list of checks.
    """

    def __init__(self, *, repository: VersionControl, cwd: Path) -> None:
        self._repository = repository
        self._cwd = cwd

    def available(self) -> bool:
        return which("gh") is not None

    def get(self, reference: str) -> Result[CIStatus, CIError]:
        if not self.available():
            return Err(
                CIError(
                    kind="gh_missing",
                    message="gh CLI not found in PATH",
                    hint="Install GitHub CLI: https://cli.github.com/",
                )
            )

        slug = self._slug()
        if isinstance(slug, Err):
            return slug

        ref = reference
        if not ref:
            commit = self._repository.current_commit()
            if isinstance(commit, Err):
                return Err(CIError(kind="git_failed", message=commit.error.message))
            ref = commit.value

        base = f"repos/{slug.value}/commits/{ref}"
        combined = self._api(f"{base}/status")
        runs = self._api(f"{base}/check-runs")
        if isinstance(combined, Err) and isinstance(runs, Err):
            return Err(
                CIError(
                    kind="query_failed",
                    message=f"failed to query CI status for {slug.value}@{ref}",
                    hint=combined.error,
                )
            )

        checks: list[CICheck] = []
        if isinstance(combined, Ok):
            checks.extend(_parse_commit_statuses(combined.value))
        if isinstance(runs, Ok):
            checks.extend(_parse_check_runs(runs.value))
        return Ok(CIStatus(reference=ref, statuses=tuple(checks)))

    def _slug(self) -> Result[str, CIError]:
        url = self._repository.remote_url()
        if isinstance(url, Err):
            return Err(CIError(kind="git_failed", message=url.error.message))
        slug = parse_github_slug(url.value)
        if slug is None:
            return Err(
                CIError(
                    kind="invalid_remote",
                    message=f"could not parse GitHub URL: {url.value}",
                )
            )
        return Ok(slug)

    def _api(self, endpoint: str) -> Result[StrDict, str]:
        result = run_process(["gh", "api", endpoint], cwd=self._cwd, timeout=_GH_TIMEOUT_SECONDS)
        if isinstance(result, Err):
            return Err(result.error.stderr.strip() or str(result.error))
        try:
            obj: object = json.loads(result.value)
        except json.JSONDecodeError as e:
            return Err(f"invalid JSON from gh api {endpoint}: {e}")
        data = as_str_dict(obj)
        if data is None:
            return Err(f"unexpected payload from gh api {endpoint}")
        return Ok(data)


def _parse_commit_statuses(data: StrDict) -> list[CICheck]:
    checks: list[CICheck] = []
    for item in as_obj_list(data.get("statuses")) or []:
        entry = as_str_dict(item)
        if entry is None:
            continue
        checks.append(
            CICheck(
                name=get_str(entry, "context") or "status",
                state=normalize_state(get_str(entry, "state")),
                description=get_str(entry, "description") or "",
            )
        )
    return checks


def _parse_check_runs(data: StrDict) -> list[CICheck]:
    checks: list[CICheck] = []
    for item in get_list(data, "check_runs") or []:
        entry = as_str_dict(item)
        if entry is None:
            continue
        app = get_table(entry, "app") or {}
        if get_str(entry, "status") == "completed":
            state = normalize_state(get_str(entry, "conclusion"))
        else:
            state = CIState.PENDING
        checks.append(
            CICheck(
                name=get_str(entry, "name") or "check-run",
                state=state,
                description=get_str(app, "name") or "",
            )
        )
    return checks
