"""Git working tree used by the release workflow and the release checks.

``VersionControl`` is what the workflow depends on; ``Repository`` provides it
by shelling out to git. Every operation returns a ``Result`` whose error is a
``GitError`` carrying git's own message.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from ra.core.result import Err, Ok, Result
from ra.platform.process import run as run_process

__all__ = ["GitError", "GitStatus", "Repository", "VersionControl"]

_LOCAL_TIMEOUT_SECONDS = 30.0
# Subcommands that talk to a remote get longer.
_REMOTE_TIMEOUT_SECONDS = 180.0
_REMOTE_COMMANDS = frozenset({"push", "fetch", "pull"})

# "## main...origin/main [ahead 2, behind 1]"
_BRANCH_HEADER_RE = re.compile(
    r"^## (?P<branch>.+?)(?:\.\.\.(?P<upstream>\S+))?(?: \[(?P<tracking>[^\]]*)\])?$"
)
_TRACKING_RE = re.compile(r"(ahead|behind) (\d+)")


@dataclass(frozen=True, slots=True)
class GitError:
    command: str
    message: str
    returncode: int = 1


@dataclass(frozen=True, slots=True)
class GitStatus:
    """Branch tracking state plus the paths ``git status`` lists as changed."""

    branch: str
    upstream: str | None = None
    ahead: int = 0
    behind: int = 0
    changed: tuple[str, ...] = ()

    @property
    def is_clean(self) -> bool:
        return not self.changed


class VersionControl(Protocol):
    def is_dirty(self) -> Result[bool, GitError]: ...

    def status(self) -> Result[GitStatus, GitError]: ...

    def current_branch(self) -> Result[str, GitError]: ...

    def current_commit(self) -> Result[str, GitError]: ...

    def all_tags(self) -> Result[list[str], GitError]: ...

    def latest_tag(self) -> str | None: ...

    def remote_url(self) -> Result[str, GitError]: ...

    def create_tag(self, tag: str, message: str) -> Result[None, GitError]: ...

    def delete_tag(self, tag: str) -> Result[None, GitError]: ...

    def push_tag(self, tag: str) -> Result[None, GitError]: ...

    def push(self) -> Result[None, GitError]: ...

    def commit_all(self, message: str) -> Result[None, GitError]: ...


class Repository:
    """Git commands run against ``path``; pushes and URL lookups use ``remote``."""

    def __init__(self, path: Path, *, remote: str = "origin") -> None:
        self.path = path
        self.remote = remote

    def is_dirty(self) -> Result[bool, GitError]:
        """Uncommitted or untracked changes present."""
        return self._git("status", "--porcelain").map(lambda out: bool(out.strip()))

    def status(self) -> Result[GitStatus, GitError]:
        return self._git("status", "--porcelain=v1", "-b").map(_parse_status)

    def current_branch(self) -> Result[str, GitError]:
        return self._git("rev-parse", "--abbrev-ref", "HEAD").map(str.strip)

    def current_commit(self) -> Result[str, GitError]:
        return self._git("rev-parse", "HEAD").map(str.strip)

    def all_tags(self) -> Result[list[str], GitError]:
        """Tags sorted highest version first."""
        return self._git("tag", "--sort=-version:refname").map(_nonblank_lines)

    def latest_tag(self) -> str | None:
        """Nearest tag reachable from HEAD."""
        described = self._git("describe", "--tags", "--abbrev=0")
        if isinstance(described, Err):
            return None
        return described.value.strip() or None

    def remote_url(self) -> Result[str, GitError]:
        return self._git("remote", "get-url", self.remote).map(str.strip)

    def create_tag(self, tag: str, message: str) -> Result[None, GitError]:
        return self._git("tag", "-a", tag, "-m", message).map(_discard)

    def delete_tag(self, tag: str) -> Result[None, GitError]:
        return self._git("tag", "-d", tag).map(_discard)

    def push_tag(self, tag: str) -> Result[None, GitError]:
        return self._git("push", self.remote, tag).map(_discard)

    def push(self) -> Result[None, GitError]:
        return self._git("push", self.remote).map(_discard)

    def commit_all(self, message: str) -> Result[None, GitError]:
        """``git add -A`` then commit; nothing is committed if staging fails."""
        staged = self._git("add", "-A")
        if isinstance(staged, Err):
            return staged
        return self._git("commit", "-m", message).map(_discard)

    def _git(self, *args: str) -> Result[str, GitError]:
        subcommand = args[0]
        timeout = (
            _REMOTE_TIMEOUT_SECONDS if subcommand in _REMOTE_COMMANDS else _LOCAL_TIMEOUT_SECONDS
        )
        result = run_process(["git", "-C", str(self.path), *args], cwd=self.path, timeout=timeout)
        if isinstance(result, Ok):
            return result
        e = result.error
        message = e.stderr.strip() or e.stdout.strip() or f"git {subcommand} failed"
        return Err(GitError(command=subcommand, message=message, returncode=e.returncode))


def _discard(_: str) -> None:
    return None


def _nonblank_lines(output: str) -> list[str]:
    return [line.strip() for line in output.splitlines() if line.strip()]


def _parse_status(output: str) -> GitStatus:
    """Parse ``git status --porcelain=v1 -b``."""
    lines = output.splitlines()
    if not lines:
        return GitStatus(branch="")

    header = _BRANCH_HEADER_RE.match(lines[0].rstrip())
    if header is None:
        return GitStatus(branch="", changed=tuple(_changed_paths(lines)))

    counts = {kind: int(n) for kind, n in _TRACKING_RE.findall(header["tracking"] or "")}
    return GitStatus(
        branch=header["branch"],
        upstream=header["upstream"],
        ahead=counts.get("ahead", 0),
        behind=counts.get("behind", 0),
        changed=tuple(_changed_paths(lines[1:])),
    )


def _changed_paths(lines: list[str]) -> list[str]:
    # "XY path"; the two status columns may be blank.
    return [line[3:] for line in lines if len(line) > 3 and not line.startswith("##")]
