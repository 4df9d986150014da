"""Release-management checks: working tree, tag availability and CI setup."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ra.checks.base import CheckOptions
from ra.core.result import Err, Ok
from ra.git.repository import VersionControl
from ra.validation.model import Check


def normalize_version(version: str) -> str:
    """Release tags always carry a leading "v"."""
    v = version.strip()
    if v and not v.startswith("v"):
        return "v" + v
    return v


@dataclass(frozen=True, slots=True)
class ReleaseChecker:
    repository: VersionControl

    def check(self, directory: Path, options: CheckOptions) -> list[Check]:
        return [
            self.check_git_status(),
            self.check_version_available(options.version),
            self.check_ci_config(directory),
        ]

    def check_git_status(self) -> Check:
        match self.repository.is_dirty():
            case Ok(False):
                return Check.go("git-status", "Working tree clean")
            case Ok(True):
                return Check.no_go("git-status", "Uncommitted changes")
            case Err(e):
                return Check.no_go("git-status", e.message)

    def check_version_available(self, version: str) -> Check:
        if not version:
            return Check.skip("version-available", "No version specified")
        tag = normalize_version(version)
        match self.repository.all_tags():
            case Ok(tags) if tag in tags:
                return Check.no_go("version-available", f"Tag {tag} already exists")
            case Ok(_):
                return Check.go("version-available", f"{tag} not yet tagged")
            case Err(e):
                return Check.no_go("version-available", e.message)

    def check_ci_config(self, directory: Path) -> Check:
        workflows = directory / ".github" / "workflows"
        if workflows.is_dir() and any(
            p.suffix in {".yml", ".yaml"} for p in workflows.iterdir() if p.is_file()
        ):
            return Check.go("ci-config", "GitHub Actions configured")
        return Check.warn("ci-config", "No CI workflows found")
