"""Documentation checks."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ra.checks.base import CheckOptions
from ra.validation.model import Check

_README_NAMES = ("README.md", "README.rst", "README.txt", "README")
_CHANGELOG_NAMES = ("CHANGELOG.md", "CHANGELOG.json", "CHANGES.md", "HISTORY.md")


def _first_existing(directory: Path, names: tuple[str, ...]) -> Path | None:
    for name in names:
        path = directory / name
        if path.is_file():
            return path
    return None


@dataclass(frozen=True, slots=True)
class DocsChecker:
    """README must exist; changelog and a changelog entry for the version should."""

    def check(self, directory: Path, options: CheckOptions) -> list[Check]:
        checks = [self.check_readme(directory)]
        changelog = _first_existing(directory, _CHANGELOG_NAMES)
        checks.append(self.check_changelog(changelog))
        checks.append(self.check_release_notes(changelog, options.version))
        return checks

    def check_readme(self, directory: Path) -> Check:
        readme = _first_existing(directory, _README_NAMES)
        if readme is None:
            return Check.no_go("readme", "README missing")
        return Check.go("readme", readme.name)

    def check_changelog(self, changelog: Path | None) -> Check:
        if changelog is None:
            return Check.warn("changelog", "No changelog file")
        return Check.go("changelog", changelog.name)

    def check_release_notes(self, changelog: Path | None, version: str) -> Check:
        if not version:
            return Check.skip("release-notes", "No version specified")
        if changelog is None:
            return Check.warn("release-notes", "No changelog file")
        try:
            text = changelog.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            return Check.warn("release-notes", f"Unreadable: {e}")
        if version.removeprefix("v") not in text:
            return Check.warn("release-notes", f"{version} not mentioned")
        return Check.go("release-notes", f"{version} documented")
