"""Product-management checks: version choice, changelog scope and roadmap."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path

from ra.checks.base import CheckOptions
from ra.core.structured import StrDict, as_str_dict, get_bool, get_list, get_str
from ra.validation.model import Check

SEMVER_RE = re.compile(
    r"^v?(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)(-[0-9A-Za-z.-]+)?(\+[0-9A-Za-z.-]+)?$"
)

_CHANGELOG_JSON = "CHANGELOG.json"
_ROADMAP = "ROADMAP.md"


def version_kind(version: str) -> str | None:
    """Classify a semver string as "major", "minor" or "patch"."""
    m = SEMVER_RE.match(version)
    if m is None:
        return None
    major, minor, patch = (int(m.group(i)) for i in (1, 2, 3))
    if major != 0 and minor == 0 and patch == 0:
        return "major"
    if minor != 0 and patch == 0:
        return "minor"
    return "patch"


@dataclass(frozen=True, slots=True)
class PMChecker:
    """Checks that the target version is sensible and documented.

    ``CHANGELOG.json`` follows the structured-changelog layout:
    ``{"releases": [{"version": ..., "highlights": [...], "added": [...]}]}``.
    """

    def check(self, directory: Path, options: CheckOptions) -> list[Check]:
        version = options.version
        release = _find_release(directory / _CHANGELOG_JSON, version)
        return [
            self.check_version(version),
            self.check_release_scope(release, version),
            self.check_changelog_quality(release, version),
            self.check_breaking_changes(release, version),
            self.check_roadmap_alignment(directory, version),
            self.check_deprecation_notices(release, version),
        ]

    def check_version(self, version: str) -> Check:
        if not version:
            return Check.warn("version-recommendation", "No version specified")
        kind = version_kind(version)
        if kind is None:
            return Check.no_go("version-recommendation", f"{version} is not semver")
        return Check.go("version-recommendation", f"{version} appropriate ({kind})")

    def check_release_scope(self, release: StrDict | str | None, version: str) -> Check:
        if not version:
            return Check.skip("release-scope", "No version specified")
        if isinstance(release, str):
            return Check.warn("release-scope", release)
        if release is None:
            return Check.warn("release-scope", f"{version} not in {_CHANGELOG_JSON}")
        total = sum(len(get_list(release, key) or []) for key in ("added", "changed", "fixed"))
        return Check.go("release-scope", f"{total} changes documented")

    def check_changelog_quality(self, release: StrDict | str | None, version: str) -> Check:
        if not version:
            return Check.skip("changelog-quality", "No version specified")
        if isinstance(release, str):
            return Check.warn("changelog-quality", release)
        if release is None:
            return Check.warn("changelog-quality", f"{version} not in {_CHANGELOG_JSON}")
        highlights = get_list(release, "highlights") or []
        if not highlights:
            return Check.warn("changelog-quality", "Missing highlights")
        return Check.go("changelog-quality", f"{len(highlights)} highlights present")

    def check_breaking_changes(self, release: StrDict | str | None, version: str) -> Check:
        if not version:
            return Check.skip("breaking-changes", "No version specified")
        if isinstance(release, str):
            return Check.warn("breaking-changes", release)
        if release is None:
            detail = f"No breaking changes ({version} not in changelog)"
            return Check.go("breaking-changes", detail)
        breaking = [
            entry
            for entry in map(as_str_dict, get_list(release, "changed") or [])
            if entry is not None and get_bool(entry, "breaking")
        ]
        if not breaking:
            return Check.go("breaking-changes", "No breaking changes")
        return Check.go("breaking-changes", f"{len(breaking)} breaking changes documented")

    def check_roadmap_alignment(self, directory: Path, version: str) -> Check:
        if not version:
            return Check.skip("roadmap-alignment", "No version specified")
        try:
            roadmap = (directory / _ROADMAP).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return Check.warn("roadmap-alignment", f"{_ROADMAP} not found")

        done, pending = _roadmap_items(roadmap, version)
        total = done + pending
        if total == 0:
            return Check.warn("roadmap-alignment", f"No roadmap items tagged for {version}")
        if pending:
            return Check.warn(
                "roadmap-alignment", f"{done}/{total} items completed ({pending} pending)"
            )
        return Check.go("roadmap-alignment", f"{done}/{total} items completed")

    def check_deprecation_notices(self, release: StrDict | str | None, version: str) -> Check:
        """Informational only: deprecations never hold a release back."""
        if not version:
            return Check.skip("deprecation-notices", "No version specified")
        if isinstance(release, str):
            return Check.go("deprecation-notices", f"No deprecations ({release})")
        if release is None:
            return Check.go("deprecation-notices", "No deprecations")
        deprecated = get_list(release, "deprecated") or []
        if not deprecated:
            return Check.go("deprecation-notices", "No deprecations")
        return Check.go("deprecation-notices", f"{len(deprecated)} deprecation notices")


def _roadmap_items(roadmap: str, version: str) -> tuple[int, int]:
    """Count completed and open ROADMAP.md items tagged with ``version``.

    An item is a ``### [x] Title`` (or ``### [ ] Title``) heading whose
    second line after it reads ``**Version:** 0.5.0``.
    """
    number = re.escape(version.removeprefix("v"))
    item = r"### \[{mark}\][^\n]+\n[^\n]*\n\*\*Version:\*\* v?" + number + r"(?!\.?\w)"
    done = len(re.findall(item.format(mark="[xX]"), roadmap))
    pending = len(re.findall(item.format(mark=" "), roadmap))
    return done, pending


def _find_release(path: Path, version: str) -> StrDict | str | None:
    """Return the release entry, None if absent, or a string describing a read problem."""
    if not version:
        return None
    try:
        obj: object = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return f"{_CHANGELOG_JSON} not found"
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return f"Failed to parse {_CHANGELOG_JSON}"

    data = as_str_dict(obj)
    if data is None:
        return f"Failed to parse {_CHANGELOG_JSON}"

    wanted = version.removeprefix("v")
    for item in get_list(data, "releases") or []:
        entry = as_str_dict(item)
        if entry is None:
            continue
        if (get_str(entry, "version") or "").removeprefix("v") == wanted:
            return entry
    return None
