"""Built-in checkers, one module per validation area.

- PMChecker: version recommendation and changelog scope
- DocsChecker: README, changelog, release notes
- ReleaseChecker: working tree, tag availability, CI configuration
- SecurityChecker: license presence
- CommandChecker: configured external commands for any area
"""

from ra.checks.base import Checker, CheckOptions, check_id, short_detail
from ra.checks.command import CommandChecker
from ra.checks.docs import DocsChecker
from ra.checks.pm import PMChecker
from ra.checks.registry import build_checkers, disabled_areas
from ra.checks.release import ReleaseChecker, normalize_version
from ra.checks.security import SecurityChecker

__all__ = [
    "CheckOptions",
    "Checker",
    "CommandChecker",
    "DocsChecker",
    "PMChecker",
    "ReleaseChecker",
    "SecurityChecker",
    "build_checkers",
    "check_id",
    "disabled_areas",
    "normalize_version",
    "short_detail",
]
