"""Checkers wired to each validation area for a given configuration."""

from __future__ import annotations

from ra.checks.base import Checker
from ra.checks.command import CommandChecker
from ra.checks.docs import DocsChecker
from ra.checks.pm import PMChecker
from ra.checks.release import ReleaseChecker
from ra.checks.security import SecurityChecker
from ra.core.config import Config
from ra.git.repository import VersionControl
from ra.validation.areas import DEFAULT_AREAS, DOCS, PM, QA, RELEASE, SECURITY


def build_checkers(config: Config, repository: VersionControl) -> dict[str, list[Checker]]:
    """Built-in checkers per area, followed by the area's configured commands.

    QA has no built-in checker: without configured commands it reports SKIP.
    """
    builtin: dict[str, list[Checker]] = {
        PM.key: [PMChecker()],
        QA.key: [],
        DOCS.key: [DocsChecker()],
        RELEASE.key: [ReleaseChecker(repository)],
        SECURITY.key: [SecurityChecker()],
    }
    checkers: dict[str, list[Checker]] = {}
    for area in DEFAULT_AREAS:
        selected = list(builtin.get(area.key, []))
        commands = config.area(area.key).commands
        if commands:
            selected.append(CommandChecker(commands))
        checkers[area.key] = selected
    return checkers


def disabled_areas(config: Config) -> frozenset[str]:
    """Area keys switched off with ``enabled = false``."""
    return frozenset(key for key, area in config.areas.items() if not area.enabled)
