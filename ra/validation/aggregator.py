"""Roll check outcomes up into teams and teams into a report."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from ra.validation.areas import ValidationArea
from ra.validation.model import Report, Team

if TYPE_CHECKING:
    from ra.checks.base import Checker, CheckOptions

__all__ = ["DEFAULT_PHASE", "build_report", "run_area", "run_areas"]

DEFAULT_PHASE = "PHASE 1: REVIEW"


def run_area(
    area: ValidationArea,
    checkers: Iterable[Checker],
    directory: Path,
    options: CheckOptions,
) -> Team:
    """Run every checker for an area and collect their checks into its team.

    With no checkers (or only checkers returning nothing) the team has no
    checks and its status is SKIP.
    """
    team = Team(id=area.team_id, name=area.name, depends_on=area.depends_on)
    for checker in checkers:
        team = team.with_checks(*checker.check(directory, options))
    return team


def run_areas(
    areas: Sequence[ValidationArea],
    checkers: Mapping[str, Sequence[Checker]],
    directory: Path,
    options: CheckOptions,
    *,
    skip: frozenset[str] = frozenset(),
    on_area: Callable[[ValidationArea], None] | None = None,
) -> list[Team]:
    """Run areas in order. Skipped areas still produce an (empty, SKIP) team."""
    teams: list[Team] = []
    for area in areas:
        selected: Sequence[Checker] = () if area.key in skip else checkers.get(area.key, ())
        if on_area is not None and area.key not in skip:
            on_area(area)
        teams.append(run_area(area, selected, directory, options))
    return teams


def build_report(
    teams: Iterable[Team],
    *,
    project: str = "",
    version: str = "",
    target: str = "",
    phase: str = DEFAULT_PHASE,
) -> Report:
    return Report(
        teams=tuple(teams),
        project=project,
        version=version,
        target=target or version or "release validation",
        phase=phase,
    )
