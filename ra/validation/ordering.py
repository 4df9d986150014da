"""Deterministic display order for report teams.

Kahn's algorithm processed one level at a time: every team whose
dependencies are already placed joins the current level, and each level is
emitted in ascending id order. The result does not depend on the order the
teams were supplied in.
"""

from __future__ import annotations

from collections.abc import Iterable

from ra.validation.model import Report, Team

__all__ = ["DependencyCycleError", "order", "order_report", "order_teams"]


class DependencyCycleError(ValueError):
    """Team dependencies form a cycle.

    This is a bug in the area configuration, never a validation result.
    """

    def __init__(self, team_ids: list[str]) -> None:
        self.team_ids = team_ids
        super().__init__(f"circular dependency detected among teams: {', '.join(team_ids)}")


def order_teams(teams: Iterable[Team]) -> list[Team]:
    """Order teams so each one follows everything it depends on.

    Dependencies on ids that are not among ``teams`` are ignored.

    Raises:
        DependencyCycleError: If the dependencies are cyclic.
        ValueError: If two teams share an id.
    """
    by_id: dict[str, Team] = {}
    for team in teams:
        if team.id in by_id:
            raise ValueError(f"duplicate team id: {team.id}")
        by_id[team.id] = team

    outgoing: dict[str, set[str]] = {team_id: set() for team_id in by_id}
    indegree: dict[str, int] = {team_id: 0 for team_id in by_id}
    for team_id, team in by_id.items():
        for dep in team.depends_on:
            if dep not in by_id:
                continue
            if team_id not in outgoing[dep]:
                outgoing[dep].add(team_id)
                indegree[team_id] += 1

    ordered: list[str] = []
    level = sorted(team_id for team_id, deg in indegree.items() if deg == 0)
    while level:
        ordered.extend(level)
        next_level: set[str] = set()
        for current in level:
            for neighbor in outgoing[current]:
                indegree[neighbor] -= 1
                if indegree[neighbor] == 0:
                    next_level.add(neighbor)
        level = sorted(next_level)

    if len(ordered) != len(by_id):
        placed = set(ordered)
        raise DependencyCycleError(sorted(team_id for team_id in by_id if team_id not in placed))

    return [by_id[team_id] for team_id in ordered]


order = order_teams


def order_report(report: Report) -> Report:
    """Copy of ``report`` with its teams in dependency order."""
    return Report(
        teams=tuple(order_teams(report.teams)),
        project=report.project,
        version=report.version,
        target=report.target,
        phase=report.phase,
    )
