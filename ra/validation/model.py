"""Check, Team and Report value types.

Statuses of teams and reports are computed properties over their contents
and cannot be assigned.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from ra.validation.status import Status, aggregate

__all__ = ["Check", "Report", "Team"]


@dataclass(frozen=True, slots=True)
class Check:
    """A single validation outcome.

    Attributes:
        id: Stable kebab-case slug (e.g. "tests", "version-recommendation")
        status: GO, WARN, NO-GO or SKIP
        detail: Short free-text explanation
    """

    id: str
    status: Status
    detail: str = ""

    @classmethod
    def go(cls, id: str, detail: str = "") -> Check:
        return cls(id=id, status=Status.GO, detail=detail)

    @classmethod
    def warn(cls, id: str, detail: str = "") -> Check:
        return cls(id=id, status=Status.WARN, detail=detail)

    @classmethod
    def no_go(cls, id: str, detail: str = "") -> Check:
        return cls(id=id, status=Status.NO_GO, detail=detail)

    @classmethod
    def skip(cls, id: str, detail: str = "") -> Check:
        return cls(id=id, status=Status.SKIP, detail=detail)

    def to_dict(self) -> dict[str, object]:
        out: dict[str, object] = {"id": self.id, "status": self.status.value}
        if self.detail:
            out["detail"] = self.detail
        return out


@dataclass(frozen=True, slots=True)
class Team:
    """Checks for one area of responsibility.

    Attributes:
        id: Team id, also the key other teams use in ``depends_on``
        name: Short display name (e.g. "qa")
        depends_on: Ids of teams that must be listed before this one
        checks: Check outcomes in the order they ran
    """

    id: str
    name: str
    depends_on: frozenset[str] = field(default_factory=frozenset)
    checks: tuple[Check, ...] = ()

    @property
    def status(self) -> Status:
        return aggregate(c.status for c in self.checks)

    def with_checks(self, *checks: Check) -> Team:
        """Return a copy with ``checks`` appended."""
        return replace(self, checks=(*self.checks, *checks))

    def failing(self) -> list[Check]:
        return [c for c in self.checks if c.status is Status.NO_GO]

    def to_dict(self) -> dict[str, object]:
        out: dict[str, object] = {
            "id": self.id,
            "name": self.name,
            "status": self.status.value,
            "checks": [c.to_dict() for c in self.checks],
        }
        if self.depends_on:
            out["depends_on"] = sorted(self.depends_on)
        return out


@dataclass(frozen=True, slots=True)
class Report:
    """Full validation output for one run."""

    teams: tuple[Team, ...]
    project: str = ""
    version: str = ""
    target: str = ""
    phase: str = ""

    @property
    def status(self) -> Status:
        return aggregate(t.status for t in self.teams)

    @property
    def is_go(self) -> bool:
        """Release is permitted unless some team is NO-GO."""
        return not self.status.blocks_release

    def team(self, team_id: str) -> Team | None:
        for t in self.teams:
            if t.id == team_id:
                return t
        return None

    def final_message(self) -> str:
        label = self.version or self.target or "release"
        if self.is_go:
            return f"\U0001f680 TEAM: GO for {label} \U0001f680"
        return f"\U0001f6d1 TEAM: NO-GO for {label} \U0001f6d1"

    def to_dict(self) -> dict[str, object]:
        return {
            "project": self.project,
            "version": self.version,
            "target": self.target,
            "phase": self.phase,
            "status": self.status.value,
            "teams": [t.to_dict() for t in self.teams],
        }
