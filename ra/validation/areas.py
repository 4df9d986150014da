"""Validation areas and the teams they report as.

PM runs first and produces the version recommendation; every other area
lists ``pm-validation`` as an upstream dependency.
"""

from __future__ import annotations

from dataclasses import dataclass, field

__all__ = [
    "DEFAULT_AREAS",
    "DOCS",
    "PM",
    "QA",
    "RELEASE",
    "SECURITY",
    "ValidationArea",
]


@dataclass(frozen=True, slots=True)
class ValidationArea:
    """Static description of one area of responsibility.

    Attributes:
        key: Config/CLI key (e.g. "qa" for ``[areas.qa]`` and ``--skip-qa``)
        team_id: Id of the team section in the report
        name: Team display name
        title: Human-readable area name
        depends_on: Upstream team ids
    """

    key: str
    team_id: str
    name: str
    title: str
    depends_on: frozenset[str] = field(default_factory=frozenset)


PM = ValidationArea(key="pm", team_id="pm-validation", name="pm", title="PM")
QA = ValidationArea(
    key="qa",
    team_id="qa-validation",
    name="qa",
    title="QA",
    depends_on=frozenset({PM.team_id}),
)
DOCS = ValidationArea(
    key="docs",
    team_id="docs-validation",
    name="documentation",
    title="Documentation",
    depends_on=frozenset({PM.team_id}),
)
RELEASE = ValidationArea(
    key="release",
    team_id="release-validation",
    name="release",
    title="Release",
    depends_on=frozenset({PM.team_id}),
)
SECURITY = ValidationArea(
    key="security",
    team_id="security-validation",
    name="security",
    title="Security",
    depends_on=frozenset({PM.team_id}),
)

DEFAULT_AREAS: tuple[ValidationArea, ...] = (PM, QA, DOCS, RELEASE, SECURITY)
