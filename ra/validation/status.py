"""Four-valued validation status and its aggregation rule."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

__all__ = ["Status", "aggregate"]


class Status(Enum):
    """Outcome of a check, a team or a whole report.

    Values are the strings used in rendered and structured reports.
    """

    GO = "GO"
    WARN = "WARN"
    NO_GO = "NO-GO"
    SKIP = "SKIP"

    def __str__(self) -> str:
        return self.value

    @property
    def icon(self) -> str:
        return _ICONS[self]

    @property
    def blocks_release(self) -> bool:
        return self is Status.NO_GO


_ICONS = {
    Status.GO: "\U0001f7e2",
    Status.WARN: "\U0001f7e1",
    Status.NO_GO: "\U0001f534",
    Status.SKIP: "⚪",
}

# Higher wins. SKIP never wins against anything else.
_RANK = {
    Status.SKIP: 0,
    Status.GO: 1,
    Status.WARN: 2,
    Status.NO_GO: 3,
}


def aggregate(statuses: Iterable[Status]) -> Status:
    """Reduce statuses to one: NO_GO > WARN > GO, SKIP only if nothing else.

    The same reducer rolls checks up into a team and teams up into a report.
    An empty input is SKIP.
    """
    result = Status.SKIP
    for status in statuses:
        if _RANK[status] > _RANK[result]:
            result = status
    return result
