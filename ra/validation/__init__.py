"""Go/no-go validation: status model, teams, reports and their ordering."""

from .aggregator import DEFAULT_PHASE, build_report, run_area, run_areas
from .areas import DEFAULT_AREAS, ValidationArea
from .model import Check, Report, Team
from .ordering import DependencyCycleError, order, order_report, order_teams
from .status import Status, aggregate

__all__ = [
    "DEFAULT_AREAS",
    "DEFAULT_PHASE",
    "Check",
    "DependencyCycleError",
    "Report",
    "Status",
    "Team",
    "ValidationArea",
    "aggregate",
    "build_report",
    "order",
    "order_report",
    "order_teams",
    "run_area",
    "run_areas",
]
