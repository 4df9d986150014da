"""Step execution engine, CI wait loop and the release workflow."""

from ra.workflow.ci_wait import CIWaiter, CIWaitError
from ra.workflow.engine import (
    NO_ACTION_REASON,
    Context,
    Runner,
    Step,
    StepAction,
    StepError,
    StepResult,
    Workflow,
    WorkflowResult,
    run_workflow,
)
from ra.workflow.release import RELEASE_AREAS, ReleaseActions, release_workflow

__all__ = [
    "CIWaitError",
    "CIWaiter",
    "Context",
    "NO_ACTION_REASON",
    "RELEASE_AREAS",
    "ReleaseActions",
    "Runner",
    "Step",
    "StepAction",
    "StepError",
    "StepResult",
    "Workflow",
    "WorkflowResult",
    "release_workflow",
    "run_workflow",
]
