"""Sequential step execution with required/optional semantics.

A ``Workflow`` is an ordered list of ``Step`` templates. Leaf steps carry an
action, composite steps carry children. Actions return
``Result[None, StepError]``; the runner records the outcome of every step
and stops at the first failing required top-level step.

Usage:
    def check_clean(ctx: Context) -> Result[None, StepError]:
        ctx.log("  Working directory is clean")
        return Ok(None)

    wf = Workflow(name="Release v1.2.3", steps=(Step("Check", action=check_clean),))
    result = run_workflow(wf, Context(directory=Path(".")), runner=Runner(dry_run=True))
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from ra.core.result import Err, Ok, Result

__all__ = [
    "NO_ACTION_REASON",
    "Context",
    "Runner",
    "Step",
    "StepAction",
    "StepError",
    "StepResult",
    "Workflow",
    "WorkflowResult",
    "run_workflow",
]

NO_ACTION_REASON = "no action defined"

StepErrorKind = Literal["invalid_input", "git", "validation", "ci", "command"]


@dataclass(frozen=True, slots=True)
class StepError:
    """Why a step action failed."""

    kind: StepErrorKind
    message: str
    hint: str | None = None

    def __str__(self) -> str:
        return self.message


type StepAction = Callable[[Context], Result[None, StepError]]


@dataclass(frozen=True, slots=True)
class Step:
    """Immutable step template.

    Attributes:
        name: Display name, also used in results
        description: Shown in verbose output
        required: A failure of this step fails its parent (or the workflow)
        action: Callable for leaf steps
        children: Sub-steps for composite steps
    """

    name: str
    description: str = ""
    required: bool = True
    action: StepAction | None = None
    children: tuple[Step, ...] = ()

    def __post_init__(self) -> None:
        if self.action is not None and self.children:
            raise ValueError(f"step {self.name!r} has both an action and children")

    @property
    def is_composite(self) -> bool:
        return bool(self.children)


@dataclass(frozen=True, slots=True)
class Workflow:
    name: str
    description: str = ""
    steps: tuple[Step, ...] = ()


def _empty_data() -> dict[str, str]:
    return {}


def _empty_output() -> list[str]:
    return []


@dataclass(slots=True)
class Context:
    """Mutable state for one workflow run.

    ``dry_run``, ``verbose`` and ``interactive`` are overwritten by the
    runner before the first step. ``data`` is scratch space shared between
    steps. ``output`` only ever grows.
    """

    directory: Path
    version: str = ""
    dry_run: bool = False
    verbose: bool = False
    interactive: bool = False
    skip_checks: bool = False
    skip_ci: bool = False
    data: dict[str, str] = field(default_factory=_empty_data)
    output: list[str] = field(default_factory=_empty_output)

    def log(self, message: str = "") -> None:
        self.output.append(message)


@dataclass(frozen=True, slots=True)
class StepResult:
    """Outcome of one step.

    ``skipped`` and ``success`` are exclusive: a step without an action is
    skipped and neither succeeds nor fails.
    """

    name: str
    success: bool = False
    skipped: bool = False
    error: StepError | None = None
    duration: float = 0.0
    sub_results: tuple[StepResult, ...] = ()
    reason: str = ""

    @property
    def failed(self) -> bool:
        return not self.success and not self.skipped

    def to_dict(self) -> dict[str, object]:
        out: dict[str, object] = {
            "name": self.name,
            "success": self.success,
            "duration_ms": _ms(self.duration),
        }
        if self.skipped:
            out["skipped"] = True
        if self.error is not None:
            out["error"] = self.error.message
        if self.sub_results:
            out["sub_steps"] = [s.to_dict() for s in self.sub_results]
        return out


@dataclass(frozen=True, slots=True)
class WorkflowResult:
    name: str
    success: bool
    steps: tuple[StepResult, ...] = ()
    duration: float = 0.0
    output: tuple[str, ...] = ()

    def failed_step(self) -> StepResult | None:
        for step in self.steps:
            if step.failed:
                return step
        return None

    def summary(self) -> str:
        lines = [
            f"Workflow: {self.name}",
            f"Status: {'Success' if self.success else 'Failed'}",
            f"Duration: {_ms(self.duration)}ms",
            "",
            "Steps:",
        ]
        for step in self.steps:
            lines.append(f"  {_mark(step)} {step.name} ({_ms(step.duration)}ms)")
            for sub in step.sub_results:
                lines.append(f"    {_mark(sub)} {sub.name}")
        return "\n".join(lines) + "\n"

    def to_dict(self) -> dict[str, object]:
        return {
            "type": "workflow_result",
            "workflow_name": self.name,
            "success": self.success,
            "duration_ms": _ms(self.duration),
            "steps": [s.to_dict() for s in self.steps],
        }


def _ms(seconds: float) -> int:
    return round(seconds * 1000)


def _mark(step: StepResult) -> str:
    if step.skipped:
        return "⊘"
    if step.success:
        return "✓"
    return "✗"


@dataclass(frozen=True, slots=True)
class Runner:
    """Executes workflows strictly in declaration order."""

    dry_run: bool = False
    verbose: bool = False
    interactive: bool = False
    clock: Callable[[], float] = time.perf_counter

    def run(self, workflow: Workflow, context: Context) -> WorkflowResult:
        start = self.clock()
        context.dry_run = self.dry_run
        context.verbose = self.verbose
        context.interactive = self.interactive

        context.log(f"=== {workflow.name} ===")
        if workflow.description:
            context.log(workflow.description)
        context.log()

        success = True
        results: list[StepResult] = []
        for step in workflow.steps:
            result = self._run_step(step, context)
            results.append(result)
            if not result.failed:
                continue
            if step.required:
                success = False
                context.log(f"Workflow failed at step: {step.name}")
                break
            context.log(f"Step {step.name} failed but is not required, continuing...")

        if success:
            context.log(f"{workflow.name} completed successfully")

        return WorkflowResult(
            name=workflow.name,
            success=success,
            steps=tuple(results),
            duration=self.clock() - start,
            output=tuple(context.output),
        )

    def _run_step(self, step: Step, context: Context) -> StepResult:
        start = self.clock()
        context.log(f"→ {step.name}")
        if step.description and context.verbose:
            context.log(f"  {step.description}")

        if step.is_composite:
            return self._run_composite(step, context, start)

        if step.action is None:
            context.log("  [skipped]")
            return StepResult(
                name=step.name,
                skipped=True,
                reason=NO_ACTION_REASON,
                duration=self.clock() - start,
            )

        match step.action(context):
            case Ok(_):
                context.log("  [done]")
                return StepResult(name=step.name, success=True, duration=self.clock() - start)
            case Err(e):
                context.log(f"  [failed: {e.message}]")
                return StepResult(
                    name=step.name,
                    error=e,
                    reason=e.message,
                    duration=self.clock() - start,
                )

    def _run_composite(self, step: Step, context: Context, start: float) -> StepResult:
        success = True
        error: StepError | None = None
        subs: list[StepResult] = []
        for child in step.children:
            sub = self._run_step(child, context)
            subs.append(sub)
            if sub.failed and child.required:
                success = False
                error = sub.error
                break
        return StepResult(
            name=step.name,
            success=success,
            error=error,
            reason=error.message if error is not None else "",
            duration=self.clock() - start,
            sub_results=tuple(subs),
        )


def run_workflow(
    workflow: Workflow,
    context: Context,
    *,
    runner: Runner | None = None,
) -> WorkflowResult:
    """Run ``workflow`` with ``runner`` (default flags when omitted)."""
    return (runner or Runner()).run(workflow, context)


