"""Tests for ra.workflow.engine module."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from ra.core.result import Err, Ok, Result
from ra.workflow.engine import (
    NO_ACTION_REASON,
    Context,
    Runner,
    Step,
    StepError,
    Workflow,
    WorkflowResult,
    run_workflow,
)

Action = Callable[[Context], Result[None, StepError]]


class Recorder:
    """Builds actions that record their invocation order."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def ok(self, name: str) -> Action:
        def action(ctx: Context) -> Result[None, StepError]:
            self.calls.append(name)
            ctx.log(f"  ran {name}")
            return Ok(None)

        return action

    def fail(self, name: str) -> Action:
        def action(ctx: Context) -> Result[None, StepError]:
            del ctx
            self.calls.append(name)
            return Err(StepError(kind="command", message=f"{name} broke"))

        return action


def _ctx(tmp_path: Path) -> Context:
    return Context(directory=tmp_path, version="v1.0.0")


class TestTopLevel:
    def test_all_steps_run_in_order(self, tmp_path: Path) -> None:
        rec = Recorder()
        steps = (Step("a", action=rec.ok("a")), Step("b", action=rec.ok("b")))
        wf = Workflow(name="wf", steps=steps)
        result = run_workflow(wf, _ctx(tmp_path))
        assert result.success
        assert rec.calls == ["a", "b"]
        assert [s.name for s in result.steps] == ["a", "b"]
        assert all(s.success for s in result.steps)

    def test_required_failure_halts(self, tmp_path: Path) -> None:
        rec = Recorder()
        wf = Workflow(
            name="wf",
            steps=(
                Step("a", action=rec.ok("a")),
                Step("b", action=rec.fail("b")),
                Step("c", action=rec.ok("c")),
            ),
        )
        result = run_workflow(wf, _ctx(tmp_path))
        assert not result.success
        assert rec.calls == ["a", "b"]
        assert [s.name for s in result.steps] == ["a", "b"]
        failed = result.failed_step()
        assert failed is not None and failed.name == "b"
        assert failed.error == StepError(kind="command", message="b broke")
        assert "Workflow failed at step: b" in result.output

    def test_first_required_failure_records_one_step(self, tmp_path: Path) -> None:
        rec = Recorder()
        wf = Workflow(
            name="wf",
            steps=(
                Step("a", action=rec.fail("a")),
                Step("b", action=rec.ok("b")),
                Step("c", action=rec.ok("c"), required=False),
            ),
        )
        result = run_workflow(wf, _ctx(tmp_path))
        assert not result.success
        assert rec.calls == ["a"]
        assert [s.name for s in result.steps] == ["a"]
        assert result.failed_step() is result.steps[0]

    def test_optional_failure_continues(self, tmp_path: Path) -> None:
        rec = Recorder()
        wf = Workflow(
            name="wf",
            steps=(
                Step("a", required=False, action=rec.fail("a")),
                Step("b", action=rec.ok("b")),
            ),
        )
        result = run_workflow(wf, _ctx(tmp_path))
        assert result.success
        assert rec.calls == ["a", "b"]
        assert result.steps[0].failed
        assert "Step a failed but is not required, continuing..." in result.output

    def test_leaf_without_action_is_skipped(self, tmp_path: Path) -> None:
        rec = Recorder()
        wf = Workflow(name="wf", steps=(Step("noop"), Step("b", action=rec.ok("b"))))
        result = run_workflow(wf, _ctx(tmp_path))
        assert result.success
        skipped = result.steps[0]
        assert skipped.skipped and not skipped.success and not skipped.failed
        assert skipped.error is None
        assert skipped.reason == NO_ACTION_REASON

    def test_empty_workflow_succeeds(self, tmp_path: Path) -> None:
        result = run_workflow(Workflow(name="empty"), _ctx(tmp_path))
        assert result.success
        assert result.steps == ()


class TestComposite:
    def _run(
        self, tmp_path: Path, *children: Step, required: bool = True
    ) -> tuple[bool, list[str]]:
        wf = Workflow(name="wf", steps=(Step("group", required=required, children=children),))
        result = run_workflow(wf, _ctx(tmp_path))
        group = result.steps[0]
        return group.success, [s.name for s in group.sub_results]

    def test_all_children_pass(self, tmp_path: Path) -> None:
        rec = Recorder()
        ok, subs = self._run(tmp_path, Step("x", action=rec.ok("x")), Step("y", action=rec.ok("y")))
        assert ok and subs == ["x", "y"]

    def test_optional_child_failure_does_not_fail_parent(self, tmp_path: Path) -> None:
        rec = Recorder()
        ok, subs = self._run(
            tmp_path,
            Step("x", required=False, action=rec.fail("x")),
            Step("y", action=rec.ok("y")),
        )
        assert ok and subs == ["x", "y"]

    def test_required_child_failure_stops_siblings(self, tmp_path: Path) -> None:
        rec = Recorder()
        ok, subs = self._run(
            tmp_path,
            Step("x", action=rec.fail("x")),
            Step("y", action=rec.ok("y")),
        )
        assert not ok
        assert subs == ["x"]
        assert rec.calls == ["x"]

    def test_optional_composite_failure_lets_workflow_continue(self, tmp_path: Path) -> None:
        rec = Recorder()
        wf = Workflow(
            name="wf",
            steps=(
                Step("group", required=False, children=(Step("x", action=rec.fail("x")),)),
                Step("after", action=rec.ok("after")),
            ),
        )
        result = run_workflow(wf, _ctx(tmp_path))
        assert result.success
        assert rec.calls == ["x", "after"]
        assert result.steps[0].error == StepError(kind="command", message="x broke")

    def test_required_composite_failure_halts_workflow(self, tmp_path: Path) -> None:
        rec = Recorder()
        wf = Workflow(
            name="wf",
            steps=(
                Step("group", children=(Step("x", action=rec.fail("x")),)),
                Step("after", action=rec.ok("after")),
            ),
        )
        result = run_workflow(wf, _ctx(tmp_path))
        assert not result.success
        assert rec.calls == ["x"]

    def test_action_and_children_rejected(self) -> None:
        with pytest.raises(ValueError, match="both an action and children"):
            Step("bad", action=Recorder().ok("x"), children=(Step("y"),))


class TestRunner:
    def test_flags_copied_onto_context(self, tmp_path: Path) -> None:
        seen: list[tuple[bool, bool, bool]] = []

        def capture(ctx: Context) -> Result[None, StepError]:
            seen.append((ctx.dry_run, ctx.verbose, ctx.interactive))
            return Ok(None)

        ctx = _ctx(tmp_path)
        ctx.dry_run = False
        wf = Workflow(name="wf", steps=(Step("capture", action=capture),))
        Runner(dry_run=True, verbose=True, interactive=True).run(wf, ctx)
        assert seen == [(True, True, True)]

    def test_steps_are_timed(self, tmp_path: Path) -> None:
        ticks = iter(float(i) for i in range(100))
        runner = Runner(clock=lambda: next(ticks))
        wf = Workflow(name="wf", steps=(Step("a", action=Recorder().ok("a")),))
        result = runner.run(wf, _ctx(tmp_path))
        assert result.steps[0].duration == 1.0
        assert result.duration == 3.0

    def test_verbose_logs_descriptions(self, tmp_path: Path) -> None:
        wf = Workflow(name="wf", steps=(Step("a", "does a", action=Recorder().ok("a")),))
        quiet = Runner().run(wf, _ctx(tmp_path))
        loud = Runner(verbose=True).run(wf, _ctx(tmp_path))
        assert "  does a" not in quiet.output
        assert "  does a" in loud.output

    def test_output_log_is_append_only(self, tmp_path: Path) -> None:
        ctx = _ctx(tmp_path)
        ctx.log("before")
        wf = Workflow(
            name="Release v1.0.0",
            description="desc",
            steps=(Step("a", action=Recorder().ok("a")),),
        )
        result = run_workflow(wf, ctx)
        assert result.output[:3] == ("before", "=== Release v1.0.0 ===", "desc")
        assert "  ran a" in result.output
        assert result.output[-1] == "Release v1.0.0 completed successfully"
        assert list(result.output) == ctx.output


class TestRendering:
    def _result(self, tmp_path: Path) -> WorkflowResult:
        rec = Recorder()
        wf = Workflow(
            name="wf",
            steps=(
                Step("a", action=rec.ok("a")),
                Step("skip-me"),
                Step("group", required=False, children=(Step("x", action=rec.fail("x")),)),
            ),
        )
        ticks = iter(float(i) / 1000 for i in range(100))
        return Runner(clock=lambda: next(ticks)).run(wf, _ctx(tmp_path))

    def test_summary(self, tmp_path: Path) -> None:
        summary = self._result(tmp_path).summary()
        assert summary.startswith("Workflow: wf\nStatus: Success\n")
        assert "  ✓ a (1ms)" in summary
        assert "  ⊘ skip-me" in summary
        assert "  ✗ group" in summary
        assert "    ✗ x" in summary

    def test_to_dict(self, tmp_path: Path) -> None:
        data = self._result(tmp_path).to_dict()
        assert data["type"] == "workflow_result"
        assert data["workflow_name"] == "wf"
        assert data["success"] is True
        steps = data["steps"]
        assert isinstance(steps, list)
        assert steps[0] == {"name": "a", "success": True, "duration_ms": 1}
        assert steps[1]["skipped"] is True
        assert steps[2]["error"] == "x broke"
        assert steps[2]["sub_steps"][0]["name"] == "x"
