"""Tests for ra.checks.command module."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from ra.checks import command as command_mod
from ra.checks.base import CheckOptions
from ra.checks.command import CommandChecker
from ra.core.config import CommandSpec
from ra.core.result import Err, Ok, Result
from ra.platform.process import NOT_FOUND_RETURNCODE, ProcessError
from ra.validation.aggregator import run_area
from ra.validation.areas import QA
from ra.validation.status import Status


def _patch(
    monkeypatch: pytest.MonkeyPatch,
    outcomes: dict[str, Result[str, ProcessError]],
) -> list[list[str]]:
    calls: list[list[str]] = []

    def fake_run(
        cmd: list[str],
        cwd: Path,
        env: dict[str, str] | None = None,
        *,
        timeout: float | None = None,
    ) -> Result[str, ProcessError]:
        del cwd, env, timeout
        calls.append(cmd)
        return outcomes[cmd[0]]

    monkeypatch.setattr(command_mod, "run_process", fake_run)
    return calls


def _failure(cmd: str, returncode: int, stdout: str = "", stderr: str = "") -> Err[ProcessError]:
    return Err(ProcessError(command=(cmd,), returncode=returncode, stdout=stdout, stderr=stderr))


def test_exit_zero_is_go(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    calls = _patch(monkeypatch, {"pytest": Ok("12 passed in 0.3s\n")})
    checker = CommandChecker([CommandSpec(id="Unit Tests", argv=("pytest", "-q"))])
    [check] = checker.check(tmp_path, CheckOptions())
    assert check.id == "unit-tests"
    assert check.status is Status.GO
    assert check.detail == "12 passed in 0.3s"
    assert calls == [["pytest", "-q"]]


def test_non_zero_is_no_go(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    _patch(monkeypatch, {"pytest": _failure("pytest", 1, stdout="2 failed\nlong trace")})
    [check] = CommandChecker([CommandSpec(id="tests", argv=("pytest",))]).check(
        tmp_path, CheckOptions()
    )
    assert check.status is Status.NO_GO
    assert check.detail == "2 failed"


def test_warn_only(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    _patch(monkeypatch, {"ruff": _failure("ruff", 1)})
    spec = CommandSpec(id="lint", argv=("ruff", "check"), warn_only=True)
    [check] = CommandChecker([spec]).check(tmp_path, CheckOptions())
    assert check.status is Status.WARN
    assert check.detail == "exit 1"


def test_missing_tool_is_no_go_not_skip(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    _patch(
        monkeypatch,
        {"golangci-lint": _failure("golangci-lint", NOT_FOUND_RETURNCODE, stderr="not found")},
    )
    spec = CommandSpec(id="lint", argv=("golangci-lint", "run"), warn_only=True)
    [check] = CommandChecker([spec]).check(tmp_path, CheckOptions())
    assert check.status is Status.NO_GO
    assert check.detail == "golangci-lint: not found"


def test_runs_every_command_in_order(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    calls = _patch(monkeypatch, {"a": Ok(""), "b": Ok("")})
    checker = CommandChecker(
        [CommandSpec(id="first", argv=("a",)), CommandSpec(id="second", argv=("b",))]
    )
    checks = checker.check(tmp_path, CheckOptions())
    assert [c.id for c in checks] == ["first", "second"]
    assert calls == [["a"], ["b"]]


def test_undecodable_output_is_a_failed_check(tmp_path: Path) -> None:
    code = "import sys; sys.stdout.buffer.write(b'\\xff\\xfe bad'); sys.exit(1)"
    checker = CommandChecker([CommandSpec(id="tests", argv=(sys.executable, "-c", code))])
    team = run_area(QA, [checker], tmp_path, CheckOptions())
    assert team.status is Status.NO_GO
    assert team.checks[0].detail == "\ufffd\ufffd bad"


def test_missing_directory_is_not_reported_as_missing_tool(tmp_path: Path) -> None:
    checker = CommandChecker([CommandSpec(id="tests", argv=(sys.executable, "-c", "pass"))])
    [check] = checker.check(tmp_path / "gone", CheckOptions(verbose=True))
    assert check.status is Status.NO_GO
    assert check.detail == f"{tmp_path / 'gone'}: no such directory"
