"""Tests for ra.git.repository module."""

from __future__ import annotations

from pathlib import Path

import pytest

from ra.core.result import Err, Ok, Result
from ra.git import repository as repository_mod
from ra.git.repository import GitStatus, Repository
from ra.platform.process import ProcessError


class FakeGit:
    """Records git invocations and answers from a table keyed by subcommand args."""

    def __init__(self, answers: dict[tuple[str, ...], Result[str, ProcessError]]) -> None:
        self.answers = answers
        self.calls: list[list[str]] = []

    def __call__(
        self,
        cmd: list[str],
        cwd: Path,
        env: dict[str, str] | None = None,
        *,
        timeout: float | None = None,
    ) -> Result[str, ProcessError]:
        del cwd, env, timeout
        assert cmd[:2] == ["git", "-C"]
        args = tuple(cmd[3:])
        self.calls.append(list(args))
        return self.answers.get(args, Ok(""))


def _fail(stderr: str, returncode: int = 1) -> Err[ProcessError]:
    return Err(ProcessError(command=("git",), returncode=returncode, stdout="", stderr=stderr))


@pytest.fixture
def fake_git(monkeypatch: pytest.MonkeyPatch) -> FakeGit:
    fake = FakeGit({})
    monkeypatch.setattr(repository_mod, "run_process", fake)
    return fake


class TestStatusParsing:
    def test_branch_with_upstream_and_counts(self) -> None:
        status = repository_mod._parse_status(  # pyright: ignore[reportPrivateUsage]
            "## main...origin/main [ahead 2, behind 1]\n M ra/cli/app.py\n?? notes.txt\n"
        )
        assert status == GitStatus(
            branch="main",
            upstream="origin/main",
            ahead=2,
            behind=1,
            changed=("ra/cli/app.py", "notes.txt"),
        )
        assert not status.is_clean

    @pytest.mark.parametrize(
        ("header", "ahead", "behind"),
        [
            ("## main...origin/main", 0, 0),
            ("## main...origin/main [ahead 3]", 3, 0),
            ("## main...origin/main [behind 4]", 0, 4),
            ("## main...origin/main [gone]", 0, 0),
        ],
    )
    def test_tracking_counts(self, header: str, ahead: int, behind: int) -> None:
        status = repository_mod._parse_status(header)  # pyright: ignore[reportPrivateUsage]
        assert (status.branch, status.upstream) == ("main", "origin/main")
        assert (status.ahead, status.behind) == (ahead, behind)

    def test_branch_without_upstream(self) -> None:
        status = repository_mod._parse_status("## feature\n")  # pyright: ignore[reportPrivateUsage]
        assert status.branch == "feature"
        assert status.upstream is None
        assert status.ahead == 0
        assert status.is_clean

    def test_empty_output(self) -> None:
        parsed = repository_mod._parse_status("")  # pyright: ignore[reportPrivateUsage]
        assert parsed == GitStatus(branch="")


class TestRepository:
    def test_is_dirty(self, fake_git: FakeGit, tmp_path: Path) -> None:
        fake_git.answers[("status", "--porcelain")] = Ok(" M file.py\n")
        assert Repository(tmp_path).is_dirty() == Ok(True)

    def test_is_clean(self, fake_git: FakeGit, tmp_path: Path) -> None:
        assert Repository(tmp_path).is_dirty() == Ok(False)

    def test_all_tags_sorted_output(self, fake_git: FakeGit, tmp_path: Path) -> None:
        fake_git.answers[("tag", "--sort=-version:refname")] = Ok("v1.1.0\nv1.0.0\n\n")
        assert Repository(tmp_path).all_tags() == Ok(["v1.1.0", "v1.0.0"])

    def test_latest_tag_none_without_tags(self, fake_git: FakeGit, tmp_path: Path) -> None:
        fake_git.answers[("describe", "--tags", "--abbrev=0")] = _fail("fatal: No names found")
        assert Repository(tmp_path).latest_tag() is None

    def test_error_maps_to_git_error(self, fake_git: FakeGit, tmp_path: Path) -> None:
        fake_git.answers[("push", "origin")] = _fail("rejected", returncode=1)
        result = Repository(tmp_path).push()
        assert isinstance(result, Err)
        assert result.error.command == "push"
        assert result.error.message == "rejected"

    def test_remote_is_used_for_pushes(self, fake_git: FakeGit, tmp_path: Path) -> None:
        repo = Repository(tmp_path, remote="upstream")
        assert repo.push_tag("v1.0.0") == Ok(None)
        assert fake_git.calls == [["push", "upstream", "v1.0.0"]]

    def test_commit_all_stages_first(self, fake_git: FakeGit, tmp_path: Path) -> None:
        assert Repository(tmp_path).commit_all("chore(release): v1.0.0") == Ok(None)
        assert fake_git.calls == [["add", "-A"], ["commit", "-m", "chore(release): v1.0.0"]]

    def test_commit_all_stops_when_add_fails(self, fake_git: FakeGit, tmp_path: Path) -> None:
        fake_git.answers[("add", "-A")] = _fail("index.lock exists")
        assert isinstance(Repository(tmp_path).commit_all("msg"), Err)
        assert fake_git.calls == [["add", "-A"]]

    def test_annotated_tag(self, fake_git: FakeGit, tmp_path: Path) -> None:
        Repository(tmp_path).create_tag("v2.0.0", "Release v2.0.0")
        assert fake_git.calls == [["tag", "-a", "v2.0.0", "-m", "Release v2.0.0"]]

    def test_status_runs_porcelain_with_branch(self, fake_git: FakeGit, tmp_path: Path) -> None:
        header = "## main...origin/main [ahead 1]\n"
        fake_git.answers[("status", "--porcelain=v1", "-b")] = Ok(header)
        assert Repository(tmp_path).status() == Ok(
            GitStatus(branch="main", upstream="origin/main", ahead=1)
        )

    def test_failure_without_output_gets_generic_message(
        self, fake_git: FakeGit, tmp_path: Path
    ) -> None:
        fake_git.answers[("rev-parse", "HEAD")] = _fail("", returncode=128)
        result = Repository(tmp_path).current_commit()
        assert isinstance(result, Err)
        assert result.error.message == "git rev-parse failed"
        assert result.error.returncode == 128
