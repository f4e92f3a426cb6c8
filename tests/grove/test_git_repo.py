"""Safety checks against real git repositories."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

import grove.cli as cli
import grove.safety as safety
from grove.context import WorkspaceContext, build_context
from grove.models import GroveConfig
from grove.workspace import find_workspace
from tests.grove.helpers import FakeMux

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_git_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(tmp_path / "gitconfig"))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")


def _git(cwd: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", "-C", str(cwd), *args], check=True, capture_output=True, text=True
    )
    return result.stdout


def init_repo(root: Path) -> Path:
    """Create ``root/app`` with one commit on ``main`` pushed to a bare origin."""
    remote = root / "origin.git"
    subprocess.run(
        ["git", "init", "--bare", str(remote)], check=True, capture_output=True
    )
    repo = root / "app"
    repo.mkdir()
    _git(repo, "init")
    _git(repo, "config", "user.email", "test@example.com")
    _git(repo, "config", "user.name", "Test User")
    (repo / "README.md").write_text("base\n", encoding="utf-8")
    _git(repo, "add", "README.md")
    _git(repo, "commit", "-m", "chore: initial")
    _git(repo, "branch", "-M", "main")
    _git(repo, "remote", "add", "origin", str(remote))
    _git(repo, "push", "-u", "origin", "main")
    return repo


def commit_files(checkout: Path, count: int) -> None:
    for index in range(1, count + 1):
        (checkout / f"change-{index}.txt").write_text(f"{index}\n", encoding="utf-8")
        _git(checkout, "add", ".")
        _git(checkout, "commit", "-m", f"feat: change {index}")


def add_worktree(ctx: WorkspaceContext, branch: str, *, push: bool = False) -> Path:
    path = ctx.worktree_path(branch)
    path.parent.mkdir(parents=True, exist_ok=True)
    _git(ctx.repo_root, "worktree", "add", "-b", branch, str(path), "main")
    if push:
        _git(path, "push", "-u", "origin", branch)
    return path


def local_branch(ctx: WorkspaceContext, branch: str) -> str:
    return _git(ctx.repo_root, "branch", "--list", branch).strip()


@pytest.fixture
def ctx(tmp_path: Path) -> WorkspaceContext:
    return build_context(init_repo(tmp_path), GroveConfig(), mux=FakeMux())


class TestSafetyReport:
    def test_untracked_file_only(self, ctx: WorkspaceContext) -> None:
        path = add_worktree(ctx, "feat/untracked", push=True)
        (path / "notes.txt").write_text("draft\n", encoding="utf-8")

        report = safety.build_safety_report(ctx, path, "feat/untracked")

        assert report == safety.SafetyReport(
            branch="feat/untracked",
            has_uncommitted_changes=True,
            remote_tracking_exists=True,
        )
        assert safety.decide(report) == safety.Blocked(reasons=("uncommitted changes",))

    def test_local_commits_without_tracking_count_everything(
        self, ctx: WorkspaceContext
    ) -> None:
        path = add_worktree(ctx, "feat/local")
        commit_files(path, 3)

        report = safety.build_safety_report(ctx, path, "feat/local")

        assert not report.has_uncommitted_changes
        assert report.unpushed_commit_count == 4
        assert not report.remote_tracking_exists
        assert [commit.subject for commit in report.recent_commits] == [
            "feat: change 3",
            "feat: change 2",
            "feat: change 1",
            "chore: initial",
        ]
        decision = safety.decide(report)
        assert isinstance(decision, safety.Blocked)
        assert "4 unpushed commit(s)" in decision.reasons

    def test_commits_ahead_of_upstream(self, ctx: WorkspaceContext) -> None:
        path = add_worktree(ctx, "feat/ahead", push=True)
        commit_files(path, 2)

        report = safety.build_safety_report(ctx, path, "feat/ahead")

        assert report.unpushed_commit_count == 2
        assert report.remote_tracking_exists

    def test_clean_tracked_workspace_proceeds(self, ctx: WorkspaceContext) -> None:
        path = add_worktree(ctx, "feat/clean", push=True)

        report = safety.build_safety_report(ctx, path, "feat/clean")

        assert report == safety.SafetyReport(
            branch="feat/clean", remote_tracking_exists=True
        )
        assert safety.decide(report) == safety.Proceed()


class TestDeletedCheckout:
    def _invoke(self, ctx: WorkspaceContext, args: list[str]):
        with patch("grove.commands.cleanup.resolve_context", return_value=ctx):
            return runner.invoke(cli.app, args)

    def test_branch_commits_block_cleanup(self, ctx: WorkspaceContext) -> None:
        path = add_worktree(ctx, "feat/gone")
        commit_files(path, 3)
        shutil.rmtree(path)

        workspace = find_workspace(ctx, "feat/gone")
        assert workspace is not None
        assert safety.removal_report(ctx, workspace).unpushed_commit_count == 4

        result = self._invoke(ctx, ["cleanup", "feat/gone"])

        assert result.exit_code == 1
        assert "4 unpushed commit(s)" in result.output
        assert local_branch(ctx, "feat/gone")

        forced = self._invoke(ctx, ["cleanup", "feat/gone", "--force"])

        assert forced.exit_code == 0
        assert local_branch(ctx, "feat/gone") == ""

    def test_pushed_branch_is_removed(self, ctx: WorkspaceContext) -> None:
        path = add_worktree(ctx, "feat/pushed", push=True)
        shutil.rmtree(path)

        result = self._invoke(ctx, ["cleanup", "feat/pushed"])

        assert result.exit_code == 0
        assert local_branch(ctx, "feat/pushed") == ""
        assert find_workspace(ctx, "feat/pushed") is None
