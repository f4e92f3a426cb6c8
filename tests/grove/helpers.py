"""In-memory git and tmux fakes for grove tests."""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from types import SimpleNamespace

from grove.context import WorkspaceContext, build_context
from grove.errors import ExternalCommandError, GitQueryError
from grove.models import GroveConfig
from grove.ports import CommitSummary, WorktreeEntry


def make_commits(count: int, prefix: str = "c") -> list[CommitSummary]:
    """Return ``count`` commits, newest first."""
    return [
        CommitSummary(short_sha=f"{prefix}{index:06d}", subject=f"commit {index}")
        for index in range(count, 0, -1)
    ]


def make_args(**fields: object) -> SimpleNamespace:
    return SimpleNamespace(**fields)


@dataclass
class FakeCheckout:
    branch: str | None
    dirty: bool = False
    commits: list[CommitSummary] = field(default_factory=list)
    tracking: str | None = None


class FakeGit:
    """Programmable ``WorkspaceGit``.

    ``failing`` holds method names that raise: queries raise
    ``GitQueryError`` and mutations raise ``ExternalCommandError``.
    """

    def __init__(self, repo_root: Path, *, remote: str = "origin") -> None:
        self.repo_root = repo_root
        self.remote = remote
        self.checkouts: dict[Path, FakeCheckout] = {}
        self.local_branches: set[str] = {"main"}
        self.remote_branches: set[str] = set()
        self.failing: set[str] = set()
        self.calls: list[tuple] = []

    def _query(self, name: str) -> None:
        self.calls.append((name,))
        if name in self.failing:
            raise GitQueryError(f"{name} failed")

    def _mutate(self, name: str, *args: object) -> None:
        self.calls.append((name, *args))
        if name in self.failing:
            raise ExternalCommandError(f"{name} failed")

    def mutations(self) -> list[tuple]:
        names = {
            "remove_checkout",
            "add_worktree",
            "delete_branch",
            "prune_worktrees",
        }
        return [call for call in self.calls if call[0] in names]

    def add_checkout(
        self,
        path: Path,
        branch: str | None,
        *,
        dirty: bool = False,
        unpushed: int = 0,
        tracking: bool = False,
        on_remote: bool | None = None,
    ) -> FakeCheckout:
        path.mkdir(parents=True, exist_ok=True)
        checkout = FakeCheckout(
            branch=branch,
            dirty=dirty,
            commits=make_commits(unpushed, prefix=(branch or "d")[:1]),
            tracking=f"{self.remote}/{branch}" if tracking and branch else None,
        )
        self.checkouts[path] = checkout
        if branch:
            self.local_branches.add(branch)
            remote_copy = tracking if on_remote is None else on_remote
            if remote_copy:
                self.remote_branches.add(branch)
        return checkout

    def _checkout(self, path: Path, ref: str) -> FakeCheckout:
        """Resolve a checkout by path, or by branch for ``refs/heads/`` refs."""
        branch = ref.removeprefix("refs/heads/")
        if path in self.checkouts and branch == ref:
            return self.checkouts[path]
        for checkout in self.checkouts.values():
            if checkout.branch == branch:
                return checkout
        raise GitQueryError(f"unknown revision {ref}")

    # GitPort

    def checkout_exists(self, path: Path) -> bool:
        return path.exists()

    def has_uncommitted_changes(self, path: Path) -> bool:
        self._query("has_uncommitted_changes")
        return self.checkouts[path].dirty

    def tracking_ref(self, path: Path, branch: str) -> str | None:
        self._query("tracking_ref")
        if path in self.checkouts:
            return self.checkouts[path].tracking
        return self._checkout(path, f"refs/heads/{branch}").tracking

    def count_commits(self, path: Path, head: str, *, exclude: str | None = None) -> int:
        self._query("count_commits")
        return len(self._checkout(path, head).commits)

    def recent_commits(
        self,
        path: Path,
        head: str,
        *,
        exclude: str | None = None,
        limit: int = 5,
    ) -> list[CommitSummary]:
        self._query("recent_commits")
        return list(self._checkout(path, head).commits[:limit])

    def remote_branch_exists(self, path: Path, branch: str) -> bool:
        self._query("remote_branch_exists")
        return branch in self.remote_branches

    def remove_checkout(self, path: Path, *, force: bool = False) -> None:
        self._mutate("remove_checkout", path, force)
        checkout = self.checkouts.get(path)
        if checkout is not None and not force and (checkout.dirty or checkout.commits):
            raise ExternalCommandError(f"{path} is not clean")
        self.checkouts.pop(path, None)
        shutil.rmtree(path, ignore_errors=True)

    # WorkspaceGit

    def local_branch_exists(self, branch: str) -> bool:
        return branch in self.local_branches

    def default_branch(self) -> str:
        return "main"

    def list_worktrees(self) -> list[WorktreeEntry]:
        self._query("list_worktrees")
        entries = [WorktreeEntry(path=self.repo_root, head="0" * 40, branch="main")]
        for path, checkout in self.checkouts.items():
            entries.append(
                WorktreeEntry(
                    path=path,
                    head="1" * 40,
                    branch=checkout.branch,
                    detached=checkout.branch is None,
                )
            )
        return entries

    def add_worktree(
        self,
        path: Path,
        branch: str,
        *,
        create_from: str | None = None,
        track: str | None = None,
    ) -> None:
        self._mutate("add_worktree", path, branch, create_from, track)
        path.mkdir(parents=True, exist_ok=True)
        self.checkouts[path] = FakeCheckout(branch=branch, tracking=track)
        self.local_branches.add(branch)

    def delete_branch(self, branch: str) -> None:
        self._mutate("delete_branch", branch)
        self.local_branches.discard(branch)

    def prune_worktrees(self) -> None:
        self._mutate("prune_worktrees")
        for path in [path for path in self.checkouts if not path.exists()]:
            del self.checkouts[path]


class FakeMux:
    """Programmable ``Multiplexer`` recording every call."""

    def __init__(self, sessions: set[str] | None = None) -> None:
        self.sessions: set[str] = set(sessions or ())
        self.windows: dict[str, list[str]] = {}
        self.options: dict[tuple[str, str], str] = {}
        self.keys: list[tuple[str, str]] = []
        self.attached: list[str] = []
        self.killed: list[str] = []
        self.failing: set[str] = set()

    def _check(self, name: str) -> None:
        if name in self.failing:
            raise ExternalCommandError(f"tmux {name} failed")

    def session_exists(self, name: str) -> bool:
        return name in self.sessions

    def list_sessions(self) -> list[str]:
        return sorted(self.sessions)

    def new_session(self, name: str, cwd: Path, *, window_name: str) -> None:
        self._check("new_session")
        self.sessions.add(name)
        self.windows[name] = [window_name]

    def new_window(self, session: str, name: str, cwd: Path) -> None:
        self._check("new_window")
        self.windows.setdefault(session, []).append(name)

    def send_keys(self, target: str, keys: str) -> None:
        self._check("send_keys")
        self.keys.append((target, keys))

    def set_option(self, session: str, option: str, value: str) -> None:
        self._check("set_option")
        self.options[(session, option)] = value

    def attach(self, session: str) -> None:
        self._check("attach")
        self.attached.append(session)

    def kill_session(self, name: str) -> None:
        self._check("kill_session")
        self.sessions.discard(name)
        self.killed.append(name)


def make_context(
    tmp_path: Path,
    *,
    config: GroveConfig | None = None,
    git: FakeGit | None = None,
    mux: FakeMux | None = None,
) -> WorkspaceContext:
    repo_root = tmp_path / "app"
    repo_root.mkdir(parents=True, exist_ok=True)
    return build_context(
        repo_root,
        config or GroveConfig(),
        git_adapter=git or FakeGit(repo_root),
        mux=mux or FakeMux(),
    )


def add_workspace(
    ctx: WorkspaceContext,
    branch: str,
    **state: object,
) -> Path:
    """Register a checkout for ``branch`` under the context's worktree root."""
    path = ctx.worktree_path(branch)
    ctx.git.add_checkout(path, branch, **state)  # type: ignore[attr-defined]
    return path
