"""Typed ports for the external tools grove drives.

The safety gate and the command layer only talk to git and tmux through
these protocols. ``grove.git.GitCli`` and ``grove.term.tmux.TmuxMultiplexer``
are the real adapters; tests substitute in-memory fakes.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol


@dataclass(frozen=True)
class CommitSummary:
    """One line of ``git log --oneline`` output."""

    short_sha: str
    subject: str

    def format(self) -> str:
        return f"{self.short_sha} {self.subject}".rstrip()


@dataclass(frozen=True)
class WorktreeEntry:
    """One worktree reported by ``git worktree list --porcelain``."""

    path: Path
    head: str | None
    branch: str | None
    bare: bool = False
    detached: bool = False


class GitPort(Protocol):
    """Read-only queries plus checkout removal used by the safety gate.

    Query methods raise ``GitQueryError`` when git cannot answer; they never
    return a default that would look like a clean checkout.
    """

    def checkout_exists(self, path: Path) -> bool: ...

    def has_uncommitted_changes(self, path: Path) -> bool: ...

    def tracking_ref(self, path: Path, branch: str) -> str | None: ...

    def count_commits(self, path: Path, head: str, *, exclude: str | None = None) -> int: ...

    def recent_commits(
        self,
        path: Path,
        head: str,
        *,
        exclude: str | None = None,
        limit: int = 5,
    ) -> list[CommitSummary]: ...

    def remote_branch_exists(self, path: Path, branch: str) -> bool: ...

    def remove_checkout(self, path: Path, *, force: bool = False) -> None: ...


class WorkspaceGit(GitPort, Protocol):
    """Repository-level git operations used to create, list and delete workspaces."""

    remote: str

    def local_branch_exists(self, branch: str) -> bool: ...

    def default_branch(self) -> str: ...

    def list_worktrees(self) -> list[WorktreeEntry]: ...

    def add_worktree(
        self,
        path: Path,
        branch: str,
        *,
        create_from: str | None = None,
        track: str | None = None,
    ) -> None: ...

    def delete_branch(self, branch: str) -> None: ...

    def prune_worktrees(self) -> None: ...


class Multiplexer(Protocol):
    """Terminal multiplexer session and window operations."""

    def session_exists(self, name: str) -> bool: ...

    def list_sessions(self) -> list[str]: ...

    def new_session(self, name: str, cwd: Path, *, window_name: str) -> None: ...

    def new_window(self, session: str, name: str, cwd: Path) -> None: ...

    def send_keys(self, target: str, keys: str) -> None: ...

    def set_option(self, session: str, option: str, value: str) -> None: ...

    def attach(self, session: str) -> None: ...

    def kill_session(self, name: str) -> None: ...
