"""Workspace discovery, creation and removal."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from . import log, paths
from .errors import GroveError, WorkspaceError

if TYPE_CHECKING:
    from .context import WorkspaceContext


@dataclass(frozen=True)
class Workspace:
    """A branch-specific worktree and its tmux session name."""

    branch: str
    path: Path
    session: str


@dataclass
class RemovalOutcome:
    """Result of removing several workspaces."""

    removed: list[Workspace] = field(default_factory=list)
    failed: list[tuple[Workspace, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


def _resolved(path: Path) -> Path:
    try:
        return path.resolve()
    except OSError:
        return path


def _is_under(path: Path, root: Path) -> bool:
    try:
        _resolved(path).relative_to(_resolved(root))
    except ValueError:
        return False
    return True


def discover_workspaces(ctx: WorkspaceContext) -> list[Workspace]:
    """List workspaces registered with git under the project's worktree root.

    Detached worktrees fall back to the branch decoded from their
    directory name.
    """
    workspaces: list[Workspace] = []
    for entry in ctx.git.list_worktrees():
        if entry.bare or not _is_under(entry.path, ctx.worktrees_root):
            continue
        if _resolved(entry.path) == _resolved(ctx.worktrees_root):
            continue
        branch = entry.branch or paths.decode_dirname(entry.path.name)
        workspaces.append(
            Workspace(branch=branch, path=entry.path, session=ctx.session_name(branch))
        )
    return sorted(workspaces, key=lambda item: item.branch)


def find_workspace(ctx: WorkspaceContext, branch: str) -> Workspace | None:
    """Return the workspace for ``branch`` when git or the filesystem knows it."""
    for workspace in discover_workspaces(ctx):
        if workspace.branch == branch:
            return workspace
    path = ctx.worktree_path(branch)
    if path.exists():
        return Workspace(branch=branch, path=path, session=ctx.session_name(branch))
    return None


def create_worktree(
    ctx: WorkspaceContext, branch: str, *, base: str | None = None
) -> Workspace:
    """Create the worktree for ``branch``.

    An existing local branch is checked out as-is, a branch that only
    exists on the remote is tracked, and anything else is created from
    ``base`` (default: the repository's default branch).

    Raises:
        WorkspaceError: The workspace directory already exists.
        ExternalCommandError: ``git worktree add`` failed.
    """
    path = ctx.worktree_path(branch)
    if path.exists():
        raise WorkspaceError(
            f"workspace for {branch} already exists at {path}",
            recovery_hint=f"run 'grove switch {branch}' instead",
        )
    path.parent.mkdir(parents=True, exist_ok=True)
    git = ctx.git
    if git.local_branch_exists(branch):
        if base:
            log.warning(f"branch {branch} already exists; ignoring --base {base}")
        log.info(f"Checking out existing branch {branch}")
        git.add_worktree(path, branch)
    elif git.remote_branch_exists(ctx.repo_root, branch):
        track = f"{git.remote}/{branch}"
        log.info(f"Tracking remote branch {track}")
        git.add_worktree(path, branch, track=track)
    else:
        start = base or git.default_branch()
        log.info(f"Creating branch {branch} from {start}")
        git.add_worktree(path, branch, create_from=start)
    return Workspace(branch=branch, path=path, session=ctx.session_name(branch))


def remove_workspace(
    ctx: WorkspaceContext,
    workspace: Workspace,
    *,
    force: bool = False,
    keep_branch: bool = False,
) -> None:
    """Tear down one workspace: session, worktree, then local branch.

    Callers must first get a non-blocking decision on ``safety.removal_report``.
    ``force`` passes ``--force`` to ``git worktree remove``; without it git
    re-validates that the checkout is clean.
    """
    if ctx.mux.session_exists(workspace.session):
        log.debug(f"Killing tmux session {workspace.session}")
        ctx.mux.kill_session(workspace.session)
    if workspace.path.exists():
        ctx.git.remove_checkout(workspace.path, force=force)
    else:
        ctx.git.prune_worktrees()
    if not keep_branch and ctx.git.local_branch_exists(workspace.branch):
        ctx.git.delete_branch(workspace.branch)


def remove_workspaces(
    ctx: WorkspaceContext,
    workspaces: list[Workspace],
    *,
    force: bool = False,
    keep_branch: bool = False,
) -> RemovalOutcome:
    """Remove several workspaces; one failure does not stop the rest."""
    outcome = RemovalOutcome()
    for workspace in workspaces:
        try:
            remove_workspace(ctx, workspace, force=force, keep_branch=keep_branch)
        except GroveError as exc:
            log.warning(f"failed to remove {workspace.branch}: {exc}")
            outcome.failed.append((workspace, str(exc)))
            continue
        outcome.removed.append(workspace)
    return outcome
