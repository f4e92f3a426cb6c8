"""Implementation for the ``grove switch`` command."""

from __future__ import annotations

from .. import term
from ..context import resolve_context
from ..errors import WorkspaceError
from ..io import say
from ..workspace import find_workspace


def switch_workspace(args: object) -> None:
    """Attach to a workspace session, recreating it when only the worktree exists."""
    branch = str(getattr(args, "branch"))
    ctx = resolve_context()
    workspace = find_workspace(ctx, branch)
    if workspace is None:
        raise WorkspaceError(
            f"no workspace for {branch}",
            recovery_hint=f"create it with 'grove new {branch}'",
        )
    if not ctx.mux.session_exists(workspace.session):
        state = term.build_workspace_state(ctx.project, branch)
        term.create_session(ctx.mux, workspace.session, workspace.path, ctx.config.tmux, state)
        say(f"Recreated tmux session {workspace.session}")
    ctx.mux.attach(workspace.session)
