"""Implementation for the ``grove new`` command."""

from __future__ import annotations

from .. import deps, files, log, term
from ..context import resolve_context
from ..editor import launch_editor, resolve_editor
from ..errors import WorkspaceError
from ..io import say
from ..workspace import create_worktree, find_workspace


def new_workspace(args: object) -> None:
    """Create a workspace: worktree, copied files, deps, session, editor.

    Args:
        args: CLI argument object with ``branch``, ``base``, ``install``,
            ``editor`` and ``attach`` fields.

    Example:
        $ grove new feat/login --base develop
    """
    branch = str(getattr(args, "branch"))
    base = getattr(args, "base", None)
    install = bool(getattr(args, "install", True))
    open_editor = bool(getattr(args, "editor", True))
    attach = bool(getattr(args, "attach", True))

    ctx = resolve_context()
    if find_workspace(ctx, branch) is not None:
        raise WorkspaceError(
            f"workspace for {branch} already exists",
            recovery_hint=f"run 'grove switch {branch}'",
        )

    workspace = create_worktree(ctx, branch, base=base)
    say(f"Created worktree {workspace.path}")

    copied = files.copy_project_files(
        ctx.repo_root, workspace.path, ctx.config.workspace.copy_files
    )
    if copied:
        say(f"Copied {len(copied)} local file(s): {', '.join(map(str, copied))}")

    if install and ctx.config.workspace.install:
        plans = deps.install_dependencies(workspace.path)
        if not plans:
            log.debug("No dependencies installed")

    state = term.build_workspace_state(ctx.project, branch)
    if ctx.mux.session_exists(workspace.session):
        log.warning(f"tmux session {workspace.session} already exists; reusing it")
    else:
        term.create_session(ctx.mux, workspace.session, workspace.path, ctx.config.tmux, state)
        say(f"Started tmux session {workspace.session}")

    if open_editor:
        choice = resolve_editor(ctx.config.editor)
        if choice is None:
            log.info("No editor found; set editor.command in the grove config")
        else:
            launch_editor(ctx, workspace, choice)

    if attach:
        ctx.mux.attach(workspace.session)
