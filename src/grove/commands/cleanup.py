"""Implementation for the ``grove cleanup`` and ``grove cleanup-all`` commands."""

from __future__ import annotations

import sys

from .. import log
from ..context import resolve_context
from ..errors import GroveError
from ..io import confirm, die, say, say_items
from ..safety import Blocked, ForcedProceed, decide, removal_report, sweep
from ..workspace import (
    discover_workspaces,
    find_workspace,
    remove_workspace,
    remove_workspaces,
)
from .report import render_blocked, render_commits, render_forced, render_remediation


def cleanup_workspace(args: object) -> None:
    """Remove one workspace after the safety gate allows it.

    Args:
        args: CLI argument object with ``branch``, ``force`` and
            ``keep_branch`` fields.

    Exits with status 1 when the gate blocks removal.

    Example:
        $ grove cleanup feat/login --force
    """
    branch = str(getattr(args, "branch"))
    force = bool(getattr(args, "force", False))
    keep_branch = bool(getattr(args, "keep_branch", False))

    ctx = resolve_context()
    workspace = find_workspace(ctx, branch)
    if workspace is None:
        say(f"No workspace found for {branch}; nothing to clean up.")
        session = ctx.session_name(branch)
        if ctx.mux.session_exists(session):
            ctx.mux.kill_session(session)
            say(f"Killed orphaned tmux session {session}.")
        return

    report = removal_report(ctx, workspace, keep_branch=keep_branch)
    decision = decide(report, force=force)
    if isinstance(decision, Blocked):
        render_blocked(report, decision, remote=ctx.git.remote)
        sys.exit(1)
    if isinstance(decision, ForcedProceed):
        render_forced(report, decision)

    try:
        remove_workspace(
            ctx,
            workspace,
            force=isinstance(decision, ForcedProceed),
            keep_branch=keep_branch,
        )
    except GroveError as exc:
        die(f"failed to remove workspace {branch}: {exc}")
    log.success(f"Removed workspace {branch}")


def cleanup_all(args: object) -> None:
    """Remove every workspace of the project, all-or-nothing on safety.

    Args:
        args: CLI argument object with ``force``, ``keep_branch`` and ``yes``
            fields.

    Exits with status 1 when any workspace blocks the batch; nothing is
    removed in that case. Individual removal failures are warnings.
    """
    force = bool(getattr(args, "force", False))
    keep_branch = bool(getattr(args, "keep_branch", False))
    yes = bool(getattr(args, "yes", False))

    ctx = resolve_context()
    workspaces = discover_workspaces(ctx)
    if not workspaces:
        say("No workspaces found.")
        return

    result = sweep(ctx, workspaces, force=force, keep_branch=keep_branch)
    if result.aborted:
        say(
            f"Refusing to remove {len(workspaces)} workspace(s); "
            f"{len(result.blocked)} would lose data:"
        )
        say_items(result.reasons)
        for item in result.blocked:
            render_commits(
                item.decision.commits,
                total=item.report.unpushed_commit_count,
                label=item.workspace.branch,
            )
        if result.blocked_unpushed_total:
            say(
                f"{result.blocked_unpushed_total} unpushed commit(s) "
                "across blocked workspaces."
            )
        render_remediation(None, remote=ctx.git.remote, single=False)
        sys.exit(1)

    for item in result.items:
        if isinstance(item.decision, ForcedProceed):
            render_forced(item.report, item.decision)

    say(f"Workspaces to remove: {len(workspaces)}")
    say_items(f"{workspace.branch} ({workspace.path})" for workspace in workspaces)
    if not yes and not confirm("Remove these workspaces?", default=False):
        say("Cancelled.")
        return

    outcome = remove_workspaces(ctx, workspaces, force=force, keep_branch=keep_branch)
    for workspace in outcome.removed:
        log.success(f"Removed workspace {workspace.branch}")
    if not outcome.ok:
        log.warning(
            f"{len(outcome.failed)} workspace(s) could not be removed: "
            + ", ".join(workspace.branch for workspace, _ in outcome.failed)
        )
