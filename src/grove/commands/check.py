"""Implementation for the ``grove check`` command."""

from __future__ import annotations

import sys

from ..context import resolve_context
from ..errors import WorkspaceError
from ..io import say, say_items
from ..safety import Proceed, decide, removal_report
from ..workspace import find_workspace
from .report import render_commits


def check_workspace(args: object) -> None:
    """Print the safety report for a workspace without changing anything.

    Exits with status 1 unless removal could proceed without ``--force``.
    """
    branch = str(getattr(args, "branch"))
    ctx = resolve_context(need_tmux=False)
    workspace = find_workspace(ctx, branch)
    if workspace is None:
        raise WorkspaceError(f"no workspace for {branch} at {ctx.worktree_path(branch)}")

    report = removal_report(ctx, workspace)
    say(f"Workspace: {branch}")
    say(f"Path: {workspace.path}")
    say(f"Uncommitted changes: {'yes' if report.has_uncommitted_changes else 'no'}")
    say(f"Unpushed commits: {report.unpushed_commit_count}")
    say(f"Remote branch: {'yes' if report.remote_tracking_exists else 'no'}")
    for error in report.check_errors:
        say(f"Check failed: {error}")
    render_commits(report.recent_commits, total=report.unpushed_commit_count)

    decision = decide(report)
    if isinstance(decision, Proceed):
        say("Safe to remove.")
        return
    say("Removal would be blocked:")
    say_items(decision.reasons)
    sys.exit(1)
