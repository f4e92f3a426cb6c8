"""Implementation for the ``grove list`` command."""

from __future__ import annotations

from rich import box
from rich.table import Table

from .. import log
from ..context import resolve_context
from ..errors import PreconditionError
from ..io import say
from ..safety import removal_report
from ..workspace import discover_workspaces


def _flag(value: bool) -> str:
    return "yes" if value else "no"


def list_workspaces(args: object) -> None:
    """List workspaces for the current project.

    Args:
        args: CLI argument object with a ``status`` flag; when false only
            branch names are printed.

    Example:
        $ grove list
    """
    ctx = resolve_context(need_tmux=False)
    workspaces = discover_workspaces(ctx)
    if not workspaces:
        say("No workspaces found.")
        return

    if not getattr(args, "status", True):
        for workspace in workspaces:
            say(workspace.branch)
        return

    try:
        sessions = set(ctx.mux.list_sessions())
    except PreconditionError:
        sessions = set()
    table = Table(title=f"Workspaces ({ctx.project})", box=box.SIMPLE)
    table.add_column("Branch", no_wrap=True)
    table.add_column("Session", no_wrap=True)
    table.add_column("Dirty", no_wrap=True)
    table.add_column("Unpushed", justify="right")
    table.add_column("Remote", no_wrap=True)
    table.add_column("Path", overflow="fold")
    for workspace in workspaces:
        report = removal_report(ctx, workspace)
        unpushed = str(report.unpushed_commit_count)
        if report.check_errors:
            unpushed = "?"
        table.add_row(
            workspace.branch,
            "active" if workspace.session in sessions else "-",
            _flag(report.has_uncommitted_changes),
            unpushed,
            _flag(report.remote_tracking_exists),
            str(workspace.path),
        )
    log.console().print(table)
