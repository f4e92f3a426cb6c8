"""Typer application for the ``grove`` command."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Callable, Optional

import typer

from . import __version__
from . import log as grove_log
from .commands import check as check_cmd
from .commands import cleanup as cleanup_cmd
from .commands import list as list_cmd
from .commands import new as new_cmd
from .commands import switch as switch_cmd
from .errors import GroveError
from .io import die

app = typer.Typer(
    name="grove",
    help="Per-branch workspaces: a git worktree plus a tmux session.",
    no_args_is_help=True,
    add_completion=False,
)


def _validate_log_level(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    if value.strip().lower() not in grove_log.LEVEL_NAMES + ("warn",):
        raise typer.BadParameter(
            f"expected one of: {', '.join(grove_log.LEVEL_NAMES)}",
            param_hint="--log-level",
        )
    return value


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"grove {__version__}")
        raise typer.Exit()


def _run(command: Callable[[object], None], **fields: object) -> None:
    try:
        command(SimpleNamespace(**fields))
    except GroveError as exc:
        die(str(exc), hint=exc.recovery_hint)


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Log level: trace, debug, info, success, warning, error.",
        callback=_validate_log_level,
    ),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Manage per-branch development workspaces."""
    if log_level is not None:
        grove_log.set_level(log_level)
    if no_color:
        grove_log.set_no_color(True)


@app.command("new")
def new(
    branch: str = typer.Argument(..., help="Branch to create or check out."),
    base: Optional[str] = typer.Option(
        None, "--base", "-b", help="Start point for a new branch."
    ),
    install: bool = typer.Option(
        True, "--install/--no-install", help="Install detected dependencies."
    ),
    editor: bool = typer.Option(True, "--editor/--no-editor", help="Open an editor."),
    attach: bool = typer.Option(
        True, "--attach/--no-attach", help="Attach to the session when done."
    ),
) -> None:
    """Create a workspace for BRANCH."""
    _run(
        new_cmd.new_workspace,
        branch=branch,
        base=base,
        install=install,
        editor=editor,
        attach=attach,
    )


@app.command("switch")
def switch(branch: str = typer.Argument(..., help="Workspace branch.")) -> None:
    """Attach to the workspace for BRANCH."""
    _run(switch_cmd.switch_workspace, branch=branch)


@app.command("list")
def list_(
    status: bool = typer.Option(
        True, "--status/--names-only", help="Include safety status columns."
    ),
) -> None:
    """List workspaces for the current repository."""
    _run(list_cmd.list_workspaces, status=status)


@app.command("check")
def check(branch: str = typer.Argument(..., help="Workspace branch.")) -> None:
    """Report whether removing BRANCH's workspace would lose work."""
    _run(check_cmd.check_workspace, branch=branch)


@app.command("cleanup")
def cleanup(
    branch: str = typer.Argument(..., help="Workspace branch."),
    force: bool = typer.Option(
        False, "--force", "-f", help="Remove even if work would be lost."
    ),
    keep_branch: bool = typer.Option(
        False, "--keep-branch", help="Keep the local branch."
    ),
) -> None:
    """Remove the workspace for BRANCH if nothing would be lost."""
    _run(
        cleanup_cmd.cleanup_workspace,
        branch=branch,
        force=force,
        keep_branch=keep_branch,
    )


@app.command("cleanup-all")
def cleanup_all(
    force: bool = typer.Option(
        False, "--force", "-f", help="Remove even if work would be lost."
    ),
    keep_branch: bool = typer.Option(
        False, "--keep-branch", help="Keep the local branches."
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
) -> None:
    """Remove every workspace, or none if any would lose work."""
    _run(
        cleanup_cmd.cleanup_all,
        force=force,
        keep_branch=keep_branch,
        yes=yes,
    )


if __name__ == "__main__":
    app()
