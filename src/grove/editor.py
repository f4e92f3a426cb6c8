"""Editor resolution and launch for grove workspaces."""

from __future__ import annotations

import os
import shlex
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Mapping

from . import exec as exec_util
from . import log
from .errors import GroveError
from .models import EditorSection
from .term import window_target

if TYPE_CHECKING:
    from .context import WorkspaceContext
    from .workspace import Workspace

EDITOR_WINDOW = "editor"


@dataclass(frozen=True)
class EditorChoice:
    """Resolved editor command.

    Attributes:
        argv: Command tokens; the workspace path is appended at launch.
        terminal: Runs inside a tmux window instead of detached.
    """

    argv: tuple[str, ...]
    terminal: bool


def _is_terminal_editor(argv: list[str], settings: EditorSection) -> bool:
    return Path(argv[0]).name in set(settings.terminal)


def resolve_editor(
    settings: EditorSection,
    *,
    env: Mapping[str, str] | None = None,
    which: Callable[[str], str | None] = shutil.which,
) -> EditorChoice | None:
    """Pick the editor to open for a new workspace.

    Order: the configured command, the first installed entry of the
    preference list, then ``$VISUAL`` and ``$EDITOR``.

    Example:
        >>> resolve_editor(EditorSection(command=["code", "-n"])).argv
        ('code', '-n')
    """
    env = env if env is not None else os.environ
    if settings.command:
        argv = list(settings.command)
        return EditorChoice(tuple(argv), _is_terminal_editor(argv, settings))
    for candidate in settings.preference:
        if which(candidate):
            return EditorChoice((candidate,), _is_terminal_editor([candidate], settings))
    for variable in ("VISUAL", "EDITOR"):
        raw = env.get(variable, "").strip()
        if not raw:
            continue
        argv = shlex.split(raw)
        if argv:
            return EditorChoice(tuple(argv), _is_terminal_editor(argv, settings))
    return None


def launch_editor(
    ctx: WorkspaceContext, workspace: Workspace, choice: EditorChoice
) -> None:
    """Open ``workspace`` in the chosen editor; failures only warn."""
    argv = [*choice.argv, str(workspace.path)]
    try:
        if choice.terminal:
            ctx.mux.new_window(workspace.session, EDITOR_WINDOW, workspace.path)
            ctx.mux.send_keys(
                window_target(workspace.session, EDITOR_WINDOW), shlex.join(argv)
            )
        else:
            exec_util.run_command_detached(argv, cwd=workspace.path)
    except GroveError as exc:
        log.warning(f"could not open editor {choice.argv[0]}: {exc}")
        return
    log.debug(f"Opened {workspace.path} with {choice.argv[0]}")
