"""Terminal multiplexer integration."""

from __future__ import annotations

from pathlib import Path

from .. import log
from ..errors import ExternalCommandError
from ..models import TmuxSection
from ..ports import Multiplexer
from .base import (
    WorkspaceState,
    build_workspace_state,
    status_colour,
    status_left,
    status_style,
    workspace_title,
)
from .tmux import TmuxMultiplexer

__all__ = [
    "TmuxMultiplexer",
    "WorkspaceState",
    "apply_workspace_identity",
    "build_workspace_state",
    "create_session",
    "status_colour",
    "status_left",
    "status_style",
    "window_target",
    "workspace_title",
]


def window_target(session: str, window: str) -> str:
    """Return a tmux target for a named window in a session.

    Example:
        >>> window_target("app-feat+x", "shell")
        '=app-feat+x:shell'
    """
    return f"={session}:{window}"


def apply_workspace_identity(
    mux: Multiplexer,
    session: str,
    state: WorkspaceState,
    *,
    style_override: str | None = None,
) -> None:
    """Style the session status bar for a workspace; failures only warn."""
    try:
        mux.set_option(session, "status-style", status_style(state.branch, style_override))
        mux.set_option(session, "status-left", status_left(state))
        mux.set_option(session, "status-left-length", str(len(state.title) + 4))
    except ExternalCommandError as exc:
        log.warning(f"could not style tmux session {session}: {exc}")


def create_session(
    mux: Multiplexer,
    session: str,
    cwd: Path,
    settings: TmuxSection,
    state: WorkspaceState,
) -> None:
    """Create a detached session with the configured window layout.

    The first configured window is created with the session; the rest are
    added in order. Window commands are typed into their windows.
    """
    first, *rest = settings.windows
    mux.new_session(session, cwd, window_name=first.name)
    for window in rest:
        mux.new_window(session, window.name, cwd)
    for window in settings.windows:
        if window.command:
            mux.send_keys(window_target(session, window.name), window.command)
    apply_workspace_identity(mux, session, state, style_override=settings.status_style)
