"""Status-bar decoration for workspace sessions."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass

# tmux colour names; readable with the default white foreground.
STATUS_PALETTE = (
    "colour24",
    "colour25",
    "colour29",
    "colour54",
    "colour88",
    "colour94",
    "colour130",
    "colour60",
)


@dataclass(frozen=True)
class WorkspaceState:
    """Names shown in a workspace session's status bar."""

    project: str
    branch: str
    title: str


def workspace_title(project: str, branch: str) -> str:
    """Join project and branch as ``project:branch`` for the status bar.

    Example:
        >>> workspace_title("app", "feat/demo")
        'app:feat/demo'
    """
    branch = (branch or "").lstrip("/")
    if project and branch:
        return f"{project}:{branch}"
    return project or branch or "workspace"


def build_workspace_state(project: str, branch: str) -> WorkspaceState:
    """Collect the status-bar names for one workspace."""
    return WorkspaceState(
        project=project or branch,
        branch=branch,
        title=workspace_title(project, branch),
    )


def status_colour(branch: str) -> str:
    """Pick a stable status-bar colour for a branch.

    Example:
        >>> status_colour("main") == status_colour("main")
        True
    """
    digest = hashlib.sha256(branch.encode("utf-8")).digest()
    return STATUS_PALETTE[digest[0] % len(STATUS_PALETTE)]


def status_style(branch: str, override: str | None = None) -> str:
    """Return the tmux ``status-style`` value for a workspace."""
    if override:
        return override
    return f"bg={status_colour(branch)},fg=white"


def status_left(state: WorkspaceState) -> str:
    """Return the tmux ``status-left`` value for a workspace.

    ``#`` is doubled so branch names are not read as tmux formats.

    Example:
        >>> status_left(build_workspace_state("app", "fix/#12"))
        ' app:fix/##12 '
    """
    return f" {state.title.replace('#', '##')} "
