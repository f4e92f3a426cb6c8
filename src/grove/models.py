"""Pydantic models for grove configuration data."""

from __future__ import annotations

import shlex

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_COPY_PATTERNS = (".env", ".env.*", ".envrc", ".tool-versions")
DEFAULT_EDITOR_PREFERENCE = ("cursor", "code", "zed")


def _strip_or_default(value: object, default: str) -> object:
    if value is None:
        return default
    if isinstance(value, str):
        normalized = value.strip()
        return normalized or default
    return value


class GitSection(BaseModel):
    """Git configuration.

    Attributes:
        path: Git executable path (default ``git``).
        remote: Remote consulted for remote-branch checks (default ``origin``).

    Example:
        >>> GitSection(path=" /usr/bin/git ").path
        '/usr/bin/git'
    """

    model_config = ConfigDict(extra="forbid")

    path: str = "git"
    remote: str = "origin"

    @field_validator("path", mode="before")
    @classmethod
    def normalize_path(cls, value: object) -> object:
        return _strip_or_default(value, "git")

    @field_validator("remote", mode="before")
    @classmethod
    def normalize_remote(cls, value: object) -> object:
        return _strip_or_default(value, "origin")


class WindowConfig(BaseModel):
    """A tmux window created with each workspace session.

    Attributes:
        name: Window name.
        command: Optional command typed into the window after creation.

    Example:
        >>> WindowConfig(name="server", command="npm run dev").command
        'npm run dev'
    """

    model_config = ConfigDict(extra="forbid")

    name: str
    command: str | None = None

    @field_validator("command", mode="before")
    @classmethod
    def normalize_command(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip() or None
        return value


class TmuxSection(BaseModel):
    """tmux configuration.

    Attributes:
        path: tmux executable path.
        session_prefix: Prefix for session names; defaults to the repo name.
        windows: Windows created for a new session, in order.
        status_style: Explicit ``status-style`` value; derived from the branch
            when unset.
    """

    model_config = ConfigDict(extra="forbid")

    path: str = "tmux"
    session_prefix: str | None = None
    windows: list[WindowConfig] = Field(
        default_factory=lambda: [WindowConfig(name="shell")]
    )
    status_style: str | None = None

    @field_validator("path", mode="before")
    @classmethod
    def normalize_path(cls, value: object) -> object:
        return _strip_or_default(value, "tmux")

    @field_validator("session_prefix", "status_style", mode="before")
    @classmethod
    def normalize_optional(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip() or None
        return value

    @field_validator("windows")
    @classmethod
    def require_window(cls, value: list[WindowConfig]) -> list[WindowConfig]:
        if not value:
            raise ValueError("at least one window is required")
        return value


class WorkspaceSection(BaseModel):
    """Workspace layout and bootstrap settings.

    Attributes:
        root: Directory holding worktrees. Relative paths resolve against the
            repository root; ``{repo}`` expands to the repository name.
        copy_files: Glob patterns copied from the main checkout.
        install: Whether dependencies are installed after creation.
    """

    model_config = ConfigDict(extra="forbid")

    root: str = "../{repo}-worktrees"
    copy_files: list[str] = Field(default_factory=lambda: list(DEFAULT_COPY_PATTERNS))
    install: bool = True


class EditorSection(BaseModel):
    """Editor launch settings.

    Attributes:
        command: Explicit editor command; wins over the preference list.
        preference: Editors tried in order when no command is configured.
        terminal: Editors that run inside a tmux window rather than detached.

    Example:
        >>> EditorSection(command="code -n").command
        ['code', '-n']
    """

    model_config = ConfigDict(extra="forbid")

    command: list[str] | None = None
    preference: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EDITOR_PREFERENCE)
    )
    terminal: list[str] = Field(
        default_factory=lambda: ["vi", "vim", "nvim", "nano", "emacs", "hx", "helix", "micro"]
    )

    @field_validator("command", mode="before")
    @classmethod
    def split_command(cls, value: object) -> object:
        if isinstance(value, str):
            parts = shlex.split(value)
            return parts or None
        return value


class GroveConfig(BaseModel):
    """Complete grove configuration.

    Example:
        >>> GroveConfig().git.remote
        'origin'
    """

    model_config = ConfigDict(extra="forbid")

    git: GitSection = Field(default_factory=GitSection)
    tmux: TmuxSection = Field(default_factory=TmuxSection)
    workspace: WorkspaceSection = Field(default_factory=WorkspaceSection)
    editor: EditorSection = Field(default_factory=EditorSection)
