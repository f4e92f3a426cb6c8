"""Error contracts for grove operations.

Operations raise ``GroveError`` subclasses on expected failures (missing
tools, bad configuration, unknown workspaces). Programmer bugs raise normal
exceptions. The CLI layer catches ``GroveError`` and exits with a message.
"""

from __future__ import annotations

from typing import Literal

GroveErrorCode = Literal[
    "precondition_failed",
    "config_invalid",
    "workspace_conflict",
    "git_query_failed",
    "external_command_failed",
]


class GroveError(Exception):
    """Expected failure carrying a stable code and an optional recovery hint."""

    def __init__(
        self,
        code: GroveErrorCode,
        message: str,
        *,
        recovery_hint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.recovery_hint = recovery_hint


class PreconditionError(GroveError):
    """Not inside a repository, or a required external tool is missing."""

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__("precondition_failed", message, recovery_hint=recovery_hint)


class ConfigError(GroveError):
    """Configuration file could not be read or validated."""

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__("config_invalid", message, recovery_hint=recovery_hint)


class WorkspaceError(GroveError):
    """Workspace already exists, or does not exist when required."""

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__("workspace_conflict", message, recovery_hint=recovery_hint)


class GitQueryError(GroveError):
    """A read-only git query failed or returned unparseable output."""

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__("git_query_failed", message, recovery_hint=recovery_hint)


class ExternalCommandError(GroveError):
    """A mutating git or tmux command failed."""

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__("external_command_failed", message, recovery_hint=recovery_hint)
