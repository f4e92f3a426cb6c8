"""Subprocess plumbing shared by the git and tmux adapters.

Adapters never call ``subprocess`` directly. They build a ``CommandRequest``
and hand it to a ``CommandRunner`` so tests can substitute scripted runners.
"""

from __future__ import annotations

import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Protocol

from . import log
from .errors import ExternalCommandError, PreconditionError


@dataclass(frozen=True)
class CommandRequest:
    """One external command invocation.

    Attributes:
        argv: Executable and arguments.
        cwd: Working directory, or the current one.
        env: Full environment, or the inherited one.
        capture_output: Capture text output; otherwise stdio is inherited.
    """

    argv: tuple[str, ...]
    cwd: Path | None = None
    env: Mapping[str, str] | None = None
    capture_output: bool = True


@dataclass(frozen=True)
class CommandResult:
    argv: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner(Protocol):
    """Execute a request; ``None`` means the executable was not found."""

    def run(self, request: CommandRequest) -> CommandResult | None: ...


def _text(value: object) -> str:
    return value if isinstance(value, str) else ""


class SubprocessCommandRunner:
    """``CommandRunner`` backed by ``subprocess.run``."""

    def run(self, request: CommandRequest) -> CommandResult | None:
        options: dict[str, object] = {
            "cwd": request.cwd,
            "env": request.env,
            "check": False,
        }
        if request.capture_output:
            options.update(capture_output=True, text=True)

        log.trace(f"$ {shlex.join(request.argv)}")
        try:
            completed = subprocess.run(list(request.argv), **options)
        except FileNotFoundError:
            return None
        return CommandResult(
            argv=request.argv,
            returncode=completed.returncode,
            stdout=_text(completed.stdout),
            stderr=_text(completed.stderr),
        )


_DEFAULT_COMMAND_RUNNER: CommandRunner = SubprocessCommandRunner()


def run_with_runner(
    request: CommandRequest, *, runner: CommandRunner | None = None
) -> CommandResult | None:
    return (runner or _DEFAULT_COMMAND_RUNNER).run(request)


def missing_command_detail(argv: tuple[str, ...] | list[str]) -> str:
    """Describe a missing executable.

    Example:
        >>> missing_command_detail(["tmux", "ls"])
        'missing required command: tmux'
    """
    if not argv:
        return "missing required command"
    return f"missing required command: {argv[0]}"


def command_failure_detail(result: CommandResult) -> str:
    """Describe a failed command, preferring its stderr.

    Example:
        >>> command_failure_detail(CommandResult(("git", "branch"), 1, "", "no\\n"))
        'command failed: git branch\\nno'
    """
    output = (result.stderr or result.stdout or "").strip()
    command_text = " ".join(result.argv)
    if output:
        return f"command failed: {command_text}\n{output}"
    return f"command failed: {command_text}"


def capture(
    cmd: list[str],
    *,
    cwd: Path | None = None,
    runner: CommandRunner | None = None,
    missing_hint: str | None = None,
) -> CommandResult:
    """Run a command capturing its output, whatever its exit status.

    Raises:
        PreconditionError: The executable is not installed.
    """
    result = run_with_runner(CommandRequest(argv=tuple(cmd), cwd=cwd), runner=runner)
    if result is None:
        raise PreconditionError(missing_command_detail(cmd), recovery_hint=missing_hint)
    return result


def run_command(
    cmd: list[str],
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
    *,
    runner: CommandRunner | None = None,
) -> None:
    """Run a command attached to the terminal.

    Used for installers and ``tmux attach-session``, whose output belongs to
    the user rather than to grove.

    Raises:
        PreconditionError: The executable is not installed.
        ExternalCommandError: The command exited non-zero.
    """
    result = run_with_runner(
        CommandRequest(argv=tuple(cmd), cwd=cwd, env=env, capture_output=False),
        runner=runner,
    )
    if result is None:
        raise PreconditionError(missing_command_detail(cmd))
    if not result.ok:
        raise ExternalCommandError(
            f"command failed: {' '.join(cmd)} (exit {result.returncode})"
        )


def run_command_detached(
    cmd: list[str],
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> None:
    """Start a command in its own session and return immediately.

    Raises:
        PreconditionError: The executable is not installed.
    """
    log.trace(f"$ {shlex.join(cmd)} &")
    try:
        subprocess.Popen(
            cmd,
            cwd=cwd,
            env=env,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except FileNotFoundError as exc:
        raise PreconditionError(missing_command_detail(cmd)) from exc
