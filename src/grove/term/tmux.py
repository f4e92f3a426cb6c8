"""tmux multiplexer adapter."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

from .. import exec as exec_util
from ..errors import ExternalCommandError


class TmuxMultiplexer:
    """Drive tmux sessions through its command interface."""

    def __init__(
        self,
        *,
        tmux_path: str = "tmux",
        runner: exec_util.CommandRunner | None = None,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self.tmux_path = tmux_path
        self._runner = runner
        self._env = env

    def _capture(self, args: list[str]) -> exec_util.CommandResult:
        return exec_util.capture(
            [self.tmux_path, *args],
            runner=self._runner,
            missing_hint="install tmux or set tmux.path in the grove config",
        )

    def _run(self, args: list[str]) -> None:
        result = self._capture(args)
        if result.returncode != 0:
            raise ExternalCommandError(exec_util.command_failure_detail(result))

    def inside_tmux(self) -> bool:
        env = self._env if self._env is not None else os.environ
        return bool(env.get("TMUX"))

    def session_exists(self, name: str) -> bool:
        return self._capture(["has-session", "-t", f"={name}"]).returncode == 0

    def list_sessions(self) -> list[str]:
        result = self._capture(["list-sessions", "-F", "#{session_name}"])
        if result.returncode != 0:
            # No server running means no sessions.
            return []
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def new_session(self, name: str, cwd: Path, *, window_name: str) -> None:
        self._run(["new-session", "-d", "-s", name, "-c", str(cwd), "-n", window_name])

    def new_window(self, session: str, name: str, cwd: Path) -> None:
        self._run(["new-window", "-d", "-t", f"={session}:", "-n", name, "-c", str(cwd)])

    def send_keys(self, target: str, keys: str) -> None:
        self._run(["send-keys", "-t", target, keys, "Enter"])

    def set_option(self, session: str, option: str, value: str) -> None:
        self._run(["set-option", "-t", f"={session}", option, value])

    def attach(self, session: str) -> None:
        """Switch the current client when inside tmux, otherwise attach."""
        if self.inside_tmux():
            self._run(["switch-client", "-t", f"={session}"])
            return
        exec_util.run_command(
            [self.tmux_path, "attach-session", "-t", f"={session}"],
            runner=self._runner,
        )

    def kill_session(self, name: str) -> None:
        self._run(["kill-session", "-t", f"={name}"])
