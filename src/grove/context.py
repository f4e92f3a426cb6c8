"""Per-invocation workspace context."""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path

from . import config as config_util
from . import git, paths
from .errors import PreconditionError
from .models import GroveConfig
from .ports import Multiplexer, WorkspaceGit
from .term import TmuxMultiplexer


@dataclass(frozen=True)
class WorkspaceContext:
    """Everything an operation needs about the current project.

    Built once at startup and passed explicitly, so operations can run
    against fabricated contexts in tests.
    """

    repo_root: Path
    project: str
    session_prefix: str
    worktrees_root: Path
    config: GroveConfig
    git: WorkspaceGit
    mux: Multiplexer

    def worktree_path(self, branch: str) -> Path:
        return paths.worktree_path(self.worktrees_root, branch)

    def session_name(self, branch: str) -> str:
        return paths.session_name(self.session_prefix, branch)


def require_tool(executable: str) -> None:
    """Fail fast when an external tool is not on ``PATH``."""
    if shutil.which(executable) is None:
        raise PreconditionError(
            f"missing required command: {executable}",
            recovery_hint=f"install {executable} or point grove at it in config",
        )


def build_context(
    repo_root: Path,
    config: GroveConfig,
    *,
    git_adapter: WorkspaceGit | None = None,
    mux: Multiplexer | None = None,
) -> WorkspaceContext:
    """Assemble a context from a known repo root and configuration."""
    project = repo_root.name
    prefix = config.tmux.session_prefix or project
    return WorkspaceContext(
        repo_root=repo_root,
        project=project,
        session_prefix=prefix,
        worktrees_root=paths.worktrees_root(repo_root, config.workspace.root),
        config=config,
        git=git_adapter
        or git.GitCli(repo_root, git_path=config.git.path, remote=config.git.remote),
        mux=mux or TmuxMultiplexer(tmux_path=config.tmux.path),
    )


def resolve_context(start: Path | None = None, *, need_tmux: bool = True) -> WorkspaceContext:
    """Resolve the context for the repository containing ``start``.

    Raises:
        PreconditionError: git or tmux is missing, or ``start`` is not inside
            a git repository.
    """
    start = start or Path.cwd()
    bootstrap = config_util.load_config(None)
    require_tool(bootstrap.git.path)
    repo_root = git.git_repo_root(start, git_path=bootstrap.git.path)
    if repo_root is None:
        raise PreconditionError(
            "command must be run inside a git repository",
            recovery_hint="cd into a repository checkout and retry",
        )
    config = config_util.load_config(repo_root)
    if need_tmux:
        require_tool(config.tmux.path)
    return build_context(repo_root, config)
