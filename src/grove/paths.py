"""Path helpers for grove configuration files and workspace directories.

Branch names map to worktree directory names with a reversible encoding:
``/`` becomes ``+`` and the two characters that would make the mapping
ambiguous (``+`` and ``%``) are percent-escaped. ``decode_dirname`` is the
exact inverse of ``encode_branch``.

Example:
    >>> encode_branch("feat/login-page")
    'feat+login-page'
    >>> decode_dirname("feat+login-page")
    'feat/login-page'
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from urllib.parse import unquote

from platformdirs import user_config_dir

GROVE_APP_NAME = "grove"
USER_CONFIG_FILENAME = "config.json"
REPO_CONFIG_FILENAME = ".grove.json"

_ENCODE_TABLE = {"%": "%25", "+": "%2B", "/": "+"}
_SESSION_UNSAFE = re.compile(r"[.:]")


def grove_config_dir() -> Path:
    """Return the per-user grove configuration directory.

    Example:
        >>> isinstance(grove_config_dir(), Path)
        True
    """
    return Path(user_config_dir(GROVE_APP_NAME))


def user_config_path() -> Path:
    """Return the per-user configuration file path."""
    return grove_config_dir() / USER_CONFIG_FILENAME


def repo_config_path(repo_root: Path) -> Path:
    """Return the repository-local configuration file path.

    Example:
        >>> repo_config_path(Path("/src/app")).as_posix()
        '/src/app/.grove.json'
    """
    return repo_root / REPO_CONFIG_FILENAME


def encode_branch(branch: str) -> str:
    """Encode a branch name into a single directory-name component.

    Args:
        branch: Git branch name, possibly containing ``/``.

    Returns:
        Directory name without path separators.

    Example:
        >>> encode_branch("fix/a+b")
        'fix+a%2Bb'
    """
    return "".join(_ENCODE_TABLE.get(char, char) for char in branch)


def decode_dirname(name: str) -> str:
    """Decode a directory name produced by ``encode_branch``.

    Example:
        >>> decode_dirname("fix+a%2Bb")
        'fix/a+b'
    """
    return unquote(name.replace("+", "/"))


def worktrees_root(repo_root: Path, template: str) -> Path:
    """Resolve the directory that holds a project's worktrees.

    Args:
        repo_root: Main checkout root.
        template: Configured root; ``{repo}`` expands to the repo name and
            relative paths resolve against ``repo_root``.

    Returns:
        Absolute, normalized path.

    Example:
        >>> worktrees_root(Path("/src/app"), "../{repo}-worktrees").as_posix()
        '/src/app-worktrees'
    """
    expanded = Path(template.replace("{repo}", repo_root.name)).expanduser()
    if not expanded.is_absolute():
        expanded = repo_root / expanded
    return Path(os.path.normpath(str(expanded)))


def worktree_path(root: Path, branch: str) -> Path:
    """Return the worktree directory for a branch.

    Example:
        >>> worktree_path(Path("/wt"), "feat/x").as_posix()
        '/wt/feat+x'
    """
    return root / encode_branch(branch)


def session_name(prefix: str, branch: str) -> str:
    """Return the tmux session name for a branch.

    tmux rejects ``.`` and ``:`` in session names, so both become ``_``.

    Example:
        >>> session_name("app", "release/1.2")
        'app-release+1_2'
    """
    return _SESSION_UNSAFE.sub("_", f"{prefix}-{encode_branch(branch)}")
