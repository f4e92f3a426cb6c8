"""Copy local-only project files into new worktrees."""

from __future__ import annotations

import shutil
from pathlib import Path

from . import log


def matching_files(source_root: Path, patterns: list[str]) -> list[Path]:
    """Return files under ``source_root`` matching any glob, relative and sorted.

    Paths inside ``.git`` are never returned.
    """
    found: set[Path] = set()
    for pattern in patterns:
        pattern = pattern.strip()
        if not pattern:
            continue
        for candidate in source_root.glob(pattern):
            if not candidate.is_file():
                continue
            relative = candidate.relative_to(source_root)
            if relative.parts and relative.parts[0] == ".git":
                continue
            found.add(relative)
    return sorted(found)


def copy_project_files(
    source_root: Path, dest_root: Path, patterns: list[str]
) -> list[Path]:
    """Copy files matching ``patterns`` that the destination lacks.

    Existing destination files are left untouched, so tracked files that
    git already checked out are never overwritten.

    Args:
        source_root: Main checkout root.
        dest_root: New worktree root.
        patterns: Glob patterns relative to ``source_root``.

    Returns:
        Relative paths that were copied.
    """
    copied: list[Path] = []
    for relative in matching_files(source_root, patterns):
        target = dest_root / relative
        if target.exists() or target.is_symlink():
            continue
        target.parent.mkdir(parents=True, exist_ok=True)
        try:
            shutil.copy2(source_root / relative, target)
        except OSError as exc:
            log.warning(f"could not copy {relative}: {exc}")
            continue
        log.debug(f"Copied {relative}")
        copied.append(relative)
    return copied
