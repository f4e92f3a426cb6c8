"""Project-type detection and dependency installation."""

from __future__ import annotations

import json
import shutil
from dataclasses import dataclass
from pathlib import Path

from . import exec as exec_util
from . import log
from .errors import GroveError

NODE_LOCKFILES = (
    ("pnpm-lock.yaml", "pnpm"),
    ("yarn.lock", "yarn"),
    ("bun.lockb", "bun"),
    ("bun.lock", "bun"),
    ("package-lock.json", "npm"),
)


@dataclass(frozen=True)
class InstallPlan:
    """An install command for one detected ecosystem."""

    ecosystem: str
    argv: tuple[str, ...]

    @property
    def display(self) -> str:
        return " ".join(self.argv)


def _package_manager_field(package_json: Path) -> str | None:
    try:
        payload = json.loads(package_json.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return None
    if not isinstance(payload, dict):
        return None
    value = payload.get("packageManager")
    if not isinstance(value, str) or not value.strip():
        return None
    # "pnpm@9.1.0+sha512..." -> "pnpm"
    return value.strip().split("@", 1)[0] or None


def node_package_manager(root: Path) -> str | None:
    """Return the Node package manager for ``root``, if it is a Node project.

    The ``packageManager`` field in ``package.json`` wins over lockfiles;
    ``npm`` is the fallback.

    Example:
        >>> node_package_manager(Path("/nonexistent")) is None
        True
    """
    package_json = root / "package.json"
    if not package_json.is_file():
        return None
    declared = _package_manager_field(package_json)
    if declared:
        return declared
    for lockfile, manager in NODE_LOCKFILES:
        if (root / lockfile).exists():
            return manager
    return "npm"


def _pyproject_declares_poetry(root: Path) -> bool:
    pyproject = root / "pyproject.toml"
    if not pyproject.is_file():
        return False
    try:
        text = pyproject.read_text(encoding="utf-8")
    except OSError:
        return False
    return "[tool.poetry]" in text


def python_install(root: Path) -> tuple[str, ...] | None:
    """Return the Python environment sync command for ``root``, if any."""
    if (root / "uv.lock").exists():
        return ("uv", "sync")
    if (root / "poetry.lock").exists() or _pyproject_declares_poetry(root):
        return ("poetry", "install")
    if (root / "Pipfile").exists():
        return ("pipenv", "install")
    return None


def detect_install_plans(root: Path) -> list[InstallPlan]:
    """Detect every ecosystem in ``root`` and its install command."""
    plans: list[InstallPlan] = []
    manager = node_package_manager(root)
    if manager:
        plans.append(InstallPlan("node", (manager, "install")))
    python_cmd = python_install(root)
    if python_cmd:
        plans.append(InstallPlan("python", python_cmd))
    if (root / "Cargo.toml").exists():
        plans.append(InstallPlan("rust", ("cargo", "fetch")))
    if (root / "go.mod").exists():
        plans.append(InstallPlan("go", ("go", "mod", "download")))
    if (root / "Gemfile").exists():
        plans.append(InstallPlan("ruby", ("bundle", "install")))
    return plans


def install_dependencies(root: Path) -> list[InstallPlan]:
    """Run every detected install command in ``root``.

    Missing tools and failing installs are warnings; the workspace is still
    usable without dependencies.

    Returns:
        Plans that completed successfully.
    """
    completed: list[InstallPlan] = []
    for plan in detect_install_plans(root):
        if shutil.which(plan.argv[0]) is None:
            log.warning(f"{plan.argv[0]} not found; skipping {plan.ecosystem} install")
            continue
        log.info(f"Installing {plan.ecosystem} dependencies: {plan.display}")
        try:
            exec_util.run_command(list(plan.argv), cwd=root)
        except GroveError as exc:
            log.warning(f"{plan.ecosystem} install failed: {exc}")
            continue
        completed.append(plan)
    return completed
