"""Configuration loading for grove.

Configuration is merged from three layers, later layers winning key by key:
built-in defaults, the per-user ``config.json`` in the platform config
directory, and the repository's ``.grove.json``. The merged payload is
validated with the Pydantic models in ``grove.models``.

Example:
    >>> from grove.config import merge_payloads
    >>> merge_payloads({"git": {"path": "git"}}, {"git": {"remote": "up"}})
    {'git': {'path': 'git', 'remote': 'up'}}
"""

import json
from pathlib import Path

from pydantic import ValidationError

from . import paths
from .errors import ConfigError
from .models import GroveConfig


def load_json(path: Path) -> dict | None:
    """Load a JSON object from disk.

    Args:
        path: Path to the JSON file.

    Returns:
        Parsed payload, or ``None`` when the file does not exist.

    Raises:
        ConfigError: The file is not valid JSON or not a JSON object.

    Example:
        >>> load_json(Path("missing.json")) is None
        True
    """
    if not path.exists():
        return None
    try:
        with path.open("r", encoding="utf-8") as fh:
            payload = json.load(fh)
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"failed to read {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigError(f"{path} must contain a JSON object")
    return payload


def merge_payloads(base: dict, override: dict) -> dict:
    """Merge ``override`` into ``base`` recursively, returning a new dict."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = merge_payloads(current, value)
        else:
            merged[key] = value
    return merged


def parse_config(payload: dict, *, source: str = "config") -> GroveConfig:
    """Validate a raw payload into ``GroveConfig``.

    Raises:
        ConfigError: Validation failed.

    Example:
        >>> parse_config({"workspace": {"install": False}}).workspace.install
        False
    """
    try:
        return GroveConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(
            f"invalid {source}: {exc}",
            recovery_hint="fix the file or remove the offending keys",
        ) from exc


def load_config(
    repo_root: Path | None = None,
    *,
    user_path: Path | None = None,
) -> GroveConfig:
    """Load and validate the effective configuration.

    Args:
        repo_root: Repository root whose ``.grove.json`` is consulted.
        user_path: Override for the per-user config path.

    Returns:
        Validated ``GroveConfig``.
    """
    payload: dict = {}
    sources: list[str] = []
    layers = [user_path or paths.user_config_path()]
    if repo_root is not None:
        layers.append(paths.repo_config_path(repo_root))
    for layer in layers:
        data = load_json(layer)
        if data is None:
            continue
        payload = merge_payloads(payload, data)
        sources.append(str(layer))
    return parse_config(payload, source=" + ".join(sources) or "config")
