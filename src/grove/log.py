"""Leveled terminal diagnostics for grove.

The threshold comes from ``--log-level`` or ``GROVE_LOG_LEVEL`` (default
``info``). Warnings and errors go to stderr; everything else to stdout.
Colors are dropped under ``--no-color``, ``NO_COLOR`` or ``GROVE_NO_COLOR``.
"""

from __future__ import annotations

import os
import sys
from enum import IntEnum

from rich.console import Console
from rich.text import Text

LEVEL_ENV_VAR = "GROVE_LOG_LEVEL"
NO_COLOR_ENV_VARS = ("NO_COLOR", "GROVE_NO_COLOR")


class LogLevel(IntEnum):
    TRACE = 10
    DEBUG = 20
    INFO = 30
    SUCCESS = 35
    WARNING = 40
    ERROR = 50


LEVEL_NAMES = tuple(level.name.lower() for level in LogLevel)
_LEVEL_BY_NAME = {level.name.lower(): level for level in LogLevel}
_LEVEL_BY_NAME["warn"] = LogLevel.WARNING

_LEVEL_STYLES = {
    LogLevel.TRACE: "dim",
    LogLevel.DEBUG: "cyan",
    LogLevel.SUCCESS: "green",
    LogLevel.WARNING: "yellow",
    LogLevel.ERROR: "bold red",
}

_configured_level: LogLevel | None = None
_no_color_override: bool | None = None


def parse_level(value: str | None) -> LogLevel:
    """Map a level name to a ``LogLevel``; unknown or blank names mean INFO.

    Example:
        >>> parse_level(" Warn ").name
        'WARNING'
        >>> parse_level("chatty").name
        'INFO'
    """
    return _LEVEL_BY_NAME.get((value or "").strip().lower(), LogLevel.INFO)


def configured_level() -> LogLevel:
    global _configured_level
    if _configured_level is None:
        _configured_level = parse_level(os.environ.get(LEVEL_ENV_VAR))
    return _configured_level


def set_level(value: str | None) -> None:
    global _configured_level
    _configured_level = parse_level(value)


def set_no_color(value: bool) -> None:
    """Force colors off, or with ``False`` leave it to the environment."""
    global _no_color_override
    _no_color_override = True if value else None


def is_enabled(level: LogLevel) -> bool:
    return level >= configured_level()


def _colors_disabled() -> bool:
    if _no_color_override is not None:
        return _no_color_override
    return any(os.environ.get(name) for name in NO_COLOR_ENV_VARS)


def console(*, stderr: bool = False) -> Console:
    """Build a console on stdout (or stderr) honoring the color settings."""
    return Console(
        file=sys.stderr if stderr else sys.stdout,
        soft_wrap=True,
        highlight=False,
        no_color=_colors_disabled(),
    )


def emit(level: LogLevel, message: str, *, style: str | None = None) -> None:
    if not is_enabled(level):
        return
    text = Text(message, style=style or _LEVEL_STYLES.get(level, ""))
    console(stderr=level >= LogLevel.WARNING).print(text)


def trace(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.TRACE, message, style=style)


def debug(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.DEBUG, message, style=style)


def info(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.INFO, message, style=style)


def success(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.SUCCESS, message, style=style)


def warning(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.WARNING, message, style=style)


def error(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.ERROR, message, style=style)
