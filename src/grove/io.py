"""Plain user-facing output and prompts.

Command results (reason lists, previews, confirmations) go through these
helpers; diagnostics go through ``grove.log``.
"""

from __future__ import annotations

import sys
from typing import Iterable

import questionary

BULLET = "  - "


def _use_questionary() -> bool:
    return sys.stdin.isatty() and sys.stdout.isatty()


def say(message: str) -> None:
    """Print a line to stdout.

    Example:
        >>> say("Removed workspace feat/x")
        Removed workspace feat/x
    """
    print(message)


def say_items(items: Iterable[str], *, bullet: str = BULLET) -> None:
    """Print one bulleted line per item.

    Example:
        >>> say_items(["uncommitted changes", "2 unpushed commit(s)"])
          - uncommitted changes
          - 2 unpushed commit(s)
    """
    for item in items:
        print(f"{bullet}{item}")


def die(message: str, code: int = 1, *, hint: str | None = None) -> None:
    """Print ``error: <message>`` (and an optional hint) to stderr and exit.

    Args:
        message: Error description.
        code: Process exit status.
        hint: Recovery suggestion printed on its own line.
    """
    print(f"error: {message}", file=sys.stderr)
    if hint:
        print(f"hint: {hint}", file=sys.stderr)
    sys.exit(code)


def confirm(text: str, default: bool = False) -> bool:
    """Ask a yes/no question.

    Uses questionary on an interactive terminal and a ``[y/N]`` prompt on
    ``input()`` otherwise. A cancelled questionary prompt counts as "no".
    """
    if _use_questionary():
        return bool(questionary.confirm(text, default=default).ask())
    suffix = "[Y/n]" if default else "[y/N]"
    response = input(f"{text} {suffix}: ").strip().lower()
    if not response:
        return default
    return response in {"y", "yes"}
