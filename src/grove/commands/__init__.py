"""Command implementations exposed by the grove CLI."""

from .check import check_workspace
from .cleanup import cleanup_all, cleanup_workspace
from .list import list_workspaces
from .new import new_workspace
from .switch import switch_workspace

__all__ = [
    "check_workspace",
    "cleanup_all",
    "cleanup_workspace",
    "list_workspaces",
    "new_workspace",
    "switch_workspace",
]
