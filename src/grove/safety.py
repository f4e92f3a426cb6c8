"""Cleanup safety gate.

Removing a workspace deletes its worktree and its local branch. Before that
happens, ``removal_report`` inspects the checkout (or the branch, once the
checkout is gone) and ``decide`` turns the report into a ``Decision``.
``sweep`` applies both across a batch.

A ``Blocked`` decision must never be followed by destructive action. A
``ForcedProceed`` decision allows it but still carries the reasons it
overrode so callers can warn before destroying data.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from . import log
from .context import WorkspaceContext
from .errors import GitQueryError
from .ports import CommitSummary
from .workspace import Workspace

PREVIEW_LIMIT = 5
UNCOMMITTED_REASON = "uncommitted changes"


@dataclass(frozen=True)
class SafetyReport:
    """Version-control state of one workspace at decision time.

    Attributes:
        branch: Workspace branch.
        has_uncommitted_changes: Staged, unstaged or untracked changes exist.
        unpushed_commit_count: Commits not reachable from the tracking ref
            (every commit on the branch when there is no tracking ref).
        remote_tracking_exists: The configured remote has a ref for the branch.
        recent_commits: Newest unpushed commits, newest first.
        check_errors: Queries that failed; any entry counts as an issue.
    """

    branch: str
    has_uncommitted_changes: bool = False
    unpushed_commit_count: int = 0
    remote_tracking_exists: bool = False
    recent_commits: tuple[CommitSummary, ...] = ()
    check_errors: tuple[str, ...] = ()

    @property
    def has_issues(self) -> bool:
        return (
            self.has_uncommitted_changes
            or self.unpushed_commit_count > 0
            or bool(self.check_errors)
        )


@dataclass(frozen=True)
class Proceed:
    """Nothing would be lost."""

    reasons: tuple[str, ...] = ()
    commits: tuple[CommitSummary, ...] = ()


@dataclass(frozen=True)
class Blocked:
    """Data would be lost and no override was given."""

    reasons: tuple[str, ...]
    commits: tuple[CommitSummary, ...] = ()


@dataclass(frozen=True)
class ForcedProceed:
    """Data would be lost but the caller forced the operation."""

    reasons: tuple[str, ...]
    commits: tuple[CommitSummary, ...] = ()


Decision = Proceed | Blocked | ForcedProceed


def build_safety_report(ctx: WorkspaceContext, path: Path, branch: str) -> SafetyReport:
    """Inspect a workspace checkout without modifying it.

    Args:
        ctx: Invocation context providing the git port.
        path: Workspace checkout location.
        branch: Workspace branch name.

    Returns:
        A fresh ``SafetyReport``. A missing checkout yields a clean report.
        Failed status or count queries are recorded in ``check_errors``
        rather than being read as clean.
    """
    git = ctx.git
    if not git.checkout_exists(path):
        log.debug(f"{branch}: no checkout at {path}; nothing to lose")
        return SafetyReport(branch=branch)

    errors: list[str] = []

    try:
        dirty = git.has_uncommitted_changes(path)
    except GitQueryError as exc:
        dirty = False
        errors.append(f"could not verify uncommitted changes: {exc}")

    return _with_commit_state(ctx, path, branch, "HEAD", dirty=dirty, errors=errors)


def build_branch_report(ctx: WorkspaceContext, branch: str) -> SafetyReport:
    """Inspect a local branch from the main checkout.

    Used when a workspace directory is gone but git still has its branch,
    so deleting the branch is the only step that can lose commits.
    """
    return _with_commit_state(
        ctx, ctx.repo_root, branch, f"refs/heads/{branch}", dirty=False, errors=[]
    )


def _with_commit_state(
    ctx: WorkspaceContext,
    cwd: Path,
    branch: str,
    head: str,
    *,
    dirty: bool,
    errors: list[str],
) -> SafetyReport:
    git = ctx.git
    try:
        tracking = git.tracking_ref(cwd, branch)
    except GitQueryError as exc:
        log.debug(f"{branch}: tracking lookup failed ({exc}); counting all commits")
        tracking = None

    unpushed = 0
    commits: list[CommitSummary] = []
    try:
        unpushed = git.count_commits(cwd, head, exclude=tracking)
    except GitQueryError as exc:
        errors.append(f"could not count unpushed commits: {exc}")
    if unpushed > 0:
        try:
            commits = git.recent_commits(
                cwd, head, exclude=tracking, limit=PREVIEW_LIMIT
            )
        except GitQueryError as exc:
            log.debug(f"{branch}: commit preview unavailable ({exc})")

    try:
        remote_exists = git.remote_branch_exists(cwd, branch)
    except GitQueryError as exc:
        log.debug(f"{branch}: remote ref lookup failed ({exc}); assuming absent")
        remote_exists = False

    return SafetyReport(
        branch=branch,
        has_uncommitted_changes=dirty,
        unpushed_commit_count=unpushed,
        remote_tracking_exists=remote_exists,
        recent_commits=tuple(commits[:PREVIEW_LIMIT]),
        check_errors=tuple(errors),
    )


def removal_report(
    ctx: WorkspaceContext, workspace: Workspace, *, keep_branch: bool = False
) -> SafetyReport:
    """Report what removing ``workspace`` would destroy.

    A present checkout is inspected in place. When the checkout is gone and
    the local branch is about to be deleted, the branch itself is inspected
    instead. A branch lookup that fails is treated as an existing branch.
    """
    git = ctx.git
    if keep_branch or git.checkout_exists(workspace.path):
        return build_safety_report(ctx, workspace.path, workspace.branch)
    try:
        branch_exists = git.local_branch_exists(workspace.branch)
    except GitQueryError as exc:
        log.debug(f"{workspace.branch}: branch lookup failed ({exc})")
        branch_exists = True
    if not branch_exists:
        return SafetyReport(branch=workspace.branch)
    log.debug(f"{workspace.branch}: no checkout; inspecting the branch instead")
    return build_branch_report(ctx, workspace.branch)


def safety_reasons(report: SafetyReport) -> tuple[str, ...]:
    """Return the human-readable conditions that make removal unsafe.

    Example:
        >>> safety_reasons(SafetyReport(branch="x", unpushed_commit_count=2,
        ...     remote_tracking_exists=True))
        ('2 unpushed commit(s)',)
    """
    reasons: list[str] = []
    if report.has_uncommitted_changes:
        reasons.append(UNCOMMITTED_REASON)
    if report.unpushed_commit_count > 0:
        reasons.append(f"{report.unpushed_commit_count} unpushed commit(s)")
        if not report.remote_tracking_exists:
            reasons.append(
                f"branch '{report.branch}' has no remote copy; "
                "these commits will be lost forever"
            )
    reasons.extend(report.check_errors)
    return tuple(reasons)


def decide(report: SafetyReport, *, force: bool = False) -> Decision:
    """Map a safety report and the force flag to a ``Decision``.

    Example:
        >>> decide(SafetyReport(branch="x"))
        Proceed(reasons=(), commits=())
        >>> decide(SafetyReport(branch="x", has_uncommitted_changes=True))
        Blocked(reasons=('uncommitted changes',), commits=())
    """
    if not report.has_issues:
        return Proceed()
    reasons = safety_reasons(report)
    if force:
        return ForcedProceed(reasons=reasons, commits=report.recent_commits)
    return Blocked(reasons=reasons, commits=report.recent_commits)


@dataclass(frozen=True)
class SweepItem:
    workspace: Workspace
    report: SafetyReport
    decision: Decision


@dataclass(frozen=True)
class SweepResult:
    """Per-workspace decisions for a batch removal."""

    items: tuple[SweepItem, ...] = field(default_factory=tuple)

    @property
    def blocked(self) -> tuple[SweepItem, ...]:
        return tuple(item for item in self.items if isinstance(item.decision, Blocked))

    @property
    def aborted(self) -> bool:
        """Any blocked item aborts the whole batch."""
        return bool(self.blocked)

    @property
    def reasons(self) -> tuple[str, ...]:
        """Union of blocked reasons, each prefixed with its branch."""
        return tuple(
            f"{item.workspace.branch}: {reason}"
            for item in self.blocked
            for reason in item.decision.reasons
        )

    @property
    def blocked_unpushed_total(self) -> int:
        return sum(item.report.unpushed_commit_count for item in self.blocked)


def sweep(
    ctx: WorkspaceContext,
    workspaces: list[Workspace],
    *,
    force: bool = False,
    keep_branch: bool = False,
) -> SweepResult:
    """Evaluate every workspace with shared force and keep-branch flags."""
    items: list[SweepItem] = []
    for workspace in workspaces:
        report = removal_report(ctx, workspace, keep_branch=keep_branch)
        items.append(
            SweepItem(
                workspace=workspace,
                report=report,
                decision=decide(report, force=force),
            )
        )
    return SweepResult(items=tuple(items))
