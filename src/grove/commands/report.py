"""Rendering helpers for safety decisions."""

from __future__ import annotations

from .. import log
from ..io import say, say_items
from ..ports import CommitSummary
from ..safety import Blocked, ForcedProceed, SafetyReport


def render_commits(
    commits: tuple[CommitSummary, ...], *, total: int, label: str | None = None
) -> None:
    if not commits:
        return
    where = f" on {label}" if label else ""
    say(f"Unpushed commits{where} (newest first):")
    for commit in commits:
        say(f"  {commit.format()}")
    hidden = total - len(commits)
    if hidden > 0:
        say(f"  ... and {hidden} more")


def render_blocked(report: SafetyReport, decision: Blocked, *, remote: str) -> None:
    say(f"Refusing to remove workspace {report.branch}:")
    say_items(decision.reasons)
    render_commits(decision.commits, total=report.unpushed_commit_count)
    render_remediation(report.branch, remote=remote, single=True)


def render_forced(report: SafetyReport, decision: ForcedProceed) -> None:
    log.warning(f"Forcing removal of {report.branch} despite:")
    for reason in decision.reasons:
        log.warning(f"  - {reason}")
    if decision.commits:
        log.warning("Discarding commits:")
        for commit in decision.commits:
            log.warning(f"  {commit.format()}")


def render_remediation(branch: str | None, *, remote: str, single: bool) -> None:
    if branch:
        push = f"push the branch: git push -u {remote} {branch}"
    else:
        push = f"push each branch: git push -u {remote} <branch>"
    if single:
        rerun = f"grove cleanup {branch or '<branch>'} --force"
    else:
        rerun = "grove cleanup-all --force"
    say("To proceed:")
    say_items(
        ["commit or stash your changes", push, f"or discard everything: {rerun}"]
    )
