"""Git adapter used by the grove CLI."""

from __future__ import annotations

from pathlib import Path

from . import exec as exec_util
from .errors import ExternalCommandError, GitQueryError
from .ports import CommitSummary, WorktreeEntry

GIT_MISSING_HINT = "install git or set git.path in the grove config"


def git_command(args: list[str], *, git_path: str | None = None) -> list[str]:
    """Build a git command using an optional executable path.

    Example:
        >>> git_command(["status"], git_path=" /opt/git ")
        ['/opt/git', 'status']
    """
    resolved = git_path.strip() if isinstance(git_path, str) else ""
    if not resolved:
        resolved = "git"
    return [resolved, *args]


def _capture(
    cmd: list[str], *, runner: exec_util.CommandRunner | None = None
) -> exec_util.CommandResult:
    return exec_util.capture(cmd, runner=runner, missing_hint=GIT_MISSING_HINT)


def git_repo_root(
    start: Path,
    *,
    git_path: str | None = None,
    runner: exec_util.CommandRunner | None = None,
) -> Path | None:
    """Return the main checkout root for any path inside a repository.

    When ``start`` is inside a linked worktree, the root of the main
    checkout (the one owning the shared ``.git`` directory) is returned.

    Args:
        start: Directory to search from.

    Returns:
        Repo root path or ``None`` if not inside a git repository.
    """
    toplevel = _capture(
        git_command(["-C", str(start), "rev-parse", "--show-toplevel"], git_path=git_path),
        runner=runner,
    )
    if toplevel.returncode != 0 or not toplevel.stdout.strip():
        return None
    worktree_root = Path(toplevel.stdout.strip())
    common = _capture(
        git_command(
            [
                "-C",
                str(start),
                "rev-parse",
                "--path-format=absolute",
                "--git-common-dir",
            ],
            git_path=git_path,
        ),
        runner=runner,
    )
    if common.returncode == 0:
        common_dir = Path(common.stdout.strip())
        if common_dir.name == ".git":
            return common_dir.parent
    return worktree_root


def parse_worktree_porcelain(output: str) -> list[WorktreeEntry]:
    """Parse ``git worktree list --porcelain`` output.

    Example:
        >>> entries = parse_worktree_porcelain(
        ...     "worktree /r\\nHEAD abc\\nbranch refs/heads/main\\n\\n"
        ... )
        >>> entries[0].branch
        'main'
    """
    entries: list[WorktreeEntry] = []
    block: dict[str, str] = {}

    def flush() -> None:
        if "worktree" not in block:
            return
        branch_ref = block.get("branch")
        branch = None
        if branch_ref and branch_ref.startswith("refs/heads/"):
            branch = branch_ref[len("refs/heads/") :]
        entries.append(
            WorktreeEntry(
                path=Path(block["worktree"]),
                head=block.get("HEAD"),
                branch=branch,
                bare="bare" in block,
                detached="detached" in block,
            )
        )

    for line in output.splitlines():
        if not line.strip():
            flush()
            block = {}
            continue
        key, _, value = line.partition(" ")
        block[key] = value.strip()
    flush()
    return entries


def parse_oneline_log(output: str) -> list[CommitSummary]:
    """Parse ``%h<TAB>%s`` formatted log lines.

    Example:
        >>> parse_oneline_log("abc123\\tAdd feature\\n")
        [CommitSummary(short_sha='abc123', subject='Add feature')]
    """
    commits: list[CommitSummary] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        short_sha, _, subject = line.partition("\t")
        commits.append(CommitSummary(short_sha=short_sha.strip(), subject=subject.strip()))
    return commits


class GitCli:
    """Git adapter bound to one repository.

    Attributes:
        repo_root: Main checkout root; repository-level commands run here.
        git_path: Git executable.
        remote: Remote consulted for remote-branch checks.
    """

    def __init__(
        self,
        repo_root: Path,
        *,
        git_path: str = "git",
        remote: str = "origin",
        runner: exec_util.CommandRunner | None = None,
    ) -> None:
        self.repo_root = repo_root
        self.git_path = git_path
        self.remote = remote
        self._runner = runner

    def _run(self, cwd: Path, args: list[str]) -> exec_util.CommandResult:
        return _capture(
            git_command(["-C", str(cwd), *args], git_path=self.git_path),
            runner=self._runner,
        )

    def _query(self, cwd: Path, args: list[str]) -> str:
        result = self._run(cwd, args)
        if result.returncode != 0:
            raise GitQueryError(exec_util.command_failure_detail(result))
        return result.stdout

    def _mutate(self, cwd: Path, args: list[str]) -> None:
        result = self._run(cwd, args)
        if result.returncode != 0:
            raise ExternalCommandError(exec_util.command_failure_detail(result))

    def _ref_exists(self, cwd: Path, ref: str) -> bool:
        result = self._run(cwd, ["rev-parse", "--verify", "--quiet", ref])
        if result.returncode == 0:
            return True
        if result.returncode == 1:
            return False
        raise GitQueryError(exec_util.command_failure_detail(result))

    def checkout_exists(self, path: Path) -> bool:
        return path.exists()

    def has_uncommitted_changes(self, path: Path) -> bool:
        output = self._query(path, ["status", "--porcelain", "--untracked-files=all"])
        return any(line.strip() for line in output.splitlines())

    def tracking_ref(self, path: Path, branch: str) -> str | None:
        # git exits non-zero both for "no upstream" and "upstream gone".
        result = self._run(
            path,
            ["rev-parse", "--abbrev-ref", "--symbolic-full-name", f"{branch}@{{upstream}}"],
        )
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def count_commits(self, path: Path, head: str, *, exclude: str | None = None) -> int:
        revisions = f"{exclude}..{head}" if exclude else head
        output = self._query(path, ["rev-list", "--count", revisions]).strip()
        try:
            return int(output)
        except ValueError as exc:
            raise GitQueryError(f"unexpected rev-list output: {output!r}") from exc

    def recent_commits(
        self,
        path: Path,
        head: str,
        *,
        exclude: str | None = None,
        limit: int = 5,
    ) -> list[CommitSummary]:
        args = ["log", "--format=%h%x09%s", f"--max-count={limit}", head]
        if exclude:
            args.append(f"^{exclude}")
        return parse_oneline_log(self._query(path, args))

    def remote_branch_exists(self, path: Path, branch: str) -> bool:
        return self._ref_exists(path, f"refs/remotes/{self.remote}/{branch}")

    def remove_checkout(self, path: Path, *, force: bool = False) -> None:
        args = ["worktree", "remove"]
        if force:
            args.append("--force")
        args.append(str(path))
        self._mutate(self.repo_root, args)

    def local_branch_exists(self, branch: str) -> bool:
        return self._ref_exists(self.repo_root, f"refs/heads/{branch}")

    def default_branch(self) -> str:
        """Resolve the default branch: remote HEAD, then main/master, then HEAD."""
        result = self._run(
            self.repo_root, ["symbolic-ref", f"refs/remotes/{self.remote}/HEAD"]
        )
        prefix = f"refs/remotes/{self.remote}/"
        if result.returncode == 0:
            ref = result.stdout.strip()
            if ref.startswith(prefix) and ref[len(prefix) :]:
                return ref[len(prefix) :]
        for candidate in ("main", "master"):
            if self.local_branch_exists(candidate):
                return candidate
        current = self._run(self.repo_root, ["rev-parse", "--abbrev-ref", "HEAD"])
        branch = current.stdout.strip() if current.returncode == 0 else ""
        if branch and branch != "HEAD":
            return branch
        return "main"

    def list_worktrees(self) -> list[WorktreeEntry]:
        output = self._query(self.repo_root, ["worktree", "list", "--porcelain"])
        return parse_worktree_porcelain(output)

    def add_worktree(
        self,
        path: Path,
        branch: str,
        *,
        create_from: str | None = None,
        track: str | None = None,
    ) -> None:
        args = ["worktree", "add"]
        if track:
            args.extend(["--track", "-b", branch, str(path), track])
        elif create_from:
            args.extend(["-b", branch, str(path), create_from])
        else:
            args.extend([str(path), branch])
        self._mutate(self.repo_root, args)

    def delete_branch(self, branch: str) -> None:
        self._mutate(self.repo_root, ["branch", "-D", branch])

    def prune_worktrees(self) -> None:
        self._mutate(self.repo_root, ["worktree", "prune"])
