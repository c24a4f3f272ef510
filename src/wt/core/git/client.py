"""
Git client for worktree workflows.

GitClient wraps the handful of git subcommands the workflows need. Commands
return ExecResult rather than raising so each workflow decides whether a
failure is fatal or advisory; only the query helpers that cannot produce a
meaningful answer (repository root, current branch, primary worktree) raise.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

from git import Git, GitCommandNotFound, InvalidGitRepositoryError, NoSuchPathError, Repo

from wt.core.errors import DetachedHeadError, NotInRepoError, WorktreeNotFoundError
from wt.core.process import ExecResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Worktree:
    """
    A worktree as reported by ``git worktree list``.

    Attributes:
        path: Absolute path to the worktree directory
        branch: Branch name without refs/heads/ (None when detached)
        is_detached: Whether HEAD is detached in this worktree
    """

    path: Path
    branch: str | None
    is_detached: bool = False


@dataclass(frozen=True)
class AheadBehind:
    """Commit counts of a branch relative to a base branch."""

    ahead: int = 0
    behind: int = 0


@runtime_checkable
class VersionControlClient(Protocol):
    """
    Capabilities the workflows consume from version control.

    GitClient is the production implementation; tests substitute an
    in-memory fake.
    """

    def is_inside_repository(self) -> bool: ...

    def repository_root(self) -> Path: ...

    def repository_name(self) -> str: ...

    def current_branch(self) -> str: ...

    def default_branch(self) -> str: ...

    def branch_exists(self, name: str) -> bool: ...

    def list_worktrees(self) -> list[Worktree]: ...

    def find_worktree_by_branch(self, name: str) -> Worktree | None: ...

    def primary_worktree(self) -> Worktree: ...

    def ahead_behind(self, branch: str, base: str, cwd: Path | None = None) -> AheadBehind: ...

    def uncommitted_count(self, cwd: Path) -> int: ...

    def add_worktree(self, path: Path, branch: str, create_branch: bool) -> ExecResult: ...

    def remove_worktree(self, path: Path, cwd: Path | None = None) -> ExecResult: ...

    def delete_branch(self, name: str, cwd: Path | None = None) -> ExecResult: ...

    def merge(self, branch: str, cwd: Path) -> ExecResult: ...

    def ignored_files(self, cwd: Path) -> list[str]: ...


def parse_worktree_list(output: str) -> list[Worktree]:
    """
    Parse ``git worktree list --porcelain`` output.

    Args:
        output: Porcelain output, one attribute per line, blank line between
            entries

    Returns:
        List of Worktree objects in the order git reported them
    """
    worktrees: list[Worktree] = []
    current: dict[str, str | bool | None] = {}

    def flush() -> None:
        if current.get("path"):
            branch = current.get("branch")
            worktrees.append(
                Worktree(
                    path=Path(str(current["path"])),
                    branch=str(branch) if branch else None,
                    is_detached=bool(current.get("is_detached", False)),
                )
            )

    for line in output.splitlines():
        line = line.strip()
        if not line:
            flush()
            current = {}
            continue

        if line.startswith("worktree "):
            current["path"] = line[len("worktree ") :]
        elif line.startswith("branch "):
            branch = line[len("branch ") :]
            if branch.startswith("refs/heads/"):
                branch = branch[len("refs/heads/") :]
            current["branch"] = branch
            current["is_detached"] = False
        elif line == "detached":
            current["branch"] = None
            current["is_detached"] = True

    # Last entry when there is no trailing blank line
    flush()

    return worktrees


class GitClient:
    """
    Version control client backed by the git CLI through GitPython.

    Example:
        >>> client = GitClient(Path.cwd())
        >>> client.default_branch()
        'main'
        >>> [wt.branch for wt in client.list_worktrees()]
        ['main', 'feature-x']
    """

    def __init__(self, cwd: Path | None = None):
        """
        Initialize the client.

        Args:
            cwd: Directory git commands run in (defaults to current directory)
        """
        self.cwd = cwd or Path.cwd()

    def run(self, *args: str, cwd: Path | None = None) -> ExecResult:
        """
        Run ``git <args>`` and capture the result without raising.

        Args:
            *args: git arguments, e.g. ("worktree", "list")
            cwd: Directory to run in (defaults to the client's cwd)

        Returns:
            ExecResult with stripped stdout/stderr and the exit code
        """
        workdir = str(cwd or self.cwd)
        logger.debug("git %s (cwd=%s)", " ".join(args), workdir)

        try:
            status, stdout, stderr = Git(workdir).execute(
                ["git", *args],
                with_extended_output=True,
                with_exceptions=False,
            )
        except GitCommandNotFound as e:
            # Missing git binary or a working directory that no longer exists
            return ExecResult(stdout="", stderr=str(e), exit_code=127)

        return ExecResult(
            stdout=str(stdout).strip(),
            stderr=str(stderr).strip(),
            exit_code=status if status is not None else 0,
        )

    def is_inside_repository(self) -> bool:
        """Check whether cwd is inside a git working tree."""
        try:
            Repo(self.cwd, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError):
            return False

        result = self.run("rev-parse", "--is-inside-work-tree")
        return result.success and result.stdout == "true"

    def repository_root(self) -> Path:
        """
        Top-level directory of the current worktree.

        Raises:
            NotInRepoError: If cwd is not inside a repository
        """
        result = self.run("rev-parse", "--show-toplevel")
        if not result.success:
            raise NotInRepoError()
        return Path(result.stdout)

    def repository_name(self) -> str:
        """Directory name of the repository root."""
        return self.repository_root().name or "repo"

    def current_branch(self) -> str:
        """
        Branch checked out in the current worktree.

        Raises:
            DetachedHeadError: If HEAD is detached
        """
        result = self.run("symbolic-ref", "--quiet", "--short", "HEAD")
        if not result.success:
            raise DetachedHeadError()
        return result.stdout

    def default_branch(self) -> str:
        """
        Detect the repository's default branch.

        Uses origin/HEAD when set, then falls back to a local main or master
        branch, and finally assumes "main".
        """
        ref = self.run("symbolic-ref", "--quiet", "refs/remotes/origin/HEAD")
        if ref.success and ref.stdout:
            return ref.stdout.replace("refs/remotes/origin/", "", 1)

        for candidate in ("main", "master"):
            if self.branch_exists(candidate):
                return candidate

        return "main"

    def branch_exists(self, name: str) -> bool:
        """Check whether a local branch exists."""
        return self.run("show-ref", "--verify", "--quiet", f"refs/heads/{name}").success

    def list_worktrees(self) -> list[Worktree]:
        """List all worktrees; empty when git cannot report them."""
        result = self.run("worktree", "list", "--porcelain")
        if not result.success:
            return []
        return parse_worktree_list(result.stdout)

    def find_worktree_by_branch(self, name: str) -> Worktree | None:
        """Find the worktree checked out to a branch."""
        return next((wt for wt in self.list_worktrees() if wt.branch == name), None)

    def primary_worktree(self) -> Worktree:
        """
        The worktree checked out to the default branch.

        Raises:
            WorktreeNotFoundError: If no worktree has the default branch
        """
        default = self.default_branch()
        worktree = self.find_worktree_by_branch(default)
        if worktree is None:
            raise WorktreeNotFoundError(default)
        return worktree

    def ahead_behind(self, branch: str, base: str, cwd: Path | None = None) -> AheadBehind:
        """Count commits ``branch`` is ahead of and behind ``base``."""
        result = self.run("rev-list", "--left-right", "--count", f"{base}...{branch}", cwd=cwd)
        if not result.success or not result.stdout:
            return AheadBehind()

        parts = result.stdout.split()
        try:
            behind, ahead = int(parts[0]), int(parts[1])
        except (IndexError, ValueError):
            return AheadBehind()
        return AheadBehind(ahead=ahead, behind=behind)

    def uncommitted_count(self, cwd: Path) -> int:
        """Number of entries in ``git status --porcelain`` for a worktree."""
        result = self.run("status", "--porcelain", cwd=cwd)
        if not result.success or not result.stdout:
            return 0
        return sum(1 for line in result.stdout.splitlines() if line.strip())

    def add_worktree(self, path: Path, branch: str, create_branch: bool) -> ExecResult:
        """
        Add a worktree at ``path``.

        Args:
            path: Destination directory
            branch: Branch to check out
            create_branch: Create ``branch`` as part of the same git call
        """
        if create_branch:
            return self.run("worktree", "add", "-b", branch, str(path))
        return self.run("worktree", "add", str(path), branch)

    def remove_worktree(self, path: Path, cwd: Path | None = None) -> ExecResult:
        """Remove a worktree (refuses dirty worktrees, as git does)."""
        return self.run("worktree", "remove", str(path), cwd=cwd)

    def delete_branch(self, name: str, cwd: Path | None = None) -> ExecResult:
        """Delete a fully merged local branch (``git branch -d``)."""
        return self.run("branch", "-d", name, cwd=cwd)

    def merge(self, branch: str, cwd: Path) -> ExecResult:
        """Merge ``branch`` into whatever is checked out at ``cwd``."""
        return self.run("merge", branch, cwd=cwd)

    def ignored_files(self, cwd: Path) -> list[str]:
        """Relative paths of untracked files matched by ignore rules."""
        result = self.run("ls-files", "--others", "--ignored", "--exclude-standard", cwd=cwd)
        if not result.success:
            return []
        return [line for line in result.stdout.splitlines() if line]
