"""
Error types for wt.

Every condition that should stop a command and reach the operator is a
WtError carrying its own exit code. Hook failures are never raised through
these types; the hook executor reports them as warnings instead.
"""

from pathlib import Path


class WtError(Exception):
    """Base exception for surfaced (non-hook) failures."""

    def __init__(self, message: str, exit_code: int = 1):
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code


class NotInRepoError(WtError):
    """Raised when the command runs outside a git repository."""

    def __init__(self) -> None:
        super().__init__("Not inside a git repository")


class DetachedHeadError(WtError):
    """Raised when HEAD does not point at a branch."""

    def __init__(self) -> None:
        super().__init__("Detached HEAD; cannot determine current branch")


class WorktreeExistsError(WtError):
    """Raised when the destination of a new worktree already exists."""

    def __init__(self, path: Path | str):
        super().__init__(f"Worktree already exists at: {path}")
        self.path = Path(path)


class WorktreeNotFoundError(WtError):
    """Raised when no worktree is checked out to the requested branch."""

    def __init__(self, branch: str):
        super().__init__(f"Cannot find worktree for branch: {branch}")
        self.branch = branch


class OnDefaultBranchError(WtError):
    """Raised when an operation targets the default branch worktree."""

    def __init__(self, operation: str):
        super().__init__(f"Cannot {operation} the default branch worktree")
        self.operation = operation


class MergeConflictError(WtError):
    """
    Raised when git rejects a merge.

    Carries the branch and worktree the merge was attempted in so the
    operator knows where to resolve it.
    """

    def __init__(self, target_branch: str, target_worktree: Path | str):
        super().__init__(
            f"Merge failed due to conflicts. Resolve conflicts in {target_worktree} "
            "and commit manually."
        )
        self.target_branch = target_branch
        self.target_worktree = Path(target_worktree)


class ConfigError(WtError):
    """Raised when a config file cannot be imported or fails validation."""

    def __init__(self, message: str, path: Path | None = None):
        if path is not None:
            message = f"Failed to load config from {path}: {message}"
        super().__init__(message)
        self.path = path


class HookCommandError(Exception):
    """A shell-command hook exited non-zero. Only raised inside the executor."""

    def __init__(self, command: str, exit_code: int):
        super().__init__(f'Command "{command}" failed with exit code {exit_code}')
        self.command = command
        self.exit_code = exit_code
