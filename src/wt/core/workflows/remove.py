"""
Remove workflow: delete a worktree and its branch.

The target is picked by branch name or, without one, through the injected
``select`` callable from every non-default worktree. The default branch
worktree can never be removed, with or without ``force``.

Exits that remove nothing because the operator had nothing to pick, backed
out of the picker, or declined the confirmation are quiet: no error and no
emitted path.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from wt.core.config.models import ResolvedConfig
from wt.core.errors import OnDefaultBranchError, WorktreeNotFoundError, WtError
from wt.core.git.client import VersionControlClient, Worktree
from wt.core.hooks.lifecycle import LifecycleRunner
from wt.core.hooks.models import HookEvent, HookName
from wt.core.workflows.common import EmitPath, is_within, require_repository
from wt.utils.logging import WtLogger

SelectWorktree = Callable[[list[Worktree]], "Worktree | None"]
ConfirmRemoval = Callable[[Worktree], bool]


def _pick_target(
    name: str | None,
    git: VersionControlClient,
    default_branch: str,
    select: SelectWorktree,
    log: WtLogger,
) -> Worktree | None:
    if name:
        found = git.find_worktree_by_branch(name)
        if found is None:
            raise WorktreeNotFoundError(name)
        return found

    candidates = [wt for wt in git.list_worktrees() if wt.branch != default_branch]
    if not candidates:
        log.warn("No worktrees available to remove (only default branch exists)")
        return None

    return select(candidates)


def remove_worktree(
    name: str | None,
    *,
    force: bool,
    git: VersionControlClient,
    config: ResolvedConfig,
    cwd: Path,
    logger: WtLogger,
    emit: EmitPath,
    select: SelectWorktree,
    confirm: ConfirmRemoval,
    runner: LifecycleRunner | None = None,
) -> Path | None:
    """
    Remove a worktree and delete its branch.

    Args:
        name: Branch whose worktree to remove; None to pick interactively
        force: Skip the confirmation prompt
        git: Version control client
        config: Resolved configuration
        cwd: Directory the command was started from
        logger: Operator-facing logger
        emit: Receives the path the shell should end up in
        select: Picks one of the candidate worktrees, or None to cancel
        confirm: Asks whether to remove the given worktree
        runner: Lifecycle runner (defaults to one built from ``config``)

    Returns:
        The emitted path, or None when nothing was removed

    Raises:
        WorktreeNotFoundError: If ``name`` has no worktree
        OnDefaultBranchError: If the target is the default branch worktree
        WtError: If git fails to remove the worktree
    """
    require_repository(git)

    repo_root = git.repository_root()
    default_branch = git.default_branch()

    worktree = _pick_target(name, git, default_branch, select, logger)
    if worktree is None:
        return None

    if worktree.branch == default_branch:
        raise OnDefaultBranchError("remove")

    if not force and not confirm(worktree):
        logger.info("Cancelled")
        return None

    primary = git.find_worktree_by_branch(default_branch)
    primary_path = primary.path if primary is not None else None
    runner = runner or LifecycleRunner(config, logger=logger)

    event = HookEvent(
        repo_root=repo_root,
        default_branch=default_branch,
        branch_name=worktree.branch or "",
        worktree_path=worktree.path,
        target_worktree=primary_path,
    )

    runner.run(HookName.BEFORE_REMOVE, event)

    logger.info(f"Removing worktree at {worktree.path}...")
    removed = git.remove_worktree(worktree.path, cwd=primary_path)
    if not removed.success:
        raise WtError(f"Failed to remove worktree: {removed.stderr}")

    if worktree.branch:
        logger.info(f"Deleting branch {worktree.branch}...")
        deleted = git.delete_branch(worktree.branch, cwd=primary_path)
        if not deleted.success:
            logger.warn(f"Could not delete branch: {deleted.stderr}")

    runner.run(HookName.AFTER_REMOVE, event)

    logger.success(f"Removed worktree '{worktree.branch}' at {worktree.path}")

    destination = cwd
    if is_within(cwd, worktree.path):
        destination = primary_path or worktree.path.parent
    emit(destination)
    return destination
