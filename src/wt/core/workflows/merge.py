"""
Merge workflow: fold the current branch into the default branch.

The merge runs inside the primary worktree (the one checked out to the
default branch). When git rejects it, the operator stays where they are and
the conflict is left for them to resolve. On success the current worktree and
its branch are cleaned up unless ``keep`` is set.

Hook order without keep:
    beforeMerge, beforeRemove, afterRemove, afterMerge

Cleanup failures after a successful merge are advisory: they are logged as
warnings and the command still succeeds.
"""

from __future__ import annotations

from pathlib import Path

from wt.core.config.models import ResolvedConfig
from wt.core.errors import MergeConflictError, WtError
from wt.core.git.client import VersionControlClient
from wt.core.hooks.lifecycle import LifecycleRunner
from wt.core.hooks.models import HookEvent, HookName
from wt.core.workflows.common import EmitPath, require_repository
from wt.utils.logging import WtLogger


def merge_worktree(
    *,
    keep: bool,
    git: VersionControlClient,
    config: ResolvedConfig,
    cwd: Path,
    logger: WtLogger,
    emit: EmitPath,
    runner: LifecycleRunner | None = None,
) -> Path:
    """
    Merge the current branch into the default branch.

    Args:
        keep: Keep the worktree and branch after merging
        git: Version control client
        config: Resolved configuration
        cwd: Directory the command was started from
        logger: Operator-facing logger
        emit: Receives the path the shell should end up in
        runner: Lifecycle runner (defaults to one built from ``config``)

    Returns:
        Path of the primary worktree

    Raises:
        WtError: If the current branch is the default branch
        WorktreeNotFoundError: If no worktree has the default branch checked out
        MergeConflictError: If git rejects the merge (``cwd`` is emitted first)
    """
    require_repository(git)

    current_branch = git.current_branch()
    default_branch = git.default_branch()

    if current_branch == default_branch:
        raise WtError(f"Already on {default_branch}, nothing to merge")

    primary = git.primary_worktree()
    worktree_path = git.repository_root()
    runner = runner or LifecycleRunner(config, logger=logger)

    event = HookEvent(
        repo_root=worktree_path,
        default_branch=default_branch,
        branch_name=current_branch,
        worktree_path=worktree_path,
        target_worktree=primary.path,
    )

    runner.run(HookName.BEFORE_MERGE, event)

    logger.info(f'Merging "{current_branch}" into "{default_branch}"...')
    result = git.merge(current_branch, cwd=primary.path)

    if not result.success:
        logger.error("Merge failed!")
        if result.stderr:
            logger.error(result.stderr)
        if result.stdout:
            logger.plain(result.stdout)
        logger.error(f"Resolve conflicts in {primary.path} then commit manually.")
        logger.info(f"You are still in: {cwd}")
        emit(cwd)
        raise MergeConflictError(default_branch, primary.path)

    logger.success(f'Merged "{current_branch}" into "{default_branch}"')

    if keep:
        logger.info("Kept worktree and branch (--keep flag)")
        runner.run(HookName.AFTER_MERGE, event)
        emit(primary.path)
        return primary.path

    runner.run(HookName.BEFORE_REMOVE, event)

    # The worktree being removed may be cwd, so git runs from the primary
    logger.info(f"Removing worktree at {worktree_path}...")
    removed = git.remove_worktree(worktree_path, cwd=primary.path)
    if not removed.success:
        logger.warn(f"Failed to remove worktree: {removed.stderr}")

    deleted = git.delete_branch(current_branch, cwd=primary.path)
    if deleted.success:
        logger.info(f'Deleted branch "{current_branch}"')
    else:
        logger.warn(f'Failed to delete branch "{current_branch}": {deleted.stderr}')

    runner.run(HookName.AFTER_REMOVE, event)
    runner.run(HookName.AFTER_MERGE, event)

    logger.success(f'Merged and cleaned up "{current_branch}"')
    emit(primary.path)
    return primary.path
