"""
Create workflow: new branch + worktree, local files copied, hooks around it.

Sequence:
    1. resolve the destination from the worktree_path template
    2. refuse an existing destination before touching anything
    3. beforeCreate
    4. git worktree add (creating the branch when it does not exist yet)
    5. copy ignored files from the repository root
    6. afterCreate
    7. emit the new worktree path
"""

from __future__ import annotations

import os
from pathlib import Path

from wt.core.config.models import ResolvedConfig
from wt.core.errors import WorktreeExistsError, WtError
from wt.core.files import copy_ignored_files
from wt.core.git.client import VersionControlClient
from wt.core.hooks.lifecycle import LifecycleRunner
from wt.core.hooks.models import HookEvent, HookName
from wt.core.workflows.common import EmitPath, require_repository
from wt.utils.logging import WtLogger


def resolve_worktree_path(
    template: str, repo: str, branch: str, parent: Path | str, cwd: Path
) -> Path:
    """
    Expand a worktree path template into an absolute, normalized path.

    Every occurrence of ``{repo}``, ``{branch}`` and ``{parent}`` is replaced;
    the result is then resolved against ``cwd`` (absolute results are kept
    as they are). Resolving an already absolute result again yields the same
    path.

    Args:
        template: Template such as "../{repo}-{branch}"
        repo: Repository directory name
        branch: Branch the worktree is for
        parent: Directory containing the repository root
        cwd: Directory relative templates are resolved from

    Returns:
        Absolute worktree path

    Example:
        >>> resolve_worktree_path("../{repo}-{branch}", "app", "feat", "/src", Path("/src/app"))
        PosixPath('/src/app-feat')
    """
    expanded = (
        template.replace("{repo}", repo)
        .replace("{branch}", branch)
        .replace("{parent}", str(parent))
    )
    return Path(os.path.normpath(os.path.join(cwd, expanded)))


def create_worktree(
    name: str,
    *,
    git: VersionControlClient,
    config: ResolvedConfig,
    cwd: Path,
    logger: WtLogger,
    emit: EmitPath,
    runner: LifecycleRunner | None = None,
) -> Path:
    """
    Create a worktree for branch ``name``.

    Args:
        name: Branch to create (or check out when it already exists)
        git: Version control client
        config: Resolved configuration
        cwd: Directory the command was started from
        logger: Operator-facing logger
        emit: Receives the new worktree path on success
        runner: Lifecycle runner (defaults to one built from ``config``)

    Returns:
        Path of the new worktree

    Raises:
        NotInRepoError: If cwd is not inside a repository
        WorktreeExistsError: If the destination already exists
        WtError: If git fails to add the worktree
    """
    require_repository(git)
    runner = runner or LifecycleRunner(config, logger=logger)

    repo_root = git.repository_root()
    default_branch = git.default_branch()
    worktree_path = resolve_worktree_path(
        config.settings.worktree_path,
        repo=git.repository_name(),
        branch=name,
        parent=repo_root.parent,
        cwd=cwd,
    )

    if worktree_path.exists():
        raise WorktreeExistsError(worktree_path)

    event = HookEvent(
        repo_root=repo_root,
        default_branch=default_branch,
        branch_name=name,
        worktree_path=worktree_path,
        source_worktree=cwd,
    )

    runner.run(HookName.BEFORE_CREATE, event)

    create_branch = not git.branch_exists(name)
    logger.info(f'Creating worktree for branch "{name}"...')
    result = git.add_worktree(worktree_path, name, create_branch=create_branch)
    if not result.success:
        raise WtError(f"Failed to create worktree: {result.stderr}")

    if config.settings.copy_ignored_files:
        copied = copy_ignored_files(
            git,
            repo_root,
            worktree_path,
            include_dependency_dirs=config.settings.copy_dependency_dirs,
        )
        if copied > 0:
            logger.info(f"Copied {copied} gitignored file(s)")

    runner.run(HookName.AFTER_CREATE, event)

    logger.success(f"Created worktree at {worktree_path}")
    emit(worktree_path)
    return worktree_path
