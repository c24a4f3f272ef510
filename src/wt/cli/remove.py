"""
wt remove: remove a worktree and delete its branch.
"""

from functools import partial

import typer

from wt.cli.errors import handle_error
from wt.cli.prompts import confirm_removal, select_worktree
from wt.cli.runtime import emit_path, get_runtime
from wt.core.workflows.remove import remove_worktree


def remove(
    ctx: typer.Context,
    name: str | None = typer.Argument(
        None, help="Branch name of the worktree to remove (omit to pick one)"
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Skip confirmation prompt",
    ),
) -> None:
    """
    Remove a worktree.

    Without a branch name, pick from the non-default worktrees. The default
    branch worktree can never be removed.

    Examples:
        wt remove feature-login
        wt rm -f feature-login
        wt rm
    """
    rt = get_runtime(ctx)
    try:
        remove_worktree(
            name,
            force=force,
            git=rt.git,
            config=rt.load_config(),
            cwd=rt.cwd,
            logger=rt.log,
            emit=emit_path,
            select=partial(
                select_worktree, title="Select a worktree to remove", logger=rt.log
            ),
            confirm=partial(confirm_removal, logger=rt.log),
        )
    except Exception as e:
        handle_error(e, debug=rt.debug)
