"""
wt create: new worktree and branch.
"""

import typer

from wt.cli.errors import handle_error
from wt.cli.runtime import emit_path, get_runtime
from wt.core.workflows.create import create_worktree


def create(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Branch name for the worktree"),
) -> None:
    """
    Create a new worktree with a branch.

    The worktree location comes from the worktree_path setting
    (default: ../{repo}-{branch}). Ignored files such as .env are copied from
    the repository root. Prints the new worktree path on stdout.

    Examples:
        wt create feature-login
        wt c fix-typo
    """
    rt = get_runtime(ctx)
    try:
        create_worktree(
            name,
            git=rt.git,
            config=rt.load_config(),
            cwd=rt.cwd,
            logger=rt.log,
            emit=emit_path,
        )
    except Exception as e:
        handle_error(e, debug=rt.debug)
