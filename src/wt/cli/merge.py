"""
wt merge: merge the current worktree's branch into the default branch.
"""

import typer

from wt.cli.errors import handle_error
from wt.cli.runtime import emit_path, get_runtime
from wt.core.workflows.merge import merge_worktree


def merge(
    ctx: typer.Context,
    keep: bool = typer.Option(
        False,
        "--keep",
        "-k",
        help="Keep the worktree and branch after merging",
    ),
) -> None:
    """
    Merge current worktree branch into default branch.

    The merge runs in the default branch's worktree. On success the current
    worktree and branch are removed (unless --keep) and the default branch's
    worktree path is printed. On conflict the current path is printed and
    the command exits 1.

    Examples:
        wt merge
        wt m --keep
    """
    rt = get_runtime(ctx)
    try:
        merge_worktree(
            keep=keep,
            git=rt.git,
            config=rt.load_config(),
            cwd=rt.cwd,
            logger=rt.log,
            emit=emit_path,
        )
    except Exception as e:
        handle_error(e, debug=rt.debug)
