"""
wt search: jump to another worktree.
"""

import typer

from wt.cli.errors import handle_error
from wt.cli.prompts import select_worktree
from wt.cli.runtime import emit_path, get_runtime
from wt.core.workflows.common import require_repository


def search(ctx: typer.Context) -> None:
    """
    Interactively select and switch between worktrees.

    Prints the chosen worktree path on stdout; with only one worktree it is
    printed directly.

    Examples:
        wt search
        wt s
    """
    rt = get_runtime(ctx)
    try:
        require_repository(rt.git)
        worktrees = rt.git.list_worktrees()
    except Exception as e:
        handle_error(e, debug=rt.debug)

    if not worktrees:
        rt.log.warn("No worktrees found")
        return

    selected = select_worktree(worktrees, logger=rt.log)
    if selected is not None:
        emit_path(selected.path)
