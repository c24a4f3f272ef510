"""
Interactive worktree picking and removal confirmation.

Prompts are written to stderr so they never mix with the path on stdout.
Without a TTY nothing is asked: selection returns None and confirmation
returns False, after explaining why.
"""

from __future__ import annotations

import sys

import typer
from rich.text import Text

from wt.cli.errors import err_console
from wt.core.git.client import Worktree
from wt.utils.logging import WtLogger


def _is_interactive() -> bool:
    return sys.stdin.isatty()


def describe(worktree: Worktree) -> str:
    """Branch label for display: the branch name or ``(detached)``."""
    if worktree.is_detached or worktree.branch is None:
        return "(detached)"
    return worktree.branch


def select_worktree(
    candidates: list[Worktree],
    title: str = "Select a worktree",
    logger: WtLogger | None = None,
) -> Worktree | None:
    """
    Let the operator pick one worktree.

    A single candidate is returned without asking. Entering ``q`` or an
    empty answer cancels.

    Returns:
        The chosen worktree, or None when cancelled or non-interactive
    """
    log = logger or WtLogger(console=err_console)
    if not candidates:
        return None

    if len(candidates) == 1:
        return candidates[0]

    for index, worktree in enumerate(candidates, start=1):
        err_console.print(
            Text(f"{index:>2}. {worktree.path}  {describe(worktree)}"),
            soft_wrap=True,
            highlight=False,
        )

    if not _is_interactive():
        log.error("No TTY available for interactive selection")
        return None

    while True:
        answer = typer.prompt(
            f"{title} (1-{len(candidates)}, q to quit)",
            default="",
            show_default=False,
            err=True,
        ).strip()
        if answer in ("", "q", "quit"):
            return None
        if answer.isdigit() and 1 <= int(answer) <= len(candidates):
            return candidates[int(answer) - 1]
        log.warn(f"Invalid choice: {answer}")


def confirm_removal(worktree: Worktree, logger: WtLogger | None = None) -> bool:
    """Ask before removing a worktree; defaults to no."""
    log = logger or WtLogger(console=err_console)
    if not _is_interactive():
        log.error("Cannot confirm in non-interactive mode. Use --force to skip confirmation.")
        return False

    return typer.confirm(
        f"Remove worktree '{describe(worktree)}' at {worktree.path}?",
        default=False,
        err=True,
    )
