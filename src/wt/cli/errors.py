"""
Standardized error handling and exit codes for the wt CLI.

Everything here prints to stderr: stdout carries only the path the shell
wrapper should ``cd`` into.
"""

from __future__ import annotations

import os
import traceback
from enum import IntEnum
from typing import NoReturn

import typer
from rich.console import Console
from rich.text import Text

from wt.core.errors import NotInRepoError, WtError

err_console = Console(stderr=True)


class ExitCode(IntEnum):
    """Standard exit codes for wt CLI operations."""

    SUCCESS = 0
    """Operation completed successfully."""

    GENERAL_ERROR = 1
    """Surfaced failure (guard violation, fatal git error, bad config)."""

    USER_ERROR = 2
    """Invalid command-line usage."""

    SIGINT = 130
    """Terminated by SIGINT (Ctrl+C) - Unix standard."""


def print_error(
    problem: str,
    *,
    reason: str | None = None,
    solution: str | None = None,
) -> None:
    """
    Print a standardized error message with optional guidance.

    Args:
        problem: Brief description of what went wrong
        reason: Optional explanation of why it happened
        solution: Optional command or action to fix it

    Example:
        >>> print_error(
        ...     "Not inside a git repository",
        ...     solution="cd into a repository and run the command again",
        ... )
    """
    err_console.print(
        Text.assemble(("error", "red"), " ", problem), soft_wrap=True, highlight=False
    )

    if reason:
        err_console.print(Text(reason, style="dim"), soft_wrap=True, highlight=False)

    if solution:
        err_console.print(
            Text.assemble(("→ Try: ", "cyan"), solution), soft_wrap=True, highlight=False
        )


def print_not_git_repo_error() -> None:
    """Print error when not in a git repository."""
    print_error(
        "Not inside a git repository",
        reason="wt manages worktrees of an existing git repository",
        solution="cd into your repository  # or git init",
    )


def handle_error(exc: BaseException, debug: bool = False) -> NoReturn:
    """
    Report an exception and exit with the matching code.

    WtError exits with its own exit code; anything unexpected exits 1 and
    prints the traceback when ``--debug`` or ``DEBUG`` is set. Typer's own
    exit/abort signals pass through untouched.
    """
    if isinstance(exc, (typer.Exit, typer.Abort)):
        raise exc

    if isinstance(exc, KeyboardInterrupt):
        raise typer.Exit(ExitCode.SIGINT)

    if isinstance(exc, NotInRepoError):
        print_not_git_repo_error()
        raise typer.Exit(exc.exit_code)

    if isinstance(exc, WtError):
        print_error(exc.message)
        raise typer.Exit(exc.exit_code)

    print_error(str(exc) or type(exc).__name__)
    if debug or os.environ.get("DEBUG"):
        err_console.print(
            Text("".join(traceback.format_exception(exc))), soft_wrap=True, highlight=False
        )
    raise typer.Exit(ExitCode.GENERAL_ERROR)
