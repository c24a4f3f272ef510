"""
wt CLI - Main application entry point.

This module sets up the Typer CLI application with all subcommands. Each
command has a short alias (create/c, merge/m, remove/rm, list/l, status/st,
search/s) registered as a hidden command.
"""

import typer
from rich.console import Console

from wt import __version__
from wt.cli import create, init_cmd, merge, remove, search, status
from wt.utils.logging import configure_logging

app = typer.Typer(
    name="wt",
    help="A CLI tool for managing git worktrees",
    no_args_is_help=True,
    add_completion=False,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
) -> None:
    """
    wt - git worktree lifecycle manager.

    Successful commands print the path to switch to on stdout; everything
    else goes to stderr. Install the shell wrapper so the shell follows:

        eval "$(wt init zsh)"

    Common Workflows:
        wt create feature-x     # New branch + worktree, cd into it
        wt merge                # Merge into default branch, clean up, cd back
        wt remove feature-x     # Drop a worktree and its branch
        wt list                 # Overview of all worktrees
    """
    configure_logging(debug)

    # Store debug flag in context for subcommands
    ctx.obj = {"debug": debug}


_COMMANDS = [
    ("create", "c", create.create),
    ("merge", "m", merge.merge),
    ("remove", "rm", remove.remove),
    ("list", "l", status.list_worktrees),
    ("status", "st", status.status),
    ("search", "s", search.search),
]

for _name, _alias, _func in _COMMANDS:
    app.command(name=_name)(_func)
    app.command(name=_alias, hidden=True)(_func)

app.command(name="init")(init_cmd.main)


@app.command()
def version() -> None:
    """Show wt version and exit."""
    console.print(f"wt version {__version__}")
    raise typer.Exit(0)


def cli_main() -> None:
    """Main CLI entry point."""
    app()


__all__ = ["app", "cli_main"]
