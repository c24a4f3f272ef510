"""
wt list / wt status: worktree overview.

Both commands show every worktree with its branch, path and how it relates
to the default branch. ``list`` prints one compact row per worktree;
``status`` adds a repository header and a boxed table.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from wt.cli.errors import handle_error
from wt.cli.runtime import get_runtime
from wt.core.git.client import VersionControlClient
from wt.core.workflows.common import require_repository

console = Console()


@dataclass(frozen=True)
class WorktreeInfo:
    """One worktree with its position relative to the default branch."""

    branch: str | None
    path: Path
    is_current: bool
    is_default: bool
    ahead: int = 0
    behind: int = 0
    uncommitted: int = 0

    @property
    def label(self) -> str:
        return self.branch if self.branch is not None else "(detached)"


def collect_worktree_info(git: VersionControlClient) -> list[WorktreeInfo]:
    """Query branch, ahead/behind and uncommitted counts for every worktree."""
    require_repository(git)

    default_branch = git.default_branch()
    current = git.repository_root().resolve()

    infos = []
    for wt in git.list_worktrees():
        is_default = wt.branch == default_branch
        ahead = behind = 0
        if wt.branch and not is_default:
            counts = git.ahead_behind(wt.branch, default_branch, cwd=wt.path)
            ahead, behind = counts.ahead, counts.behind

        infos.append(
            WorktreeInfo(
                branch=wt.branch,
                path=wt.path,
                is_current=wt.path.resolve() == current,
                is_default=is_default,
                ahead=ahead,
                behind=behind,
                uncommitted=git.uncommitted_count(wt.path),
            )
        )
    return infos


def format_list_status(info: WorktreeInfo) -> str:
    """Status column for ``wt list``: default marker, divergence, dirty count."""
    parts = []
    if info.is_default:
        parts.append("(default)")

    divergence = []
    if info.ahead > 0:
        divergence.append(f"{info.ahead} ahead")
    if info.behind > 0:
        divergence.append(f"{info.behind} behind")
    if divergence:
        parts.append(", ".join(divergence))

    if info.uncommitted > 0:
        parts.append(f"{info.uncommitted} uncommitted")

    return " ".join(parts)


def format_status(info: WorktreeInfo) -> str:
    """Status column for ``wt status``: modified, ahead, behind or clean."""
    parts = []
    if info.uncommitted > 0:
        parts.append(f"{info.uncommitted} modified")
    if info.ahead > 0:
        parts.append(f"{info.ahead} ahead")
    if info.behind > 0:
        parts.append(f"{info.behind} behind")
    return ", ".join(parts) if parts else "clean"


def list_worktrees(ctx: typer.Context) -> None:
    """
    List all worktrees with status.

    The current worktree is marked with *.

    Examples:
        wt list
        wt l
    """
    rt = get_runtime(ctx)
    try:
        infos = collect_worktree_info(rt.git)
    except Exception as e:
        handle_error(e, debug=rt.debug)

    if not infos:
        console.print("No worktrees found")
        return

    table = Table(box=None, show_header=False, pad_edge=False)
    table.add_column("", no_wrap=True)
    table.add_column("Branch", style="green", no_wrap=True)
    table.add_column("Path", style="cyan")
    table.add_column("Status")

    for info in infos:
        table.add_row(
            "*" if info.is_current else " ",
            escape(info.label),
            escape(str(info.path)),
            format_list_status(info),
        )

    console.print(table)


def status(ctx: typer.Context) -> None:
    """
    Show status of all worktrees.

    Examples:
        wt status
        wt st
    """
    rt = get_runtime(ctx)
    try:
        repo_name = rt.git.repository_name()
        default_branch = rt.git.default_branch()
        infos = collect_worktree_info(rt.git)
    except Exception as e:
        handle_error(e, debug=rt.debug)

    count = len(infos)
    console.print(f"Repository: [bold]{escape(repo_name)}[/bold]")
    console.print(
        f"Default branch: {escape(default_branch)} "
        f"({count} worktree{'' if count == 1 else 's'})"
    )
    console.print()

    if not infos:
        console.print("No worktrees found")
        return

    table = Table()
    table.add_column("Branch", style="green", no_wrap=True)
    table.add_column("Path", style="cyan")
    table.add_column("Status")

    for info in infos:
        marker = "*" if info.is_current else " "
        table.add_row(
            escape(f"{marker}{info.label}"),
            escape(str(info.path)),
            format_status(info),
        )

    console.print(table)
