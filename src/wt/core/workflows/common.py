"""Helpers shared by the worktree workflows."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from wt.core.errors import NotInRepoError
from wt.core.git.client import VersionControlClient

# Receives the single path a workflow hands to the shell wrapper
EmitPath = Callable[[Path], None]


def require_repository(git: VersionControlClient) -> None:
    """
    Fail fast when the working directory is not inside a repository.

    Raises:
        NotInRepoError: If git reports no enclosing working tree
    """
    if not git.is_inside_repository():
        raise NotInRepoError()


def is_within(path: Path, directory: Path) -> bool:
    """Check whether ``path`` is ``directory`` or somewhere below it."""
    try:
        path.resolve().relative_to(directory.resolve())
    except ValueError:
        return False
    return True
