"""
Git access for wt.

Example:
    >>> from wt.core.git import GitClient
    >>> client = GitClient()
    >>> client.primary_worktree().path
    PosixPath('/home/user/proj')
"""

from .client import (
    AheadBehind,
    GitClient,
    VersionControlClient,
    Worktree,
    parse_worktree_list,
)

__all__ = [
    "AheadBehind",
    "GitClient",
    "VersionControlClient",
    "Worktree",
    "parse_worktree_list",
]
