"""
Worktree workflows.

Each workflow takes its collaborators (git client, config, logger, emit
callback) as keyword arguments and raises WtError subclasses for anything the
operator must see. Hooks never interrupt a workflow.
"""

from wt.core.workflows.create import create_worktree, resolve_worktree_path
from wt.core.workflows.merge import merge_worktree
from wt.core.workflows.remove import remove_worktree

__all__ = [
    "create_worktree",
    "merge_worktree",
    "remove_worktree",
    "resolve_worktree_path",
]
