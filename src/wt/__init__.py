"""
wt: git worktree lifecycle manager.

Create a worktree and branch, merge it back, remove it, and run plugin and
inline hooks around each step.
"""

from wt.core.config.models import WtConfig
from wt.core.hooks.models import HookContext, HookName, WtPlugin

__version__ = "0.1.0"

__all__ = ["HookContext", "HookName", "WtConfig", "WtPlugin", "__version__"]
