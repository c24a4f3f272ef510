"""
Lifecycle hooks for worktree workflows.

Key Models:
    HookName: The six lifecycle points
    HookEvent: Event data built by a workflow
    HookContext: What hook functions receive (event + logger + exec)
    WtPlugin: A named bundle of hooks

Key Classes:
    HookExecutor: Runs one hook value with failure isolation
    LifecycleRunner: Runs plugin hooks then the inline hook
"""

from wt.core.hooks.executor import HookExecutor
from wt.core.hooks.lifecycle import LifecycleRunner, run_hooks
from wt.core.hooks.models import (
    CommandHook,
    FunctionHook,
    HookContext,
    HookEvent,
    HookFunction,
    HookName,
    HookValue,
    SequenceHook,
    WtPlugin,
    parse_hook_value,
)

__all__ = [
    "CommandHook",
    "FunctionHook",
    "HookContext",
    "HookEvent",
    "HookExecutor",
    "HookFunction",
    "HookName",
    "HookValue",
    "LifecycleRunner",
    "SequenceHook",
    "WtPlugin",
    "parse_hook_value",
    "run_hooks",
]
