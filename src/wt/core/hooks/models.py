"""
Hook data models for wt.

Lifecycle hooks fire around the three worktree operations:
- beforeCreate / afterCreate: around ``git worktree add``
- beforeMerge / afterMerge: around merging a branch into the primary worktree
- beforeRemove / afterRemove: around worktree removal and branch deletion

A hook value is a function, a shell command string, or a list mixing both.
Config values are normalized into a closed set of variants (FunctionHook,
CommandHook, SequenceHook) so the executor dispatches on exactly three shapes.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from wt.core.process import ExecResult
    from wt.utils.logging import WtLogger


class HookName(str, Enum):
    """The six lifecycle points at which hooks run."""

    BEFORE_CREATE = "beforeCreate"
    AFTER_CREATE = "afterCreate"
    BEFORE_MERGE = "beforeMerge"
    AFTER_MERGE = "afterMerge"
    BEFORE_REMOVE = "beforeRemove"
    AFTER_REMOVE = "afterRemove"

    @classmethod
    def parse(cls, value: HookName | str) -> HookName:
        """
        Resolve a hook name from its camelCase value or snake_case form.

        Args:
            value: HookName, "afterCreate" or "after_create"

        Returns:
            Matching HookName

        Raises:
            ValueError: If the name is not one of the six lifecycle points
        """
        if isinstance(value, cls):
            return value
        for member in cls:
            if value in (member.value, member.name.lower()):
                return member
        valid = ", ".join(member.value for member in cls)
        raise ValueError(f"Unknown hook name '{value}' (valid: {valid})")


@dataclass(frozen=True)
class HookEvent:
    """
    Data describing one lifecycle event, built by the owning workflow.

    Attributes:
        repo_root: Top-level directory of the repository
        default_branch: Primary branch name (e.g. "main")
        branch_name: Branch being created, merged or removed
        worktree_path: Worktree being acted on
        source_worktree: Worktree the new one was created from (create events)
        target_worktree: Worktree that remains afterwards (merge/remove events)
    """

    repo_root: Path
    default_branch: str
    branch_name: str
    worktree_path: Path
    source_worktree: Path | None = None
    target_worktree: Path | None = None


@dataclass(frozen=True)
class HookContext(HookEvent):
    """
    What a hook function receives: the event plus injected capabilities.

    Hooks never build these; the lifecycle runner binds ``logger`` and
    ``exec`` to an event before each invocation.
    """

    logger: WtLogger | None = None
    exec: Callable[..., ExecResult] | None = field(default=None, repr=False)

    @classmethod
    def bind(
        cls,
        event: HookEvent,
        logger: WtLogger,
        exec_fn: Callable[..., ExecResult],
    ) -> HookContext:
        return cls(
            repo_root=event.repo_root,
            default_branch=event.default_branch,
            branch_name=event.branch_name,
            worktree_path=event.worktree_path,
            source_worktree=event.source_worktree,
            target_worktree=event.target_worktree,
            logger=logger,
            exec=exec_fn,
        )


HookFunction = Callable[[HookContext], Union[None, Awaitable[None]]]
HookValue = Union[HookFunction, str, Sequence[Union[HookFunction, str]]]


@dataclass(frozen=True)
class FunctionHook:
    """A Python callable hook."""

    func: HookFunction


@dataclass(frozen=True)
class CommandHook:
    """A shell command run in the worktree directory."""

    command: str


@dataclass(frozen=True)
class SequenceHook:
    """Steps run in order; the first failing step stops the rest."""

    steps: tuple[FunctionHook | CommandHook, ...]


HookStep = Union[FunctionHook, CommandHook]
ParsedHook = Union[FunctionHook, CommandHook, SequenceHook]


def _parse_step(value: Any) -> HookStep:
    if isinstance(value, (FunctionHook, CommandHook)):
        return value
    if isinstance(value, str):
        return CommandHook(value)
    if callable(value):
        return FunctionHook(value)
    raise TypeError(f"Hook steps must be functions or command strings, got {type(value).__name__}")


def parse_hook_value(value: Any) -> ParsedHook:
    """
    Normalize a configured hook value into its tagged variant.

    Args:
        value: Function, command string, list/tuple of those, or an
            already parsed hook

    Returns:
        FunctionHook, CommandHook or SequenceHook

    Raises:
        TypeError: If the value (or one of its steps) has an unsupported type
    """
    if isinstance(value, SequenceHook):
        return value
    if isinstance(value, (list, tuple)):
        return SequenceHook(tuple(_parse_step(item) for item in value))
    return _parse_step(value)


@dataclass(frozen=True)
class WtPlugin:
    """
    A named bundle of hooks.

    Plugins run in list order before inline hooks. The name is only used to
    label failures.
    """

    name: str
    hooks: Mapping[HookName, HookValue] = field(default_factory=dict)

    def get_hook(self, hook_name: HookName) -> HookValue | None:
        return self.hooks.get(hook_name) if self.hooks else None
