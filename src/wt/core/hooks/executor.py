"""
Hook executor.

Runs one configured hook value against a HookContext:

- function: called with the context; an async function is awaited to
  completion before anything else happens
- command string: run through ``context.exec`` in the worktree directory,
  output echoed to stderr (stdout lines first, then stderr lines); a non-zero
  exit raises HookCommandError
- list: steps run in order inside a single try block, so the first step that
  raises (function or command) skips the remaining steps of that list only

Whatever is raised is caught here and reported as a single warning tagged
with the caller's label. Failures never leave the executor: a broken hook
stops its own body but never its siblings or the workflow around it.

Usage:
    from wt.core.hooks.executor import HookExecutor

    executor = HookExecutor()
    executor.execute(["npm install", notify], context, 'Inline afterCreate hook')
"""

import asyncio
import inspect
import logging
from typing import Any

from wt.core.errors import HookCommandError
from wt.core.hooks.models import (
    CommandHook,
    FunctionHook,
    HookContext,
    HookStep,
    HookValue,
    SequenceHook,
    parse_hook_value,
)
from wt.utils.logging import WtLogger

logger = logging.getLogger(__name__)


async def _await(awaitable: Any) -> Any:
    return await awaitable


class HookExecutor:
    """
    Executor for a single hook value.

    Example:
        >>> executor = HookExecutor()
        >>> ok = executor.execute("npm install", context, "Inline afterCreate hook")
        >>> ok
        True
    """

    def execute(self, value: HookValue, context: HookContext, label: str) -> bool:
        """
        Run a hook value, swallowing and reporting any failure.

        Args:
            value: Function, command string, list of both, or a parsed hook
            context: Context bound with logger and exec capabilities
            label: Prefix for the warning logged on failure

        Returns:
            True if the hook body ran to completion, False if it failed
        """
        log = context.logger or WtLogger()
        try:
            hook = parse_hook_value(value)
            if isinstance(hook, SequenceHook):
                for step in hook.steps:
                    self._run_step(step, context, log)
            else:
                self._run_step(hook, context, log)
        except Exception as e:
            logger.debug("%s raised", label, exc_info=True)
            log.warn(f"{label} failed: {e}")
            return False
        return True

    def _run_step(self, step: HookStep, context: HookContext, log: WtLogger) -> None:
        if isinstance(step, CommandHook):
            self._run_command(step.command, context, log)
        elif isinstance(step, FunctionHook):
            result = step.func(context)
            if inspect.isawaitable(result):
                asyncio.run(_await(result))
        else:
            raise TypeError(f"Unsupported hook step: {step!r}")

    def _run_command(self, command: str, context: HookContext, log: WtLogger) -> None:
        if context.exec is None:
            raise RuntimeError("No command runner bound to hook context")

        log.info(f"Running: {command}")
        result = context.exec(command, cwd=context.worktree_path)

        if result.stdout:
            for line in result.stdout.split("\n"):
                log.plain(line)
        if result.stderr:
            for line in result.stderr.split("\n"):
                log.plain(line)

        if result.exit_code != 0:
            raise HookCommandError(command, result.exit_code)
