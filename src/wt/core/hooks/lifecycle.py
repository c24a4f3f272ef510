"""
Lifecycle hook integration for the worktree workflows.

The workflows describe each lifecycle event with a HookEvent; this module binds
it to a logger and a command runner and runs every hook registered for that
point.

Ordering:
- plugin hooks first, in the order plugins appear in the config
- then the inline hook from the config's ``hooks`` mapping

Each hook is isolated: a failing plugin hook is reported as a warning and the
next plugin (and the inline hook) still runs. Nothing raised by a hook ever
reaches the workflow.

Usage:
    from wt.core.hooks.lifecycle import LifecycleRunner

    runner = LifecycleRunner(config, logger=log)
    runner.run(HookName.AFTER_CREATE, event)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from wt.core.hooks.executor import HookExecutor
from wt.core.hooks.models import HookContext, HookEvent, HookName
from wt.core.process import ExecResult, run_shell
from wt.utils.logging import WtLogger

if TYPE_CHECKING:
    from wt.core.config.models import ResolvedConfig

logger = logging.getLogger(__name__)


class LifecycleRunner:
    """
    Runs plugin and inline hooks for one lifecycle point at a time.

    Args:
        config: Resolved configuration holding plugins and inline hooks
        logger: Sink handed to hooks (defaults to a stderr WtLogger)
        executor: Hook executor (injectable for tests)
        exec_fn: Command runner bound into each HookContext
    """

    def __init__(
        self,
        config: ResolvedConfig,
        logger: WtLogger | None = None,
        executor: HookExecutor | None = None,
        exec_fn: Callable[..., ExecResult] = run_shell,
    ):
        self.config = config
        self.log = logger or WtLogger()
        self.executor = executor or HookExecutor()
        self.exec_fn = exec_fn

    def run(self, hook_name: HookName, event: HookEvent) -> None:
        """
        Run every hook registered for ``hook_name``.

        Args:
            hook_name: Lifecycle point being reached
            event: Event data built by the workflow
        """
        context = HookContext.bind(event, self.log, self.exec_fn)

        for plugin in self.config.plugins:
            hook = plugin.get_hook(hook_name)
            if hook is None:
                continue
            logger.debug("Running %s hook from plugin %s", hook_name.value, plugin.name)
            self.executor.execute(
                hook, context, f'Plugin "{plugin.name}" {hook_name.value} hook'
            )

        inline = self.config.inline_hook(hook_name)
        if inline is not None:
            logger.debug("Running inline %s hook", hook_name.value)
            self.executor.execute(inline, context, f"Inline {hook_name.value} hook")


def run_hooks(
    hook_name: HookName,
    config: ResolvedConfig,
    event: HookEvent,
    logger: WtLogger | None = None,
) -> None:
    """Run the hooks for one lifecycle point with a default runner."""
    LifecycleRunner(config, logger=logger).run(hook_name, event)
