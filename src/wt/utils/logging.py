"""
Operator-facing logging for wt.

WtLogger prints short, level-tagged lines to stderr. stdout is reserved for
the single path a command emits for shell integration, so nothing in this
module ever writes there. Library code logs developer detail through the
standard ``logging`` module instead; ``configure_logging`` turns that on for
``wt --debug``.
"""

import logging

from rich.console import Console
from rich.text import Text

LEVEL_STYLES = {
    "info": "blue",
    "success": "green",
    "warn": "yellow",
    "error": "red",
    "debug": "bright_black",
}


class WtLogger:
    """
    Level-tagged logger sink handed to workflows and hooks.

    Args:
        verbose: Print debug messages
        console: Console to print to (defaults to a stderr console)

    Example:
        >>> log = WtLogger()
        >>> log.info("Creating worktree")
        >>> log.success("Done")
    """

    def __init__(self, verbose: bool = False, console: Console | None = None):
        self.verbose = verbose
        self.console = console or Console(stderr=True)

    def _emit(self, level: str, message: str) -> None:
        line = Text.assemble((level, LEVEL_STYLES[level]), " ", message)
        self.console.print(line, soft_wrap=True, highlight=False)

    def info(self, message: str) -> None:
        self._emit("info", message)

    def success(self, message: str) -> None:
        self._emit("success", message)

    def warn(self, message: str) -> None:
        self._emit("warn", message)

    def error(self, message: str) -> None:
        self._emit("error", message)

    def debug(self, message: str) -> None:
        if self.verbose:
            self._emit("debug", message)

    def plain(self, line: str) -> None:
        """Echo a raw line (command output) without a level tag."""
        self.console.print(Text(line), soft_wrap=True, highlight=False)


def configure_logging(debug: bool = False) -> None:
    """Send library debug logging to stderr when --debug is set."""
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
