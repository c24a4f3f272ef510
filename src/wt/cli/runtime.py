"""
Per-invocation collaborators for CLI commands.

Commands build a Runtime from the typer context, load the config, and hand
the pieces to a workflow. ``emit_path`` is the only writer of workflow output
to stdout.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from wt.cli.errors import err_console
from wt.core.config.loader import load_config
from wt.core.config.models import ResolvedConfig
from wt.core.git.client import GitClient
from wt.utils.logging import WtLogger


def emit_path(path: Path) -> None:
    """Write the path the shell wrapper should cd into."""
    typer.echo(str(path))


@dataclass
class Runtime:
    """Working directory, git client and logger for one command."""

    cwd: Path
    git: GitClient
    log: WtLogger
    debug: bool = False

    def load_config(self) -> ResolvedConfig:
        return load_config(self.cwd)


def get_runtime(ctx: typer.Context) -> Runtime:
    debug = bool((ctx.obj or {}).get("debug", False))
    cwd = Path.cwd()
    return Runtime(
        cwd=cwd,
        git=GitClient(cwd),
        log=WtLogger(verbose=debug, console=err_console),
        debug=debug,
    )
