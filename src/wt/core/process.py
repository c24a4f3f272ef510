"""
Shell command execution for hooks and plugins.

Commands run through the shell, block until the child exits and have their
output fully buffered. Output is spooled to temporary files and at most
MAX_OUTPUT_BYTES is read back per stream, so a noisy command cannot grow
memory without bound.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import IO

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

MAX_OUTPUT_BYTES = 50 * 1024 * 1024


class ExecResult(BaseModel):
    """Structured result from a git or shell command."""

    model_config = ConfigDict(frozen=True)

    stdout: str = ""
    """Standard output, stripped of surrounding whitespace."""

    stderr: str = ""
    """Standard error, stripped of surrounding whitespace."""

    exit_code: int = 0
    """Process exit code."""

    @property
    def success(self) -> bool:
        """Whether the command exited with status 0."""
        return self.exit_code == 0


def _read_capped(stream: IO[bytes]) -> str:
    stream.seek(0)
    return stream.read(MAX_OUTPUT_BYTES).decode("utf-8", errors="replace").strip()


def run_shell(command: str, cwd: Path | str | None = None) -> ExecResult:
    """
    Run a shell command and capture its output.

    Never raises for a failing command; a command that cannot be started
    (missing working directory, unusable shell) is reported as exit code 127
    with the OS error on stderr.

    Args:
        command: Command line passed to the shell
        cwd: Working directory (defaults to the current directory)

    Returns:
        ExecResult with stdout, stderr and exit code

    Example:
        >>> result = run_shell("echo hello")
        >>> result.stdout
        'hello'
    """
    logger.debug("Running shell command: %s (cwd=%s)", command, cwd)

    with tempfile.TemporaryFile() as out, tempfile.TemporaryFile() as err:
        try:
            completed = subprocess.run(
                command,
                shell=True,
                cwd=str(cwd) if cwd is not None else None,
                stdin=subprocess.DEVNULL,
                stdout=out,
                stderr=err,
            )
        except OSError as e:
            return ExecResult(stdout="", stderr=str(e), exit_code=127)

        return ExecResult(
            stdout=_read_capped(out),
            stderr=_read_capped(err),
            exit_code=completed.returncode,
        )


def command_exists(name: str) -> bool:
    """Check whether an executable is available on PATH."""
    return shutil.which(name) is not None
