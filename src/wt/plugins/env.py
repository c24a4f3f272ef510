"""
Env file helpers shared by the database branching plugins.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

from dotenv import dotenv_values

_DATABASE_URL_LINE = re.compile(r"^DATABASE_URL=.*$", re.MULTILINE)


def env_value(env_path: Path, name: str) -> str | None:
    """Read ``name`` from the process environment, then from ``env_path``."""
    if from_env := os.environ.get(name):
        return from_env
    if env_path.is_file():
        return dotenv_values(env_path).get(name) or None
    return None


def set_database_url(content: str, url: str) -> str:
    """Replace (or append) the DATABASE_URL line of an env file."""
    line = f'DATABASE_URL="{url}"'
    if _DATABASE_URL_LINE.search(content):
        return _DATABASE_URL_LINE.sub(lambda _: line, content, count=1)
    return f"{content}\n{line}\n"
