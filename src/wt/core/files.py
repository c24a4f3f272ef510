"""
Copying git-ignored files into a new worktree.

A fresh worktree only holds tracked files, so local-only files such as
``.env`` are copied over from the repository root after creation.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path, PurePosixPath

from wt.core.git.client import VersionControlClient

logger = logging.getLogger(__name__)

DEPENDENCY_DIRS = frozenset({"node_modules", ".venv", "venv"})


def is_in_dependency_dir(relative_path: str) -> bool:
    """Check whether any directory component is a dependency directory."""
    parts = PurePosixPath(relative_path).parts[:-1]
    return any(part in DEPENDENCY_DIRS for part in parts)


def copy_ignored_files(
    git: VersionControlClient,
    src_dir: Path,
    dst_dir: Path,
    include_dependency_dirs: bool = False,
) -> int:
    """
    Copy untracked, ignored files from ``src_dir`` to ``dst_dir``.

    Relative paths are preserved. Symlinks and anything that is not a regular
    file are skipped.

    Args:
        git: Client used to list ignored files
        src_dir: Repository root to copy from
        dst_dir: New worktree to copy into
        include_dependency_dirs: Also copy files under node_modules, .venv, venv

    Returns:
        Number of files copied
    """
    files = git.ignored_files(src_dir)
    if not include_dependency_dirs:
        files = [f for f in files if not is_in_dependency_dir(f)]

    copied = 0
    for relative in files:
        src = src_dir / relative
        if src.is_symlink() or not src.is_file():
            continue

        dst = dst_dir / relative
        dst.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src, dst)
        copied += 1

    logger.debug("Copied %d ignored file(s) from %s to %s", copied, src_dir, dst_dir)
    return copied
