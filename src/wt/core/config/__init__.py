"""
Configuration for wt.

Usage:
    from wt.core.config import load_config

    config = load_config(Path.cwd())
    config.settings.copy_ignored_files
"""

from wt.core.config.loader import (
    apply_env_overrides,
    find_config_file,
    load_config,
    resolve_config,
)
from wt.core.config.models import DEFAULT_WORKTREE_PATH, ResolvedConfig, WtConfig, WtSettings

__all__ = [
    "DEFAULT_WORKTREE_PATH",
    "ResolvedConfig",
    "WtConfig",
    "WtSettings",
    "apply_env_overrides",
    "find_config_file",
    "load_config",
    "resolve_config",
]
