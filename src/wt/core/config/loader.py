"""
Configuration discovery and loading.

Implements the configuration precedence chain:
    defaults < config file < env vars

The config file is found by walking up from the working directory. In each
directory ``wt_config.py`` is preferred over ``.wt.json``; the first directory
holding either wins.

A Python config module exposes either ``config`` (a WtConfig or a dict) or
module-level ``plugins`` / ``hooks`` / setting names. A JSON config holds
settings and command-string hooks only, since it cannot express functions.
"""

from __future__ import annotations

import hashlib
import importlib.util
import json
import logging
import os
import sys
from collections.abc import Mapping
from dataclasses import fields
from pathlib import Path
from types import MappingProxyType
from typing import Any

from pydantic import ValidationError

from wt.core.config.models import ResolvedConfig, WtConfig, WtSettings
from wt.core.errors import ConfigError
from wt.core.hooks.models import HookName, ParsedHook, WtPlugin, parse_hook_value

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = ("wt_config.py", ".wt.json")

SETTING_NAMES = ("copy_ignored_files", "copy_dependency_dirs", "worktree_path")

# camelCase spellings accepted in .wt.json
_CAMEL_SETTING_NAMES = {
    "copyIgnoredFiles": "copy_ignored_files",
    "copyDependencyDirs": "copy_dependency_dirs",
    "worktreePath": "worktree_path",
}


def find_config_file(start: Path | None = None) -> Path | None:
    """
    Find the nearest config file at or above ``start``.

    Args:
        start: Directory to start from (defaults to current directory)

    Returns:
        Path to the config file, or None if there is none up to the filesystem root
    """
    directory = (start or Path.cwd()).resolve()

    for candidate_dir in (directory, *directory.parents):
        for filename in CONFIG_FILENAMES:
            candidate = candidate_dir / filename
            if candidate.is_file():
                return candidate

    return None


def _config_to_dict(config: Any, path: Path) -> dict[str, Any]:
    if isinstance(config, WtConfig):
        return {f.name: getattr(config, f.name) for f in fields(config)}
    if isinstance(config, dict):
        return dict(config)
    raise ConfigError(
        f"'config' must be a WtConfig or dict, got {type(config).__name__}", path
    )


def load_python_config(path: Path) -> dict[str, Any]:
    """
    Import a ``wt_config.py`` module and extract its configuration.

    Args:
        path: Path to the config module

    Returns:
        Raw configuration dict (settings, plugins, hooks)

    Raises:
        ConfigError: If the module cannot be imported or exposes a bad config
    """
    digest = hashlib.sha1(str(path).encode()).hexdigest()[:12]
    spec = importlib.util.spec_from_file_location(f"_wt_config_{digest}", path)
    if spec is None or spec.loader is None:
        raise ConfigError("not an importable Python file", path)

    module = importlib.util.module_from_spec(spec)
    sys.modules[spec.name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        sys.modules.pop(spec.name, None)
        raise ConfigError(f"{type(e).__name__}: {e}", path) from e

    if hasattr(module, "config"):
        return _config_to_dict(module.config, path)

    return {
        name: getattr(module, name)
        for name in (*SETTING_NAMES, "plugins", "hooks")
        if hasattr(module, name)
    }


def load_json_config(path: Path) -> dict[str, Any]:
    """
    Load a ``.wt.json`` config.

    Raises:
        ConfigError: If the file is not valid JSON, not an object, or holds
            hooks that are not command strings
    """
    try:
        with path.open() as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        raise ConfigError(str(e), path) from e

    if not isinstance(data, dict):
        raise ConfigError("top-level value must be an object", path)

    if "plugins" in data:
        raise ConfigError("plugins can only be configured in wt_config.py", path)

    hooks = data.get("hooks") or {}
    if not isinstance(hooks, dict):
        raise ConfigError("hooks must be an object", path)

    for name, value in hooks.items():
        if value is None:
            continue
        commands = value if isinstance(value, list) else [value]
        if not all(isinstance(command, str) for command in commands):
            raise ConfigError(
                f"hook '{name}' must be a command string or a list of command strings",
                path,
            )

    return {_CAMEL_SETTING_NAMES.get(key, key): value for key, value in data.items()}


def get_default_config() -> dict[str, Any]:
    """
    Get hardcoded default settings.

    Returns:
        Dictionary with default setting values
    """
    return WtSettings().model_dump()


def _env_flag(value: str) -> bool:
    return value.lower() not in ("false", "0", "no", "")


def apply_env_overrides(settings: dict[str, Any]) -> dict[str, Any]:
    """
    Apply environment variable overrides to settings.

    Env vars have the highest precedence and override the config file.

    Supported env vars:
        WT_WORKTREE_PATH - overrides worktree_path
        WT_COPY_IGNORED_FILES - overrides copy_ignored_files
        WT_COPY_DEPENDENCY_DIRS - overrides copy_dependency_dirs

    Args:
        settings: Settings dictionary to override

    Returns:
        Settings dictionary with env var overrides applied
    """
    result = settings.copy()

    if worktree_path := os.environ.get("WT_WORKTREE_PATH"):
        result["worktree_path"] = worktree_path

    if (copy_ignored := os.environ.get("WT_COPY_IGNORED_FILES")) is not None:
        result["copy_ignored_files"] = _env_flag(copy_ignored)

    if (copy_deps := os.environ.get("WT_COPY_DEPENDENCY_DIRS")) is not None:
        result["copy_dependency_dirs"] = _env_flag(copy_deps)

    return result


def _parse_hooks(
    hooks: Any, owner: str, path: Path | None
) -> MappingProxyType[HookName, ParsedHook]:
    if hooks is None:
        return MappingProxyType({})
    if not isinstance(hooks, Mapping):
        raise ConfigError(f"{owner} hooks must be a mapping of hook name to hook", path)

    parsed: dict[HookName, ParsedHook] = {}
    for name, value in hooks.items():
        if value is None:
            continue
        try:
            parsed[HookName.parse(name)] = parse_hook_value(value)
        except (ValueError, TypeError) as e:
            raise ConfigError(f"{owner}: {e}", path) from e
    return MappingProxyType(parsed)


def _parse_plugins(plugins: Any, path: Path | None) -> tuple[WtPlugin, ...]:
    if plugins is None:
        return ()
    if not isinstance(plugins, (list, tuple)):
        raise ConfigError("plugins must be a list of WtPlugin", path)

    resolved = []
    for plugin in plugins:
        if not isinstance(plugin, WtPlugin):
            raise ConfigError(
                f"plugins must be WtPlugin instances, got {type(plugin).__name__}", path
            )
        hooks = _parse_hooks(plugin.hooks, f'Plugin "{plugin.name}"', path)
        resolved.append(WtPlugin(name=plugin.name, hooks=hooks))
    return tuple(resolved)


def resolve_config(raw: dict[str, Any], path: Path | None = None) -> ResolvedConfig:
    """
    Layer defaults, a raw config dict and env vars into a ResolvedConfig.

    Hook values are parsed up front so a malformed hook is reported when the
    config loads, not halfway through a workflow.

    Args:
        raw: Raw config as returned by load_python_config/load_json_config
        path: Config file the dict came from (for error messages)

    Raises:
        ConfigError: If settings fail validation or hooks/plugins are malformed
    """
    raw = dict(raw)
    plugins = _parse_plugins(raw.pop("plugins", None), path)
    hooks = _parse_hooks(raw.pop("hooks", None), "Inline", path)

    # None means "not set" for WtConfig fields
    file_settings = {key: value for key, value in raw.items() if value is not None}
    merged = apply_env_overrides({**get_default_config(), **file_settings})

    try:
        settings = WtSettings(**merged)
    except ValidationError as e:
        raise ConfigError(str(e), path) from e

    return ResolvedConfig(settings=settings, plugins=plugins, hooks=hooks)


def load_config(cwd: Path | None = None) -> ResolvedConfig:
    """
    Discover and load the configuration for a working directory.

    Configuration precedence (highest to lowest):
        1. Environment variables (WT_*)
        2. Nearest wt_config.py or .wt.json
        3. Hardcoded defaults

    Args:
        cwd: Directory to search from (defaults to current directory)

    Returns:
        ResolvedConfig for this invocation

    Raises:
        ConfigError: If the config file cannot be loaded or is invalid

    Example:
        >>> config = load_config()
        >>> config.settings.worktree_path
        '../{repo}-{branch}'
    """
    path = find_config_file(cwd)

    if path is None:
        logger.debug("No config file found, using defaults")
        return resolve_config({})

    logger.debug("Loading config from %s", path)
    if path.suffix == ".py":
        raw = load_python_config(path)
    else:
        raw = load_json_config(path)

    return resolve_config(raw, path)
