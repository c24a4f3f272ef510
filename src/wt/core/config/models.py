"""
Configuration data models for wt.

WtConfig is what a ``wt_config.py`` file declares. The loader merges it with
defaults and environment overrides into a ResolvedConfig, which is built once
per command and never modified afterwards.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, field_validator

from wt.core.hooks.models import HookName, HookValue, WtPlugin

DEFAULT_WORKTREE_PATH = "../{repo}-{branch}"


class WtSettings(BaseModel):
    """
    Behavioural settings for worktree creation.

    These are the only scalar settings; everything else in a config file is
    plugins and hooks.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    copy_ignored_files: bool = Field(
        default=True,
        description="Copy git-ignored files (e.g. .env) from the repo root into new worktrees",
    )
    copy_dependency_dirs: bool = Field(
        default=False,
        description="Include dependency directories such as node_modules when copying",
    )
    worktree_path: str = Field(
        default=DEFAULT_WORKTREE_PATH,
        description="Worktree location template. Variables: {repo}, {branch}, {parent}",
    )

    @field_validator("worktree_path")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("worktree_path cannot be empty")
        return value


@dataclass
class WtConfig:
    """
    User-facing configuration declared in ``wt_config.py``.

    Unset settings fall back to defaults. Plugins run in list order, then
    inline hooks.

    Example:
        >>> from wt import WtConfig
        >>> from wt.plugins import neon_plugin
        >>> config = WtConfig(
        ...     plugins=[neon_plugin()],
        ...     hooks={"afterCreate": ["npm install", "npm run db:migrate"]},
        ... )
    """

    copy_ignored_files: bool | None = None
    copy_dependency_dirs: bool | None = None
    worktree_path: str | None = None
    plugins: list[WtPlugin] = field(default_factory=list)
    hooks: dict[HookName | str, HookValue] = field(default_factory=dict)


@dataclass(frozen=True)
class ResolvedConfig:
    """
    Settings, ordered plugins and inline hooks for one command invocation.

    Attributes:
        settings: Validated settings
        plugins: Plugins in execution order
        hooks: Inline hooks keyed by lifecycle point
    """

    settings: WtSettings = field(default_factory=WtSettings)
    plugins: tuple[WtPlugin, ...] = ()
    hooks: Mapping[HookName, HookValue] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def inline_hook(self, hook_name: HookName) -> HookValue | None:
        return self.hooks.get(hook_name)
