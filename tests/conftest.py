"""
Pytest configuration and shared fixtures.

Provides an in-memory git client, hook recorders, a captured logger and
config builders used across the test suite.
"""

from __future__ import annotations

from io import StringIO
from pathlib import Path
from types import MappingProxyType
from typing import Any

import pytest
from rich.console import Console

from wt.core.config.models import ResolvedConfig, WtSettings
from wt.core.errors import WorktreeNotFoundError
from wt.core.git.client import AheadBehind, Worktree
from wt.core.hooks.models import HookContext, HookName, WtPlugin
from wt.core.process import ExecResult
from wt.utils.logging import WtLogger

# ==============================================================================
# Fake git client
# ==============================================================================


class FakeGitClient:
    """
    In-memory stand-in for GitClient.

    Records every mutating call in ``calls`` and keeps worktrees/branches in
    plain lists so tests can assert on the resulting state.
    """

    def __init__(
        self,
        repo_root: Path,
        current_branch: str = "main",
        default_branch: str = "main",
    ):
        self.root = repo_root
        self.current = current_branch
        self.default = default_branch
        self.inside = True
        self.branches: set[str] = {default_branch}
        self.worktrees: list[Worktree] = [Worktree(path=repo_root, branch=default_branch)]
        self.ignored: list[str] = []
        self.calls: list[tuple[Any, ...]] = []

        self.add_result = ExecResult()
        self.merge_result = ExecResult(stdout="Fast-forward")
        self.remove_result = ExecResult()
        self.delete_result = ExecResult()

    def add_branch_worktree(self, branch: str, path: Path) -> Worktree:
        worktree = Worktree(path=path, branch=branch)
        self.branches.add(branch)
        self.worktrees.append(worktree)
        return worktree

    # VersionControlClient -------------------------------------------------

    def is_inside_repository(self) -> bool:
        return self.inside

    def repository_root(self) -> Path:
        return self.root

    def repository_name(self) -> str:
        return self.root.name

    def current_branch(self) -> str:
        return self.current

    def default_branch(self) -> str:
        return self.default

    def branch_exists(self, name: str) -> bool:
        return name in self.branches

    def list_worktrees(self) -> list[Worktree]:
        return list(self.worktrees)

    def find_worktree_by_branch(self, name: str) -> Worktree | None:
        return next((wt for wt in self.worktrees if wt.branch == name), None)

    def primary_worktree(self) -> Worktree:
        worktree = self.find_worktree_by_branch(self.default)
        if worktree is None:
            raise WorktreeNotFoundError(self.default)
        return worktree

    def ahead_behind(self, branch: str, base: str, cwd: Path | None = None) -> AheadBehind:
        return AheadBehind()

    def uncommitted_count(self, cwd: Path) -> int:
        return 0

    def add_worktree(self, path: Path, branch: str, create_branch: bool) -> ExecResult:
        self.calls.append(("add_worktree", path, branch, create_branch))
        if self.add_result.success:
            path.mkdir(parents=True)
            self.add_branch_worktree(branch, path)
        return self.add_result

    def remove_worktree(self, path: Path, cwd: Path | None = None) -> ExecResult:
        self.calls.append(("remove_worktree", path, cwd))
        if self.remove_result.success:
            self.worktrees = [wt for wt in self.worktrees if wt.path != path]
        return self.remove_result

    def delete_branch(self, name: str, cwd: Path | None = None) -> ExecResult:
        self.calls.append(("delete_branch", name, cwd))
        if self.delete_result.success:
            self.branches.discard(name)
        return self.delete_result

    def merge(self, branch: str, cwd: Path) -> ExecResult:
        self.calls.append(("merge", branch, cwd))
        return self.merge_result

    def ignored_files(self, cwd: Path) -> list[str]:
        return list(self.ignored)

    @property
    def mutations(self) -> list[str]:
        return [call[0] for call in self.calls]


# ==============================================================================
# Hook recording
# ==============================================================================


class HookRecorder:
    """Builds hook functions that append (label, hook name, context) on call."""

    def __init__(self) -> None:
        self.events: list[tuple[str, HookName, HookContext]] = []

    def hook(self, label: str, hook_name: HookName):
        def record(ctx: HookContext) -> None:
            self.events.append((label, hook_name, ctx))

        return record

    def plugin(self, name: str, *hook_names: HookName) -> WtPlugin:
        return WtPlugin(
            name=name,
            hooks={hook_name: self.hook(name, hook_name) for hook_name in hook_names},
        )

    def inline_hooks(self, *hook_names: HookName) -> dict[HookName, Any]:
        return {hook_name: self.hook("inline", hook_name) for hook_name in hook_names}

    @property
    def order(self) -> list[tuple[str, str]]:
        return [(label, hook_name.value) for label, hook_name, _ in self.events]

    @property
    def hook_names(self) -> list[str]:
        return [hook_name.value for _, hook_name, _ in self.events]

    def contexts(self, hook_name: HookName) -> list[HookContext]:
        return [ctx for _, name, ctx in self.events if name == hook_name]


ALL_HOOKS = tuple(HookName)


def make_config(
    *,
    plugins: list[WtPlugin] | None = None,
    hooks: dict[HookName, Any] | None = None,
    **settings: Any,
) -> ResolvedConfig:
    """Build a ResolvedConfig without going through the loader."""
    return ResolvedConfig(
        settings=WtSettings(**settings),
        plugins=tuple(plugins or ()),
        hooks=MappingProxyType(dict(hooks or {})),
    )


# ==============================================================================
# Fixtures
# ==============================================================================


@pytest.fixture
def repo_root(tmp_path: Path) -> Path:
    """Directory standing in for the primary worktree of a repository."""
    root = tmp_path / "app"
    root.mkdir()
    return root


@pytest.fixture
def fake_git(repo_root: Path) -> FakeGitClient:
    return FakeGitClient(repo_root)


@pytest.fixture
def recorder() -> HookRecorder:
    return HookRecorder()


@pytest.fixture
def log() -> WtLogger:
    """WtLogger writing to an in-memory console."""
    return WtLogger(verbose=True, console=Console(file=StringIO(), width=200))


@pytest.fixture
def emitted() -> list[Path]:
    """List that collects paths passed to a workflow's emit callback."""
    return []


def log_output(logger: WtLogger) -> str:
    return logger.console.file.getvalue()


def fake_exec(results: dict[str, ExecResult] | None = None, calls: list | None = None):
    """
    Build an exec function returning canned results per command.

    Unknown commands succeed with empty output.
    """
    results = results or {}

    def run(command: str, cwd: Path | str | None = None) -> ExecResult:
        if calls is not None:
            calls.append((command, cwd))
        return results.get(command, ExecResult())

    return run
