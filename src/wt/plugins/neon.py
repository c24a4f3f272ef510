"""
Neon plugin: one Neon database branch per worktree.

afterCreate creates a Neon branch named after the git branch and writes its
connection string to ``DATABASE_URL`` in the new worktree's env file.
beforeRemove deletes that Neon branch again.

Both hooks do nothing when no project id is configured or the ``neon`` CLI is
not installed. The project id is read from the environment first, then from
the env file.

Usage (wt_config.py):
    from wt import WtConfig
    from wt.plugins import neon_plugin

    config = WtConfig(plugins=[neon_plugin(parent_branch="current")])
"""

from __future__ import annotations

import shlex
from collections.abc import Callable
from pathlib import Path

from wt.core.hooks.models import HookContext, HookName, WtPlugin
from wt.core.process import ExecResult, command_exists, run_shell
from wt.plugins.env import env_value, set_database_url
from wt.utils.logging import WtLogger


def neon_plugin(
    project_id_env_var: str = "NEON_PROJECT_ID",
    env_file: str = ".env",
    parent_branch: str = "main",
) -> WtPlugin:
    """
    Build the Neon branching plugin.

    Args:
        project_id_env_var: Variable holding the Neon project id
        env_file: Env file, relative to each worktree
        parent_branch: "main" to branch from the primary Neon branch,
            "current" to branch from the source worktree's git branch, or an
            explicit Neon branch name
    """

    def parent_flag(ctx: HookContext, run: Callable[..., ExecResult]) -> str:
        if parent_branch == "main":
            return ""
        if parent_branch != "current":
            return parent_branch

        result = run(
            "git symbolic-ref --quiet --short HEAD",
            cwd=ctx.source_worktree or ctx.repo_root,
        )
        if result.success and result.stdout and result.stdout != ctx.default_branch:
            return result.stdout
        return ""

    def after_create(ctx: HookContext) -> None:
        log = ctx.logger or WtLogger()
        run = ctx.exec or run_shell

        source_env = Path(ctx.source_worktree or ctx.repo_root) / env_file
        target_env = Path(ctx.worktree_path) / env_file

        pid = env_value(source_env, project_id_env_var)
        if not pid:
            log.debug("Neon: No project ID found, skipping branch creation")
            return

        if not command_exists("neon"):
            log.debug("Neon: CLI not installed, skipping branch creation")
            return

        parent = parent_flag(ctx, run)
        command = (
            f"neon branches create --name {shlex.quote(ctx.branch_name)} "
            f"--project-id {shlex.quote(pid)}"
        )
        if parent:
            command += f" --parent {shlex.quote(parent)}"
            log.info(f'Neon: Creating branch "{ctx.branch_name}" from "{parent}"...')
        else:
            log.info(f'Neon: Creating branch "{ctx.branch_name}"...')

        created = run(command)
        if not created.success:
            log.warn(f"Neon: Failed to create branch: {created.stderr}")
            return

        connection = run(
            f"neon connection-string --branch {shlex.quote(ctx.branch_name)} "
            f"--project-id {shlex.quote(pid)}"
        )
        if not connection.success or not connection.stdout:
            log.warn("Neon: Failed to get connection string")
            return

        if not target_env.exists():
            log.warn(f"Neon: {env_file} not found at {target_env}, skipping DATABASE_URL patch")
            return

        content = target_env.read_text(encoding="utf-8")
        target_env.write_text(set_database_url(content, connection.stdout), encoding="utf-8")
        log.success(f'Neon: Patched DATABASE_URL for branch "{ctx.branch_name}"')

    def before_remove(ctx: HookContext) -> None:
        log = ctx.logger or WtLogger()
        run = ctx.exec or run_shell

        pid = env_value(Path(ctx.target_worktree or ctx.repo_root) / env_file, project_id_env_var)
        if not pid or not command_exists("neon"):
            return

        log.info(f'Neon: Deleting branch "{ctx.branch_name}"...')
        result = run(
            f"neon branches delete {shlex.quote(ctx.branch_name)} "
            f"--project-id {shlex.quote(pid)} --force"
        )
        if result.success:
            log.success(f'Neon: Deleted branch "{ctx.branch_name}"')
        else:
            log.warn(f"Neon: Failed to delete branch: {result.stderr}")

    return WtPlugin(
        name="neon",
        hooks={
            HookName.AFTER_CREATE: after_create,
            HookName.BEFORE_REMOVE: before_remove,
        },
    )
