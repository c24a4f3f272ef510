"""
PlanetScale plugin: one PlanetScale database branch per worktree.

afterCreate creates a PlanetScale branch named after the git branch, creates
a password on it and writes the resulting connection string to
``DATABASE_URL`` in the new worktree's env file. beforeRemove deletes the
branch again.

Both hooks do nothing when no database name is configured or the ``pscale``
CLI is not installed. Database and organisation are read from the
environment first, then from the env file.

Usage (wt_config.py):
    from wt import WtConfig
    from wt.plugins import planetscale_plugin

    config = WtConfig(plugins=[planetscale_plugin(parent_branch="current")])
"""

from __future__ import annotations

import json
import shlex
import time
from collections.abc import Callable
from pathlib import Path

from wt.core.hooks.models import HookContext, HookName, WtPlugin
from wt.core.process import ExecResult, command_exists, run_shell
from wt.plugins.env import env_value, set_database_url
from wt.utils.logging import WtLogger


def parse_connection_string(output: str) -> str | None:
    """Pull the general connection string out of ``pscale password create`` JSON."""
    try:
        return json.loads(output)["connection_strings"]["general"]
    except (ValueError, KeyError, TypeError):
        return None


def planetscale_plugin(
    database_env_var: str = "PLANETSCALE_DATABASE",
    org_env_var: str = "PLANETSCALE_ORG",
    env_file: str = ".env",
    parent_branch: str = "main",
) -> WtPlugin:
    """
    Build the PlanetScale branching plugin.

    Args:
        database_env_var: Variable holding the PlanetScale database name
        org_env_var: Variable holding the PlanetScale organisation (optional)
        env_file: Env file, relative to each worktree
        parent_branch: "main" to branch from the default PlanetScale branch,
            "current" to branch from the source worktree's git branch, or an
            explicit PlanetScale branch name
    """

    def org_flag(env_path: Path) -> str:
        org = env_value(env_path, org_env_var)
        return f" --org {shlex.quote(org)}" if org else ""

    def from_branch(ctx: HookContext, run: Callable[..., ExecResult]) -> str:
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

        database = env_value(source_env, database_env_var)
        if not database:
            log.debug("PlanetScale: No database name found, skipping branch creation")
            return

        if not command_exists("pscale"):
            log.debug("PlanetScale: CLI not installed, skipping branch creation")
            return

        org = org_flag(source_env)
        db = shlex.quote(database)
        branch = shlex.quote(ctx.branch_name)

        parent = from_branch(ctx, run)
        command = f"pscale branch create {db} {branch}"
        if parent:
            command += f" --from {shlex.quote(parent)}"
            log.info(f'PlanetScale: Creating branch "{ctx.branch_name}" from "{parent}"...')
        else:
            log.info(f'PlanetScale: Creating branch "{ctx.branch_name}"...')

        created = run(f"{command}{org} --wait")
        if not created.success:
            log.warn(f"PlanetScale: Failed to create branch: {created.stderr}")
            return

        password_name = shlex.quote(f"wt-{ctx.branch_name}-{int(time.time() * 1000)}")
        password = run(
            f"pscale password create {db} {branch} {password_name}{org} --format json"
        )
        if not password.success or not password.stdout:
            log.warn("PlanetScale: Failed to create password for connection string")
            return

        connection = parse_connection_string(password.stdout)
        if not connection:
            log.warn("PlanetScale: Failed to parse password response")
            return

        if not target_env.exists():
            log.warn(
                f"PlanetScale: {env_file} not found at {target_env}, skipping DATABASE_URL patch"
            )
            return

        content = target_env.read_text(encoding="utf-8")
        target_env.write_text(set_database_url(content, connection), encoding="utf-8")
        log.success(f'PlanetScale: Patched DATABASE_URL for branch "{ctx.branch_name}"')

    def before_remove(ctx: HookContext) -> None:
        log = ctx.logger or WtLogger()
        run = ctx.exec or run_shell

        env_path = Path(ctx.target_worktree or ctx.repo_root) / env_file
        database = env_value(env_path, database_env_var)
        if not database or not command_exists("pscale"):
            return

        log.info(f'PlanetScale: Deleting branch "{ctx.branch_name}"...')
        result = run(
            f"pscale branch delete {shlex.quote(database)} "
            f"{shlex.quote(ctx.branch_name)}{org_flag(env_path)} --force"
        )
        if result.success:
            log.success(f'PlanetScale: Deleted branch "{ctx.branch_name}"')
        else:
            log.warn(f"PlanetScale: Failed to delete branch: {result.stderr}")

    return WtPlugin(
        name="planetscale",
        hooks={
            HookName.AFTER_CREATE: after_create,
            HookName.BEFORE_REMOVE: before_remove,
        },
    )
