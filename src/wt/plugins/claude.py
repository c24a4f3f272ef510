"""
Claude plugin: carry Claude session history over to the surviving worktree.

Claude stores sessions per project directory under
``~/.claude/projects/<path with "/" replaced by "-">``. When a worktree is
removed, its sessions are moved into the target worktree's project directory
so ``claude --resume`` still finds them.
"""

from __future__ import annotations

from pathlib import Path

from wt.core.hooks.models import HookContext, HookName, WtPlugin
from wt.utils.logging import WtLogger


def project_dir_name(worktree_path: Path | str) -> str:
    """Encode a worktree path the way Claude names project directories."""
    return str(worktree_path).replace("/", "-")


def claude_plugin(claude_home: Path | str | None = None) -> WtPlugin:
    """
    Build the Claude session migration plugin.

    Args:
        claude_home: Claude home directory (defaults to ~/.claude)
    """
    home = Path(claude_home) if claude_home is not None else Path.home() / ".claude"
    projects_dir = home / "projects"

    def before_remove(ctx: HookContext) -> None:
        log = ctx.logger or WtLogger()
        if not projects_dir.exists():
            log.debug("Claude: No projects directory found")
            return

        if ctx.target_worktree is None:
            log.debug("Claude: No target worktree, skipping session migration")
            return

        old_dir = projects_dir / project_dir_name(ctx.worktree_path)
        new_dir = projects_dir / project_dir_name(ctx.target_worktree)

        if not old_dir.exists():
            log.debug(f"Claude: No sessions found for {ctx.worktree_path}")
            return

        new_dir.mkdir(parents=True, exist_ok=True)

        moved = 0
        for entry in sorted(old_dir.iterdir()):
            destination = new_dir / entry.name
            if destination.exists():
                destination = new_dir / f"{entry.stem}-{ctx.branch_name}{entry.suffix}"
            try:
                entry.rename(destination)
            except OSError:
                log.debug(f"Claude: Failed to move {entry.name}")
                continue
            moved += 1

        try:
            old_dir.rmdir()
        except OSError:
            # Left behind when some files failed to move
            pass

        if moved > 0:
            log.success(f"Claude: Migrated {moved} session(s) to {ctx.target_worktree}")

    return WtPlugin(name="claude", hooks={HookName.BEFORE_REMOVE: before_remove})
