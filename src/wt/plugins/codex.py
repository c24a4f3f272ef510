"""
Codex plugin: repoint Codex sessions at the surviving worktree.

Codex records the working directory of each session as ``"cwd":"<path>"``
inside ``*.jsonl`` files under ``$CODEX_HOME/sessions``. Before a worktree is
removed, every such reference is rewritten to the target worktree.
"""

from __future__ import annotations

import os
from pathlib import Path

from wt.core.hooks.models import HookContext, HookName, WtPlugin
from wt.utils.logging import WtLogger


def codex_plugin(codex_home: Path | str | None = None) -> WtPlugin:
    """
    Build the Codex session patching plugin.

    Args:
        codex_home: Codex home directory (defaults to $CODEX_HOME, then ~/.codex)
    """
    if codex_home is None:
        codex_home = os.environ.get("CODEX_HOME") or Path.home() / ".codex"
    sessions_dir = Path(codex_home) / "sessions"

    def before_remove(ctx: HookContext) -> None:
        log = ctx.logger or WtLogger()
        if not sessions_dir.exists():
            log.debug("Codex: No sessions directory found")
            return

        if ctx.target_worktree is None:
            log.debug("Codex: No target worktree, skipping session patching")
            return

        old_pattern = f'"cwd":"{ctx.worktree_path}"'
        new_pattern = f'"cwd":"{ctx.target_worktree}"'

        patched = 0
        for session_file in sorted(sessions_dir.rglob("*.jsonl")):
            if not session_file.is_file():
                continue
            try:
                content = session_file.read_text(encoding="utf-8")
                if old_pattern not in content:
                    continue
                session_file.write_text(
                    content.replace(old_pattern, new_pattern), encoding="utf-8"
                )
            except (OSError, UnicodeDecodeError):
                log.debug(f"Codex: Failed to patch {session_file}")
                continue
            patched += 1

        if patched > 0:
            log.success(f"Codex: Patched {patched} session(s) to {ctx.target_worktree}")

    return WtPlugin(name="codex", hooks={HookName.BEFORE_REMOVE: before_remove})
