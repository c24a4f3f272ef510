"""
Built-in plugins.

Each factory returns a WtPlugin to list in ``WtConfig.plugins``.
"""

from wt.plugins.claude import claude_plugin
from wt.plugins.codex import codex_plugin
from wt.plugins.neon import neon_plugin
from wt.plugins.planetscale import planetscale_plugin

__all__ = ["claude_plugin", "codex_plugin", "neon_plugin", "planetscale_plugin"]
