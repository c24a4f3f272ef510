"""Core worktree lifecycle logic: git access, hooks, configuration and workflows."""
