"""
Tests for the built-in plugins.
"""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from conftest import fake_exec, log_output
from wt.core.hooks.models import HookContext, HookName
from wt.core.process import ExecResult
from wt.plugins import claude_plugin, codex_plugin, neon_plugin, planetscale_plugin
from wt.plugins.claude import project_dir_name
from wt.plugins.env import env_value, set_database_url
from wt.plugins.planetscale import parse_connection_string


def make_context(tmp_path, log, exec_fn=None, **overrides) -> HookContext:
    values = dict(
        repo_root=tmp_path / "app",
        default_branch="main",
        branch_name="feat",
        worktree_path=tmp_path / "app-feat",
        target_worktree=tmp_path / "app",
        logger=log,
        exec=exec_fn or fake_exec(),
    )
    values.update(overrides)
    return HookContext(**values)


class TestClaudePlugin:
    def test_moves_sessions_to_target_project(self, tmp_path, log):
        home = tmp_path / "claude"
        ctx = make_context(tmp_path, log)
        old_dir = home / "projects" / project_dir_name(ctx.worktree_path)
        new_dir = home / "projects" / project_dir_name(ctx.target_worktree)
        old_dir.mkdir(parents=True)
        new_dir.mkdir(parents=True)
        (old_dir / "a.jsonl").write_text("old-a")
        (old_dir / "b.jsonl").write_text("old-b")
        (new_dir / "b.jsonl").write_text("existing-b")

        plugin = claude_plugin(claude_home=home)
        plugin.get_hook(HookName.BEFORE_REMOVE)(ctx)

        assert (new_dir / "a.jsonl").read_text() == "old-a"
        assert (new_dir / "b.jsonl").read_text() == "existing-b"
        assert (new_dir / "b-feat.jsonl").read_text() == "old-b"
        assert not old_dir.exists()
        assert "Claude: Migrated 2 session(s)" in log_output(log)

    def test_no_target_worktree(self, tmp_path, log):
        home = tmp_path / "claude"
        (home / "projects").mkdir(parents=True)
        ctx = make_context(tmp_path, log, target_worktree=None)

        claude_plugin(claude_home=home).get_hook(HookName.BEFORE_REMOVE)(ctx)

        assert "skipping session migration" in log_output(log)

    def test_project_dir_name(self):
        assert project_dir_name("/Users/me/src/app") == "-Users-me-src-app"


class TestCodexPlugin:
    def test_rewrites_session_cwd(self, tmp_path, log):
        home = tmp_path / "codex"
        sessions = home / "sessions" / "2026" / "01"
        sessions.mkdir(parents=True)
        ctx = make_context(tmp_path, log)
        session = sessions / "s.jsonl"
        session.write_text(f'{{"cwd":"{ctx.worktree_path}","x":1}}\n')
        other = sessions / "other.jsonl"
        other.write_text('{"cwd":"/somewhere/else"}\n')

        codex_plugin(codex_home=home).get_hook(HookName.BEFORE_REMOVE)(ctx)

        assert session.read_text() == f'{{"cwd":"{ctx.target_worktree}","x":1}}\n'
        assert other.read_text() == '{"cwd":"/somewhere/else"}\n'
        assert "Codex: Patched 1 session(s)" in log_output(log)

    def test_codex_home_from_environment(self, tmp_path, monkeypatch, log):
        monkeypatch.setenv("CODEX_HOME", str(tmp_path / "env-codex"))
        ctx = make_context(tmp_path, log)

        codex_plugin().get_hook(HookName.BEFORE_REMOVE)(ctx)

        assert "Codex: No sessions directory found" in log_output(log)


class TestNeonPlugin:
    @pytest.fixture(autouse=True)
    def no_project_env(self, monkeypatch):
        monkeypatch.delenv("NEON_PROJECT_ID", raising=False)

    @pytest.fixture
    def worktrees(self, tmp_path):
        source = tmp_path / "app"
        target = tmp_path / "app-feat"
        source.mkdir()
        target.mkdir()
        (source / ".env").write_text('NEON_PROJECT_ID="proj-123"\nDATABASE_URL="postgres://main"\n')
        (target / ".env").write_text('NEON_PROJECT_ID="proj-123"\nDATABASE_URL="postgres://main"\n')
        return source, target

    def test_after_create_branches_database(self, tmp_path, log, worktrees):
        source, target = worktrees
        calls: list = []
        exec_fn = fake_exec(
            {
                "neon connection-string --branch feat --project-id proj-123": ExecResult(
                    stdout="postgres://feat"
                )
            },
            calls,
        )
        ctx = make_context(
            tmp_path, log, exec_fn, source_worktree=source, worktree_path=target
        )

        with patch("wt.plugins.neon.command_exists", return_value=True):
            neon_plugin().get_hook(HookName.AFTER_CREATE)(ctx)

        assert [command for command, _ in calls] == [
            "neon branches create --name feat --project-id proj-123",
            "neon connection-string --branch feat --project-id proj-123",
        ]
        assert 'DATABASE_URL="postgres://feat"' in (target / ".env").read_text()
        assert 'Neon: Patched DATABASE_URL for branch "feat"' in log_output(log)

    def test_project_id_from_environment_wins(self, tmp_path, log, worktrees, monkeypatch):
        source, target = worktrees
        monkeypatch.setenv("NEON_PROJECT_ID", "from-env")
        calls: list = []
        ctx = make_context(
            tmp_path, log, fake_exec(calls=calls), source_worktree=source, worktree_path=target
        )

        with patch("wt.plugins.neon.command_exists", return_value=True):
            neon_plugin().get_hook(HookName.AFTER_CREATE)(ctx)

        assert calls[0][0] == "neon branches create --name feat --project-id from-env"

    def test_parent_branch_from_current_worktree(self, tmp_path, log, worktrees):
        source, target = worktrees
        calls: list = []
        exec_fn = fake_exec(
            {"git symbolic-ref --quiet --short HEAD": ExecResult(stdout="develop")}, calls
        )
        ctx = make_context(
            tmp_path, log, exec_fn, source_worktree=source, worktree_path=target
        )

        with patch("wt.plugins.neon.command_exists", return_value=True):
            neon_plugin(parent_branch="current").get_hook(HookName.AFTER_CREATE)(ctx)

        assert calls[0] == ("git symbolic-ref --quiet --short HEAD", source)
        assert calls[1][0] == (
            "neon branches create --name feat --project-id proj-123 --parent develop"
        )

    def test_skips_without_cli(self, tmp_path, log, worktrees):
        source, target = worktrees
        calls: list = []
        ctx = make_context(
            tmp_path, log, fake_exec(calls=calls), source_worktree=source, worktree_path=target
        )

        with patch("wt.plugins.neon.command_exists", return_value=False):
            neon_plugin().get_hook(HookName.AFTER_CREATE)(ctx)

        assert calls == []

    def test_skips_without_project_id(self, tmp_path, log):
        calls: list = []
        ctx = make_context(tmp_path, log, fake_exec(calls=calls))

        neon_plugin().get_hook(HookName.AFTER_CREATE)(ctx)

        assert calls == []
        assert "Neon: No project ID found" in log_output(log)

    def test_before_remove_deletes_branch(self, tmp_path, log, worktrees):
        source, _ = worktrees
        calls: list = []
        ctx = make_context(tmp_path, log, fake_exec(calls=calls), target_worktree=source)

        with patch("wt.plugins.neon.command_exists", return_value=True):
            neon_plugin().get_hook(HookName.BEFORE_REMOVE)(ctx)

        assert calls == [("neon branches delete feat --project-id proj-123 --force", None)]

    def test_create_failure_is_a_warning(self, tmp_path, log, worktrees):
        source, target = worktrees
        exec_fn = fake_exec(
            {
                "neon branches create --name feat --project-id proj-123": ExecResult(
                    stderr="quota exceeded", exit_code=1
                )
            }
        )
        ctx = make_context(
            tmp_path, log, exec_fn, source_worktree=source, worktree_path=target
        )

        with patch("wt.plugins.neon.command_exists", return_value=True):
            neon_plugin().get_hook(HookName.AFTER_CREATE)(ctx)

        assert "Neon: Failed to create branch: quota exceeded" in log_output(log)
        assert 'DATABASE_URL="postgres://main"' in (target / ".env").read_text()

    def test_runs_commands_without_bound_exec(self, tmp_path, log, worktrees):
        source, _ = worktrees
        calls: list = []
        ctx = make_context(tmp_path, log, target_worktree=source, exec=None)

        with (
            patch("wt.plugins.neon.command_exists", return_value=True),
            patch("wt.plugins.neon.run_shell", side_effect=fake_exec(calls=calls)),
        ):
            neon_plugin().get_hook(HookName.BEFORE_REMOVE)(ctx)

        assert calls == [("neon branches delete feat --project-id proj-123 --force", None)]


class TestPlanetScalePlugin:
    CREATE = "pscale branch create shop feat --org acme --wait"
    PASSWORD = "pscale password create shop feat wt-feat-1700000000000 --org acme --format json"

    @pytest.fixture(autouse=True)
    def no_planetscale_env(self, monkeypatch):
        monkeypatch.delenv("PLANETSCALE_DATABASE", raising=False)
        monkeypatch.delenv("PLANETSCALE_ORG", raising=False)

    @pytest.fixture(autouse=True)
    def fixed_clock(self):
        with patch("wt.plugins.planetscale.time.time", return_value=1700000000.0):
            yield

    @pytest.fixture
    def worktrees(self, tmp_path):
        source = tmp_path / "app"
        target = tmp_path / "app-feat"
        source.mkdir()
        target.mkdir()
        env = 'PLANETSCALE_DATABASE=shop\nPLANETSCALE_ORG=acme\nDATABASE_URL="mysql://main"\n'
        (source / ".env").write_text(env)
        (target / ".env").write_text(env)
        return source, target

    def test_after_create_branches_database(self, tmp_path, log, worktrees):
        source, target = worktrees
        calls: list = []
        password = json.dumps({"connection_strings": {"general": "mysql://feat"}})
        exec_fn = fake_exec({self.PASSWORD: ExecResult(stdout=password)}, calls)
        ctx = make_context(
            tmp_path, log, exec_fn, source_worktree=source, worktree_path=target
        )

        with patch("wt.plugins.planetscale.command_exists", return_value=True):
            planetscale_plugin().get_hook(HookName.AFTER_CREATE)(ctx)

        assert [command for command, _ in calls] == [self.CREATE, self.PASSWORD]
        assert 'DATABASE_URL="mysql://feat"' in (target / ".env").read_text()
        assert 'PlanetScale: Patched DATABASE_URL for branch "feat"' in log_output(log)

    def test_parent_branch_from_current_worktree(self, tmp_path, log, worktrees):
        source, target = worktrees
        calls: list = []
        exec_fn = fake_exec(
            {"git symbolic-ref --quiet --short HEAD": ExecResult(stdout="develop")}, calls
        )
        ctx = make_context(
            tmp_path, log, exec_fn, source_worktree=source, worktree_path=target
        )

        with patch("wt.plugins.planetscale.command_exists", return_value=True):
            planetscale_plugin(parent_branch="current").get_hook(HookName.AFTER_CREATE)(ctx)

        assert calls[0] == ("git symbolic-ref --quiet --short HEAD", source)
        assert calls[1][0] == "pscale branch create shop feat --from develop --org acme --wait"

    def test_named_parent_branch(self, tmp_path, log, worktrees):
        source, target = worktrees
        calls: list = []
        ctx = make_context(
            tmp_path, log, fake_exec(calls=calls), source_worktree=source, worktree_path=target
        )

        with patch("wt.plugins.planetscale.command_exists", return_value=True):
            planetscale_plugin(parent_branch="staging").get_hook(HookName.AFTER_CREATE)(ctx)

        assert calls[0][0] == "pscale branch create shop feat --from staging --org acme --wait"

    def test_unparseable_password_response_is_a_warning(self, tmp_path, log, worktrees):
        source, target = worktrees
        exec_fn = fake_exec({self.PASSWORD: ExecResult(stdout="not json")})
        ctx = make_context(
            tmp_path, log, exec_fn, source_worktree=source, worktree_path=target
        )

        with patch("wt.plugins.planetscale.command_exists", return_value=True):
            planetscale_plugin().get_hook(HookName.AFTER_CREATE)(ctx)

        assert "PlanetScale: Failed to parse password response" in log_output(log)
        assert 'DATABASE_URL="mysql://main"' in (target / ".env").read_text()

    def test_skips_without_database(self, tmp_path, log):
        calls: list = []
        ctx = make_context(tmp_path, log, fake_exec(calls=calls))

        planetscale_plugin().get_hook(HookName.AFTER_CREATE)(ctx)

        assert calls == []
        assert "PlanetScale: No database name found" in log_output(log)

    def test_skips_without_cli(self, tmp_path, log, worktrees):
        source, target = worktrees
        calls: list = []
        ctx = make_context(
            tmp_path, log, fake_exec(calls=calls), source_worktree=source, worktree_path=target
        )

        with patch("wt.plugins.planetscale.command_exists", return_value=False):
            planetscale_plugin().get_hook(HookName.AFTER_CREATE)(ctx)

        assert calls == []

    def test_before_remove_deletes_branch(self, tmp_path, log, worktrees):
        source, _ = worktrees
        calls: list = []
        ctx = make_context(tmp_path, log, fake_exec(calls=calls), target_worktree=source)

        with patch("wt.plugins.planetscale.command_exists", return_value=True):
            planetscale_plugin().get_hook(HookName.BEFORE_REMOVE)(ctx)

        assert calls == [("pscale branch delete shop feat --org acme --force", None)]
        assert 'PlanetScale: Deleted branch "feat"' in log_output(log)

    def test_delete_failure_is_a_warning(self, tmp_path, log, worktrees):
        source, _ = worktrees
        exec_fn = fake_exec(
            {
                "pscale branch delete shop feat --org acme --force": ExecResult(
                    stderr="branch not found", exit_code=1
                )
            }
        )
        ctx = make_context(tmp_path, log, exec_fn, target_worktree=source)

        with patch("wt.plugins.planetscale.command_exists", return_value=True):
            planetscale_plugin().get_hook(HookName.BEFORE_REMOVE)(ctx)

        assert "PlanetScale: Failed to delete branch: branch not found" in log_output(log)


class TestParseConnectionString:
    def test_reads_general_connection_string(self):
        output = json.dumps({"id": "pw", "connection_strings": {"general": "mysql://x"}})

        assert parse_connection_string(output) == "mysql://x"

    @pytest.mark.parametrize("output", ["not json", "[]", '{"connection_strings": {}}'])
    def test_malformed_output(self, output):
        assert parse_connection_string(output) is None


class TestEnvValue:
    def test_environment_wins_over_file(self, tmp_path, monkeypatch):
        env = tmp_path / ".env"
        env.write_text("SOME_DB=from-file\n")
        monkeypatch.setenv("SOME_DB", "from-env")

        assert env_value(env, "SOME_DB") == "from-env"

    def test_reads_quoted_value_from_file(self, tmp_path, monkeypatch):
        env = tmp_path / ".env"
        env.write_text('SOME_DB="from-file"\n')
        monkeypatch.delenv("SOME_DB", raising=False)

        assert env_value(env, "SOME_DB") == "from-file"

    def test_missing_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("SOME_DB", raising=False)

        assert env_value(tmp_path / ".env", "SOME_DB") is None


class TestSetDatabaseUrl:
    def test_replaces_existing_line(self):
        content = "A=1\nDATABASE_URL=old\nB=2\n"

        assert set_database_url(content, "postgres://new") == (
            'A=1\nDATABASE_URL="postgres://new"\nB=2\n'
        )

    def test_appends_when_missing(self):
        assert set_database_url("A=1", "postgres://new") == 'A=1\nDATABASE_URL="postgres://new"\n'
