"""
Flask CLI command tests.
"""

import pytest

from rta.storage import get_repository


@pytest.fixture
def runner(app):
    return app.test_cli_runner()


class TestSystemCommands:

    def test_init_is_idempotent(self, runner, repo):
        result = runner.invoke(args=["system", "init"])
        assert result.exit_code == 0
        assert "DONE" in result.output
        assert "already has 6" in result.output
        assert repo.count_residents() == 6

    def test_reset_db_requires_confirmation(self, runner):
        result = runner.invoke(args=["system", "reset-db"])
        assert "Refusing" in result.output

    def test_reset_db(self, app, runner, repo):
        result = runner.invoke(args=["system", "reset-db", "--yes"])
        if repo.backend_name == "sql":
            assert "PASS Database reset (6 residents seeded)" in result.output
            assert get_repository().count_residents() == 6
        else:
            assert "only applies to sql" in result.output


class TestUserCommands:

    def test_create_and_list(self, runner, repo):
        result = runner.invoke(args=[
            "users", "create", "--username", "erin", "--password", "secret123",
            "--full-name", "Erin Rusu", "--company", "ASP",
        ])
        assert result.exit_code == 0
        assert "PASS Created user: erin" in result.output
        assert repo.get_user_by_username("erin").company == "ASP"

        listing = runner.invoke(args=["users", "list"])
        assert "erin" in listing.output
        assert "Erin Rusu" in listing.output

    def test_create_duplicate_fails_cleanly(self, runner, alice):
        result = runner.invoke(args=["users", "create", "--username", "alice", "--password", "secret123"])
        assert result.exit_code == 0
        assert "FAIL Username already exists" in result.output

    def test_list_empty(self, runner):
        result = runner.invoke(args=["users", "list"])
        assert "No users found." in result.output


class TestMaintenanceCommands:

    def test_cleanup_sessions(self, runner, alice_client):
        alice_client.post("/api/logout")
        result = runner.invoke(args=["maintenance", "cleanup-sessions"])
        assert result.exit_code == 0
        assert "PASS Deleted 1 session(s)" in result.output
