"""CLI tests against a file-backed SQLite database."""

import asyncio

import pytest
from click.testing import CliRunner

from warden.cli import cli
from warden.core.config import get_settings
from warden.infrastructure.persistence.database import DatabaseManager
from warden.infrastructure.persistence.models import UserModel


async def _create_user(user_id: int) -> None:
    db = DatabaseManager(get_settings())
    try:
        async with db.session() as session:
            session.add(
                UserModel(
                    id=user_id,
                    first_name="Ada",
                    last_name="Lovelace",
                    email="ada@example.com",
                    password_hash="x",
                )
            )
            await session.commit()
    finally:
        await db.disconnect()


@pytest.fixture
def runner(tmp_path, monkeypatch):
    db_path = tmp_path / "data" / "cli.db"
    monkeypatch.setenv("WARDEN_DATABASE_URL", f"sqlite+aiosqlite:///{db_path}")
    monkeypatch.setenv("WARDEN_ENVIRONMENT", "testing")
    monkeypatch.setenv("WARDEN_LOG_FORMAT", "console")
    monkeypatch.setenv("WARDEN_LOG_LEVEL", "ERROR")
    monkeypatch.setenv("WARDEN_SECRET_KEY", "cli-test-secret-key-long-enough-for-hs256")
    get_settings.cache_clear()

    yield CliRunner()

    get_settings.cache_clear()


def test_migrate_status_rollback(runner):
    result = runner.invoke(cli, ["migrate"])
    assert result.exit_code == 0, result.output
    assert "Applied m001_create_users_table" in result.output
    assert "Applied m004_create_user_roles_table" in result.output

    result = runner.invoke(cli, ["migrate"])
    assert result.exit_code == 0
    assert "No pending migrations." in result.output

    result = runner.invoke(cli, ["rollback"])
    assert result.exit_code == 0
    assert "Rolled back m004_create_user_roles_table" in result.output

    result = runner.invoke(cli, ["migration-status"])
    assert result.exit_code == 0
    assert "[x] m003_create_roles_table" in result.output
    assert "[ ] m004_create_user_roles_table" in result.output


def test_rollback_on_fresh_database(runner):
    result = runner.invoke(cli, ["rollback"])

    assert result.exit_code == 0
    assert "Nothing to roll back." in result.output


def test_rbac_workflow(runner):
    assert runner.invoke(cli, ["migrate"]).exit_code == 0

    result = runner.invoke(cli, ["rbac", "create-role", "editor", "--description", "Edits"])
    assert result.exit_code == 0, result.output
    assert "Created role 1: editor" in result.output

    result = runner.invoke(
        cli,
        ["rbac", "create-permission", "article.publish", "--action", "publish",
         "--resource", "article"],
    )
    assert result.exit_code == 0, result.output
    assert "Created permission 1: article.publish" in result.output

    result = runner.invoke(cli, ["rbac", "grant-permissions", "1", "1"])
    assert "Granted 1 permission(s) to role 1" in result.output
    result = runner.invoke(cli, ["rbac", "grant-permissions", "1", "1"])
    assert "Granted 0 permission(s) to role 1" in result.output

    # The file-backed database enforces foreign keys, so an unknown user is
    # rejected by storage rather than by the service
    result = runner.invoke(cli, ["rbac", "assign-roles", "7", "1"])
    assert result.exit_code == 1

    asyncio.run(_create_user(7))
    result = runner.invoke(cli, ["rbac", "assign-roles", "7", "1"])
    assert result.exit_code == 0, result.output
    assert "Assigned 1 role(s) to user 7" in result.output

    result = runner.invoke(cli, ["rbac", "user-permissions", "7"])
    assert result.exit_code == 0
    assert "article.publish\tarticle:publish" in result.output

    assert runner.invoke(cli, ["rbac", "revoke-permissions", "1", "1"]).exit_code == 0
    result = runner.invoke(cli, ["rbac", "user-permissions", "7"])
    assert "User 7 holds no permissions." in result.output

    assert runner.invoke(cli, ["rbac", "unassign-roles", "7", "1"]).exit_code == 0


def test_rbac_errors_exit_nonzero(runner):
    assert runner.invoke(cli, ["migrate"]).exit_code == 0
    assert runner.invoke(cli, ["rbac", "create-role", "editor"]).exit_code == 0

    duplicate = runner.invoke(cli, ["rbac", "create-role", "editor"])
    unknown_role = runner.invoke(cli, ["rbac", "grant-permissions", "99", "1"])

    assert duplicate.exit_code == 1
    assert "already exists" in duplicate.output
    assert unknown_role.exit_code == 1
    assert "not found" in unknown_role.output


def test_info(runner):
    result = runner.invoke(cli, ["info"])

    assert result.exit_code == 0
    assert "Warden v0.1.0" in result.output
    assert "Signing key:  configured" in result.output
