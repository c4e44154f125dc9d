"""Command-line interface for Warden.

This module provides the CLI commands for running the server, managing the
schema and administering roles and permissions.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import NoReturn, TypeVar

import click

from warden import __version__
from warden.core.config import get_settings
from warden.core.logging import configure_logging, get_logger
from warden.domain.errors import WardenError
from warden.infrastructure.persistence.database import DatabaseManager

T = TypeVar("T")


def run_with_database(operation: Callable[[DatabaseManager], Awaitable[T]]) -> T:
    """Run ``operation`` against a fresh database manager, then dispose of it.

    Domain errors are reported on stderr and end the command with exit code 1.
    """
    settings = get_settings()
    configure_logging(settings)
    logger = get_logger(__name__)

    async def runner() -> T:
        db = DatabaseManager(settings)
        db.ensure_sqlite_directory()
        try:
            return await operation(db)
        finally:
            await db.disconnect()

    try:
        return asyncio.run(runner())
    except WardenError as e:
        logger.error("Command failed", error=e.message)
        click.echo(f"Error: {e.message}", err=True)
        raise SystemExit(1)


@click.group()
@click.version_option(version=__version__, prog_name="Warden")
def cli() -> None:
    """Warden - accounts, login and role-based access control."""


@cli.command()
@click.option("--host", type=str, default=None, help="Host to bind to (overrides config)")
@click.option("--port", type=int, default=None, help="Port to bind to (overrides config)")
@click.option(
    "--reload",
    is_flag=True,
    default=False,
    help="Enable auto-reload for development",
)
def serve(host: str | None, port: int | None, reload: bool) -> None:
    """Start the Warden HTTP server.

    Pending migrations are applied on startup unless
    WARDEN_RUN_MIGRATIONS_ON_STARTUP is false.
    """
    import uvicorn

    settings = get_settings()
    bind_host = host or settings.host
    bind_port = port or settings.port

    configure_logging(settings)
    logger = get_logger(__name__)
    logger.info(
        "Starting Warden server",
        host=bind_host,
        port=bind_port,
        reload=reload,
        environment=settings.environment,
    )

    uvicorn.run(
        "warden.infrastructure.api.app:app",
        host=bind_host,
        port=bind_port,
        reload=reload,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


@cli.command()
def migrate() -> None:
    """Apply every pending schema migration."""
    from warden.infrastructure.persistence.migrations import MigrationRunner

    async def apply(db: DatabaseManager) -> list[str]:
        return await MigrationRunner(db.engine).run()

    applied = run_with_database(apply)
    if not applied:
        click.echo("No pending migrations.")
        return
    for name in applied:
        click.echo(f"Applied {name}")


@cli.command()
def rollback() -> None:
    """Revert the most recently applied migration."""
    from warden.infrastructure.persistence.migrations import MigrationRunner

    async def revert(db: DatabaseManager) -> str | None:
        runner = MigrationRunner(db.engine)
        await runner.initialize()
        return await runner.rollback_last()

    name = run_with_database(revert)
    if name is None:
        click.echo("Nothing to roll back.")
    else:
        click.echo(f"Rolled back {name}")


@cli.command("migration-status")
def migration_status() -> None:
    """Show which registered migrations have been applied."""
    from warden.infrastructure.persistence.migrations import MigrationRunner

    async def report(db: DatabaseManager):
        runner = MigrationRunner(db.engine)
        await runner.initialize()
        return await runner.status()

    for entry in run_with_database(report):
        mark = "x" if entry.applied else " "
        click.echo(f"[{mark}] {entry.name}")


@cli.command()
def info() -> None:
    """Display Warden configuration."""
    settings = get_settings()

    click.echo(f"""
Warden v{settings.app_version}
{'=' * 40}

Configuration:
  Environment:  {settings.environment}
  API Prefix:   {settings.api_prefix}

Server:
  Host:         {settings.host}
  Port:         {settings.port}

Database:
  Pool Size:    {settings.db_pool_size}
  Echo:         {settings.db_echo}
  Auto-migrate: {settings.run_migrations_on_startup}

Security:
  Signing key:  {"configured" if settings.secret_key else "MISSING"}

Logging:
  Level:        {settings.log_level}
  Format:       {settings.log_format}
""")


@cli.group()
def rbac() -> None:
    """Administer roles, permissions and assignments."""


def _authorization_service(db: DatabaseManager):
    from warden.domain.services import AuthorizationService

    return AuthorizationService(db.session_factory)


@rbac.command("create-role")
@click.argument("name")
@click.option("--description", default=None, help="Free-text description")
def create_role(name: str, description: str | None) -> None:
    """Create a role called NAME."""

    async def create(db: DatabaseManager):
        return await _authorization_service(db).create_role(name, description)

    role = run_with_database(create)
    click.echo(f"Created role {role.id}: {role.name}")


@rbac.command("create-permission")
@click.argument("name")
@click.option("--action", required=True, help="Action the permission allows")
@click.option("--resource", default=None, help="Resource the action applies to")
def create_permission(name: str, action: str, resource: str | None) -> None:
    """Create a permission called NAME."""

    async def create(db: DatabaseManager):
        return await _authorization_service(db).create_permission(name, action, resource)

    permission = run_with_database(create)
    click.echo(f"Created permission {permission.id}: {permission.name}")


@rbac.command("grant-permissions")
@click.argument("role_id", type=int)
@click.argument("permission_ids", type=int, nargs=-1, required=True)
def grant_permissions(role_id: int, permission_ids: tuple[int, ...]) -> None:
    """Grant PERMISSION_IDS to the role ROLE_ID."""

    async def grant(db: DatabaseManager):
        return await _authorization_service(db).grant_permissions_to_role(
            role_id, permission_ids
        )

    created = run_with_database(grant)
    click.echo(f"Granted {len(created)} permission(s) to role {role_id}")


@rbac.command("revoke-permissions")
@click.argument("role_id", type=int)
@click.argument("permission_ids", type=int, nargs=-1, required=True)
def revoke_permissions(role_id: int, permission_ids: tuple[int, ...]) -> None:
    """Revoke PERMISSION_IDS from the role ROLE_ID."""

    async def revoke(db: DatabaseManager):
        await _authorization_service(db).revoke_permissions_from_role(
            role_id, permission_ids
        )

    run_with_database(revoke)
    click.echo(f"Revoked permissions from role {role_id}")


@rbac.command("assign-roles")
@click.argument("user_id", type=int)
@click.argument("role_ids", type=int, nargs=-1, required=True)
def assign_roles(user_id: int, role_ids: tuple[int, ...]) -> None:
    """Give the user USER_ID the roles ROLE_IDS."""

    async def assign(db: DatabaseManager):
        return await _authorization_service(db).grant_roles_to_user(user_id, role_ids)

    created = run_with_database(assign)
    click.echo(f"Assigned {len(created)} role(s) to user {user_id}")


@rbac.command("unassign-roles")
@click.argument("user_id", type=int)
@click.argument("role_ids", type=int, nargs=-1, required=True)
def unassign_roles(user_id: int, role_ids: tuple[int, ...]) -> None:
    """Take the roles ROLE_IDS away from the user USER_ID."""

    async def unassign(db: DatabaseManager):
        await _authorization_service(db).revoke_roles_from_user(user_id, role_ids)

    run_with_database(unassign)
    click.echo(f"Unassigned roles from user {user_id}")


@rbac.command("user-permissions")
@click.argument("user_id", type=int)
def user_permissions(user_id: int) -> None:
    """List every permission the user USER_ID holds."""

    async def resolve(db: DatabaseManager):
        return await _authorization_service(db).user_permissions(user_id)

    permissions = run_with_database(resolve)
    if not permissions:
        click.echo(f"User {user_id} holds no permissions.")
        return
    for permission in permissions:
        scope = f"{permission.resource}:" if permission.resource else ""
        click.echo(f"{permission.id}\t{permission.name}\t{scope}{permission.action}")


def main() -> NoReturn:
    """Main entry point for the CLI.

    This function is called when the `warden` command is run
    or when using `python -m warden`.
    """
    cli()


if __name__ == "__main__":
    main()
