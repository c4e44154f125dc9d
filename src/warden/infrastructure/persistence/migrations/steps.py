"""Registered schema migration steps.

Steps run in the order they appear in ``MIGRATIONS``. Every ``up`` creates
only what is missing and every ``down`` drops only what exists, so a step can
be re-run safely against a partially migrated database.
"""

from collections.abc import Awaitable, Callable
from typing import NamedTuple

from sqlalchemy import Table
from sqlalchemy.ext.asyncio import AsyncConnection

from warden.infrastructure.persistence.models import (
    PermissionModel,
    RoleModel,
    RolePermissionModel,
    UserModel,
    UserRoleModel,
)

StepAction = Callable[[AsyncConnection], Awaitable[None]]


class MigrationStep(NamedTuple):
    """A named, reversible schema change."""

    name: str
    up: StepAction
    down: StepAction


async def _create_tables(conn: AsyncConnection, *tables: Table) -> None:
    for table in tables:
        await conn.run_sync(table.create, checkfirst=True)


async def _drop_tables(conn: AsyncConnection, *tables: Table) -> None:
    for table in tables:
        await conn.run_sync(table.drop, checkfirst=True)


async def create_users_table(conn: AsyncConnection) -> None:
    await _create_tables(conn, UserModel.__table__)


async def drop_users_table(conn: AsyncConnection) -> None:
    await _drop_tables(conn, UserModel.__table__)


async def create_permissions_table(conn: AsyncConnection) -> None:
    await _create_tables(conn, PermissionModel.__table__)


async def drop_permissions_table(conn: AsyncConnection) -> None:
    await _drop_tables(conn, PermissionModel.__table__)


async def create_roles_table(conn: AsyncConnection) -> None:
    # role_permissions references permissions, created by m002
    await _create_tables(conn, RoleModel.__table__, RolePermissionModel.__table__)


async def drop_roles_table(conn: AsyncConnection) -> None:
    await _drop_tables(conn, RolePermissionModel.__table__, RoleModel.__table__)


async def create_user_roles_table(conn: AsyncConnection) -> None:
    await _create_tables(conn, UserRoleModel.__table__)


async def drop_user_roles_table(conn: AsyncConnection) -> None:
    await _drop_tables(conn, UserRoleModel.__table__)


MIGRATIONS: tuple[MigrationStep, ...] = (
    MigrationStep("m001_create_users_table", create_users_table, drop_users_table),
    MigrationStep(
        "m002_create_permissions_table", create_permissions_table, drop_permissions_table
    ),
    MigrationStep("m003_create_roles_table", create_roles_table, drop_roles_table),
    MigrationStep(
        "m004_create_user_roles_table", create_user_roles_table, drop_user_roles_table
    ),
)
