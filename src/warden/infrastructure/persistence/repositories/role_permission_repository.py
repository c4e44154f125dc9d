"""Repository for the role_permissions join table."""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from warden.infrastructure.persistence.models import (
    PermissionModel,
    RoleModel,
    RolePermissionModel,
    UserRoleModel,
)


class RolePermissionRepository:
    """Repository for permission grants to roles."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, role_id: int, permission_id: int) -> RolePermissionModel:
        """Insert a (role, permission) pair."""
        association = RolePermissionModel(role_id=role_id, permission_id=permission_id)
        self.session.add(association)
        await self.session.flush()
        return association

    async def get(self, role_id: int, permission_id: int) -> RolePermissionModel | None:
        """Get the join row for a (role, permission) pair."""
        result = await self.session.execute(
            select(RolePermissionModel).where(
                RolePermissionModel.role_id == role_id,
                RolePermissionModel.permission_id == permission_id,
            )
        )
        return result.scalar_one_or_none()

    async def remove(self, role_id: int, permission_id: int) -> bool:
        """Delete a (role, permission) pair.

        Returns:
            True if a row was deleted, False if the pair did not exist.
        """
        result = await self.session.execute(
            delete(RolePermissionModel).where(
                RolePermissionModel.role_id == role_id,
                RolePermissionModel.permission_id == permission_id,
            )
        )
        return result.rowcount > 0

    async def list_permissions_for_role(self, role_id: int) -> list[PermissionModel]:
        """List permissions granted to a role, ordered by name."""
        result = await self.session.execute(
            select(PermissionModel)
            .join(RolePermissionModel, PermissionModel.id == RolePermissionModel.permission_id)
            .where(RolePermissionModel.role_id == role_id)
            .order_by(PermissionModel.name)
        )
        return list(result.scalars().all())

    async def list_roles_for_permission(self, permission_id: int) -> list[RoleModel]:
        """List roles holding a permission, ordered by name."""
        result = await self.session.execute(
            select(RoleModel)
            .join(RolePermissionModel, RoleModel.id == RolePermissionModel.role_id)
            .where(RolePermissionModel.permission_id == permission_id)
            .order_by(RoleModel.name)
        )
        return list(result.scalars().all())

    async def list_permissions_for_user(self, user_id: int) -> list[PermissionModel]:
        """List every permission a user reaches through their roles.

        A permission held through several roles appears once.
        """
        result = await self.session.execute(
            select(PermissionModel)
            .join(RolePermissionModel, PermissionModel.id == RolePermissionModel.permission_id)
            .join(UserRoleModel, RolePermissionModel.role_id == UserRoleModel.role_id)
            .where(UserRoleModel.user_id == user_id)
            .distinct()
            .order_by(PermissionModel.name)
        )
        return list(result.scalars().all())
