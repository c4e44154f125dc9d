"""Role repository for database operations."""

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from warden.domain.entities import Page, check_page_bounds
from warden.infrastructure.persistence.models import (
    RoleModel,
    RolePermissionModel,
    UserRoleModel,
)


class RoleRepository:
    """Repository for role database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, role: RoleModel) -> RoleModel:
        """Create a new role.

        Args:
            role: Role model to create.

        Returns:
            Created role model.
        """
        self.session.add(role)
        await self.session.flush()
        return role

    async def get_by_id(self, role_id: int) -> RoleModel | None:
        """Get a role by ID.

        Args:
            role_id: Role ID.

        Returns:
            Role model if found, None otherwise.
        """
        result = await self.session.execute(
            select(RoleModel).where(RoleModel.id == role_id)
        )
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str) -> RoleModel | None:
        """Get a role by name.

        Args:
            name: Role name (e.g., 'editor').

        Returns:
            Role model if found, None otherwise.
        """
        result = await self.session.execute(
            select(RoleModel).where(RoleModel.name == name)
        )
        return result.scalar_one_or_none()

    async def paginate(self, page: int = 1, limit: int = 50) -> Page[RoleModel]:
        """List roles ordered by ID, one page at a time."""
        check_page_bounds(page, limit)
        total = await self.session.scalar(select(func.count()).select_from(RoleModel))
        result = await self.session.execute(
            select(RoleModel)
            .order_by(RoleModel.id)
            .limit(limit)
            .offset((page - 1) * limit)
        )
        return Page(
            records=list(result.scalars().all()),
            total=total or 0,
            page=page,
            limit=limit,
        )

    async def update(
        self, role: RoleModel, name: str, description: str | None
    ) -> RoleModel:
        """Change the name and description of a role."""
        role.name = name
        role.description = description
        await self.session.flush()
        return role

    async def delete(self, role: RoleModel) -> None:
        """Delete a role together with its memberships and grants.

        Join rows are removed explicitly so the result does not depend on
        the database enforcing ON DELETE CASCADE.
        """
        await self.session.execute(
            delete(UserRoleModel).where(UserRoleModel.role_id == role.id)
        )
        await self.session.execute(
            delete(RolePermissionModel).where(RolePermissionModel.role_id == role.id)
        )
        await self.session.delete(role)
        await self.session.flush()
