"""Permission repository for database operations."""

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from warden.domain.entities import Page, check_page_bounds
from warden.infrastructure.persistence.models import PermissionModel, RolePermissionModel


class PermissionRepository:
    """Repository for permission database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, permission: PermissionModel) -> PermissionModel:
        """Create a new permission.

        Args:
            permission: Permission model to create.

        Returns:
            Created permission model.
        """
        self.session.add(permission)
        await self.session.flush()
        return permission

    async def get_by_id(self, permission_id: int) -> PermissionModel | None:
        """Get a permission by ID.

        Args:
            permission_id: Permission ID.

        Returns:
            Permission model if found, None otherwise.
        """
        result = await self.session.execute(
            select(PermissionModel).where(PermissionModel.id == permission_id)
        )
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str) -> PermissionModel | None:
        """Get a permission by its unique name."""
        result = await self.session.execute(
            select(PermissionModel).where(PermissionModel.name == name)
        )
        return result.scalar_one_or_none()

    async def get_by_resource_and_action(
        self, resource: str, action: str
    ) -> PermissionModel | None:
        """Get the permission granting ``action`` on ``resource``.

        Args:
            resource: Resource name.
            action: Action name.

        Returns:
            Permission model if found, None otherwise.
        """
        result = await self.session.execute(
            select(PermissionModel).where(
                PermissionModel.resource == resource,
                PermissionModel.action == action,
            )
        )
        return result.scalar_one_or_none()

    async def list_by_resource(self, resource: str) -> list[PermissionModel]:
        """List all permissions scoped to a resource, ordered by name."""
        result = await self.session.execute(
            select(PermissionModel)
            .where(PermissionModel.resource == resource)
            .order_by(PermissionModel.name)
        )
        return list(result.scalars().all())

    async def paginate(self, page: int = 1, limit: int = 50) -> Page[PermissionModel]:
        """List permissions ordered by name, one page at a time."""
        check_page_bounds(page, limit)
        total = await self.session.scalar(
            select(func.count()).select_from(PermissionModel)
        )
        result = await self.session.execute(
            select(PermissionModel)
            .order_by(PermissionModel.name)
            .limit(limit)
            .offset((page - 1) * limit)
        )
        return Page(
            records=list(result.scalars().all()),
            total=total or 0,
            page=page,
            limit=limit,
        )

    async def delete(self, permission: PermissionModel) -> None:
        """Delete a permission and every grant of it to a role."""
        await self.session.execute(
            delete(RolePermissionModel).where(
                RolePermissionModel.permission_id == permission.id
            )
        )
        await self.session.delete(permission)
        await self.session.flush()
