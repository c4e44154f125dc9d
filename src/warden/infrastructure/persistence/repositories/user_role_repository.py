"""Repository for the user_roles join table."""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from warden.infrastructure.persistence.models import RoleModel, UserModel, UserRoleModel


class UserRoleRepository:
    """Repository for role memberships of users."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, user_id: int, role_id: int) -> UserRoleModel:
        """Insert a (user, role) pair."""
        association = UserRoleModel(user_id=user_id, role_id=role_id)
        self.session.add(association)
        await self.session.flush()
        return association

    async def get(self, user_id: int, role_id: int) -> UserRoleModel | None:
        """Get the join row for a (user, role) pair."""
        result = await self.session.execute(
            select(UserRoleModel).where(
                UserRoleModel.user_id == user_id,
                UserRoleModel.role_id == role_id,
            )
        )
        return result.scalar_one_or_none()

    async def remove(self, user_id: int, role_id: int) -> bool:
        """Delete a (user, role) pair.

        Returns:
            True if a row was deleted, False if the pair did not exist.
        """
        result = await self.session.execute(
            delete(UserRoleModel).where(
                UserRoleModel.user_id == user_id,
                UserRoleModel.role_id == role_id,
            )
        )
        return result.rowcount > 0

    async def list_roles_for_user(self, user_id: int) -> list[RoleModel]:
        """List the roles of a user, ordered by name."""
        result = await self.session.execute(
            select(RoleModel)
            .join(UserRoleModel, RoleModel.id == UserRoleModel.role_id)
            .where(UserRoleModel.user_id == user_id)
            .order_by(RoleModel.name)
        )
        return list(result.scalars().all())

    async def list_users_for_role(self, role_id: int) -> list[UserModel]:
        """List the members of a role, ordered by last then first name."""
        result = await self.session.execute(
            select(UserModel)
            .join(UserRoleModel, UserModel.id == UserRoleModel.user_id)
            .where(UserRoleModel.role_id == role_id)
            .order_by(UserModel.last_name, UserModel.first_name)
        )
        return list(result.scalars().all())
