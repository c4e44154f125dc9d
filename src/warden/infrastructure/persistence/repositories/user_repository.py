"""User repository for database operations."""

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from warden.domain.entities import Page, check_page_bounds
from warden.infrastructure.persistence.models import UserModel


class UserRepository:
    """Repository for account credential storage."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, user: UserModel) -> UserModel:
        """Create a new user.

        Args:
            user: User model to create.

        Returns:
            Created user model with its generated ID.
        """
        self.session.add(user)
        await self.session.flush()
        return user

    async def get_by_id(self, user_id: int) -> UserModel | None:
        """Get a user by ID.

        Args:
            user_id: User ID.

        Returns:
            User model if found, None otherwise.
        """
        result = await self.session.execute(
            select(UserModel).where(UserModel.id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> UserModel | None:
        """Get a user by email address.

        Args:
            email: User's email address.

        Returns:
            User model if found, None otherwise.
        """
        result = await self.session.execute(
            select(UserModel).where(UserModel.email == email)
        )
        return result.scalar_one_or_none()

    async def email_exists(self, email: str) -> bool:
        """Check if an email already belongs to an account."""
        result = await self.session.execute(
            select(UserModel.id).where(UserModel.email == email).limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def update_password(self, user_id: int, password_hash: str) -> None:
        """Replace the stored credential of a user.

        Args:
            user_id: ID of the user to update.
            password_hash: New encoded password hash.
        """
        await self.session.execute(
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(password_hash=password_hash, updated_at=func.now())
        )
        await self.session.flush()

    async def paginate(self, page: int = 1, limit: int = 50) -> Page[UserModel]:
        """List users ordered by ID, one page at a time."""
        check_page_bounds(page, limit)
        total = await self.session.scalar(select(func.count()).select_from(UserModel))
        result = await self.session.execute(
            select(UserModel)
            .order_by(UserModel.id)
            .limit(limit)
            .offset((page - 1) * limit)
        )
        return Page(
            records=list(result.scalars().all()),
            total=total or 0,
            page=page,
            limit=limit,
        )
