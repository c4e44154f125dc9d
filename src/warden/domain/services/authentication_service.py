"""Authentication service for registration, login and credential changes.

Every operation opens its own session from the pool and commits or rolls
back before returning. Storage, hashing and signing failures surface as
``InternalError``; the underlying detail only reaches the log.
"""

from argon2.exceptions import HashingError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from warden.core.logging import get_logger
from warden.domain.entities import LoginResult, UserProfile
from warden.domain.errors import (
    InternalError,
    InvalidCredentialsError,
    NotFoundError,
    UserAlreadyExistsError,
)
from warden.infrastructure.auth import (
    DUMMY_PASSWORD_HASH,
    JWTError,
    JWTService,
    hash_password,
    needs_rehash,
    verify_password,
)
from warden.infrastructure.persistence.models import UserModel
from warden.infrastructure.persistence.repositories import UserRepository

logger = get_logger(__name__)


class AuthenticationService:
    """Service for account registration and password login."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        jwt_service: JWTService,
    ) -> None:
        """Initialize the authentication service.

        Args:
            session_factory: Factory producing one session per operation.
            jwt_service: Signs session tokens issued on login.
        """
        self.session_factory = session_factory
        self.jwt_service = jwt_service

    async def register(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
    ) -> UserModel:
        """Create a new account.

        Args:
            first_name: Given name.
            last_name: Family name.
            email: Login identity, unique across accounts.
            password: Plaintext password, stored only as an Argon2id hash.

        Returns:
            The created user record.

        Raises:
            UserAlreadyExistsError: If the email already has an account.
            InternalError: If hashing or storage fails.
        """
        try:
            async with self.session_factory() as session:
                user_repo = UserRepository(session)
                if await user_repo.email_exists(email):
                    logger.info("Registration failed: email exists", email=email)
                    raise UserAlreadyExistsError()

                user = await user_repo.create(
                    UserModel(
                        first_name=first_name,
                        last_name=last_name,
                        email=email,
                        password_hash=hash_password(password),
                    )
                )
                await session.commit()
        except HashingError as e:
            logger.error("Registration failed: password hashing", error=str(e))
            raise InternalError(f"Password hashing failed: {e}") from e
        except SQLAlchemyError as e:
            logger.error("Registration failed: storage", email=email, error=str(e))
            raise InternalError(f"Could not store account: {e}") from e

        logger.info("User registered", user_id=user.id, email=email)
        return user

    async def login(self, email: str, password: str) -> LoginResult:
        """Verify a password and issue a session token.

        An unknown email and a wrong password raise the same error, and an
        unknown email is still checked against a dummy hash. A stored hash
        made with outdated parameters is replaced after a successful check.

        Raises:
            InvalidCredentialsError: If the email or password is wrong.
            InternalError: If storage or token signing fails.
        """
        try:
            async with self.session_factory() as session:
                user = await UserRepository(session).get_by_email(email)
        except SQLAlchemyError as e:
            logger.error("Login failed: storage", error=str(e))
            raise InternalError(f"Could not load account: {e}") from e

        if user is None:
            verify_password(password, DUMMY_PASSWORD_HASH)
            logger.info("Login failed: invalid credentials", email=email)
            raise InvalidCredentialsError()

        if not verify_password(password, user.password_hash):
            logger.info("Login failed: invalid credentials", email=email)
            raise InvalidCredentialsError()

        if needs_rehash(user.password_hash):
            await self._rehash(user.id, password)

        try:
            token = self.jwt_service.create_session_token(user.id, user.email)
        except JWTError as e:
            logger.error("Login failed: token signing", user_id=user.id, error=str(e))
            raise InternalError(f"Could not sign session token: {e}") from e

        logger.info("User logged in", user_id=user.id)
        return LoginResult(token=token, user=UserProfile.from_record(user))

    async def _rehash(self, user_id: int, password: str) -> None:
        """Store a fresh hash of a verified password under the current parameters."""
        try:
            async with self.session_factory() as session:
                await UserRepository(session).update_password(user_id, hash_password(password))
                await session.commit()
        except HashingError as e:
            logger.error("Rehash failed: hashing", user_id=user_id, error=str(e))
            raise InternalError(f"Password hashing failed: {e}") from e
        except SQLAlchemyError as e:
            logger.error("Rehash failed: storage", user_id=user_id, error=str(e))
            raise InternalError(f"Could not update credential: {e}") from e

        logger.info("Password rehashed", user_id=user_id)

    async def change_password(
        self,
        user_id: int,
        current_password: str,
        new_password: str,
    ) -> None:
        """Replace the credential of an account after verifying the current one.

        Raises:
            NotFoundError: If the account does not exist.
            InvalidCredentialsError: If ``current_password`` does not verify.
            InternalError: If hashing or storage fails.
        """
        try:
            async with self.session_factory() as session:
                user_repo = UserRepository(session)
                user = await user_repo.get_by_id(user_id)
                if user is None:
                    raise NotFoundError(f"User {user_id} not found")
                if not verify_password(current_password, user.password_hash):
                    logger.info("Password change rejected", user_id=user_id)
                    raise InvalidCredentialsError()

                await user_repo.update_password(user_id, hash_password(new_password))
                await session.commit()
        except HashingError as e:
            logger.error("Password change failed: hashing", error=str(e))
            raise InternalError(f"Password hashing failed: {e}") from e
        except SQLAlchemyError as e:
            logger.error("Password change failed: storage", user_id=user_id, error=str(e))
            raise InternalError(f"Could not update credential: {e}") from e

        logger.info("Password changed", user_id=user_id)

    async def get_profile(self, user_id: int) -> UserProfile:
        """Get the public profile of an account.

        Raises:
            NotFoundError: If the account does not exist.
        """
        try:
            async with self.session_factory() as session:
                user = await UserRepository(session).get_by_id(user_id)
        except SQLAlchemyError as e:
            logger.error("Profile lookup failed", user_id=user_id, error=str(e))
            raise InternalError(f"Could not load account: {e}") from e

        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return UserProfile.from_record(user)
