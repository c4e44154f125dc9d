"""FastAPI dependencies for services and authentication.

Services are built per request from the ``DatabaseManager`` and
``JWTService`` stored on ``app.state`` by the application factory.
"""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from warden.core.logging import get_logger
from warden.domain.errors import InternalError
from warden.domain.services import AuthenticationService, AuthorizationService
from warden.infrastructure.auth import (
    InvalidTokenError,
    JWTService,
    SigningKeyMissingError,
    TokenExpiredError,
)

logger = get_logger(__name__)


@dataclass
class CurrentUser:
    """The authenticated caller, extracted from a valid session token."""

    user_id: int
    email: str


def get_session_factory(request: Request) -> async_sessionmaker[AsyncSession]:
    """Get the session factory of the application's database manager."""
    return request.app.state.db.session_factory


def get_token_service(request: Request) -> JWTService:
    """Get the application's session token service."""
    return request.app.state.jwt_service


def get_authentication_service(
    session_factory: Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)],
    jwt_service: Annotated[JWTService, Depends(get_token_service)],
) -> AuthenticationService:
    return AuthenticationService(session_factory, jwt_service)


def get_authorization_service(
    session_factory: Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)],
) -> AuthorizationService:
    return AuthorizationService(session_factory)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    jwt_service: Annotated[JWTService, Depends(get_token_service)],
    authorization: Annotated[str | None, Header()] = None,
) -> CurrentUser:
    """Extract and validate the current user from the Authorization header.

    Args:
        jwt_service: Service used to verify the token.
        authorization: The Authorization header value (e.g., "Bearer <token>").

    Returns:
        CurrentUser: The authenticated user's context.

    Raises:
        HTTPException: 401 if the token is missing, invalid, or expired.
        InternalError: If no signing secret is configured.
    """
    if authorization is None:
        logger.info("Authentication failed: missing Authorization header")
        raise _unauthorized("Missing Authorization header")

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        logger.info("Authentication failed: invalid Authorization header format")
        raise _unauthorized("Could not validate credentials")

    try:
        payload = jwt_service.decode_token(parts[1])
        return CurrentUser(user_id=int(payload["sub"]), email=payload["email"])
    except SigningKeyMissingError as e:
        logger.error("Token verification impossible: no signing secret")
        raise InternalError(str(e)) from e
    except TokenExpiredError:
        logger.info("Authentication failed: token expired")
        raise _unauthorized("Token has expired")
    except InvalidTokenError as e:
        logger.info("Authentication failed: invalid token", error=str(e))
        raise _unauthorized("Invalid token")
    except (KeyError, ValueError) as e:
        logger.warning("Authentication failed: malformed claims", error=str(e))
        raise _unauthorized("Invalid token")


AuthenticatedUser = Annotated[CurrentUser, Depends(get_current_user)]
