"""Authentication API routes.

Provides endpoints for user registration, login, and the current account.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from warden.core.logging import get_logger
from warden.domain.services import AuthenticationService, AuthorizationService
from warden.infrastructure.api.dependencies import (
    AuthenticatedUser,
    get_authentication_service,
    get_authorization_service,
)
from warden.infrastructure.api.schemas import (
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    MeResponse,
    MessageResponse,
    PermissionResponse,
    RegisterRequest,
    UserResponse,
)

logger = get_logger(__name__)

router = APIRouter()


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=MessageResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input"},
        409: {"model": ErrorResponse, "description": "Email already registered"},
    },
)
async def register(
    request: RegisterRequest,
    auth_service: Annotated[AuthenticationService, Depends(get_authentication_service)],
) -> MessageResponse:
    """Register a new account."""
    await auth_service.register(
        first_name=request.first_name,
        last_name=request.last_name,
        email=request.email,
        password=request.password,
    )
    return MessageResponse(message="User registered successfully")


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input or credentials"},
    },
)
async def login(
    request: LoginRequest,
    auth_service: Annotated[AuthenticationService, Depends(get_authentication_service)],
) -> LoginResponse:
    """Authenticate with email and password and receive a session token."""
    result = await auth_service.login(email=request.email, password=request.password)
    return LoginResponse(
        token=result.token,
        user=UserResponse.model_validate(result.user),
    )


@router.get(
    "/me",
    response_model=MeResponse,
    responses={401: {"model": ErrorResponse, "description": "Not authenticated"}},
)
async def me(
    current_user: AuthenticatedUser,
    auth_service: Annotated[AuthenticationService, Depends(get_authentication_service)],
    authz_service: Annotated[AuthorizationService, Depends(get_authorization_service)],
) -> MeResponse:
    """Get the authenticated account and every permission it holds."""
    profile = await auth_service.get_profile(current_user.user_id)
    permissions = await authz_service.user_permissions(current_user.user_id)
    return MeResponse(
        user=UserResponse.model_validate(profile),
        permissions=[PermissionResponse.model_validate(p) for p in permissions],
    )
