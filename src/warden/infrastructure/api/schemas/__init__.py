"""Pydantic schemas for API requests and responses."""

from warden.infrastructure.api.schemas.auth_schemas import (
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    MeResponse,
    MessageResponse,
    PermissionResponse,
    RegisterRequest,
    UserResponse,
)

__all__ = [
    "ErrorResponse",
    "LoginRequest",
    "LoginResponse",
    "MeResponse",
    "MessageResponse",
    "PermissionResponse",
    "RegisterRequest",
    "UserResponse",
]
