"""Pydantic schemas for authentication endpoints."""

from pydantic import BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    """Request body for account registration."""

    first_name: str = Field(..., min_length=1, max_length=255, description="Given name")
    last_name: str = Field(..., min_length=1, max_length=255, description="Family name")
    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=1, description="User's password")


class LoginRequest(BaseModel):
    """Request body for password login."""

    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=1, description="User's password")


class UserResponse(BaseModel):
    """Public account information. Never carries the password hash."""

    id: int = Field(..., description="User ID")
    first_name: str = Field(..., description="Given name")
    last_name: str = Field(..., description="Family name")
    email: str = Field(..., description="User's email address")

    model_config = {"from_attributes": True}


class LoginResponse(BaseModel):
    """Response for a successful login."""

    token: str = Field(..., description="JWT session token, valid for 24 hours")
    user: UserResponse = Field(..., description="User information")


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str


class PermissionResponse(BaseModel):
    """A permission held by the current user."""

    id: int
    name: str
    resource: str | None = None
    action: str

    model_config = {"from_attributes": True}


class MeResponse(BaseModel):
    """The authenticated account and the permissions it holds."""

    user: UserResponse
    permissions: list[PermissionResponse]


class ErrorResponse(BaseModel):
    """Body of every error response."""

    error: str = Field(..., description="Public error message")
