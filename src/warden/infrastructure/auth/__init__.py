"""Authentication infrastructure components.

Password hashing and session token signing.
"""

from warden.infrastructure.auth.jwt_service import (
    SESSION_TOKEN_LIFETIME,
    InvalidTokenError,
    JWTError,
    JWTService,
    SigningKeyMissingError,
    TokenExpiredError,
)
from warden.infrastructure.auth.password_hasher import (
    DUMMY_PASSWORD_HASH,
    hash_password,
    needs_rehash,
    verify_password,
)

__all__ = [
    "DUMMY_PASSWORD_HASH",
    "InvalidTokenError",
    "JWTError",
    "JWTService",
    "SESSION_TOKEN_LIFETIME",
    "SigningKeyMissingError",
    "TokenExpiredError",
    "hash_password",
    "needs_rehash",
    "verify_password",
]
