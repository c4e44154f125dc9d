"""JWT session token service.

Session tokens are HS256-signed and live for exactly 24 hours from issuance.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

SESSION_TOKEN_LIFETIME = timedelta(hours=24)


class JWTError(Exception):
    """Base exception for JWT-related errors."""

    pass


class TokenExpiredError(JWTError):
    """Raised when a token has expired."""

    pass


class InvalidTokenError(JWTError):
    """Raised when a token is invalid."""

    pass


class SigningKeyMissingError(JWTError):
    """Raised when no signing secret is configured."""

    pass


class JWTService:
    """Service for creating and validating session tokens."""

    ALGORITHM = "HS256"
    ISSUER = "warden"

    def __init__(self, secret_key: str | None) -> None:
        """Initialize the JWT service.

        Args:
            secret_key: Secret key for signing tokens. ``None`` is accepted so
                the application can start; every sign or verify call then
                raises ``SigningKeyMissingError``.
        """
        self._secret_key = secret_key

    @property
    def secret_key(self) -> str:
        """Get the secret key for signing tokens."""
        if not self._secret_key:
            raise SigningKeyMissingError("Token signing secret is not configured")
        return self._secret_key

    def create_session_token(
        self,
        user_id: int,
        email: str,
        issued_at: datetime | None = None,
    ) -> str:
        """Create a session token for an account.

        Args:
            user_id: The account identifier.
            email: The account email address.
            issued_at: Issuance time, defaults to now (UTC).

        Returns:
            Encoded JWT.
        """
        now = issued_at or datetime.now(timezone.utc)
        payload = {
            "iss": self.ISSUER,
            # PyJWT only accepts string subjects
            "sub": str(user_id),
            "iat": now,
            "exp": now + SESSION_TOKEN_LIFETIME,
            "user_id": user_id,
            "email": email,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.ALGORITHM)

    def decode_token(self, token: str) -> dict[str, Any]:
        """Decode and validate a session token.

        Args:
            token: The encoded JWT token.

        Returns:
            Decoded token payload.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the token is invalid.
        """
        try:
            return jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.ALGORITHM],
                issuer=self.ISSUER,
                options={"require": ["exp", "iat", "sub"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError("Invalid token") from e

    @staticmethod
    def get_expires_in() -> int:
        """Get the session token lifetime in seconds."""
        return int(SESSION_TOKEN_LIFETIME.total_seconds())
