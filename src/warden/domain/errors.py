"""Error taxonomy shared by services and the HTTP layer.

Every error carries the HTTP status it maps to and a fixed public message.
The exception's own message may hold internal detail for logs; only
``public_message`` is ever returned to a caller.
"""


class WardenError(Exception):
    """Base class for all Warden domain errors."""

    status_code: int = 500
    public_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.public_message
        super().__init__(self.message)


class AlreadyExistsError(WardenError):
    """Raised when a name, email or (resource, action) pair is already taken."""

    status_code = 409
    public_message = "Already exists"


class UserAlreadyExistsError(AlreadyExistsError):
    """Raised when registering an email that already has an account."""

    public_message = "User already exists"


class NotFoundError(WardenError):
    """Raised when a referenced record does not exist."""

    status_code = 404
    public_message = "Not found"


class InvalidCredentialsError(WardenError):
    """Raised for every login failure.

    Unknown email and wrong password produce the same error, reported to
    the caller exactly like malformed input.
    """

    status_code = 400
    public_message = "Invalid input"


class InternalError(WardenError):
    """Raised for storage, hashing and token-signing failures."""


class MigrationError(WardenError):
    """Raised when a schema migration step cannot be applied or rolled back."""
