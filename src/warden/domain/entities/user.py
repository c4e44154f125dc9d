"""Public user projections returned by the authentication service."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UserProfile:
    """Public-safe view of an account.

    The password hash is never part of this projection.

    Attributes:
        id: Account identifier.
        first_name: Given name.
        last_name: Family name.
        email: Unique email address.
    """

    id: int
    first_name: str
    last_name: str
    email: str

    @classmethod
    def from_record(cls, record) -> "UserProfile":
        """Build a profile from any object exposing the account attributes."""
        return cls(
            id=record.id,
            first_name=record.first_name,
            last_name=record.last_name,
            email=record.email,
        )


@dataclass(frozen=True)
class LoginResult:
    """Outcome of a successful login."""

    token: str
    user: UserProfile
