"""Password hashing using Argon2id.

Each hash embeds its own random salt and parameters, so a stored credential
can be verified without any other state.
"""

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

_hasher = PasswordHasher()

# Verified against when the account does not exist, so an unknown email costs
# the same as a wrong password.
DUMMY_PASSWORD_HASH = _hasher.hash("warden-timing-equalizer")


def hash_password(password: str) -> str:
    """Hash a password using Argon2id.

    Args:
        password: The plaintext password to hash.

    Returns:
        The encoded hash string.

    Example:
        >>> hash_password("SecureP@ss123!").startswith("$argon2id$")
        True
    """
    return _hasher.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """Verify a password against a hash.

    A malformed stored hash counts as a failed verification.

    Args:
        password: The plaintext password to verify.
        hashed: The hashed password to verify against.

    Returns:
        True if the password matches, False otherwise.
    """
    try:
        return _hasher.verify(hashed, password)
    except (VerificationError, InvalidHashError):
        return False


def needs_rehash(hashed: str) -> bool:
    """Check if a hash was produced with outdated parameters."""
    return _hasher.check_needs_rehash(hashed)
