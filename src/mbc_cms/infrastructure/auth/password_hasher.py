"""Password hashing utility using Argon2.

Used by admin bootstrap to store the initial credential and by the HTTP
layer to verify Basic credentials against stored hashes.
"""

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    """Hash a password using Argon2id.

    Args:
        password: The plaintext password to hash.

    Returns:
        The hashed password string.

    Example:
        >>> hash_password("SecureP@ss123!").startswith("$argon2id$")
        True
    """
    return _hasher.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """Verify a password against a hash.

    A malformed stored hash verifies as False rather than raising.

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
