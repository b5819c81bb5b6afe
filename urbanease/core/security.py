"""Password hashing and password rule helpers.

Pipeline:
- hash_password / ensure_password_hash: bcrypt with per-call salt
- verify_password: constant-time bcrypt comparison
- validate_password_strength: format rules (sync, no network)
- DUMMY_HASH: timing-safe constant for user enumeration defense
"""

import bcrypt

from urbanease.core.config import settings
from urbanease.core.errors import ValidationError

# Prefixes produced by bcrypt implementations. A value starting with one of
# these is treated as already hashed and stored untouched.
_BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")

# bcrypt ignores (or, in recent releases, rejects) input beyond 72 bytes
_BCRYPT_MAX_BYTES = 72

_MIN_PASSWORD_LENGTH = 8

# Pre-computed bcrypt hash for timing-safe comparison on user-not-found.
# Security: prevents user enumeration via response time differences.
DUMMY_HASH = b"$2b$12$ZP2PVB8yI35X.mkRqcUPUuSzJA1CNRt4dZ7X3cyrfJu.2S3w.Qen2"


def is_password_hash(value: str) -> bool:
    """Return True if value already looks like a bcrypt hash."""
    return value.startswith(_BCRYPT_PREFIXES) and len(value) == 60


def hash_password(password: str) -> str:
    """Hash a plain-text password with a fresh salt.

    Args:
        password: Plain-text password.

    Returns:
        bcrypt hash string (60 chars).
    """
    return bcrypt.hashpw(
        password.encode(), bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    ).decode()


def ensure_password_hash(value: str) -> str:
    """Hash value unless it is already a bcrypt hash.

    Used by the User model so that re-saving an identity never double-hashes
    its password, while any plain secret written to the column is hashed.
    """
    if is_password_hash(value):
        return value
    return hash_password(value)


def verify_password(password: str, password_hash: str | None) -> bool:
    """Check a plain-text password against a stored hash.

    Always performs a bcrypt comparison, against DUMMY_HASH when there is no
    stored hash, so the response time does not reveal whether the account
    exists.

    Args:
        password: Plain-text password supplied by the caller.
        password_hash: Stored bcrypt hash, or None for unknown accounts.

    Returns:
        True only when a stored hash exists and matches.
    """
    candidate = password.encode()[:_BCRYPT_MAX_BYTES]
    if not password_hash:
        bcrypt.checkpw(candidate, DUMMY_HASH)
        return False
    try:
        return bcrypt.checkpw(candidate, password_hash.encode())
    except ValueError:
        # Malformed stored hash
        return False


def validate_password_strength(password: str) -> None:
    """Validate password meets length requirements.

    Rules: at least 8 characters, at most 72 bytes once UTF-8 encoded.

    Args:
        password: Plain-text password to validate.

    Raises:
        ValidationError: If password doesn't meet requirements.
    """
    if len(password) < _MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {_MIN_PASSWORD_LENGTH} characters"
        )
    if len(password.encode()) > _BCRYPT_MAX_BYTES:
        raise ValidationError(
            f"Password must be at most {_BCRYPT_MAX_BYTES} bytes"
        )
