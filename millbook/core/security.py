"""Password hashing helpers (bcrypt)."""

import secrets
import string

import bcrypt

# bcrypt ignores everything past 72 bytes; newer releases refuse longer input.
_BCRYPT_MAX_BYTES = 72

_TEMP_PASSWORD_ALPHABET = string.ascii_lowercase + string.digits


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = 12) -> str:
    """Hash a password with a fresh salt."""
    hashed = bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def generate_temporary_password(length: int = 8) -> str:
    """Random lowercase alphanumeric password handed out once on account creation."""
    return "".join(secrets.choice(_TEMP_PASSWORD_ALPHABET) for _ in range(length))
