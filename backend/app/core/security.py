"""
Password hashing: bcrypt with a fresh salt per record.
"""

import bcrypt

from app.config import settings
from app.core.exceptions import PasswordTooLong

# bcrypt only reads the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


def hash_password(password: str, rounds: int | None = None) -> str:
    """Hash ``password`` at the given bcrypt cost (defaults to BCRYPT_ROUNDS)."""
    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise PasswordTooLong()
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(encoded, salt).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    """Check ``password`` against a stored bcrypt hash; malformed hashes never match."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False
