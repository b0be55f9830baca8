import logging
from dataclasses import dataclass

import bcrypt

from app.core.errors import InternalError

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class Identity:
    """Authenticated caller. Only the gatekeeping dependency in ``app.api.deps`` builds these."""
    user_id: str
    email: str

def get_password_hash(password: str, rounds: int = 10) -> str:
    """
    Hash a password with bcrypt using a fresh salt.
    The cost factor is stored inside the hash, so verification needs no settings.
    """
    try:
        salt = bcrypt.gensalt(rounds=rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")
    except ValueError as e:
        # bcrypt refuses passwords longer than 72 bytes
        logger.error(f"Password hashing failed: {e}")
        raise InternalError("Failed to hash password") from e

def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Malformed stored hash or oversized password
        return False
