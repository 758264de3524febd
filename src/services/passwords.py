"""Password hashing and verification."""

import logging

from passlib.context import CryptContext

from src.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

# bcrypt silently ignores everything past this many bytes
MAX_PASSWORD_BYTES = 72

# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


def password_too_long(password: str) -> bool:
    """Check whether bcrypt would truncate this password."""
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash.

    A stored value that is not a recognised hash never verifies, and neither
    does a password bcrypt would have to truncate.
    """
    if not plain_password or not hashed_password:
        return False
    if password_too_long(plain_password):
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        logger.warning("Stored password hash could not be identified")
        return False


def dummy_verify() -> None:
    """Spend the same time as a real verification, for logins with no such user."""
    pwd_context.dummy_verify()


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)
