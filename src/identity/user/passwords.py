"""Password hashing and reset token generation."""

import secrets

from passlib.context import CryptContext
from shared import settings

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def generate_reset_token() -> str:
    """Hex-encoded token from a CSPRNG, 160 bits by default."""
    return secrets.token_hex(settings.RESET_TOKEN_BYTES)
