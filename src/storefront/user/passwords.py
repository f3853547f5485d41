"""Credential hashing and verification (bcrypt through passlib)."""

import os
import secrets

from passlib.context import CryptContext

DEFAULT_ROUNDS = 12
MIN_PASSWORD_LENGTH = 6


def hashing_rounds() -> int:
    """bcrypt cost factor from ``BCRYPT_SALT_ROUNDS``."""
    return int(os.getenv("BCRYPT_SALT_ROUNDS", str(DEFAULT_ROUNDS)))


def _context() -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=hashing_rounds())


def hash_password(password: str) -> str:
    return _context().hash(password)


def verify_password(password: str, password_hash: str | None) -> bool:
    if not password or not password_hash:
        return False
    return _context().verify(password, password_hash)


def generate_token() -> str:
    """Opaque URL-safe token for email verification and password resets."""
    return secrets.token_urlsafe(32)
