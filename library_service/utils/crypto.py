"""Cryptography utilities"""

import hashlib

from passlib.context import CryptContext

# Unsalted SHA-256 hex digests
pwd_context = CryptContext(schemes=["hex_sha256"])


def hash_password(password: str) -> str:
    """
    Hash a password with SHA-256

    Args:
        password: Plain text password

    Returns:
        Lowercase hexadecimal digest (64 characters)
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against a hash (constant-time comparison)

    Args:
        plain_password: Plain text password to verify
        hashed_password: Hashed password to compare against

    Returns:
        True if password matches, False otherwise
    """
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password.lower())


def hash_token_jti(jti: str) -> str:
    """
    Hash a JWT jti claim using SHA-256

    Args:
        jti: JWT ID to hash

    Returns:
        Hexadecimal hash string (64 characters)
    """
    return hashlib.sha256(jti.encode()).hexdigest()
