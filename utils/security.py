"""
security helpers:
- Argon2 password hashing via argon2-cffi
- JTI generation for token identifiers
"""
from __future__ import annotations

import uuid

from argon2 import PasswordHasher
from argon2.exceptions import VerifyMismatchError, InvalidHashError

ph = PasswordHasher()


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2
    """
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """ Verify a plaintext password using argon2
    """
    try:
        return ph.verify(password_hash, password)
    except (VerifyMismatchError, InvalidHashError):
        return False


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return uuid.uuid4().hex
