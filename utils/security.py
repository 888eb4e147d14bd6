"""
security helpers:
- Argon2 password hashing via argon2-cffi
- JTI generation for token identifiers
- One-time reset codes
"""
from __future__ import annotations

import secrets
import uuid
from datetime import datetime, timezone

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

OTP_MIN = 100000
OTP_MAX = 999999

ph = PasswordHasher()


def build_password_hasher(time_cost: int | None = None, memory_cost: int | None = None,
                          parallelism: int | None = None) -> PasswordHasher:
    """Build an Argon2 hasher, falling back to argon2-cffi defaults for unset params."""
    kwargs = {}
    if time_cost:
        kwargs["time_cost"] = time_cost
    if memory_cost:
        kwargs["memory_cost"] = memory_cost
    if parallelism:
        kwargs["parallelism"] = parallelism
    return PasswordHasher(**kwargs) if kwargs else ph


def hash_password(password: str, hasher: PasswordHasher | None = None) -> str:
    """Hash a plaintext password using Argon2
    """
    return (hasher or ph).hash(password)


def verify_password(password: str, password_hash: str, hasher: PasswordHasher | None = None) -> bool:
    """ Verify a plaintext password using argon2
    """
    if not password_hash:
        return False
    try:
        return (hasher or ph).verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return str(uuid.uuid4())


def generate_otp() -> int:
    """Six digit reset code, uniform in [100000, 999999]."""
    return OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1)


def utcnow() -> datetime:
    # naive UTC, matching what SQLite hands back for DateTime columns
    return datetime.now(timezone.utc).replace(tzinfo=None)
