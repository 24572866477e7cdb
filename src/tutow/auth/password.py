"""
Learner password hashing (argon2id) and length rules.

Hash cost comes from settings so development and test runs can use a
cheaper configuration. Hashes made under older parameters are upgraded on
the next successful login (see ``check_needs_rehash``).
"""

from __future__ import annotations

from functools import lru_cache

import argon2

from tutow.config import get_settings


class PasswordStrengthError(ValueError):
    """Raised when a password does not meet the length requirements."""


@lru_cache(maxsize=4)
def _hasher(time_cost: int, memory_kib: int) -> argon2.PasswordHasher:
    return argon2.PasswordHasher(
        time_cost=time_cost,
        memory_cost=memory_kib,
        parallelism=1,
        type=argon2.Type.ID,
    )


def _current_hasher() -> argon2.PasswordHasher:
    settings = get_settings()
    return _hasher(settings.password_hash_time_cost, settings.password_hash_memory_kib)


def hash_password(password: str) -> str:
    return _current_hasher().hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """True if ``password`` matches. Mismatches and malformed hashes return False."""
    try:
        return _current_hasher().verify(password_hash, password)
    except (argon2.exceptions.VerificationError, argon2.exceptions.InvalidHashError):
        return False


def check_needs_rehash(password_hash: str) -> bool:
    return _current_hasher().check_needs_rehash(password_hash)


def validate_password_strength(password: str) -> None:
    """
    Only length is checked: children's passwords need ``password_min_length``
    characters (6 by default), at most ``password_max_length``, and must not be
    whitespace only.
    """
    settings = get_settings()
    if not password or not password.strip():
        msg = "Password cannot be empty"
        raise PasswordStrengthError(msg)
    if len(password) < settings.password_min_length:
        msg = f"Password must be at least {settings.password_min_length} characters"
        raise PasswordStrengthError(msg)
    if len(password) > settings.password_max_length:
        msg = f"Password must not exceed {settings.password_max_length} characters"
        raise PasswordStrengthError(msg)
