"""
Authentication business logic: learner registration and login.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import func, select

from tutow.auth.password import (
    check_needs_rehash,
    hash_password,
    validate_password_strength,
    verify_password,
)
from tutow.config import get_settings
from tutow.db.models import User
from tutow.garden.service import create_garden

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()

USERNAME_PATTERN = re.compile(r"^[a-zA-Z]+$")


# ---------------------------------------------------------------------------
# User queries
# ---------------------------------------------------------------------------


async def get_user_by_id(db: AsyncSession, user_id: int) -> User | None:
    """Fetch a user by ID."""
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    """Fetch a user by email (case-insensitive)."""
    result = await db.execute(select(User).where(func.lower(User.email) == email.lower()))
    return result.scalar_one_or_none()


async def get_user_by_username(db: AsyncSession, username: str) -> User | None:
    """Fetch a user by username (case-insensitive)."""
    result = await db.execute(select(User).where(func.lower(User.username) == username.lower()))
    return result.scalar_one_or_none()


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------


def validate_registration(name: str, username: str, password: str) -> None:
    """
    Validate the free-text registration fields.

    Raises:
        ValueError: If the name is empty or the username is not letters only.
        PasswordStrengthError: If the password is too short or too long.
    """
    if not name:
        msg = "Name is required"
        raise ValueError(msg)
    if len(username) < 3:
        msg = "Username must be at least 3 characters"
        raise ValueError(msg)
    if not USERNAME_PATTERN.match(username):
        msg = "Username may only contain letters"
        raise ValueError(msg)
    validate_password_strength(password)


async def register_user(
    db: AsyncSession,
    name: str,
    email: str,
    username: str,
    password: str,
    school: str | None = None,
) -> User:
    """
    Register a new learner with starting gold and an empty garden.

    Raises:
        ValueError: If validation fails or the email/username is taken.
    """
    validate_registration(name, username, password)

    if await get_user_by_email(db, email) is not None:
        msg = "Email already registered"
        raise ValueError(msg)
    if await get_user_by_username(db, username) is not None:
        msg = "Username already taken"
        raise ValueError(msg)

    settings = get_settings()
    user = User(
        name=name,
        email=email.lower().strip(),
        username=username,
        password_hash=hash_password(password),
        school=school or None,
        xp=0,
        gold=settings.starting_gold,
        created_at=datetime.now(timezone.utc),
    )
    db.add(user)
    await db.flush()

    await create_garden(db, user.id)
    logger.info("user_created", user_id=user.id, username=username)
    return user


# ---------------------------------------------------------------------------
# Login
# ---------------------------------------------------------------------------


async def authenticate_user(db: AsyncSession, email: str, password: str) -> User:
    """
    Authenticate a user with email + password.

    Raises:
        ValueError: If credentials are invalid.
    """
    user = await get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        logger.info("login_failed", email=email)
        msg = "Invalid email or password"
        raise ValueError(msg)

    user.last_login = datetime.now(timezone.utc)
    if check_needs_rehash(user.password_hash):
        user.password_hash = hash_password(password)
        logger.info("password_rehashed", user_id=user.id)
    await db.flush()
    return user
