"""User profile business logic."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

import structlog

from tutow.db.models import User

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()

MIN_GRADE = 1
MAX_GRADE = 6


async def update_profile(
    db: AsyncSession,
    user: User,
    name: str,
    school: str | None = None,
    current_grade: int | None = None,
) -> User:
    """
    Replace the editable profile fields. The username is never changed here.

    Raises:
        ValueError: If the name is blank or the grade is outside 1..6.
    """
    name = name.strip()
    if not name:
        msg = "Name is required"
        raise ValueError(msg)
    if current_grade is not None and not MIN_GRADE <= current_grade <= MAX_GRADE:
        msg = f"Grade must be between {MIN_GRADE} and {MAX_GRADE}"
        raise ValueError(msg)

    user.name = name
    user.school = (school or "").strip() or None
    user.current_grade = current_grade
    user.updated_at = datetime.now(timezone.utc)

    await db.flush()
    logger.info("profile_updated", user_id=user.id, current_grade=current_grade)
    return user
