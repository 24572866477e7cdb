"""Badge lookups and awards with duplicate prevention."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tutow.db.models import Badge, UserBadge

logger = logging.getLogger(__name__)


async def list_active_badges(db: AsyncSession) -> list[Badge]:
    result = await db.execute(
        select(Badge).where(Badge.is_active.is_(True)).order_by(Badge.sort_order, Badge.id)
    )
    return list(result.scalars().all())


async def has_badge(db: AsyncSession, user_id: int, badge_id: int) -> bool:
    """Check if user already has a specific badge."""
    result = await db.execute(
        select(UserBadge.id).where(
            UserBadge.user_id == user_id,
            UserBadge.badge_id == badge_id,
        )
    )
    return result.scalar_one_or_none() is not None


async def owned_badge_ids(db: AsyncSession, user_id: int) -> set[int]:
    result = await db.execute(select(UserBadge.badge_id).where(UserBadge.user_id == user_id))
    return set(result.scalars().all())


async def get_user_badges(db: AsyncSession, user_id: int, limit: int | None = None) -> list[UserBadge]:
    """Badges earned by a user, most recent first."""
    stmt = (
        select(UserBadge)
        .where(UserBadge.user_id == user_id)
        .order_by(UserBadge.earned_at.desc(), UserBadge.id.desc())
    )
    if limit is not None:
        stmt = stmt.limit(limit)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def award_badge(db: AsyncSession, user_id: int, badge_id: int) -> bool:
    """Award a badge to a user and commit.

    Returns True if awarded, False if the user already owns it. The
    ``uq_user_badge`` constraint decides concurrent awards; the losing
    insert is rolled back and reported as already owned.
    """
    if await has_badge(db, user_id, badge_id):
        return False

    db.add(UserBadge(
        user_id=user_id,
        badge_id=badge_id,
        earned_at=datetime.now(timezone.utc),
    ))
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        return False  # Race condition: badge already awarded

    logger.info("Badge %d awarded to user %d", badge_id, user_id)
    return True
