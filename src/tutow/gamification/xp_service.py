"""XP grants with an idempotent ledger."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from tutow.db.models import User, XPLedger

logger = logging.getLogger(__name__)


async def grant_xp(
    db: AsyncSession,
    user_id: int,
    amount: int,
    source: str,
    source_id: str,
    description: str,
    idempotency_key: str,
) -> bool:
    """Grant XP to a user. Returns True if granted, False if the key was already used.

    Appends an ``xp_ledger`` row and increments ``users.xp`` in the same
    transaction. The caller commits.
    """
    existing = await db.execute(
        select(XPLedger.id).where(XPLedger.idempotency_key == idempotency_key)
    )
    if existing.scalar_one_or_none() is not None:
        return False

    db.add(XPLedger(
        user_id=user_id,
        amount=amount,
        source=source,
        source_id=source_id,
        description=description,
        idempotency_key=idempotency_key,
        created_at=datetime.now(timezone.utc),
    ))
    await db.execute(
        update(User)
        .where(User.id == user_id)
        .values(xp=User.xp + amount)
        .execution_options(synchronize_session=False)
    )
    await db.flush()
    logger.debug("Granted %d XP to user %d from %s", amount, user_id, source)
    return True


async def get_xp_history(db: AsyncSession, user_id: int, limit: int = 50) -> list[XPLedger]:
    """Most recent ledger entries for a user."""
    result = await db.execute(
        select(XPLedger)
        .where(XPLedger.user_id == user_id)
        .order_by(XPLedger.created_at.desc(), XPLedger.id.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def xp_earned_since(db: AsyncSession, user_id: int, since: datetime) -> int:
    """Sum of XP granted to a user at or after ``since``."""
    result = await db.execute(
        select(func.coalesce(func.sum(XPLedger.amount), 0)).where(
            XPLedger.user_id == user_id,
            XPLedger.created_at >= since,
        )
    )
    return int(result.scalar_one())
