"""XP leaderboard, ranked in SQL."""

from __future__ import annotations

import math
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tutow.db.models import User


async def get_leaderboard(db: AsyncSession, page: int = 1, limit: int = 10) -> dict[str, Any]:
    """One page of users ranked by XP descending, ties broken by user id.

    Rank is the absolute position, so page 2 with limit 10 starts at 11.
    """
    offset = (page - 1) * limit
    result = await db.execute(
        select(User.id, User.name, User.username, User.school, User.xp, User.current_grade)
        .order_by(User.xp.desc(), User.id.asc())
        .offset(offset)
        .limit(limit)
    )
    entries = [
        {
            "rank": offset + i + 1,
            "id": row.id,
            "name": row.name,
            "username": row.username,
            "school": row.school,
            "xp": row.xp,
            "current_grade": row.current_grade,
        }
        for i, row in enumerate(result)
    ]

    total_users = (await db.execute(select(func.count()).select_from(User))).scalar_one()
    total_pages = math.ceil(total_users / limit) if total_users else 0
    return {
        "entries": entries,
        "pagination": {
            "current_page": page,
            "total_pages": total_pages,
            "total_users": total_users,
            "has_next_page": page < total_pages,
            "has_prev_page": page > 1,
        },
    }
