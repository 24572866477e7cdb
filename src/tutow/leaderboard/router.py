"""Leaderboard API endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from tutow.database import get_session
from tutow.leaderboard.schemas import LeaderboardResponse
from tutow.leaderboard.service import get_leaderboard

router = APIRouter(prefix="/api/v1", tags=["Leaderboard"])


@router.get("/leaderboard", response_model=LeaderboardResponse)
async def leaderboard(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_session),
):
    """Users ranked by XP, highest first."""
    data = await get_leaderboard(db, page, limit)
    return LeaderboardResponse(**data)
