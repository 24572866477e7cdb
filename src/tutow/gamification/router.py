"""Gamification API endpoints: badge catalog, achievements and XP history."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from tutow.auth.dependencies import get_current_user
from tutow.database import get_session
from tutow.db.models import User
from tutow.gamification.achievement_service import AchievementEvaluator, get_badge_progress
from tutow.gamification.badge_service import get_user_badges, list_active_badges
from tutow.gamification.schemas import (
    AllBadgesResponse,
    BadgeProgressListResponse,
    BadgeProgressResponse,
    BadgeResponse,
    CheckAchievementsResponse,
    EarnedBadgeResponse,
    EarnedBadgesResponse,
    XPHistoryEntry,
    XPHistoryResponse,
)
from tutow.gamification.xp_service import get_xp_history

router = APIRouter(prefix="/api/v1", tags=["Gamification"])


# ── Public endpoints ──


@router.get("/badges", response_model=AllBadgesResponse)
async def list_badges(db: AsyncSession = Depends(get_session)):
    """Get all active badge definitions."""
    badges = await list_active_badges(db)
    return AllBadgesResponse(badges=[BadgeResponse.model_validate(b) for b in badges])


# ── Authenticated endpoints ──


@router.get(
    "/achievements",
    response_model=EarnedBadgesResponse | BadgeProgressListResponse,
)
async def get_achievements(
    type: str = Query("earned", pattern="^(earned|progress)$"),  # noqa: A002
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Earned badges, or every badge with progress when ``type=progress``."""
    if type == "progress":
        items = await get_badge_progress(db, user.id)
        return BadgeProgressListResponse(badges=[BadgeProgressResponse(**item) for item in items])

    earned = await get_user_badges(db, user.id)
    available = await list_active_badges(db)
    return EarnedBadgesResponse(
        badges=[EarnedBadgeResponse.model_validate(ub) for ub in earned],
        total_earned=len(earned),
        total_available=len(available),
    )


@router.post("/achievements", response_model=CheckAchievementsResponse)
async def check_achievements(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Evaluate every badge for the current user and award the new ones."""
    new_badges = await AchievementEvaluator(db).evaluate(user.id)
    if new_badges:
        message = f"Congratulations! You earned {len(new_badges)} new badge(s)"
    else:
        message = "No new badges yet"
    return CheckAchievementsResponse(new_badges=new_badges, message=message)


@router.get("/users/me/xp/history", response_model=XPHistoryResponse)
async def get_my_xp_history(
    limit: int = Query(50, ge=1, le=200),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Get current user's XP ledger, newest first."""
    entries = await get_xp_history(db, user.id, limit=limit)
    return XPHistoryResponse(
        total_xp=user.xp,
        entries=[XPHistoryEntry.model_validate(e) for e in entries],
    )
