"""Gamification API request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict

# --- Badges ---


class BadgeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    display_name: str
    description: str
    category: str
    image_url: str | None = None
    requirement: dict[str, Any]


class AllBadgesResponse(BaseModel):
    badges: list[BadgeResponse]


class EarnedBadgeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    earned_at: datetime
    badge: BadgeResponse


class EarnedBadgesResponse(BaseModel):
    type: str = "earned"
    badges: list[EarnedBadgeResponse]
    total_earned: int
    total_available: int


class BadgeProgressResponse(BadgeResponse):
    earned: bool
    earned_at: datetime | None = None
    current_progress: int = 0


class BadgeProgressListResponse(BaseModel):
    type: str = "progress"
    badges: list[BadgeProgressResponse]


class CheckAchievementsResponse(BaseModel):
    success: bool = True
    new_badges: list[str]
    message: str


# --- XP ---


class XPHistoryEntry(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    amount: int
    source: str
    source_id: str | None = None
    description: str | None = None
    created_at: datetime | None = None


class XPHistoryResponse(BaseModel):
    total_xp: int
    entries: list[XPHistoryEntry]
