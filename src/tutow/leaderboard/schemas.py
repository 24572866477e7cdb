"""Leaderboard response schemas."""

from __future__ import annotations

from pydantic import BaseModel


class LeaderboardEntryResponse(BaseModel):
    rank: int
    id: int
    name: str
    username: str
    school: str | None = None
    xp: int
    current_grade: int | None = None


class PaginationResponse(BaseModel):
    current_page: int
    total_pages: int
    total_users: int
    has_next_page: bool
    has_prev_page: bool


class LeaderboardResponse(BaseModel):
    entries: list[LeaderboardEntryResponse]
    pagination: PaginationResponse
