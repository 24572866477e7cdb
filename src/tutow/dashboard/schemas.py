"""Dashboard response schema."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class DashboardUser(BaseModel):
    name: str
    xp: int
    gold: int
    current_grade: int | None = None
    streak: int
    total_lessons_completed: int
    total_exercise_sessions: int


class DashboardMaterial(BaseModel):
    id: int
    name: str
    description: str | None = None
    progress: int
    total_lessons: int
    completed_lessons: int
    color: str


class RecentBadge(BaseModel):
    name: str
    icon: str | None = None
    earned_at: datetime


class DailyTask(BaseModel):
    task: str
    progress: int
    target: int
    completed: bool


class DashboardResponse(BaseModel):
    user: DashboardUser
    materials: list[DashboardMaterial]
    recent_badges: list[RecentBadge]
    daily_tasks: list[DailyTask]
