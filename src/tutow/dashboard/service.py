"""Dashboard aggregation.

Combines profile, course progress, badges and today's activity into one
response. When Redis is configured the result is cached for 10 seconds.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tutow.content.service import count_completed_courses, list_materials, list_progress
from tutow.db.models import CourseProgress, ExerciseSession, Grade, User
from tutow.gamification.badge_service import get_user_badges
from tutow.gamification.requirements import current_streak, utc_date
from tutow.gamification.xp_service import xp_earned_since
from tutow.redis_client import get_cached_json, redis_enabled, set_cached_json

logger = structlog.get_logger()

DASHBOARD_CACHE_KEY = "dashboard:{user_id}"
DASHBOARD_CACHE_TTL = 10  # seconds
STREAK_LOOKBACK_DAYS = 30
MATERIAL_COLORS = ("blue", "green", "purple", "orange", "red", "cyan")

DAILY_LESSON_TARGET = 1
DAILY_SESSION_TARGET = 3
DAILY_XP_TARGET = 50


def _task(task: str, progress: int, target: int) -> dict[str, Any]:
    return {
        "task": task,
        "progress": min(progress, target),
        "target": target,
        "completed": progress >= target,
    }


async def _learning_streak(db: AsyncSession, user_id: int, now: datetime) -> int:
    """Consecutive days, ending today, on which the user completed a course."""
    result = await db.execute(
        select(CourseProgress.completed_at).where(
            CourseProgress.user_id == user_id,
            CourseProgress.completed.is_(True),
            CourseProgress.completed_at >= now - timedelta(days=STREAK_LOOKBACK_DAYS),
        )
    )
    days = [utc_date(ts) for ts in result.scalars() if ts is not None]
    return current_streak(days, now.date())


async def _materials_with_progress(db: AsyncSession, user_id: int, grade_name: str) -> list[dict[str, Any]]:
    grade = (await db.execute(select(Grade).where(Grade.name == grade_name))).scalar_one_or_none()
    if grade is None:
        return []

    materials = await list_materials(db, grade.id)
    completed_by_material: dict[int, int] = {}
    for p in await list_progress(db, user_id, grade_id=grade.id):
        if p.completed:
            completed_by_material[p.material_id] = completed_by_material.get(p.material_id, 0) + 1

    items = []
    for i, m in enumerate(materials):
        total = len(m.courses)
        done = completed_by_material.get(m.id, 0)
        items.append({
            "id": m.id,
            "name": m.display_name or m.name,
            "description": m.description,
            "progress": round(done * 100 / total) if total else 0,
            "total_lessons": total,
            "completed_lessons": done,
            "color": MATERIAL_COLORS[i % len(MATERIAL_COLORS)],
        })
    return items


async def build_dashboard(db: AsyncSession, user: User) -> dict[str, Any]:
    """Assemble the dashboard payload for ``user``. Values are JSON-serializable."""
    now = datetime.now(timezone.utc)
    today_start = now.replace(hour=0, minute=0, second=0, microsecond=0)

    total_lessons = await count_completed_courses(db, user.id)
    total_sessions = (await db.execute(
        select(func.count()).select_from(ExerciseSession).where(ExerciseSession.user_id == user.id)
    )).scalar_one()

    lessons_today = await count_completed_courses(db, user.id, since=today_start)
    sessions_today = (await db.execute(
        select(func.count()).select_from(ExerciseSession).where(
            ExerciseSession.user_id == user.id,
            ExerciseSession.completed_at >= today_start,
        )
    )).scalar_one()
    xp_today = await xp_earned_since(db, user.id, today_start)

    recent_badges = [
        {
            "name": ub.badge.display_name,
            "icon": ub.badge.image_url,
            "earned_at": ub.earned_at.isoformat(),
        }
        for ub in await get_user_badges(db, user.id, limit=3)
    ]

    return {
        "user": {
            "name": user.name,
            "xp": user.xp,
            "gold": user.gold,
            "current_grade": user.current_grade,
            "streak": await _learning_streak(db, user.id, now),
            "total_lessons_completed": total_lessons,
            "total_exercise_sessions": total_sessions,
        },
        "materials": await _materials_with_progress(db, user.id, str(user.current_grade or 1)),
        "recent_badges": recent_badges,
        "daily_tasks": [
            _task("Selesaikan 1 pelajaran", lessons_today, DAILY_LESSON_TARGET),
            _task("Kerjakan 3 latihan soal", sessions_today, DAILY_SESSION_TARGET),
            _task("Raih 50 XP hari ini", xp_today, DAILY_XP_TARGET),
        ],
    }


async def get_dashboard(db: AsyncSession, user: User) -> dict[str, Any]:
    """Dashboard payload, served from the Redis cache when one is configured."""
    if not redis_enabled():
        return await build_dashboard(db, user)

    cache_key = DASHBOARD_CACHE_KEY.format(user_id=user.id)
    cached = await get_cached_json(cache_key)
    if cached is not None:
        return cached

    data = await build_dashboard(db, user)
    await set_cached_json(cache_key, DASHBOARD_CACHE_TTL, data)
    logger.debug("dashboard_cached", user_id=user.id)
    return data
