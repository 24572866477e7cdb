"""Course catalog queries and per-user course progress."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tutow.db.models import Course, CourseProgress, Grade, Material, User
from tutow.gamification.xp_service import grant_xp

logger = structlog.get_logger()


@dataclass
class ProgressUpdate:
    progress: CourseProgress
    xp_earned: int


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


async def list_grades(db: AsyncSession) -> list[Grade]:
    result = await db.execute(select(Grade).order_by(Grade.order))
    return list(result.scalars().all())


async def get_grade_by_name(db: AsyncSession, name: str) -> Grade | None:
    result = await db.execute(select(Grade).where(Grade.name == name))
    return result.scalar_one_or_none()


async def list_materials(db: AsyncSession, grade_id: int) -> list[Material]:
    """Materials of a grade in display order, courses eagerly loaded."""
    result = await db.execute(
        select(Material).where(Material.grade_id == grade_id).order_by(Material.order)
    )
    return list(result.scalars().all())


async def get_material(db: AsyncSession, material_id: int) -> Material | None:
    result = await db.execute(select(Material).where(Material.id == material_id))
    return result.scalar_one_or_none()


async def get_material_by_name(db: AsyncSession, grade_id: int, name: str) -> Material | None:
    result = await db.execute(
        select(Material).where(Material.grade_id == grade_id, Material.name == name)
    )
    return result.scalar_one_or_none()


# ---------------------------------------------------------------------------
# Progress
# ---------------------------------------------------------------------------


async def list_progress(
    db: AsyncSession,
    user_id: int,
    material_id: int | None = None,
    grade_id: int | None = None,
) -> list[CourseProgress]:
    """Progress rows for a user, optionally narrowed to one material or one grade."""
    stmt = select(CourseProgress).where(CourseProgress.user_id == user_id)
    if material_id is not None:
        stmt = stmt.where(CourseProgress.material_id == material_id)
    elif grade_id is not None:
        stmt = stmt.join(Material, Material.id == CourseProgress.material_id).where(
            Material.grade_id == grade_id
        )
    result = await db.execute(stmt.order_by(CourseProgress.updated_at.desc()))
    return list(result.scalars().all())


async def count_completed_courses(db: AsyncSession, user_id: int, since: datetime | None = None) -> int:
    stmt = (
        select(func.count())
        .select_from(CourseProgress)
        .where(CourseProgress.user_id == user_id, CourseProgress.completed.is_(True))
    )
    if since is not None:
        stmt = stmt.where(CourseProgress.completed_at >= since)
    result = await db.execute(stmt)
    return result.scalar_one()


async def update_progress(
    db: AsyncSession,
    user: User,
    course_id: int,
    completed: bool,
    score: int | None = None,
) -> ProgressUpdate:
    """
    Record a course attempt.

    The course's ``xp_reward`` is granted the first time it is completed;
    later completions only update the score.

    Raises:
        LookupError: If the course does not exist.
    """
    course = await db.get(Course, course_id)
    if course is None:
        msg = "Course not found"
        raise LookupError(msg)

    now = datetime.now(timezone.utc)
    result = await db.execute(
        select(CourseProgress).where(
            CourseProgress.user_id == user.id,
            CourseProgress.course_id == course_id,
        )
    )
    progress = result.scalar_one_or_none()
    was_completed = progress is not None and progress.completed
    if progress is None:
        progress = CourseProgress(
            user_id=user.id,
            course_id=course.id,
            material_id=course.material_id,
            completed=False,
            updated_at=now,
        )
        db.add(progress)

    progress.completed = completed
    progress.completed_at = (progress.completed_at if was_completed else now) if completed else None
    if score is not None:
        progress.score = score
    progress.updated_at = now
    await db.flush()

    xp_earned = 0
    if completed and not was_completed:
        granted = await grant_xp(
            db,
            user_id=user.id,
            amount=course.xp_reward,
            source="course",
            source_id=str(course.id),
            description=f"Completed course: {course.title}",
            idempotency_key=f"course:{course.id}:{user.id}",
        )
        if granted:
            xp_earned = course.xp_reward
            logger.info("course_completed", user_id=user.id, course_id=course.id, xp=xp_earned)

    return ProgressUpdate(progress=progress, xp_earned=xp_earned)
