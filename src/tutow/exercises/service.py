"""Exercise fetching, submission and progress statistics."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import structlog
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from tutow.config import get_settings
from tutow.content.service import get_grade_by_name, get_material_by_name
from tutow.db.models import Course, Exercise, ExerciseAnswer, ExerciseSession, Grade, Material, User
from tutow.exercises.scoring import SubmissionScore, display_accuracy, score_submission

logger = structlog.get_logger()


@dataclass
class Submission:
    session: ExerciseSession
    score: SubmissionScore


async def resolve_grade_and_material(
    db: AsyncSession, grade_name: str, material_name: str
) -> tuple[Grade, Material]:
    """
    Raises:
        LookupError: If the grade or the material within it does not exist.
    """
    grade = await get_grade_by_name(db, grade_name)
    if grade is None:
        msg = "Grade not found"
        raise LookupError(msg)
    material = await get_material_by_name(db, grade.id, material_name)
    if material is None:
        msg = "Material not found"
        raise LookupError(msg)
    return grade, material


async def pick_exercises(
    db: AsyncSession, grade_name: str, material_name: str
) -> tuple[list[Exercise], int]:
    """A random batch of a material's exercises and the material's exercise total."""
    grade, material = await resolve_grade_and_material(db, grade_name, material_name)
    where = (Exercise.grade_id == grade.id, Exercise.material_id == material.id)

    total = (await db.execute(select(func.count()).select_from(Exercise).where(*where))).scalar_one()
    result = await db.execute(
        select(Exercise).where(*where).order_by(func.random()).limit(get_settings().exercise_batch_size)
    )
    return list(result.scalars().all()), total


async def submit_exercises(
    db: AsyncSession,
    user: User,
    grade_name: str,
    material_name: str,
    exercise_ids: list[int],
    answers: list[str],
    time_spent: int,
) -> Submission:
    """
    Score a submission, store the session with its answers and credit the gold.

    The caller commits, then runs achievement evaluation.

    Raises:
        LookupError: Unknown grade, material or exercise.
        ValueError: ``answers`` and ``exercise_ids`` differ in length.
    """
    if len(answers) != len(exercise_ids):
        msg = "answers and exercise_ids must have the same length"
        raise ValueError(msg)

    grade, material = await resolve_grade_and_material(db, grade_name, material_name)

    result = await db.execute(
        select(Exercise.id, Exercise.answer).where(Exercise.id.in_(set(exercise_ids)))
    )
    answer_key = {row.id: row.answer for row in result}
    # repeated ids count as missing
    if len(answer_key) != len(exercise_ids):
        msg = "Some exercises not found"
        raise LookupError(msg)

    score = score_submission(answer_key, exercise_ids, answers, time_spent)

    session = ExerciseSession(
        user_id=user.id,
        grade_id=grade.id,
        material_id=material.id,
        total_questions=score.total,
        correct_answers=score.correct,
        total_time=time_spent,
        gold_earned=score.gold_earned,
        completed_at=datetime.now(timezone.utc),
        answers=[
            ExerciseAnswer(
                exercise_id=a.exercise_id,
                user_answer=a.user_answer,
                is_correct=a.is_correct,
                time_spent=a.time_spent,
            )
            for a in score.answers
        ],
    )
    db.add(session)
    if score.gold_earned:
        await db.execute(
            update(User)
            .where(User.id == user.id)
            .values(gold=User.gold + score.gold_earned)
            .execution_options(synchronize_session=False)
        )
    await db.flush()

    logger.info(
        "exercise_submitted",
        user_id=user.id,
        session_id=session.id,
        material=material.name,
        correct=score.correct,
        total=score.total,
        gold=score.gold_earned,
    )
    return Submission(session=session, score=score)


# ---------------------------------------------------------------------------
# Listings and statistics
# ---------------------------------------------------------------------------


async def materials_overview(db: AsyncSession, grade_name: str) -> tuple[Grade, list[dict[str, Any]]]:
    """Materials of a grade with exercise and course counts.

    Raises:
        LookupError: If the grade does not exist.
    """
    grade = await get_grade_by_name(db, grade_name)
    if grade is None:
        msg = "Grade not found"
        raise LookupError(msg)

    exercise_counts = dict(
        (await db.execute(
            select(Exercise.material_id, func.count())
            .where(Exercise.grade_id == grade.id)
            .group_by(Exercise.material_id)
        )).all()
    )
    course_counts = dict(
        (await db.execute(
            select(Course.material_id, func.count())
            .join(Material, Material.id == Course.material_id)
            .where(Material.grade_id == grade.id)
            .group_by(Course.material_id)
        )).all()
    )
    materials = (await db.execute(
        select(Material).where(Material.grade_id == grade.id).order_by(Material.order)
    )).scalars().all()
    return grade, [
        {
            "id": m.id,
            "name": m.name,
            "display_name": m.display_name,
            "description": m.description,
            "image_url": m.image_url,
            "order": m.order,
            "exercise_count": exercise_counts.get(m.id, 0),
            "course_count": course_counts.get(m.id, 0),
        }
        for m in materials
    ]


def _session_summary(s: ExerciseSession) -> dict[str, Any]:
    return {
        "id": s.id,
        "material_id": s.material_id,
        "material_name": s.material.name,
        "material_display_name": s.material.display_name,
        "total_questions": s.total_questions,
        "correct_answers": s.correct_answers,
        "accuracy": display_accuracy(s.correct_answers, s.total_questions),
        "gold_earned": s.gold_earned,
        "total_time": s.total_time,
        "completed_at": s.completed_at,
    }


async def exercise_progress(
    db: AsyncSession,
    user_id: int,
    grade_name: str | None = None,
    material_name: str | None = None,
) -> dict[str, Any]:
    """Overall totals, best session, per-material stats and the most recent sessions.

    Raises:
        LookupError: If a grade or material filter names something unknown.
    """
    stmt = select(ExerciseSession).where(ExerciseSession.user_id == user_id)
    if grade_name is not None:
        grade = await get_grade_by_name(db, grade_name)
        if grade is None:
            msg = "Grade not found"
            raise LookupError(msg)
        stmt = stmt.where(ExerciseSession.grade_id == grade.id)
        if material_name is not None:
            material = await get_material_by_name(db, grade.id, material_name)
            if material is None:
                msg = "Material not found"
                raise LookupError(msg)
            stmt = stmt.where(ExerciseSession.material_id == material.id)

    sessions = list(
        (await db.execute(stmt.order_by(ExerciseSession.completed_at.desc(), ExerciseSession.id.desc())))
        .scalars()
        .all()
    )

    total_questions = sum(s.total_questions for s in sessions)
    total_correct = sum(s.correct_answers for s in sessions)
    best = max(
        sessions,
        key=lambda s: (s.correct_answers / s.total_questions if s.total_questions else 0, -s.total_time),
        default=None,
    )

    by_material: dict[int, dict[str, Any]] = {}
    for s in sessions:
        stats = by_material.setdefault(s.material_id, {
            "material_id": s.material_id,
            "material_name": s.material.name,
            "material_display_name": s.material.display_name,
            "sessions": 0,
            "total_questions": 0,
            "correct_answers": 0,
            "gold_earned": 0,
        })
        stats["sessions"] += 1
        stats["total_questions"] += s.total_questions
        stats["correct_answers"] += s.correct_answers
        stats["gold_earned"] += s.gold_earned
    for stats in by_material.values():
        stats["accuracy"] = display_accuracy(stats["correct_answers"], stats["total_questions"])

    limit = get_settings().recent_sessions_limit
    return {
        "overall": {
            "total_sessions": len(sessions),
            "total_questions": total_questions,
            "correct_answers": total_correct,
            "accuracy": display_accuracy(total_correct, total_questions),
            "gold_earned": sum(s.gold_earned for s in sessions),
            "total_time": sum(s.total_time for s in sessions),
        },
        "best_session": _session_summary(best) if best else None,
        "materials": list(by_material.values()),
        "recent_sessions": [_session_summary(s) for s in sessions[:limit]],
    }
