"""Exercise endpoints: fetch, submit and progress."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from tutow.auth.dependencies import get_current_user
from tutow.database import get_session
from tutow.db.models import User
from tutow.exercises.schemas import (
    ExerciseBatchResponse,
    ExerciseProgressResponse,
    ExerciseResponse,
    MaterialsOverviewResponse,
    SubmitRequest,
    SubmitResponse,
)
from tutow.exercises.service import (
    exercise_progress,
    materials_overview,
    pick_exercises,
    submit_exercises,
)
from tutow.gamification.achievement_service import AchievementEvaluator

logger = structlog.get_logger()

router = APIRouter(prefix="/api/v1/exercises", tags=["Exercises"])


@router.get("", response_model=ExerciseBatchResponse)
async def get_exercises(
    grade: str | None = Query(None),
    material: str | None = Query(None),
    _user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> ExerciseBatchResponse:
    """A random batch of exercises for one material."""
    if not grade or not material:
        raise HTTPException(status_code=400, detail="Grade and material are required")
    try:
        exercises, total = await pick_exercises(db, grade, material)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return ExerciseBatchResponse(
        exercises=[ExerciseResponse.model_validate(e) for e in exercises],
        total=total,
        message=None if exercises else "No exercises available for this material",
    )


@router.get("/materials", response_model=MaterialsOverviewResponse)
async def get_exercise_materials(
    grade: str = Query("1"),
    _user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> MaterialsOverviewResponse:
    """Materials of a grade with exercise and course counts."""
    try:
        grade_row, materials = await materials_overview(db, grade)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return MaterialsOverviewResponse(grade=grade_row.name, materials=materials, total=len(materials))


@router.get("/progress", response_model=ExerciseProgressResponse)
async def get_exercise_progress(
    grade: str | None = Query(None),
    material: str | None = Query(None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> ExerciseProgressResponse:
    """Exercise statistics for the current user."""
    try:
        stats = await exercise_progress(db, user.id, grade_name=grade, material_name=material)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return ExerciseProgressResponse(**stats)


@router.post("/submit", response_model=SubmitResponse)
async def submit(
    body: SubmitRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> SubmitResponse:
    """Score a finished exercise set, credit gold, then check for new badges."""
    if not body.is_complete:
        raise HTTPException(status_code=400, detail="Missing required fields")
    user_id = user.id
    try:
        submission = await submit_exercises(
            db,
            user,
            grade_name=body.grade,
            material_name=body.material,
            exercise_ids=body.exercise_ids,
            answers=body.answers,
            time_spent=body.time_spent,
        )
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    await db.commit()
    session_id = submission.session.id

    new_badges = await AchievementEvaluator(db).evaluate(user_id)

    score = submission.score
    return SubmitResponse(
        success=True,
        session_id=session_id,
        correct=score.correct,
        total=score.total,
        accuracy=score.accuracy,
        gold_earned=score.gold_earned,
        time_spent=score.time_spent,
        new_badges=new_badges,
    )
