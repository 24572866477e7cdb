"""Exercise request/response schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class ExerciseResponse(BaseModel):
    """A question as served to the learner. The answer is never included."""

    model_config = {"from_attributes": True}

    id: int
    question: str
    options: list[str]
    difficulty: str


class ExerciseBatchResponse(BaseModel):
    exercises: list[ExerciseResponse]
    total: int
    message: str | None = None


class SubmitRequest(BaseModel):
    """Every field is required; absent or empty ones are rejected by the route with 400."""

    grade: str | None = None
    material: str | None = None
    answers: list[str] | None = None
    exercise_ids: list[int] | None = None
    time_spent: int | None = Field(None, ge=0)

    @property
    def is_complete(self) -> bool:
        return bool(self.grade and self.material and self.answers and self.exercise_ids) and self.time_spent is not None


class SubmitResponse(BaseModel):
    success: bool
    session_id: int
    correct: int
    total: int
    accuracy: int
    gold_earned: int
    time_spent: int
    new_badges: list[str]


class MaterialSummary(BaseModel):
    id: int
    name: str
    display_name: str
    description: str | None = None
    image_url: str | None = None
    order: int
    exercise_count: int
    course_count: int


class MaterialsOverviewResponse(BaseModel):
    grade: str
    materials: list[MaterialSummary]
    total: int


class SessionSummary(BaseModel):
    id: int
    material_id: int
    material_name: str
    material_display_name: str
    total_questions: int
    correct_answers: int
    accuracy: int
    gold_earned: int
    total_time: int
    completed_at: datetime


class MaterialStats(BaseModel):
    material_id: int
    material_name: str
    material_display_name: str
    sessions: int
    total_questions: int
    correct_answers: int
    gold_earned: int
    accuracy: int


class OverallStats(BaseModel):
    total_sessions: int
    total_questions: int
    correct_answers: int
    accuracy: int
    gold_earned: int
    total_time: int


class ExerciseProgressResponse(BaseModel):
    overall: OverallStats
    best_session: SessionSummary | None = None
    materials: list[MaterialStats]
    recent_sessions: list[SessionSummary]
