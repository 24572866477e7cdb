"""Badge requirement predicates.

A badge's ``requirement`` column stores one of a closed set of tagged
variants, e.g. ``{"type": "correct_answers", "count": 100}``. Stored data is
parsed into the matching pydantic model and checked against a
:class:`UserFacts` snapshot by :func:`is_satisfied`.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter


class GradeCompletion(BaseModel):
    type: Literal["grade_completion"] = "grade_completion"
    grade: int = Field(..., ge=1)
    completion_percentage: int = Field(100, ge=1, le=100)


class CorrectAnswers(BaseModel):
    type: Literal["correct_answers"] = "correct_answers"
    count: int = Field(..., ge=1)


class MaterialCompletion(BaseModel):
    type: Literal["material_completion"] = "material_completion"
    material_names: list[str] = Field(..., min_length=1)


class PerfectSession(BaseModel):
    type: Literal["perfect_session"] = "perfect_session"
    accuracy: int = Field(100, ge=1, le=100)


class SpeedCompletion(BaseModel):
    type: Literal["speed_completion"] = "speed_completion"
    questions: int = Field(..., ge=1)
    max_time: int = Field(..., ge=1)


class DailyStreak(BaseModel):
    type: Literal["daily_streak"] = "daily_streak"
    days: int = Field(..., ge=1)


class SessionCount(BaseModel):
    type: Literal["session_count"] = "session_count"
    count: int = Field(..., ge=1)


class GoldEarned(BaseModel):
    type: Literal["gold_earned"] = "gold_earned"
    amount: int = Field(..., ge=1)


Requirement = Annotated[
    Union[
        GradeCompletion,
        CorrectAnswers,
        MaterialCompletion,
        PerfectSession,
        SpeedCompletion,
        DailyStreak,
        SessionCount,
        GoldEarned,
    ],
    Field(discriminator="type"),
]

_requirement_adapter: TypeAdapter[Requirement] = TypeAdapter(Requirement)


def parse_requirement(data: dict[str, Any]) -> Requirement:
    """Validate stored requirement JSON. Raises ``pydantic.ValidationError`` on unknown types."""
    return _requirement_adapter.validate_python(data)


@dataclass(frozen=True)
class SessionFact:
    total_questions: int
    correct_answers: int
    total_time: int


@dataclass
class UserFacts:
    """Aggregate statistics for one user, gathered once per evaluation pass."""

    total_correct: int = 0
    total_gold_earned: int = 0
    sessions: list[SessionFact] = field(default_factory=list)
    longest_streak: int = 0
    # grade number -> (completed courses, total courses)
    grade_courses: dict[int, tuple[int, int]] = field(default_factory=dict)
    # material names whose every course is completed
    completed_materials: set[str] = field(default_factory=set)

    @property
    def session_count(self) -> int:
        return len(self.sessions)


def utc_date(value: datetime) -> date:
    """Calendar day of a timestamp in UTC. Naive values are taken to be UTC already."""
    if value.tzinfo is None:
        return value.date()
    return value.astimezone(timezone.utc).date()


def current_streak(days: Iterable[date], today: date) -> int:
    """Consecutive active days ending on ``today``. 0 when today is not active."""
    active = set(days)
    streak = 0
    day = today
    while day in active:
        streak += 1
        day -= timedelta(days=1)
    return streak


def longest_daily_streak(days: Iterable[date]) -> int:
    """Length of the longest run of consecutive calendar days."""
    ordered = sorted(set(days))
    best = run = 0
    previous: date | None = None
    for day in ordered:
        run = run + 1 if previous is not None and day - previous == timedelta(days=1) else 1
        best = max(best, run)
        previous = day
    return best


def _grade_ratio_met(facts: UserFacts, grade: int, percentage: int) -> bool:
    completed, total = facts.grade_courses.get(grade, (0, 0))
    if total == 0:
        return False
    return completed * 100 >= percentage * total


def is_satisfied(requirement: Requirement, facts: UserFacts) -> bool:
    """Evaluate one requirement against a user's facts."""
    if isinstance(requirement, CorrectAnswers):
        return facts.total_correct >= requirement.count
    if isinstance(requirement, SessionCount):
        return facts.session_count >= requirement.count
    if isinstance(requirement, GoldEarned):
        return facts.total_gold_earned >= requirement.amount
    if isinstance(requirement, DailyStreak):
        return facts.longest_streak >= requirement.days
    if isinstance(requirement, GradeCompletion):
        return _grade_ratio_met(facts, requirement.grade, requirement.completion_percentage)
    if isinstance(requirement, MaterialCompletion):
        return any(name in facts.completed_materials for name in requirement.material_names)
    if isinstance(requirement, PerfectSession):
        return any(
            s.total_questions > 0 and s.correct_answers * 100 >= requirement.accuracy * s.total_questions
            for s in facts.sessions
        )
    if isinstance(requirement, SpeedCompletion):
        return any(
            s.total_questions >= requirement.questions and s.total_time <= requirement.max_time
            for s in facts.sessions
        )
    msg = f"Unhandled requirement type: {type(requirement).__name__}"
    raise TypeError(msg)


def current_progress(requirement: Requirement, facts: UserFacts) -> int:
    """Progress toward a requirement, in the requirement's own unit.

    Counted for answer, session and gold totals and as a rounded percentage
    for grade completion; other kinds report 0.
    """
    if isinstance(requirement, CorrectAnswers):
        return facts.total_correct
    if isinstance(requirement, SessionCount):
        return facts.session_count
    if isinstance(requirement, GoldEarned):
        return facts.total_gold_earned
    if isinstance(requirement, GradeCompletion):
        completed, total = facts.grade_courses.get(requirement.grade, (0, 0))
        return round(completed * 100 / total) if total else 0
    return 0
