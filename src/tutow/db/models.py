"""ORM models for users, course content, exercises, the garden and achievements."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tutow.db.base import Base


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class User(Base):
    """A learner account. ``xp`` only grows; ``gold`` is spent in the garden."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(256), nullable=False)
    school: Mapped[str | None] = mapped_column(String(200), nullable=True)
    current_grade: Mapped[int | None] = mapped_column(Integer, nullable=True)
    xp: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    gold: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    last_login: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    garden: Mapped[Garden | None] = relationship("Garden", back_populates="user", uselist=False)


# ---------------------------------------------------------------------------
# Course content
# ---------------------------------------------------------------------------


class Grade(Base):
    """School grade (``name`` is the grade number as text, e.g. "1")."""

    __tablename__ = "grades"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(16), unique=True, nullable=False)
    display_name: Mapped[str] = mapped_column(String(64), nullable=False)
    order: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")


class Material(Base):
    """A topic within a grade, grouping courses and exercises."""

    __tablename__ = "materials"
    __table_args__ = (
        UniqueConstraint("grade_id", "name", name="uq_material_grade_name"),
        UniqueConstraint("grade_id", "order", name="uq_material_grade_order"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    grade_id: Mapped[int] = mapped_column(Integer, ForeignKey("grades.id", ondelete="CASCADE"), nullable=False)
    name: Mapped[str] = mapped_column(String(64), nullable=False)
    display_name: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(256), nullable=True)
    order: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")

    grade: Mapped[Grade] = relationship("Grade", lazy="joined")
    courses: Mapped[list[Course]] = relationship(
        "Course",
        back_populates="material",
        lazy="selectin",
        order_by=lambda: [Course.level, Course.order],
    )


class Course(Base):
    """A lesson inside a material. ``registry_key`` links it to an interactive renderer."""

    __tablename__ = "courses"
    __table_args__ = (
        UniqueConstraint("material_id", "level", "order", name="uq_course_material_level_order"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    material_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("materials.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    level: Mapped[int] = mapped_column(Integer, nullable=False, server_default="1")
    order: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    content: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    xp_reward: Mapped[int] = mapped_column(Integer, nullable=False, server_default="10")
    registry_key: Mapped[str | None] = mapped_column(String(128), nullable=True)

    material: Mapped[Material] = relationship("Material", back_populates="courses")


class CourseProgress(Base):
    """Per-user course completion: UNIQUE(user_id, course_id)."""

    __tablename__ = "course_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name="uq_course_progress_user_course"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    course_id: Mapped[int] = mapped_column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)
    material_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("materials.id", ondelete="CASCADE"), nullable=False
    )
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")
    score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    course: Mapped[Course] = relationship("Course", lazy="joined")


# ---------------------------------------------------------------------------
# Exercises
# ---------------------------------------------------------------------------


class Exercise(Base):
    """A multiple-choice question. ``answer`` is compared verbatim."""

    __tablename__ = "exercises"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    grade_id: Mapped[int] = mapped_column(Integer, ForeignKey("grades.id", ondelete="CASCADE"), nullable=False)
    material_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("materials.id", ondelete="CASCADE"), nullable=False
    )
    question: Mapped[str] = mapped_column(Text, nullable=False)
    options: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    answer: Mapped[str] = mapped_column(String(256), nullable=False)
    difficulty: Mapped[str] = mapped_column(String(16), nullable=False, server_default="easy")
    explanation: Mapped[str | None] = mapped_column(Text, nullable=True)


class ExerciseSession(Base):
    """Immutable record of one submitted exercise attempt."""

    __tablename__ = "exercise_sessions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    grade_id: Mapped[int] = mapped_column(Integer, ForeignKey("grades.id"), nullable=False)
    material_id: Mapped[int] = mapped_column(Integer, ForeignKey("materials.id"), nullable=False)
    total_questions: Mapped[int] = mapped_column(Integer, nullable=False)
    correct_answers: Mapped[int] = mapped_column(Integer, nullable=False)
    total_time: Mapped[int] = mapped_column(Integer, nullable=False)
    gold_earned: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    completed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    material: Mapped[Material] = relationship("Material", lazy="joined")
    answers: Mapped[list[ExerciseAnswer]] = relationship(
        "ExerciseAnswer", back_populates="session", cascade="all, delete-orphan"
    )


class ExerciseAnswer(Base):
    """One answered question within an exercise session."""

    __tablename__ = "exercise_answers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    session_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("exercise_sessions.id", ondelete="CASCADE"), nullable=False
    )
    exercise_id: Mapped[int] = mapped_column(Integer, ForeignKey("exercises.id"), nullable=False)
    user_answer: Mapped[str] = mapped_column(String(256), nullable=False)
    is_correct: Mapped[bool] = mapped_column(Boolean, nullable=False)
    time_spent: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")

    session: Mapped[ExerciseSession] = relationship("ExerciseSession", back_populates="answers")


# ---------------------------------------------------------------------------
# Garden
# ---------------------------------------------------------------------------


class PlantType(Base):
    """Static plant catalog entry. ``grade`` is the tier: bronze, silver or gold."""

    __tablename__ = "plant_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    display_name: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    grade: Mapped[str] = mapped_column(String(16), nullable=False)
    seed_price: Mapped[int] = mapped_column(Integer, nullable=False)
    water_cost: Mapped[int] = mapped_column(Integer, nullable=False)
    growth_stages: Mapped[int] = mapped_column(Integer, nullable=False)
    xp_reward: Mapped[int] = mapped_column(Integer, nullable=False)
    image_url: Mapped[str | None] = mapped_column(String(256), nullable=True)


class Garden(Base):
    """One garden per user, holding a fixed number of pots."""

    __tablename__ = "gardens"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    user: Mapped[User] = relationship("User", back_populates="garden")
    pots: Mapped[list[GardenPot]] = relationship(
        "GardenPot",
        back_populates="garden",
        lazy="selectin",
        order_by="GardenPot.slot",
        cascade="all, delete-orphan",
    )


class GardenPot(Base):
    """A planting slot. ``version`` guards against concurrent updates of the same pot."""

    __tablename__ = "garden_pots"
    __table_args__ = (
        UniqueConstraint("garden_id", "slot", name="uq_garden_pot_slot"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    garden_id: Mapped[int] = mapped_column(Integer, ForeignKey("gardens.id", ondelete="CASCADE"), nullable=False)
    slot: Mapped[int] = mapped_column(Integer, nullable=False)
    plant_type_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("plant_types.id"), nullable=True)
    planted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    last_watered: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    current_stage: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    is_ready_to_harvest: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="false"
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1, server_default="1")

    garden: Mapped[Garden] = relationship("Garden", back_populates="pots")
    plant_type: Mapped[PlantType | None] = relationship("PlantType", lazy="joined")

    __mapper_args__ = {"version_id_col": version}  # noqa: RUF012


class CollectionBookEntry(Base):
    """Per-user plant unlock record: UNIQUE(user_id, plant_type_id)."""

    __tablename__ = "collection_book_entries"
    __table_args__ = (
        UniqueConstraint("user_id", "plant_type_id", name="uq_collection_user_plant"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    plant_type_id: Mapped[int] = mapped_column(Integer, ForeignKey("plant_types.id"), nullable=False)
    unlocked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")
    unlocked_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    times_harvested: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")

    plant_type: Mapped[PlantType] = relationship("PlantType", lazy="joined")


# ---------------------------------------------------------------------------
# Achievements
# ---------------------------------------------------------------------------


class Badge(Base):
    """Badge catalog entry. ``requirement`` holds a tagged predicate, e.g. {"type": "session_count", "count": 10}."""

    __tablename__ = "badges"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    display_name: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(32), nullable=False)
    image_url: Mapped[str | None] = mapped_column(String(256), nullable=True)
    requirement: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default="true")


class UserBadge(Base):
    """Badges earned by users: UNIQUE(user_id, badge_id) prevents duplicates."""

    __tablename__ = "user_badges"
    __table_args__ = (
        UniqueConstraint("user_id", "badge_id", name="uq_user_badge"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    badge_id: Mapped[int] = mapped_column(Integer, ForeignKey("badges.id"), nullable=False)
    earned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    badge: Mapped[Badge] = relationship("Badge", lazy="joined")


class XPLedger(Base):
    """Immutable XP transaction log with idempotency key."""

    __tablename__ = "xp_ledger"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    source: Mapped[str] = mapped_column(String(32), nullable=False)
    source_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    description: Mapped[str | None] = mapped_column(String(256), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    idempotency_key: Mapped[str | None] = mapped_column(String(256), unique=True, nullable=True)
