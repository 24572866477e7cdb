"""Achievement evaluator: checks a user's aggregate statistics against badge requirements."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any

from pydantic import ValidationError
from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tutow.db.models import Course, CourseProgress, ExerciseSession, Grade, Material, UserBadge
from tutow.gamification.badge_service import award_badge, get_user_badges, list_active_badges, owned_badge_ids
from tutow.gamification.requirements import (
    Requirement,
    SessionFact,
    UserFacts,
    current_progress,
    is_satisfied,
    longest_daily_streak,
    parse_requirement,
    utc_date,
)

logger = logging.getLogger(__name__)


async def collect_facts(db: AsyncSession, user_id: int) -> UserFacts:
    """Gather every statistic a badge requirement can ask about."""
    facts = UserFacts()

    sessions = await db.execute(
        select(
            ExerciseSession.total_questions,
            ExerciseSession.correct_answers,
            ExerciseSession.total_time,
            ExerciseSession.gold_earned,
            ExerciseSession.completed_at,
        ).where(ExerciseSession.user_id == user_id)
    )
    active_days: list[date] = []
    for total_questions, correct, total_time, gold, completed_at in sessions:
        facts.sessions.append(SessionFact(total_questions, correct, total_time))
        facts.total_correct += correct
        facts.total_gold_earned += gold
        active_days.append(utc_date(completed_at))
    facts.longest_streak = longest_daily_streak(active_days)

    # Per material: total courses vs. courses this user has completed
    completed = and_(
        CourseProgress.course_id == Course.id,
        CourseProgress.user_id == user_id,
        CourseProgress.completed.is_(True),
    )
    rows = await db.execute(
        select(
            Material.name,
            Grade.name,
            func.count(Course.id),
            func.count(CourseProgress.id),
        )
        .select_from(Material)
        .join(Grade, Grade.id == Material.grade_id)
        .join(Course, Course.material_id == Material.id)
        .outerjoin(CourseProgress, completed)
        .group_by(Material.id, Material.name, Grade.name)
    )
    for material_name, grade_name, total, done in rows:
        if done >= total:
            facts.completed_materials.add(material_name)
        if grade_name.isdigit():
            grade = int(grade_name)
            prev_done, prev_total = facts.grade_courses.get(grade, (0, 0))
            facts.grade_courses[grade] = (prev_done + done, prev_total + total)

    return facts


@dataclass(frozen=True)
class _BadgeRule:
    id: int
    name: str
    display_name: str
    requirement: Requirement


class AchievementEvaluator:
    """Awards every active badge whose requirement a user now satisfies."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self._rules: list[_BadgeRule] | None = None

    async def _load_rules(self) -> list[_BadgeRule]:
        """Load and cache active badges as plain data."""
        if self._rules is None:
            rules = []
            for badge in await list_active_badges(self.db):
                try:
                    requirement = parse_requirement(badge.requirement)
                except ValidationError:
                    logger.warning("Badge %s has an invalid requirement; skipping", badge.name)
                    continue
                rules.append(_BadgeRule(badge.id, badge.name, badge.display_name, requirement))
            self._rules = rules
        return self._rules

    async def evaluate(self, user_id: int) -> list[str]:
        """Evaluate all badges for a user.

        Returns display names of the badges awarded in this pass (may be
        empty). Each award is committed on its own, so the caller must
        have committed its own work first.
        """
        rules = await self._load_rules()
        owned = await owned_badge_ids(self.db, user_id)
        pending = [r for r in rules if r.id not in owned]
        if not pending:
            return []

        facts = await collect_facts(self.db, user_id)
        awarded: list[str] = []
        for rule in pending:
            if not is_satisfied(rule.requirement, facts):
                continue
            if await award_badge(self.db, user_id, rule.id):
                awarded.append(rule.display_name)

        if awarded:
            logger.info("User %d earned %d badge(s): %s", user_id, len(awarded), ", ".join(awarded))
        return awarded


async def get_badge_progress(db: AsyncSession, user_id: int) -> list[dict[str, Any]]:
    """Every active badge with the user's earned state and progress toward it."""
    badges = await list_active_badges(db)
    earned: dict[int, UserBadge] = {ub.badge_id: ub for ub in await get_user_badges(db, user_id)}
    facts = await collect_facts(db, user_id)

    items = []
    for badge in badges:
        user_badge = earned.get(badge.id)
        try:
            progress = current_progress(parse_requirement(badge.requirement), facts)
        except ValidationError:
            progress = 0
        items.append({
            "id": badge.id,
            "name": badge.name,
            "display_name": badge.display_name,
            "description": badge.description,
            "category": badge.category,
            "image_url": badge.image_url,
            "requirement": badge.requirement,
            "earned": user_badge is not None,
            "earned_at": user_badge.earned_at if user_badge else None,
            "current_progress": progress,
        })
    return items
