"""Exercise scoring: correctness, accuracy and gold rewards.

Reward tiers compare the exact ratio using integer arithmetic
(``correct * 100 >= threshold * total``) so 89.5% never rounds up into the
90% tier. The rounded percentage is only for display.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

# (minimum accuracy percent, gold), highest first
ACCURACY_GOLD_TIERS: tuple[tuple[int, int], ...] = (
    (90, 15),
    (80, 12),
    (70, 10),
    (60, 8),
    (50, 5),
)

# (finish strictly under this many seconds, bonus gold), fastest first
TIME_BONUS_TIERS: tuple[tuple[int, int], ...] = (
    (300, 3),
    (450, 2),
)


@dataclass(frozen=True)
class ScoredAnswer:
    exercise_id: int
    user_answer: str
    is_correct: bool
    time_spent: int


@dataclass(frozen=True)
class SubmissionScore:
    answers: tuple[ScoredAnswer, ...]
    correct: int
    total: int
    accuracy: int
    base_gold: int
    time_bonus: int
    time_spent: int

    @property
    def gold_earned(self) -> int:
        return self.base_gold + self.time_bonus


def accuracy_gold(correct: int, total: int) -> int:
    """Gold for the accuracy tier reached by ``correct`` out of ``total``."""
    if total <= 0:
        return 0
    for threshold, gold in ACCURACY_GOLD_TIERS:
        if correct * 100 >= threshold * total:
            return gold
    return 0


def time_bonus(seconds: int) -> int:
    """Bonus gold for finishing quickly. Bands do not stack."""
    for limit, bonus in TIME_BONUS_TIERS:
        if seconds < limit:
            return bonus
    return 0


def display_accuracy(correct: int, total: int) -> int:
    """Accuracy percentage rounded half up, as shown to the learner."""
    if total <= 0:
        return 0
    return (correct * 200 + total) // (total * 2)


def score_submission(
    answer_key: Mapping[int, str],
    exercise_ids: Sequence[int],
    answers: Sequence[str],
    time_spent: int,
) -> SubmissionScore:
    """
    Score one submission.

    Args:
        answer_key: Correct answer per exercise id. Must contain every id submitted.
        exercise_ids: Exercises in the order they were answered.
        answers: The learner's answers, parallel to ``exercise_ids``.
        time_spent: Elapsed seconds for the whole attempt.

    Answers must match exactly; no trimming or case folding. Time is shared
    evenly across answers (integer division) since questions are not timed
    individually.
    """
    if len(exercise_ids) != len(answers):
        msg = "answers and exercise_ids must have the same length"
        raise ValueError(msg)

    total = len(exercise_ids)
    per_answer_time = time_spent // total if total else 0
    scored = tuple(
        ScoredAnswer(
            exercise_id=exercise_id,
            user_answer=answer,
            is_correct=answer == answer_key[exercise_id],
            time_spent=per_answer_time,
        )
        for exercise_id, answer in zip(exercise_ids, answers)
    )
    correct = sum(1 for a in scored if a.is_correct)
    return SubmissionScore(
        answers=scored,
        correct=correct,
        total=total,
        accuracy=display_accuracy(correct, total),
        base_gold=accuracy_gold(correct, total),
        time_bonus=time_bonus(time_spent),
        time_spent=time_spent,
    )
