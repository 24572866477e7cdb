"""Exercise scoring unit tests: accuracy tiers, time bonus, answer matching."""

from __future__ import annotations

import pytest

from tutow.exercises.scoring import accuracy_gold, display_accuracy, score_submission, time_bonus

KEY = {i: str(i) for i in range(1, 11)}
IDS = list(KEY)


def _answers(correct: int) -> list[str]:
    return [KEY[i] if n < correct else "wrong" for n, i in enumerate(IDS)]


class TestAccuracyGold:
    @pytest.mark.parametrize(
        ("correct", "total", "gold"),
        [
            (10, 10, 15),
            (9, 10, 15),
            (8, 10, 12),
            (7, 10, 10),
            (6, 10, 8),
            (5, 10, 5),
            (4, 10, 0),
            (0, 10, 0),
        ],
    )
    def test_tiers(self, correct, total, gold):
        assert accuracy_gold(correct, total) == gold

    def test_just_below_ninety_is_not_rounded_up(self):
        # 179/200 = 89.5% displays as 90 but earns the 80% tier
        assert display_accuracy(179, 200) == 90
        assert accuracy_gold(179, 200) == 12

    def test_zero_total(self):
        assert accuracy_gold(0, 0) == 0
        assert display_accuracy(0, 0) == 0


class TestTimeBonus:
    @pytest.mark.parametrize(
        ("seconds", "bonus"),
        [(0, 3), (299, 3), (300, 2), (449, 2), (450, 0), (1000, 0)],
    )
    def test_bands(self, seconds, bonus):
        assert time_bonus(seconds) == bonus


class TestDisplayAccuracy:
    @pytest.mark.parametrize(
        ("correct", "total", "expected"),
        [(9, 10, 90), (1, 3, 33), (2, 3, 67), (1, 8, 13), (1, 200, 1), (0, 5, 0), (5, 5, 100)],
    )
    def test_round_half_up(self, correct, total, expected):
        assert display_accuracy(correct, total) == expected


class TestScoreSubmission:
    def test_nine_of_ten_in_250_seconds(self):
        score = score_submission(KEY, IDS, _answers(9), time_spent=250)
        assert score.correct == 9
        assert score.total == 10
        assert score.accuracy == 90
        assert score.base_gold == 15
        assert score.time_bonus == 3
        assert score.gold_earned == 18

    def test_slow_low_accuracy_earns_nothing(self):
        score = score_submission(KEY, IDS, _answers(3), time_spent=600)
        assert score.gold_earned == 0

    def test_exact_match_only(self):
        score = score_submission({1: "7"}, [1], [" 7"], time_spent=10)
        assert score.correct == 0
        assert score.answers[0].is_correct is False

    def test_time_shared_across_answers(self):
        score = score_submission(KEY, IDS, _answers(10), time_spent=95)
        assert {a.time_spent for a in score.answers} == {9}

    def test_answers_keep_submission_order(self):
        ids = [3, 1, 2]
        score = score_submission(KEY, ids, ["3", "x", "2"], time_spent=30)
        assert [a.exercise_id for a in score.answers] == ids
        assert [a.is_correct for a in score.answers] == [True, False, True]

    def test_length_mismatch(self):
        with pytest.raises(ValueError, match="same length"):
            score_submission(KEY, IDS, ["1"], time_spent=10)
