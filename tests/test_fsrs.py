"""Tests for the FSRS memory model."""

import pytest

from engines.fsrs import (
    SECONDS_PER_DAY,
    Card,
    Grade,
    days_to_seconds,
    initial_difficulty,
    interval_days,
    new_difficulty,
    retrievability,
    review_card,
    seconds_to_days,
    start_of_day,
)

DAY = 19_675 * SECONDS_PER_DAY
DUE = DAY + 5 * 3600


def new_card(**changes) -> Card:
    return Card(id=1, native="book", target="книга", due=DUE, **changes)


class TestTimeHelpers:

    def test_start_of_day(self):
        assert start_of_day(DAY + 80_000) == DUE
        assert start_of_day(DAY) == DUE
        assert start_of_day(DAY, day_start_hour=0) == DAY

    def test_seconds_to_days_floors(self):
        assert seconds_to_days(SECONDS_PER_DAY * 2 + 10) == 2
        assert seconds_to_days(SECONDS_PER_DAY - 1) == 0

    def test_negative_span_is_zero(self):
        assert seconds_to_days(-SECONDS_PER_DAY * 3) == 0

    def test_days_to_seconds(self):
        assert days_to_seconds(3) == 3 * SECONDS_PER_DAY


class TestFormulas:

    def test_interval_equals_stability_at_default_retention(self):
        assert interval_days(2.4) == pytest.approx(2.4, abs=1e-9)

    def test_higher_retention_shortens_interval(self):
        assert interval_days(10, target_retention=0.95) < interval_days(10)

    def test_retrievability_at_stability(self):
        assert retrievability(5.0, 5.0) == pytest.approx(0.9)

    def test_retrievability_without_elapsed_time(self):
        assert retrievability(0, 3.0) == 1

    def test_initial_difficulty(self):
        assert initial_difficulty(Grade.GOOD) == pytest.approx(4.93)
        assert initial_difficulty(Grade.EASY) == pytest.approx(3.99)

    def test_difficulty_clamped(self):
        assert new_difficulty(1.0, Grade.EASY) == 1.0
        assert new_difficulty(10.0, Grade.AGAIN) == 10.0

    def test_again_raises_difficulty(self):
        assert new_difficulty(5.0, Grade.AGAIN) > 5.0


class TestReviewCard:

    def test_first_good_review(self):
        card = review_card(new_card(), Grade.GOOD, DUE)
        assert card.stability == pytest.approx(2.4)
        assert card.difficulty == pytest.approx(4.93)
        assert card.due == DUE + 2 * SECONDS_PER_DAY

    @pytest.mark.parametrize("grade,days", [
        (Grade.AGAIN, 0),
        (Grade.HARD, 0),
        (Grade.GOOD, 2),
        (Grade.EASY, 5),
    ])
    def test_first_review_interval(self, grade, days):
        card = review_card(new_card(), grade, DUE)
        assert card.due == DUE + days * SECONDS_PER_DAY

    def test_first_review_ignores_review_time(self):
        late = review_card(new_card(), Grade.GOOD, DUE + 30 * SECONDS_PER_DAY)
        assert late == review_card(new_card(), Grade.GOOD, DUE)

    def test_early_good_review_keeps_stability(self):
        card = new_card(stability=2.4, difficulty=4.93)
        reviewed = review_card(card, Grade.GOOD, DUE - SECONDS_PER_DAY)
        assert reviewed.stability == pytest.approx(2.4)

    def test_again_lowers_stability(self):
        card = new_card(stability=2.4, difficulty=4.93)
        reviewed = review_card(card, Grade.AGAIN, DUE)
        assert reviewed.stability < card.stability
        assert reviewed.difficulty > card.difficulty

    def test_late_good_review_grows_stability(self):
        card = new_card(stability=2.4, difficulty=4.93)
        reviewed = review_card(card, Grade.GOOD, DUE + 3 * SECONDS_PER_DAY)
        assert reviewed.stability > card.stability
        assert reviewed.due > card.due

    def test_easy_beats_good(self):
        card = new_card(stability=4.0, difficulty=5.0)
        good = review_card(card, Grade.GOOD, DUE + 4 * SECONDS_PER_DAY)
        easy = review_card(card, Grade.EASY, DUE + 4 * SECONDS_PER_DAY)
        assert easy.stability > good.stability

    def test_pure(self):
        card = new_card()
        review_card(card, Grade.GOOD, DUE)
        assert card.stability == 0.0
        assert card.is_new

    def test_identity_preserved(self):
        reviewed = review_card(new_card(), Grade.HARD, DUE)
        assert (reviewed.id, reviewed.native, reviewed.target) == (1, "book", "книга")
