"""FSRS Memory Model

Free Spaced Repetition Scheduler (v4 weights). Pure functions over a Card
value: difficulty and stability are updated from the review grade, and the
due timestamp advances by the interval that keeps predicted recall at the
target retention.

A card with zero stability has never been reviewed (new phase); its first
grade sets stability and difficulty directly. Later grades go through
retrievability, so the time since the card became due matters.
"""
import math
from dataclasses import dataclass, replace
from enum import IntEnum

from core.logging import srs_logger

log = srs_logger()

WEIGHTS = (
    0.4, 0.6, 2.4, 5.8,  # initial stability per grade
    4.93, 0.94,  # initial difficulty
    0.86, 0.01,  # difficulty update, mean reversion
    1.49, 0.14, 0.94,  # stability after recall
    2.18, 0.05, 0.34, 1.26,  # stability after lapse
    0.29, 2.61,  # hard penalty, easy bonus
)

FACTOR = 19 / 81
DECAY = -0.5

TARGET_RETENTION = 0.9

MIN_DIFFICULTY = 1.0
MAX_DIFFICULTY = 10.0

SECONDS_PER_DAY = 86_400


class Grade(IntEnum):
    AGAIN = 1
    HARD = 2
    GOOD = 3
    EASY = 4


@dataclass(frozen=True, slots=True)
class Card:
    """Scheduled native/target text pair.

    ``due`` is epoch seconds, ``stability`` is in days.
    """
    id: int
    native: str
    target: str
    due: int
    stability: float = 0.0
    difficulty: float = 0.0

    @property
    def is_new(self) -> bool:
        return self.stability == 0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "native": self.native,
            "target": self.target,
            "due": self.due,
            "stability": self.stability,
            "difficulty": self.difficulty,
        }


# =============================================================================
# Time helpers
# =============================================================================

def start_of_day(epoch: int, day_start_hour: int = 5) -> int:
    """Epoch seconds at which the study day containing ``epoch`` (UTC date) begins."""
    return epoch - epoch % SECONDS_PER_DAY + day_start_hour * 3600


def seconds_to_days(seconds: int) -> int:
    """Whole days in a span; negative spans count as zero."""
    return max(seconds, 0) // SECONDS_PER_DAY


def days_to_seconds(days: int) -> int:
    return days * SECONDS_PER_DAY


# =============================================================================
# Formulas
# =============================================================================

def _clamp_difficulty(difficulty: float) -> float:
    return min(max(difficulty, MIN_DIFFICULTY), MAX_DIFFICULTY)


def initial_stability(grade: Grade) -> float:
    return WEIGHTS[grade - 1]


def initial_difficulty(grade: Grade) -> float:
    return WEIGHTS[4] - (grade - 3) * WEIGHTS[5]


def retrievability(elapsed_days: float, stability: float) -> float:
    """Predicted probability of recall after ``elapsed_days``."""
    return (1 + FACTOR * elapsed_days / stability) ** DECAY


def new_difficulty(difficulty: float, grade: Grade) -> float:
    """Difficulty after a review, reverted towards the initial Good difficulty.

    The result is clamped to [MIN_DIFFICULTY, MAX_DIFFICULTY], so it departs
    from the bare formula at the extremes (10.0 graded Again stays 10.0).
    """
    updated = (
        WEIGHTS[7] * initial_difficulty(Grade.GOOD)
        + (1 - WEIGHTS[7]) * (difficulty - WEIGHTS[6] * (grade - 3))
    )
    return _clamp_difficulty(updated)


def stability_after_recall(stability: float, difficulty: float, r: float, grade: Grade) -> float:
    if grade == Grade.HARD:
        factor = WEIGHTS[15]
    elif grade == Grade.EASY:
        factor = WEIGHTS[16]
    else:
        factor = 1.0
    return stability * (
        math.exp(WEIGHTS[8])
        * (11 - difficulty)
        * stability ** -WEIGHTS[9]
        * (math.exp(WEIGHTS[10] * (1 - r)) - 1)
        * factor
        + 1
    )


def stability_after_lapse(stability: float, difficulty: float, r: float) -> float:
    return (
        WEIGHTS[11]
        * difficulty ** -WEIGHTS[12]
        * ((stability + 1) ** WEIGHTS[13] - 1)
        * math.exp(WEIGHTS[14] * (1 - r))
    )


def new_stability(stability: float, difficulty: float, r: float, grade: Grade) -> float:
    if grade == Grade.AGAIN:
        return stability_after_lapse(stability, difficulty, r)
    return stability_after_recall(stability, difficulty, r, grade)


def interval_days(stability: float, target_retention: float = TARGET_RETENTION) -> float:
    """Days until predicted recall drops to ``target_retention``."""
    return (stability / FACTOR) * (target_retention ** (1 / DECAY) - 1)


# =============================================================================
# Card transitions
# =============================================================================

def initial_schedule(card: Card, grade: Grade, target_retention: float = TARGET_RETENTION) -> Card:
    """First review of a new card."""
    stability = initial_stability(grade)
    difficulty = _clamp_difficulty(initial_difficulty(grade))
    days = int(interval_days(stability, target_retention))
    return replace(
        card,
        stability=stability,
        difficulty=difficulty,
        due=card.due + days_to_seconds(days),
    )


def schedule(
    card: Card, grade: Grade, review_time: int, target_retention: float = TARGET_RETENTION
) -> Card:
    """Review of a card that already has a memory state."""
    elapsed = seconds_to_days(review_time - card.due)
    r = retrievability(elapsed, card.stability)
    difficulty = new_difficulty(card.difficulty, grade)
    stability = new_stability(card.stability, card.difficulty, r, grade)
    days = int(interval_days(stability, target_retention))
    return replace(
        card,
        stability=stability,
        difficulty=difficulty,
        due=card.due + days_to_seconds(days),
    )


def review_card(
    card: Card, grade: Grade, review_time: int, target_retention: float = TARGET_RETENTION
) -> Card:
    """Apply a grade; the caller persists the returned card."""
    if card.is_new:
        reviewed = initial_schedule(card, grade, target_retention)
    else:
        reviewed = schedule(card, grade, review_time, target_retention)
    log.debug(
        "card_reviewed",
        card_id=card.id,
        grade=grade.name,
        stability=round(reviewed.stability, 3),
        difficulty=round(reviewed.difficulty, 3),
        due=reviewed.due,
    )
    return reviewed
