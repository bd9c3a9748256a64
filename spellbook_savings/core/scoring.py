"""Pure scoring and mastery rules.

Points for a correct answer are the tier's base points plus a streak bonus
that grows by one stack per consecutive correct answer after the first,
capped at ``MAX_STREAK_BONUS_STACKS``. A tier is mastered once its correct
count reaches the configured threshold; the open-ended threshold is never
reached.
"""

from __future__ import annotations

import math
from typing import Mapping

from spellbook_savings.constants.quiz_constants import (
    EASY_BASE_POINTS,
    EASY_MASTERY_THRESHOLD,
    HARD_BASE_POINTS,
    HARD_MASTERY_THRESHOLD,
    MAX_STREAK_BONUS_STACKS,
    MEDIUM_BASE_POINTS,
    MEDIUM_MASTERY_THRESHOLD,
    POINTS_BAR_MAX_POINTS,
    STREAK_BONUS_UNIT,
)
from spellbook_savings.core.models import Difficulty

_BASE_POINTS: dict[Difficulty, int] = {
    Difficulty.EASY: EASY_BASE_POINTS,
    Difficulty.MEDIUM: MEDIUM_BASE_POINTS,
    Difficulty.HARD: HARD_BASE_POINTS,
}

_DEFAULT_MASTERY_THRESHOLDS: dict[Difficulty, float] = {
    Difficulty.EASY: EASY_MASTERY_THRESHOLD,
    Difficulty.MEDIUM: MEDIUM_MASTERY_THRESHOLD,
    Difficulty.HARD: HARD_MASTERY_THRESHOLD,
}

_DIFFICULTY_ORDER: tuple[Difficulty, ...] = (Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD)


def base_points(difficulty: Difficulty) -> int:
    return _BASE_POINTS[difficulty]


def streak_bonus(streak: int) -> int:
    """Bonus earned by a correct answer that brings the streak to ``streak``."""
    stacks = min(max(streak - 1, 0), MAX_STREAK_BONUS_STACKS)
    return stacks * STREAK_BONUS_UNIT


def points_for_correct_answer(difficulty: Difficulty, streak: int) -> int:
    return base_points(difficulty) + streak_bonus(streak)


def default_mastery_thresholds() -> dict[Difficulty, float]:
    return dict(_DEFAULT_MASTERY_THRESHOLDS)


def mastery_threshold(
    difficulty: Difficulty,
    thresholds: Mapping[Difficulty, float] | None = None,
) -> float:
    """Return the correct-answer count needed to master ``difficulty``."""
    if thresholds is not None and difficulty in thresholds:
        return thresholds[difficulty]
    return _DEFAULT_MASTERY_THRESHOLDS[difficulty]


def mastery_progress(correct_count: int, threshold: float) -> float:
    """Normalized progress towards ``threshold`` in the range 0..1."""
    if math.isinf(threshold):
        return 0.0
    if threshold <= 0:
        return 1.0
    return min(correct_count / threshold, 1.0)


def is_mastered(correct_count: int, threshold: float) -> bool:
    return correct_count >= threshold


def format_threshold(threshold: float) -> str:
    """Display form of a threshold; the open-ended sentinel shows as infinity."""
    if math.isinf(threshold):
        return "∞"
    return str(int(threshold))


def next_difficulty(difficulty: Difficulty) -> Difficulty | None:
    """Tier a player is promoted to after mastering ``difficulty``, if any."""
    position = _DIFFICULTY_ORDER.index(difficulty)
    if position + 1 < len(_DIFFICULTY_ORDER):
        return _DIFFICULTY_ORDER[position + 1]
    return None


def points_bar_percent(points: int) -> float:
    if points <= 0:
        return 0.0
    return min(points / POINTS_BAR_MAX_POINTS * 100, 100.0)
