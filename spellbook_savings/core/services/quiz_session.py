"""State machine for a single player's quiz run.

A session is created for one topic and moves through
``IN_PROGRESS`` -> ``GAME_OVER``. Within ``IN_PROGRESS`` each question is first
unanswered (the player may select and re-select a response), then answered
once it has been submitted and graded. Advancing to the next question checks
tier mastery, promotes easy -> medium -> hard, and ends the game when hard is
mastered or when no unused question is left for the topic.

None of the operations raise: calls made when their preconditions do not hold
are ignored (or return ``False``) and leave the state untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
import random
from typing import Mapping

from spellbook_savings.constants.quiz_constants import MAX_REPEAT_DRAW_ATTEMPTS
from spellbook_savings.core.grading import grade_answer
from spellbook_savings.core.models import AnswerValue, Category, Difficulty, Question
from spellbook_savings.core.scoring import (
    default_mastery_thresholds,
    format_threshold,
    is_mastered,
    mastery_progress,
    next_difficulty,
    points_bar_percent,
    points_for_correct_answer,
)
from spellbook_savings.core.services.question_bank import QuestionBank
from spellbook_savings.core.topics import GameTopic, categories_for_topic, random_allowed_category

logger = logging.getLogger(__name__)


class SessionPhase(str, Enum):
    IN_PROGRESS = "in_progress"
    GAME_OVER = "game_over"


class GameOverReason(str, Enum):
    MASTERED = "mastered"
    EXHAUSTED = "exhausted"


@dataclass(slots=True, frozen=True)
class MasteryInfo:
    """Progress towards mastering one difficulty tier."""

    difficulty: Difficulty
    current: int
    needed: float
    progress: float

    @property
    def needed_label(self) -> str:
        return format_threshold(self.needed)


@dataclass(slots=True, frozen=True)
class SessionSnapshot:
    """Immutable copy of a session's state returned to consumers."""

    phase: SessionPhase
    topic: GameTopic
    allowed_categories: tuple[Category, ...]
    current_category: Category
    current_difficulty: Difficulty
    current_question: Question | None
    selected_answer: AnswerValue | None
    is_answered: bool
    last_answer_correct: bool
    points: int
    streak: int
    questions_answered: int
    questions_correct: int
    correct_count_by_difficulty: dict[Difficulty, int]
    mastery_progress_by_difficulty: dict[Difficulty, float]
    completed_difficulties: tuple[Difficulty, ...]
    mastery: MasteryInfo
    points_bar_percent: float
    game_over: bool
    game_over_reason: GameOverReason | None


class QuizSession:
    """Owns the mutable state of one quiz run and its transitions."""

    def __init__(
        self,
        bank: QuestionBank,
        topic: GameTopic,
        rng: random.Random | None = None,
        mastery_thresholds: Mapping[Difficulty, float] | None = None,
    ) -> None:
        self._bank = bank
        self._rng = rng or random.Random()
        self._mastery_thresholds = default_mastery_thresholds()
        if mastery_thresholds:
            self._mastery_thresholds.update(mastery_thresholds)

        self._topic = topic
        self._allowed_categories = categories_for_topic(topic)
        self._current_category = random_allowed_category(topic, self._rng)
        self._current_difficulty = Difficulty.EASY
        self._current_question: Question | None = None

        self._selected_answer: AnswerValue | None = None
        self._is_answered: bool = False
        self._last_answer_correct: bool = False

        self._points: int = 0
        self._streak: int = 0
        self._questions_answered: int = 0
        self._questions_correct: int = 0
        self._correct_by_difficulty: dict[Difficulty, int] = {d: 0 for d in Difficulty}
        self._mastery_progress: dict[Difficulty, float] = {d: 0.0 for d in Difficulty}
        self._completed_difficulties: list[Difficulty] = []
        self._used_question_ids: set[str] = set()

        self._game_over: bool = False
        self._game_over_reason: GameOverReason | None = None

    @classmethod
    def start(
        cls,
        bank: QuestionBank,
        topic: GameTopic,
        rng: random.Random | None = None,
        mastery_thresholds: Mapping[Difficulty, float] | None = None,
    ) -> "QuizSession":
        """Create a session for ``topic`` and load its first question."""
        session = cls(bank, topic, rng=rng, mastery_thresholds=mastery_thresholds)
        logger.info(
            "Starting session for topic %s (starting category %s)",
            topic.value,
            session._current_category.value,
        )
        session._load_next_question(
            previous_question_id=None,
            preferred_category=session._current_category,
        )
        return session

    # --- Transitions ---

    def select_answer(self, answer: AnswerValue) -> None:
        """Record an ungraded response for the current question."""
        if self._game_over or self._current_question is None or self._is_answered:
            return
        self._selected_answer = answer

    def submit_answer(self) -> bool:
        """Grade the selected answer. Returns ``False`` if nothing was graded."""
        question = self._current_question
        if (
            self._game_over
            or question is None
            or self._selected_answer is None
            or self._is_answered
        ):
            return False

        is_correct = grade_answer(question, self._selected_answer)
        difficulty = self._current_difficulty

        self._is_answered = True
        self._last_answer_correct = is_correct
        self._questions_answered += 1

        if is_correct:
            self._questions_correct += 1
            self._correct_by_difficulty[difficulty] += 1
            self._streak += 1
            self._points += points_for_correct_answer(difficulty, self._streak)
        else:
            self._streak = 0

        self._mastery_progress[difficulty] = mastery_progress(
            self._correct_by_difficulty[difficulty],
            self._mastery_thresholds[difficulty],
        )
        logger.debug(
            "Graded question %s as %s (points=%d, streak=%d)",
            question.id,
            "correct" if is_correct else "incorrect",
            self._points,
            self._streak,
        )
        return True

    def go_to_next_question(self) -> None:
        """Promote on mastery, then serve the next unused question."""
        if self._game_over or not self._is_answered:
            return

        previous = self._current_question
        difficulty = self._current_difficulty
        if is_mastered(self._correct_by_difficulty[difficulty], self._mastery_thresholds[difficulty]):
            if difficulty not in self._completed_difficulties:
                self._completed_difficulties.append(difficulty)
            promoted = next_difficulty(difficulty)
            if promoted is None:
                self._end_game(GameOverReason.MASTERED)
                return
            logger.info("Promoting session from %s to %s", difficulty.value, promoted.value)
            self._current_difficulty = promoted

        self._load_next_question(previous.id if previous is not None else None)

    # --- Accessors ---

    def get_phase(self) -> SessionPhase:
        return SessionPhase.GAME_OVER if self._game_over else SessionPhase.IN_PROGRESS

    def get_topic(self) -> GameTopic:
        return self._topic

    def get_allowed_categories(self) -> tuple[Category, ...]:
        return self._allowed_categories

    def get_current_category(self) -> Category:
        return self._current_category

    def get_current_difficulty(self) -> Difficulty:
        return self._current_difficulty

    def get_current_question(self) -> Question | None:
        return self._current_question

    def get_selected_answer(self) -> AnswerValue | None:
        return self._selected_answer

    def is_answered(self) -> bool:
        return self._is_answered

    def was_last_answer_correct(self) -> bool:
        return self._last_answer_correct

    def get_points(self) -> int:
        return self._points

    def get_streak(self) -> int:
        return self._streak

    def get_questions_answered(self) -> int:
        return self._questions_answered

    def get_questions_correct(self) -> int:
        return self._questions_correct

    def get_correct_count(self, difficulty: Difficulty) -> int:
        return self._correct_by_difficulty[difficulty]

    def get_mastery_progress(self, difficulty: Difficulty) -> float:
        return self._mastery_progress[difficulty]

    def get_mastery_threshold(self, difficulty: Difficulty) -> float:
        return self._mastery_thresholds[difficulty]

    def get_completed_difficulties(self) -> tuple[Difficulty, ...]:
        return tuple(self._completed_difficulties)

    def get_used_question_ids(self) -> frozenset[str]:
        return frozenset(self._used_question_ids)

    def is_game_over(self) -> bool:
        return self._game_over

    def get_game_over_reason(self) -> GameOverReason | None:
        return self._game_over_reason

    def get_mastery_info(self) -> MasteryInfo:
        """Mastery progress for the tier currently being played."""
        difficulty = self._current_difficulty
        return MasteryInfo(
            difficulty=difficulty,
            current=self._correct_by_difficulty[difficulty],
            needed=self._mastery_thresholds[difficulty],
            progress=self._mastery_progress[difficulty],
        )

    def get_points_bar_percent(self) -> float:
        return points_bar_percent(self._points)

    def snapshot(self) -> SessionSnapshot:
        selected = self._selected_answer
        if isinstance(selected, list):
            selected = list(selected)
        return SessionSnapshot(
            phase=self.get_phase(),
            topic=self._topic,
            allowed_categories=self._allowed_categories,
            current_category=self._current_category,
            current_difficulty=self._current_difficulty,
            current_question=self._current_question,
            selected_answer=selected,
            is_answered=self._is_answered,
            last_answer_correct=self._last_answer_correct,
            points=self._points,
            streak=self._streak,
            questions_answered=self._questions_answered,
            questions_correct=self._questions_correct,
            correct_count_by_difficulty=dict(self._correct_by_difficulty),
            mastery_progress_by_difficulty=dict(self._mastery_progress),
            completed_difficulties=tuple(self._completed_difficulties),
            mastery=self.get_mastery_info(),
            points_bar_percent=self.get_points_bar_percent(),
            game_over=self._game_over,
            game_over_reason=self._game_over_reason,
        )

    # --- Internals ---

    def _draw_question(
        self,
        previous_question_id: str | None,
        preferred_category: Category | None = None,
    ) -> Question | None:
        candidate = self._bank.random_question_for_topic(
            self._topic,
            self._current_difficulty,
            exclude_ids=self._used_question_ids,
            rng=self._rng,
            preferred_category=preferred_category,
        )
        attempts = 0
        while (
            candidate is not None
            and previous_question_id is not None
            and candidate.id == previous_question_id
            and attempts < MAX_REPEAT_DRAW_ATTEMPTS
        ):
            candidate = self._bank.random_question_for_topic(
                self._topic,
                self._current_difficulty,
                exclude_ids=self._used_question_ids,
                rng=self._rng,
                preferred_category=preferred_category,
            )
            attempts += 1
        return candidate

    def _load_next_question(
        self,
        previous_question_id: str | None,
        preferred_category: Category | None = None,
    ) -> None:
        question = self._draw_question(previous_question_id, preferred_category)
        if question is None:
            self._end_game(GameOverReason.EXHAUSTED)
            return

        self._current_question = question
        self._current_category = question.category
        self._used_question_ids.add(question.id)
        self._selected_answer = None
        self._is_answered = False
        self._last_answer_correct = False

    def _end_game(self, reason: GameOverReason) -> None:
        self._game_over = True
        self._game_over_reason = reason
        self._current_question = None
        logger.info(
            "Session for topic %s over (%s) with %d points",
            self._topic.value,
            reason.value,
            self._points,
        )
