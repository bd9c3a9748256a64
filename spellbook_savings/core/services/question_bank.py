"""Read-only store of quiz questions with lookup and random sampling."""

from __future__ import annotations

from collections import defaultdict
import logging
import random
from typing import Collection, Iterable

from spellbook_savings.core.models import Category, Difficulty, Question, QuestionType
from spellbook_savings.core.topics import GameTopic, categories_for_topic

logger = logging.getLogger(__name__)

# Dropdowns are kept out of the hard tier and free-text answers out of the
# easier tiers.
ALLOWED_TYPES_BY_DIFFICULTY: dict[Difficulty, tuple[QuestionType, ...]] = {
    Difficulty.EASY: (
        QuestionType.MULTIPLE_CHOICE,
        QuestionType.TRUE_FALSE,
        QuestionType.DROPDOWN,
    ),
    Difficulty.MEDIUM: (
        QuestionType.MULTIPLE_CHOICE,
        QuestionType.TRUE_FALSE,
        QuestionType.DROPDOWN,
    ),
    Difficulty.HARD: (
        QuestionType.FILL_IN_THE_BLANK,
        QuestionType.MULTIPLE_CHOICE,
        QuestionType.TRUE_FALSE,
    ),
}


class QuestionBank:
    """Immutable collection of questions grouped by category and difficulty."""

    def __init__(self, questions: Iterable[Question]) -> None:
        self._questions: tuple[Question, ...] = tuple(questions)
        self._by_id: dict[str, Question] = {}
        grouped: dict[tuple[Category, Difficulty], list[Question]] = defaultdict(list)
        for question in self._questions:
            if question.id in self._by_id:
                raise ValueError(f"Duplicate question id '{question.id}'.")
            self._by_id[question.id] = question
            grouped[(question.category, question.difficulty)].append(question)
        self._by_category_and_difficulty: dict[tuple[Category, Difficulty], tuple[Question, ...]] = {
            key: tuple(items) for key, items in grouped.items()
        }

    def get_questions(self) -> list[Question]:
        """Return a copy of all loaded questions."""
        return list(self._questions)

    def get_question(self, question_id: str) -> Question | None:
        return self._by_id.get(question_id)

    def get_question_count(self) -> int:
        return len(self._questions)

    def has_questions(self) -> bool:
        return bool(self._questions)

    def questions_for(self, category: Category, difficulty: Difficulty) -> list[Question]:
        """Return every question tagged with ``category`` and ``difficulty``."""
        return list(self._by_category_and_difficulty.get((category, difficulty), ()))

    def questions_for_topic(
        self,
        topic: GameTopic,
        difficulty: Difficulty,
        exclude_ids: Collection[str] = (),
    ) -> list[Question]:
        """Return the questions a session on ``topic`` may be served at ``difficulty``.

        Only categories mapped to the topic and question types allowed for the
        tier are included; ids in ``exclude_ids`` are skipped.
        """
        allowed_types = ALLOWED_TYPES_BY_DIFFICULTY[difficulty]
        eligible: list[Question] = []
        for category in categories_for_topic(topic):
            for question in self._by_category_and_difficulty.get((category, difficulty), ()):
                if question.type in allowed_types and question.id not in exclude_ids:
                    eligible.append(question)
        return eligible

    def random_question_for_topic(
        self,
        topic: GameTopic,
        difficulty: Difficulty,
        exclude_ids: Collection[str] = (),
        rng: random.Random | None = None,
        preferred_category: Category | None = None,
    ) -> Question | None:
        """Pick a question type at random, then a question of that type.

        Types without any eligible question are skipped so a sparse type does
        not starve the others. With ``preferred_category`` the pick is limited
        to that category while it still has eligible questions, and widens to
        the whole topic otherwise. Returns ``None`` when nothing is eligible.
        """
        chooser = rng or random
        candidates = self.questions_for_topic(topic, difficulty, exclude_ids)
        if preferred_category is not None:
            preferred = [q for q in candidates if q.category is preferred_category]
            if preferred:
                candidates = preferred
            elif candidates:
                logger.debug(
                    "No %s questions in category %s; drawing from topic %s",
                    difficulty.value,
                    preferred_category.value,
                    topic.value,
                )
        by_type: dict[QuestionType, list[Question]] = defaultdict(list)
        for question in candidates:
            by_type[question.type].append(question)

        available_types = [
            question_type
            for question_type in ALLOWED_TYPES_BY_DIFFICULTY[difficulty]
            if by_type[question_type]
        ]
        if not available_types:
            logger.warning(
                "No questions found for topic: %s, difficulty: %s",
                topic.value,
                difficulty.value,
            )
            return None

        chosen_type = chooser.choice(available_types)
        return chooser.choice(by_type[chosen_type])
