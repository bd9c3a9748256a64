"""Human-readable labels for enumerated values shown to the player."""

from __future__ import annotations

from spellbook_savings.core.models import Category, Difficulty, QuestionType

_QUESTION_TYPE_LABELS: dict[QuestionType, str] = {
    QuestionType.MULTIPLE_CHOICE: "Multiple Choice",
    QuestionType.TRUE_FALSE: "True or False",
    QuestionType.FILL_IN_THE_BLANK: "Fill in the Blank",
    QuestionType.DROPDOWN: "Dropdown",
}


def format_difficulty(difficulty: Difficulty) -> str:
    return difficulty.value.capitalize()


def format_category(category: Category) -> str:
    """Title-case a category, e.g. ``debt management`` -> ``Debt Management``."""
    return " ".join(word.capitalize() for word in category.value.split())


def format_question_type(question_type: QuestionType) -> str:
    return _QUESTION_TYPE_LABELS[question_type]
