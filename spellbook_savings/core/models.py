"""Domain models for the quiz application."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class Difficulty(str, Enum):
    """Difficulty tiers, listed in promotion order."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Category(str, Enum):
    """Domain tag carried by every question."""

    INCOME = "income"
    BUDGETING = "budgeting"
    SAVING = "saving"
    BANKING = "banking"
    CREDIT = "credit"
    DEBT = "debt"
    DEBT_MANAGEMENT = "debt management"
    INVESTING = "investing"
    TAXES = "taxes"
    INSURANCE = "insurance"
    FRAUD = "fraud"
    RISK_MANAGEMENT = "risk management"


class QuestionType(str, Enum):
    MULTIPLE_CHOICE = "multiple-choice"
    TRUE_FALSE = "true-false"
    FILL_IN_THE_BLANK = "fill-in-the-blank"
    DROPDOWN = "dropdown"


@dataclass(slots=True, frozen=True)
class Choice:
    """One option of a multiple-choice question."""

    text: str
    is_correct: bool


@dataclass(slots=True, frozen=True)
class DropdownBlank:
    """A single blank in a dropdown question and the options offered for it."""

    correct_answer: str
    options: tuple[str, ...]


@dataclass(slots=True, frozen=True)
class MultipleChoiceQuestion:
    id: str
    category: Category
    difficulty: Difficulty
    question_text: str
    choices: tuple[Choice, ...]
    type: QuestionType = field(default=QuestionType.MULTIPLE_CHOICE, init=False)


@dataclass(slots=True, frozen=True)
class TrueFalseQuestion:
    """A statement the player marks as true or false."""

    id: str
    category: Category
    difficulty: Difficulty
    question_text: str
    is_true: bool
    type: QuestionType = field(default=QuestionType.TRUE_FALSE, init=False)


@dataclass(slots=True, frozen=True)
class FillInTheBlankQuestion:
    id: str
    category: Category
    difficulty: Difficulty
    question_text: str
    correct_answer: str
    type: QuestionType = field(default=QuestionType.FILL_IN_THE_BLANK, init=False)


@dataclass(slots=True, frozen=True)
class DropdownQuestion:
    """A sentence with one or more blanks, each filled from its own option list."""

    id: str
    category: Category
    difficulty: Difficulty
    question_text: str
    blanks: tuple[DropdownBlank, ...]
    type: QuestionType = field(default=QuestionType.DROPDOWN, init=False)


Question = Union[
    MultipleChoiceQuestion,
    TrueFalseQuestion,
    FillInTheBlankQuestion,
    DropdownQuestion,
]

# Raw, ungraded response. Its expected shape depends on the question type:
# choice index, boolean-like value, free text, or one string per blank.
AnswerValue = Union[bool, int, float, str, list[Union[str, None]]]
