from __future__ import annotations

import random

import pytest

from spellbook_savings.core.models import (
    Category,
    Choice,
    Difficulty,
    DropdownBlank,
    DropdownQuestion,
    FillInTheBlankQuestion,
    MultipleChoiceQuestion,
    Question,
    TrueFalseQuestion,
)
from spellbook_savings.core.services.question_bank import QuestionBank


def make_multiple_choice(
    question_id: str,
    category: Category = Category.SAVING,
    difficulty: Difficulty = Difficulty.EASY,
    correct_index: int = 1,
    choice_count: int = 3,
) -> MultipleChoiceQuestion:
    return MultipleChoiceQuestion(
        id=question_id,
        category=category,
        difficulty=difficulty,
        question_text=f"Question {question_id}?",
        choices=tuple(
            Choice(text=f"Option {index}", is_correct=index == correct_index)
            for index in range(choice_count)
        ),
    )


def make_true_false(
    question_id: str,
    category: Category = Category.SAVING,
    difficulty: Difficulty = Difficulty.EASY,
    is_true: bool = True,
) -> TrueFalseQuestion:
    return TrueFalseQuestion(
        id=question_id,
        category=category,
        difficulty=difficulty,
        question_text=f"Statement {question_id}.",
        is_true=is_true,
    )


def make_fill_in(
    question_id: str,
    category: Category = Category.SAVING,
    difficulty: Difficulty = Difficulty.HARD,
    correct_answer: str = "Compound Interest",
) -> FillInTheBlankQuestion:
    return FillInTheBlankQuestion(
        id=question_id,
        category=category,
        difficulty=difficulty,
        question_text=f"Fill in {question_id}: ____",
        correct_answer=correct_answer,
    )


def make_dropdown(
    question_id: str,
    category: Category = Category.SAVING,
    difficulty: Difficulty = Difficulty.EASY,
    answers: tuple[str, ...] = ("save", "invest"),
) -> DropdownQuestion:
    return DropdownQuestion(
        id=question_id,
        category=category,
        difficulty=difficulty,
        question_text="First ____ then ____.",
        blanks=tuple(
            DropdownBlank(correct_answer=answer, options=answers + ("borrow",))
            for answer in answers
        ),
    )


def correct_answer_for(question: Question):
    if isinstance(question, MultipleChoiceQuestion):
        return next(index for index, choice in enumerate(question.choices) if choice.is_correct)
    if isinstance(question, TrueFalseQuestion):
        return question.is_true
    if isinstance(question, FillInTheBlankQuestion):
        return question.correct_answer
    return [blank.correct_answer for blank in question.blanks]


def wrong_answer_for(question: Question):
    if isinstance(question, MultipleChoiceQuestion):
        return next(index for index, choice in enumerate(question.choices) if not choice.is_correct)
    if isinstance(question, TrueFalseQuestion):
        return not question.is_true
    if isinstance(question, FillInTheBlankQuestion):
        return "definitely not it"
    return ["nope"] * len(question.blanks)


def saving_tier(difficulty: Difficulty, count: int, prefix: str) -> list[Question]:
    """``count`` questions of mixed, tier-appropriate types for the Saving topic."""
    questions: list[Question] = []
    for index in range(count):
        question_id = f"{prefix}-{index}"
        if index % 3 == 0:
            questions.append(make_multiple_choice(question_id, difficulty=difficulty))
        elif index % 3 == 1:
            questions.append(make_true_false(question_id, difficulty=difficulty, is_true=index % 2 == 0))
        elif difficulty is Difficulty.HARD:
            questions.append(make_fill_in(question_id, difficulty=difficulty))
        else:
            questions.append(make_dropdown(question_id, difficulty=difficulty))
    return questions


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def full_bank() -> QuestionBank:
    """Eight questions per tier for the Saving topic."""
    return QuestionBank(
        saving_tier(Difficulty.EASY, 8, "easy")
        + saving_tier(Difficulty.MEDIUM, 8, "medium")
        + saving_tier(Difficulty.HARD, 8, "hard")
    )
