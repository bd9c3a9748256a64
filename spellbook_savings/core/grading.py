"""Answer grading for every question type.

Each question type has its own grader, looked up by the question's type tag.
Graders never raise: an answer of the wrong shape is simply incorrect.
"""

from __future__ import annotations

from typing import Callable

from spellbook_savings.core.models import (
    AnswerValue,
    DropdownQuestion,
    FillInTheBlankQuestion,
    MultipleChoiceQuestion,
    Question,
    QuestionType,
    TrueFalseQuestion,
)


def grade_answer(question: Question, answer: AnswerValue | None) -> bool:
    """Return whether ``answer`` is a correct response to ``question``."""
    if answer is None:
        return False
    grader = _GRADERS[question.type]
    return grader(question, answer)


def _normalize_text(value: str) -> str:
    return value.strip().lower()


def _grade_multiple_choice(question: MultipleChoiceQuestion, answer: AnswerValue) -> bool:
    # bool is an int subclass but never a valid choice index.
    if isinstance(answer, bool) or not isinstance(answer, int):
        return False
    if not 0 <= answer < len(question.choices):
        return False
    return question.choices[answer].is_correct


def _coerce_true_false(answer: AnswerValue) -> bool | None:
    if isinstance(answer, bool):
        return answer
    if isinstance(answer, (int, float)):
        if answer == 1:
            return True
        if answer == 0:
            return False
        return None
    if isinstance(answer, str):
        lowered = _normalize_text(answer)
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    return None


def _grade_true_false(question: TrueFalseQuestion, answer: AnswerValue) -> bool:
    user_value = _coerce_true_false(answer)
    if user_value is None:
        return False
    return user_value == question.is_true


def _grade_fill_in_the_blank(question: FillInTheBlankQuestion, answer: AnswerValue) -> bool:
    if not isinstance(answer, str):
        return False
    return _normalize_text(answer) == _normalize_text(question.correct_answer)


def _grade_dropdown(question: DropdownQuestion, answer: AnswerValue) -> bool:
    if not isinstance(answer, (list, tuple)) or len(answer) != len(question.blanks):
        return False
    for entry, blank in zip(answer, question.blanks):
        if not isinstance(entry, str):
            return False
        if _normalize_text(entry) != _normalize_text(blank.correct_answer):
            return False
    return True


_GRADERS: dict[QuestionType, Callable[..., bool]] = {
    QuestionType.MULTIPLE_CHOICE: _grade_multiple_choice,
    QuestionType.TRUE_FALSE: _grade_true_false,
    QuestionType.FILL_IN_THE_BLANK: _grade_fill_in_the_blank,
    QuestionType.DROPDOWN: _grade_dropdown,
}
