"""Loading of the static question datasets shipped with the application.

Each question type lives in its own JSON file, an array of records:

    questions_multiple_choice.json
        {"category": "saving", "difficulty": "easy", "question": "...",
         "choices": [{"text": "...", "isCorrect": true}, ...]}
    questions_true_false.json
        {"category": "...", "difficulty": "...", "statement": "...", "isTrue": false}
    questions_fill_in_the_blank.json
        {"category": "...", "difficulty": "...", "question": "...", "answer": "..."}
    questions_dropdown.json
        {"category": "...", "difficulty": "...", "question": "...",
         "blanks": [{"correctAnswer": "...", "options": ["...", "..."]}]}

``category`` and ``difficulty`` are free-form strings normalized against the
closed enumerations. An ``id`` may be given; otherwise the id is derived from
the record's position (``mc-0``, ``tf-3``, ...).

A record that fails validation is dropped with a warning instead of failing
the whole load, so a typo in one question never takes down a session.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
import re
from typing import Annotated, Any, Optional

from pydantic import (
    BaseModel,
    Field,
    StrictBool,
    StringConstraints,
    ValidationError,
    field_validator,
    model_validator,
)

from spellbook_savings.constants.quiz_constants import MAX_ANSWER_BLANKS
from spellbook_savings.core.models import (
    Category,
    Choice,
    Difficulty,
    DropdownBlank,
    DropdownQuestion,
    FillInTheBlankQuestion,
    MultipleChoiceQuestion,
    Question,
    QuestionType,
    TrueFalseQuestion,
)
from spellbook_savings.core.services.question_bank import QuestionBank

logger = logging.getLogger(__name__)

_DATA_DIR = Path(__file__).resolve().parent.parent / "data"

NonEmptyText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class QuestionLoadError(Exception):
    """Raised when a question dataset cannot be read at all."""


def _normalize_tag(value: str) -> str:
    cleaned = re.sub(r"[-_]", " ", value).strip().lower()
    return re.sub(r"\s+", " ", cleaned)


class _RecordBase(BaseModel):
    id: Optional[NonEmptyText] = None
    category: Category
    difficulty: Difficulty

    @field_validator("category", "difficulty", mode="before")
    @classmethod
    def _normalize(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _normalize_tag(value)
        return value


class _ChoiceRecord(BaseModel):
    text: NonEmptyText
    is_correct: StrictBool = Field(alias="isCorrect")


class _MultipleChoiceRecord(_RecordBase):
    question: NonEmptyText
    choices: Annotated[list[_ChoiceRecord], Field(min_length=2)]

    @model_validator(mode="after")
    def _require_correct_choice(self) -> "_MultipleChoiceRecord":
        if not any(choice.is_correct for choice in self.choices):
            raise ValueError("at least one choice must be marked correct")
        return self

    def to_question(self, question_id: str) -> Question:
        return MultipleChoiceQuestion(
            id=question_id,
            category=self.category,
            difficulty=self.difficulty,
            question_text=self.question,
            choices=tuple(Choice(text=c.text, is_correct=c.is_correct) for c in self.choices),
        )


class _TrueFalseRecord(_RecordBase):
    statement: NonEmptyText
    is_true: StrictBool = Field(alias="isTrue")

    def to_question(self, question_id: str) -> Question:
        return TrueFalseQuestion(
            id=question_id,
            category=self.category,
            difficulty=self.difficulty,
            question_text=self.statement,
            is_true=self.is_true,
        )


class _FillInTheBlankRecord(_RecordBase):
    question: NonEmptyText
    answer: NonEmptyText

    def to_question(self, question_id: str) -> Question:
        return FillInTheBlankQuestion(
            id=question_id,
            category=self.category,
            difficulty=self.difficulty,
            question_text=self.question,
            correct_answer=self.answer,
        )


class _BlankRecord(BaseModel):
    correct_answer: NonEmptyText = Field(alias="correctAnswer")
    options: Annotated[list[NonEmptyText], Field(min_length=1)]


class _DropdownRecord(_RecordBase):
    question: NonEmptyText
    blanks: Annotated[list[_BlankRecord], Field(min_length=1, max_length=MAX_ANSWER_BLANKS)]

    def to_question(self, question_id: str) -> Question:
        return DropdownQuestion(
            id=question_id,
            category=self.category,
            difficulty=self.difficulty,
            question_text=self.question,
            blanks=tuple(
                DropdownBlank(correct_answer=b.correct_answer, options=tuple(b.options))
                for b in self.blanks
            ),
        )


_RECORD_MODELS: dict[QuestionType, type[_RecordBase]] = {
    QuestionType.MULTIPLE_CHOICE: _MultipleChoiceRecord,
    QuestionType.TRUE_FALSE: _TrueFalseRecord,
    QuestionType.FILL_IN_THE_BLANK: _FillInTheBlankRecord,
    QuestionType.DROPDOWN: _DropdownRecord,
}

_ID_PREFIXES: dict[QuestionType, str] = {
    QuestionType.MULTIPLE_CHOICE: "mc",
    QuestionType.TRUE_FALSE: "tf",
    QuestionType.FILL_IN_THE_BLANK: "fb",
    QuestionType.DROPDOWN: "dd",
}

DATASET_FILES: dict[QuestionType, str] = {
    QuestionType.MULTIPLE_CHOICE: "questions_multiple_choice.json",
    QuestionType.TRUE_FALSE: "questions_true_false.json",
    QuestionType.FILL_IN_THE_BLANK: "questions_fill_in_the_blank.json",
    QuestionType.DROPDOWN: "questions_dropdown.json",
}


def parse_question_records(
    records: list[Any],
    question_type: QuestionType,
    source: str = "<memory>",
) -> list[Question]:
    """Validate raw records of one type, dropping the malformed ones."""
    record_model = _RECORD_MODELS[question_type]
    prefix = _ID_PREFIXES[question_type]
    questions: list[Question] = []
    for index, raw in enumerate(records):
        try:
            record = record_model.model_validate(raw)
        except ValidationError as exc:
            logger.warning(
                "Dropping %s record #%d from %s: %s",
                question_type.value,
                index,
                source,
                _summarize_errors(exc),
            )
            continue
        questions.append(record.to_question(record.id or f"{prefix}-{index}"))
    return questions


def load_questions_from_file(file_path: Path, question_type: QuestionType) -> list[Question]:
    """Read one dataset file. A missing file yields no questions."""
    if not file_path.exists():
        logger.warning("Question dataset %s not found; skipping.", file_path)
        return []
    try:
        records = json.loads(file_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise QuestionLoadError(f"Could not read question dataset {file_path}: {exc}") from exc
    if not isinstance(records, list):
        raise QuestionLoadError(f"Question dataset {file_path} must contain a JSON array.")
    return parse_question_records(records, question_type, source=file_path.name)


def load_question_bank(data_dir: Path | None = None) -> QuestionBank:
    """Load all four datasets into a :class:`QuestionBank`.

    Questions whose id repeats one already loaded are dropped.
    """
    directory = data_dir or _DATA_DIR
    questions: list[Question] = []
    seen_ids: set[str] = set()
    for question_type, file_name in DATASET_FILES.items():
        for question in load_questions_from_file(directory / file_name, question_type):
            if question.id in seen_ids:
                logger.warning("Dropping duplicate question id '%s' from %s", question.id, file_name)
                continue
            seen_ids.add(question.id)
            questions.append(question)
    logger.info("Loaded %d questions from %s", len(questions), directory)
    return QuestionBank(questions)


def _summarize_errors(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "record"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)
