"""FastAPI server that exposes quiz sessions to a presentation layer."""

from __future__ import annotations

from typing import Annotated, Optional, Union

from fastapi import Depends, FastAPI, HTTPException, Response
from pydantic import BaseModel, Field, StrictBool, StrictFloat, StrictInt, StrictStr
import uvicorn

from spellbook_savings.constants.about import APP_ABOUT_TEXT, APP_NAME, APP_VERSION
from spellbook_savings.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from spellbook_savings.constants.quiz_constants import (
    MAX_ANSWER_BLANKS,
    QUEST_COMPLETE_MESSAGE,
    QUESTIONS_EXHAUSTED_MESSAGE,
    SELECT_ANSWER_PROMPT,
)
from spellbook_savings.core.display import format_category, format_difficulty, format_question_type
from spellbook_savings.core.markdown_renderer import renderer
from spellbook_savings.core.models import (
    DropdownQuestion,
    FillInTheBlankQuestion,
    MultipleChoiceQuestion,
    Question,
    TrueFalseQuestion,
)
from spellbook_savings.core.quiz_manager import QuizManager, SessionNotFoundError
from spellbook_savings.core.services.quiz_session import GameOverReason, SessionSnapshot
from spellbook_savings.core.topics import GameTopic, format_game_topic
from spellbook_savings.utils.logging_config import uvicorn_log_level

_GAME_OVER_MESSAGES: dict[GameOverReason, str] = {
    GameOverReason.MASTERED: QUEST_COMPLETE_MESSAGE,
    GameOverReason.EXHAUSTED: QUESTIONS_EXHAUSTED_MESSAGE,
}


class StartSessionPayload(BaseModel):
    """Payload schema for starting a new run."""

    topic: GameTopic


class AnswerPayload(BaseModel):
    """Payload schema for the player's in-progress answer.

    Strict types keep ``true`` a boolean and ``1`` an integer, so the grader
    sees the value exactly as the client sent it. Blank lists are capped at
    ``MAX_ANSWER_BLANKS`` entries.
    """

    value: Union[
        StrictBool,
        StrictInt,
        StrictFloat,
        StrictStr,
        Annotated[list[Optional[StrictStr]], Field(max_length=MAX_ANSWER_BLANKS)],
    ]


def _serialize_question(question: Question, reveal: bool) -> dict[str, object]:
    """Serialize a question. Correctness data is only included once graded."""
    payload: dict[str, object] = {
        "question_id": question.id,
        "type": question.type.value,
        "type_label": format_question_type(question.type),
        "category": question.category.value,
        "category_label": format_category(question.category),
        "difficulty": question.difficulty.value,
        "difficulty_label": format_difficulty(question.difficulty),
        "question_html": renderer.render_fragment(question.question_text),
    }
    if isinstance(question, MultipleChoiceQuestion):
        choices = []
        for index, choice in enumerate(question.choices):
            entry: dict[str, object] = {
                "index": index,
                "text": choice.text,
                "html": renderer.render_inline(choice.text),
            }
            if reveal:
                entry["is_correct"] = choice.is_correct
            choices.append(entry)
        payload["choices"] = choices
    elif isinstance(question, TrueFalseQuestion):
        if reveal:
            payload["is_true"] = question.is_true
    elif isinstance(question, FillInTheBlankQuestion):
        if reveal:
            payload["correct_answer"] = question.correct_answer
    elif isinstance(question, DropdownQuestion):
        blanks = []
        for blank in question.blanks:
            entry = {"options": list(blank.options)}
            if reveal:
                entry["correct_answer"] = blank.correct_answer
            blanks.append(entry)
        payload["blanks"] = blanks
    return payload


def _serialize_snapshot(session_id: str, snapshot: SessionSnapshot) -> dict[str, object]:
    question = snapshot.current_question
    mastery = snapshot.mastery
    summary_message = None
    if snapshot.game_over_reason is not None:
        summary_message = _GAME_OVER_MESSAGES[snapshot.game_over_reason]
    return {
        "session_id": session_id,
        "phase": snapshot.phase.value,
        "topic": snapshot.topic.value,
        "topic_label": format_game_topic(snapshot.topic),
        "allowed_categories": [category.value for category in snapshot.allowed_categories],
        "current_category": snapshot.current_category.value,
        "current_difficulty": snapshot.current_difficulty.value,
        "current_difficulty_label": format_difficulty(snapshot.current_difficulty),
        "question": None if question is None else _serialize_question(question, snapshot.is_answered),
        "selected_answer": snapshot.selected_answer,
        "is_answered": snapshot.is_answered,
        "last_answer_correct": snapshot.last_answer_correct if snapshot.is_answered else None,
        "points": snapshot.points,
        "points_bar_percent": snapshot.points_bar_percent,
        "streak": snapshot.streak,
        "questions_answered": snapshot.questions_answered,
        "questions_correct": snapshot.questions_correct,
        "mastery": {
            "difficulty": mastery.difficulty.value,
            "difficulty_label": format_difficulty(mastery.difficulty),
            "current": mastery.current,
            "needed": mastery.needed_label,
            "percent": mastery.progress * 100,
        },
        "mastery_progress_by_difficulty": {
            difficulty.value: progress
            for difficulty, progress in snapshot.mastery_progress_by_difficulty.items()
        },
        "completed_difficulties": [difficulty.value for difficulty in snapshot.completed_difficulties],
        "game_over": snapshot.game_over,
        "game_over_reason": None if snapshot.game_over_reason is None else snapshot.game_over_reason.value,
        "summary_message": summary_message,
    }


def _get_quiz_manager_dependency(quiz_manager: QuizManager):
    def dependency() -> QuizManager:
        return quiz_manager

    return dependency


def create_api_app(quiz_manager: QuizManager) -> FastAPI:
    """Create a FastAPI application wired to the provided quiz manager."""
    app = FastAPI(title=f"{APP_NAME} API", description=APP_ABOUT_TEXT, version=APP_VERSION)
    quiz_manager_dep = _get_quiz_manager_dependency(quiz_manager)

    @app.get("/topics")
    def list_topics(manager: QuizManager = Depends(quiz_manager_dep)) -> list[dict[str, object]]:
        return manager.get_topics()

    @app.post("/sessions", status_code=201)
    def start_session(
        payload: StartSessionPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        session_id = manager.start_session(payload.topic)
        return _serialize_snapshot(session_id, manager.get_snapshot(session_id))

    @app.get("/sessions/{session_id}")
    def get_session(
        session_id: str,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            snapshot = manager.get_snapshot(session_id)
        except SessionNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return _serialize_snapshot(session_id, snapshot)

    @app.put("/sessions/{session_id}/answer")
    def select_answer(
        session_id: str,
        payload: AnswerPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            snapshot = manager.select_answer(session_id, payload.value)
        except SessionNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return _serialize_snapshot(session_id, snapshot)

    @app.post("/sessions/{session_id}/submit")
    def submit_answer(
        session_id: str,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            accepted = manager.submit_answer(session_id)
            snapshot = manager.get_snapshot(session_id)
        except SessionNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        message = None
        if not accepted and not snapshot.game_over and snapshot.selected_answer is None:
            message = SELECT_ANSWER_PROMPT
        return {
            "accepted": accepted,
            "message": message,
            "session": _serialize_snapshot(session_id, snapshot),
        }

    @app.post("/sessions/{session_id}/next")
    def go_to_next_question(
        session_id: str,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            snapshot = manager.go_to_next_question(session_id)
        except SessionNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return _serialize_snapshot(session_id, snapshot)

    @app.delete("/sessions/{session_id}", status_code=204)
    def end_session(
        session_id: str,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> Response:
        try:
            manager.end_session(session_id)
        except SessionNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return Response(status_code=204)

    return app


def run_api_server(
    quiz_manager: QuizManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> None:
    """Serve the API with uvicorn until interrupted."""
    app = create_api_app(quiz_manager)
    config = uvicorn.Config(app=app, host=host, port=port, log_level=uvicorn_log_level())
    server = uvicorn.Server(config)
    server.run()
