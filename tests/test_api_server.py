from __future__ import annotations

from fastapi.testclient import TestClient
import pytest

from spellbook_savings.constants.quiz_constants import (
    MAX_ANSWER_BLANKS,
    QUEST_COMPLETE_MESSAGE,
    SELECT_ANSWER_PROMPT,
)
from spellbook_savings.core.quiz_manager import QuizManager
from spellbook_savings.core.services.question_bank import QuestionBank
from spellbook_savings.server.api_server import create_api_app

from conftest import correct_answer_for, make_dropdown, make_multiple_choice


@pytest.fixture
def manager(full_bank) -> QuizManager:
    quiz_manager = QuizManager(full_bank)
    quiz_manager.set_seed(0)
    return quiz_manager


@pytest.fixture
def client(manager) -> TestClient:
    return TestClient(create_api_app(manager))


def _start(client: TestClient, topic: str = "Saving") -> dict:
    response = client.post("/sessions", json={"topic": topic})
    assert response.status_code == 201
    return response.json()


def _play_correctly(client: TestClient, manager: QuizManager, session_id: str) -> dict:
    question = manager.get_current_question(session_id)
    client.put(f"/sessions/{session_id}/answer", json={"value": correct_answer_for(question)})
    client.post(f"/sessions/{session_id}/submit")
    return client.post(f"/sessions/{session_id}/next").json()


def test_list_topics(client):
    response = client.get("/topics")
    assert response.status_code == 200
    topics = response.json()
    assert len(topics) == 6
    assert topics[4]["topic"] == "Debt Management"


def test_start_session(client):
    body = _start(client)
    assert body["phase"] == "in_progress"
    assert body["topic"] == "Saving"
    assert body["current_difficulty"] == "easy"
    assert body["points"] == 0
    assert body["question"]["difficulty"] == "easy"
    assert body["question"]["question_html"].startswith("<p>")
    assert body["mastery"] == {
        "difficulty": "easy",
        "difficulty_label": "Easy",
        "current": 0,
        "needed": "5",
        "percent": 0.0,
    }


def test_unknown_topic_is_rejected(client):
    response = client.post("/sessions", json={"topic": "Lottery"})
    assert response.status_code == 422


def test_unknown_session_is_404(client):
    assert client.get("/sessions/nope").status_code == 404
    assert client.post("/sessions/nope/submit").status_code == 404
    assert client.post("/sessions/nope/next").status_code == 404
    assert client.put("/sessions/nope/answer", json={"value": 1}).status_code == 404
    assert client.delete("/sessions/nope").status_code == 404


def test_submit_without_answer_prompts_for_selection(client):
    session_id = _start(client)["session_id"]
    response = client.post(f"/sessions/{session_id}/submit")
    assert response.status_code == 200
    body = response.json()
    assert body["accepted"] is False
    assert body["message"] == SELECT_ANSWER_PROMPT
    assert body["session"]["questions_answered"] == 0


def test_answer_flow_reveals_result_after_grading():
    question = make_multiple_choice("mc-only", correct_index=2)
    manager = QuizManager(QuestionBank([question]))
    client = TestClient(create_api_app(manager))
    body = _start(client)
    session_id = body["session_id"]
    assert all("is_correct" not in choice for choice in body["question"]["choices"])

    selected = client.put(f"/sessions/{session_id}/answer", json={"value": 2}).json()
    assert selected["selected_answer"] == 2
    assert selected["last_answer_correct"] is None

    submitted = client.post(f"/sessions/{session_id}/submit").json()
    assert submitted["accepted"] is True
    assert submitted["message"] is None
    session = submitted["session"]
    assert session["is_answered"] is True
    assert session["last_answer_correct"] is True
    assert session["points"] == 10
    assert session["streak"] == 1
    assert [c["is_correct"] for c in session["question"]["choices"]] == [False, False, True]


def test_boolean_answers_keep_their_type():
    question = make_multiple_choice("mc-only", correct_index=1)
    manager = QuizManager(QuestionBank([question]))
    client = TestClient(create_api_app(manager))
    session_id = _start(client)["session_id"]

    client.put(f"/sessions/{session_id}/answer", json={"value": True})
    submitted = client.post(f"/sessions/{session_id}/submit").json()
    # True is not a choice index, even though it equals 1.
    assert submitted["session"]["last_answer_correct"] is False


def test_dropdown_answers_accept_string_lists():
    manager = QuizManager(QuestionBank([make_dropdown("dd-only")]))
    client = TestClient(create_api_app(manager))
    body = _start(client)
    session_id = body["session_id"]
    assert "correct_answer" not in body["question"]["blanks"][0]

    client.put(f"/sessions/{session_id}/answer", json={"value": ["Save", " invest"]})
    session = client.post(f"/sessions/{session_id}/submit").json()["session"]
    assert session["last_answer_correct"] is True
    assert session["question"]["blanks"][1]["correct_answer"] == "invest"


def test_full_run_ends_with_summary(client, manager):
    session_id = _start(client)["session_id"]
    body = {}
    for _ in range(15):
        body = _play_correctly(client, manager, session_id)

    assert body["game_over"] is True
    assert body["phase"] == "game_over"
    assert body["game_over_reason"] == "mastered"
    assert body["summary_message"] == QUEST_COMPLETE_MESSAGE
    assert body["question"] is None
    assert body["completed_difficulties"] == ["easy", "medium", "hard"]


def test_delete_session(client):
    session_id = _start(client)["session_id"]
    assert client.delete(f"/sessions/{session_id}").status_code == 204
    assert client.get(f"/sessions/{session_id}").status_code == 404


def test_oversized_blank_list_is_rejected(client):
    session_id = _start(client)["session_id"]
    response = client.put(
        f"/sessions/{session_id}/answer",
        json={"value": ["save"] * (MAX_ANSWER_BLANKS + 1)},
    )
    assert response.status_code == 422
    assert client.get(f"/sessions/{session_id}").json()["selected_answer"] is None
