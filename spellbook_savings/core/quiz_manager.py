"""Business logic facade shared by the API layer and any other front end."""

from __future__ import annotations

from collections import OrderedDict
from datetime import datetime, timedelta, timezone
import logging
import random
from threading import Lock
from typing import Callable, Mapping
from uuid import uuid4

from spellbook_savings.constants.quiz_constants import MAX_LIVE_SESSIONS, SESSION_IDLE_TIMEOUT_SECONDS
from spellbook_savings.core.display import format_category
from spellbook_savings.core.models import AnswerValue, Difficulty, Question
from spellbook_savings.core.services.question_bank import QuestionBank
from spellbook_savings.core.services.quiz_session import QuizSession, SessionSnapshot
from spellbook_savings.core.topics import GameTopic, categories_for_topic, format_game_topic

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionNotFoundError(LookupError):
    """Raised when a session id does not refer to a live session."""


class QuizManager:
    """Facade over the question bank and the set of live quiz sessions.

    Each session is independent; the lock only protects the registry and
    serializes calls coming from concurrent request handlers. Sessions idle
    for longer than ``idle_timeout`` are discarded, and once ``max_sessions``
    are live the least recently used one makes room for a new run.
    """

    def __init__(
        self,
        bank: QuestionBank,
        mastery_thresholds: Mapping[Difficulty, float] | None = None,
        max_sessions: int = MAX_LIVE_SESSIONS,
        idle_timeout: timedelta = timedelta(seconds=SESSION_IDLE_TIMEOUT_SECONDS),
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1.")
        self._lock = Lock()
        self._bank = bank
        self._mastery_thresholds = dict(mastery_thresholds) if mastery_thresholds else None
        self._max_sessions = max_sessions
        self._idle_timeout = idle_timeout
        self._clock = clock
        # Least recently used first.
        self._sessions: OrderedDict[str, QuizSession] = OrderedDict()
        self._last_used: dict[str, datetime] = {}
        self._seed_rng = random.Random()

    # --- Topics ---

    def get_topics(self) -> list[dict[str, object]]:
        return [
            {
                "topic": topic.value,
                "label": format_game_topic(topic),
                "categories": [
                    {"value": category.value, "label": format_category(category)}
                    for category in categories_for_topic(topic)
                ],
            }
            for topic in GameTopic
        ]

    # --- Session lifecycle ---

    def start_session(self, topic: GameTopic) -> str:
        """Create a new session for ``topic`` and return its id."""
        with self._lock:
            self._discard_expired_sessions()
            while len(self._sessions) >= self._max_sessions:
                oldest_id = next(iter(self._sessions))
                self._discard(oldest_id)
                logger.info("Evicted least recently used session %s", oldest_id)

            session_rng = random.Random(self._seed_rng.getrandbits(64))
            session = QuizSession.start(
                self._bank,
                topic,
                rng=session_rng,
                mastery_thresholds=self._mastery_thresholds,
            )
            session_id = uuid4().hex
            self._sessions[session_id] = session
            self._last_used[session_id] = self._clock()
            return session_id

    def end_session(self, session_id: str) -> None:
        with self._lock:
            if session_id not in self._sessions:
                raise SessionNotFoundError(f"Unknown session '{session_id}'.")
            self._discard(session_id)
            logger.info("Discarded session %s", session_id)

    def get_session_count(self) -> int:
        with self._lock:
            self._discard_expired_sessions()
            return len(self._sessions)

    def has_session(self, session_id: str) -> bool:
        with self._lock:
            self._discard_expired_sessions()
            return session_id in self._sessions

    # --- Session delegation ---

    def get_snapshot(self, session_id: str) -> SessionSnapshot:
        with self._lock:
            return self._get_session(session_id).snapshot()

    def get_current_question(self, session_id: str) -> Question | None:
        with self._lock:
            return self._get_session(session_id).get_current_question()

    def select_answer(self, session_id: str, answer: AnswerValue) -> SessionSnapshot:
        with self._lock:
            session = self._get_session(session_id)
            session.select_answer(answer)
            return session.snapshot()

    def submit_answer(self, session_id: str) -> bool:
        with self._lock:
            return self._get_session(session_id).submit_answer()

    def go_to_next_question(self, session_id: str) -> SessionSnapshot:
        with self._lock:
            session = self._get_session(session_id)
            session.go_to_next_question()
            return session.snapshot()

    # --- Settings ---

    def set_seed(self, seed: int | None) -> None:
        """Seed the generator that seeds every new session's RNG."""
        with self._lock:
            self._seed_rng.seed(seed)

    def _get_session(self, session_id: str) -> QuizSession:
        self._discard_expired_sessions()
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"Unknown session '{session_id}'.")
        self._sessions.move_to_end(session_id)
        self._last_used[session_id] = self._clock()
        return session

    def _discard(self, session_id: str) -> None:
        del self._sessions[session_id]
        del self._last_used[session_id]

    def _discard_expired_sessions(self) -> None:
        cutoff = self._clock() - self._idle_timeout
        # Ordered by last use, so the scan stops at the first fresh session.
        while self._sessions:
            oldest_id = next(iter(self._sessions))
            if self._last_used[oldest_id] > cutoff:
                break
            self._discard(oldest_id)
            logger.info("Expired idle session %s", oldest_id)
