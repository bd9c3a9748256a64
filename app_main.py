"""Application entry point for Spellbook Savings."""

from __future__ import annotations

from spellbook_savings.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from spellbook_savings.core.question_loader import load_question_bank
from spellbook_savings.core.quiz_manager import QuizManager
from spellbook_savings.server.api_server import run_api_server
from spellbook_savings.constants.logging_constants import LOG_LEVEL
from spellbook_savings.utils.logging_config import configure_logging


def main() -> None:
    """Initialize logging, load the question bank, and serve the quiz API."""
    logger = configure_logging(LOG_LEVEL)
    logger.info("Starting Spellbook Savings…")

    bank = load_question_bank()
    if not bank.has_questions():
        logger.warning("Question bank is empty; every session will end immediately.")

    quiz_manager = QuizManager(bank)
    logger.info("Quiz API available at http://%s:%d/", DEFAULT_HOST, DEFAULT_PORT)
    run_api_server(quiz_manager=quiz_manager, host=DEFAULT_HOST, port=DEFAULT_PORT)


if __name__ == "__main__":
    main()
