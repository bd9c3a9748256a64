"""Logging configuration helpers for the quiz application."""

from __future__ import annotations

import logging
from logging import Logger

from spellbook_savings.constants.logging_constants import LOG_FORMAT, LOG_LEVEL


def configure_logging(level: int = LOG_LEVEL) -> Logger:
    """Configure root logging at ``level`` and return the package logger."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    package_logger = logging.getLogger("spellbook_savings")
    package_logger.setLevel(level)
    return package_logger


def uvicorn_log_level(level: int = LOG_LEVEL) -> str:
    """Translate a stdlib level into the name uvicorn expects."""
    return logging.getLevelName(level).lower()
