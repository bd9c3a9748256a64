"""Logging defaults for the server process."""

import logging

LOG_LEVEL: int = logging.INFO
LOG_FORMAT: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
