"""Logging configuration helpers for the QuizMe server."""

from __future__ import annotations

import logging
from logging import Logger

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: int = logging.INFO, access_log: bool = True) -> Logger:
    """Configure process-wide logging and return the ``quizme`` logger.

    With ``access_log`` off, uvicorn's per-request lines are limited to warnings.
    """
    logging.basicConfig(level=level, format=LOG_FORMAT)
    if not access_log:
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    return logging.getLogger("quizme")
