from __future__ import annotations

import logging

from quizme.utils.logging_config import configure_logging


def test_returns_the_package_logger():
    assert configure_logging().name == "quizme"


def test_access_log_can_be_quietened():
    access = logging.getLogger("uvicorn.access")
    previous = access.level
    try:
        configure_logging(access_log=False)
        assert access.level == logging.WARNING
    finally:
        access.setLevel(previous)
