"""Application entry point for the QuizMe server."""

from __future__ import annotations

from quizme.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from quizme.core.quiz_manager import QuizManager
from quizme.server.api_server import run_api_server
from quizme.utils.logging_config import configure_logging


def main() -> None:
    """Initialize logging, build the in-memory quiz services and serve the API."""
    logger = configure_logging()
    logger.info("Starting QuizMe on http://%s:%s/", DEFAULT_HOST, DEFAULT_PORT)

    quiz_manager = QuizManager()
    run_api_server(quiz_manager=quiz_manager, host=DEFAULT_HOST, port=DEFAULT_PORT)


if __name__ == "__main__":
    main()
