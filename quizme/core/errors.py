"""Exceptions raised by the quiz core and translated to HTTP errors by the server."""

from __future__ import annotations


class QuizError(Exception):
    """Base class for quiz errors. Unhandled subclasses surface as HTTP 500."""

    status_code: int = 500


class NotFoundError(QuizError):
    """Raised when a referenced quiz, question, participation or response is missing."""

    status_code = 404

    def __init__(self, resource: str, identifier: object | None = None) -> None:
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found")


class QuizValidationError(QuizError):
    """Raised when submitted data breaks a rule of the quiz model."""

    status_code = 400


class ParticipationClosedError(QuizError):
    """Raised when a completed participation is answered or submitted again."""

    status_code = 409


class QuestionInUseError(QuizError):
    """Raised when deleting a question would change a submitted participation's result."""

    status_code = 409
