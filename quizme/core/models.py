"""Domain models for the quiz application."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class QuestionType(str, Enum):
    """Supported question kinds."""

    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    TRUE_FALSE = "TRUE_FALSE"
    ESSAY = "ESSAY"


@dataclass(slots=True, frozen=True)
class ExactAnswer:
    """Answer key for MULTIPLE_CHOICE and TRUE_FALSE questions."""

    value: str


@dataclass(slots=True, frozen=True)
class KeywordAnswer:
    """Answer key for ESSAY questions: any accepted keyword counts as correct."""

    accepted: tuple[str, ...]


AnswerKey = ExactAnswer | KeywordAnswer
SubmittedValue = str | list[str]


@dataclass(slots=True, frozen=True)
class Quiz:
    id: int
    title: str
    code: str
    created_at: datetime
    description: str | None = None
    category: str | None = None
    duration: int | None = None  # minutes
    creator_id: int | None = None


@dataclass(slots=True, frozen=True)
class Question:
    id: int
    quiz_id: int
    text: str
    type: QuestionType
    correct_answer: AnswerKey
    order: int
    options: tuple[str, ...] | None = None


@dataclass(slots=True, frozen=True)
class Participation:
    """One participant's attempt at a quiz."""

    id: int
    quiz_id: int
    participant_name: str
    started_at: datetime
    score: int | None = None
    time_spent: int | None = None  # seconds
    completed: bool = False
    finished_at: datetime | None = None


@dataclass(slots=True, frozen=True)
class Response:
    """A participant's answer to one question.

    ``id`` is None only for placeholder entries built for unanswered questions.
    """

    id: int | None
    participation_id: int
    question_id: int
    answer: SubmittedValue
    is_correct: bool | None = None
    is_marked_for_review: bool = False
    challenge_reason: str | None = None


@dataclass(slots=True, frozen=True)
class QuizDraft:
    """Validated quiz fields awaiting an id and code from the store."""

    title: str
    description: str | None = None
    category: str | None = None
    duration: int | None = None
    creator_id: int | None = None


@dataclass(slots=True, frozen=True)
class QuestionDraft:
    """Validated question fields awaiting an id from the store."""

    text: str
    type: QuestionType
    correct_answer: AnswerKey
    order: int
    options: tuple[str, ...] | None = None
