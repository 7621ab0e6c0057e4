"""Request payload schemas for the HTTP API.

Field names are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from quizme.constants.quiz_constants import DEFAULT_DURATION_MINUTES
from quizme.core.models import QuestionType


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class QuestionPayload(CamelModel):
    """Payload schema for one authored question."""

    text: str = Field(min_length=1)
    type: QuestionType
    options: list[str] | None = None
    correct_answer: str | list[str]
    order: int | None = None


class QuizPayload(CamelModel):
    """Payload schema for creating a quiz together with its questions."""

    title: str = Field(min_length=1)
    description: str | None = None
    category: str | None = None
    duration: int | None = Field(default=DEFAULT_DURATION_MINUTES, gt=0)
    creator_id: int | None = None
    questions: list[QuestionPayload] = Field(default_factory=list)


class QuizUpdatePayload(CamelModel):
    """Partial quiz update; only the fields present in the body are changed."""

    title: str | None = None
    description: str | None = None
    category: str | None = None
    duration: int | None = None
    creator_id: int | None = None


class QuestionUpdatePayload(CamelModel):
    """Partial question update; the merged question is validated as a whole."""

    text: str | None = None
    type: QuestionType | None = None
    options: list[str] | None = None
    correct_answer: str | list[str] | None = None
    order: int | None = None


class ParticipationPayload(CamelModel):
    quiz_id: int
    participant_name: str = Field(min_length=1)


class ResponsePayload(CamelModel):
    """Payload schema for submitted answers."""

    participation_id: int
    question_id: int
    answer: str | list[str]
    is_marked_for_review: bool = False


class ChallengePayload(CamelModel):
    challenge_reason: str | None = None


class SubmitPayload(CamelModel):
    time_spent: int = Field(ge=0)
