"""Storage interface for quizzes, questions, participations and responses."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from datetime import datetime

from quizme.core.models import (
    Participation,
    Question,
    QuestionDraft,
    Quiz,
    QuizDraft,
    Response,
    SubmittedValue,
)


class QuizStorage(ABC):
    """Repository contract used by the lifecycle and report services.

    Lookups return ``None`` (or ``False`` for deletes) when the record does
    not exist; raising is left to the callers. Update operations shallow-merge
    the given fields onto the stored record.
    """

    # --- Quizzes ---

    @abstractmethod
    def create_quiz(
        self, draft: QuizDraft, questions: list[QuestionDraft]
    ) -> tuple[Quiz, list[Question]]:
        """Insert a quiz and its questions as one step and assign a unique code."""

    @abstractmethod
    def get_quiz(self, quiz_id: int) -> Quiz | None: ...

    @abstractmethod
    def get_quiz_by_code(self, code: str) -> Quiz | None: ...

    @abstractmethod
    def list_quizzes(self, creator_id: int | None = None) -> list[Quiz]: ...

    @abstractmethod
    def update_quiz(self, quiz_id: int, changes: Mapping[str, object]) -> Quiz | None: ...

    @abstractmethod
    def delete_quiz(self, quiz_id: int) -> bool:
        """Delete a quiz together with its questions, participations and responses."""

    # --- Questions ---

    @abstractmethod
    def create_question(self, quiz_id: int, draft: QuestionDraft) -> Question | None: ...

    @abstractmethod
    def get_question(self, question_id: int) -> Question | None: ...

    @abstractmethod
    def list_questions(self, quiz_id: int) -> list[Question]:
        """Return the questions of a quiz ordered by ``order`` ascending."""

    @abstractmethod
    def update_question(
        self, question_id: int, changes: Mapping[str, object]
    ) -> Question | None: ...

    @abstractmethod
    def delete_question(self, question_id: int) -> bool:
        """Delete a question and the responses that answer it.

        Raises ``QuestionInUseError`` when a completed participation answered it.
        """

    # --- Participations ---

    @abstractmethod
    def create_participation(
        self, quiz_id: int, participant_name: str, started_at: datetime
    ) -> Participation: ...

    @abstractmethod
    def get_participation(self, participation_id: int) -> Participation | None: ...

    @abstractmethod
    def list_participations(self, quiz_id: int) -> list[Participation]: ...

    @abstractmethod
    def update_participation(
        self, participation_id: int, changes: Mapping[str, object]
    ) -> Participation | None: ...

    # --- Responses ---

    @abstractmethod
    def upsert_response(
        self,
        participation_id: int,
        question_id: int,
        answer: SubmittedValue,
        is_correct: bool | None,
        is_marked_for_review: bool = False,
    ) -> Response | None:
        """Store the answer for (participation, question), replacing an earlier one.

        Returns ``None`` when either record no longer exists.
        """

    @abstractmethod
    def get_response(self, response_id: int) -> Response | None: ...

    @abstractmethod
    def list_responses(self, participation_id: int) -> list[Response]: ...

    @abstractmethod
    def list_responses_for_quiz(self, quiz_id: int) -> list[Response]: ...

    @abstractmethod
    def update_response(
        self, response_id: int, changes: Mapping[str, object]
    ) -> Response | None: ...
