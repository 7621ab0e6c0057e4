"""In-memory implementation of the quiz storage interface."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import fields, replace
from datetime import datetime, timezone
from threading import Lock
from typing import TypeVar

from quizme.constants.quiz_constants import MAX_CODE_ATTEMPTS
from quizme.core.errors import QuestionInUseError, QuizError, QuizValidationError
from quizme.core.models import (
    Participation,
    Question,
    QuestionDraft,
    Quiz,
    QuizDraft,
    Response,
    SubmittedValue,
)
from quizme.core.quiz_code import QuizCodeGenerator, normalize_code
from quizme.core.quiz_validation import ensure_unique_orders
from quizme.core.services.storage import QuizStorage

_Record = TypeVar("_Record", Quiz, Question, Participation, Response)

_IMMUTABLE_QUIZ_FIELDS = frozenset({"id", "code", "created_at"})
_IMMUTABLE_QUESTION_FIELDS = frozenset({"id", "quiz_id"})
_IMMUTABLE_PARTICIPATION_FIELDS = frozenset({"id", "quiz_id", "started_at"})
_IMMUTABLE_RESPONSE_FIELDS = frozenset({"id", "participation_id", "question_id"})


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MemoryStorage(QuizStorage):
    """Keeps every record in process memory behind a single lock.

    Identifiers are allocated per record type from counters starting at 1 and
    are never reused. Id and code allocation happen inside the same critical
    section as the write that uses them.
    """

    def __init__(
        self,
        code_generator: Callable[[], str] | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._lock = Lock()
        self._code_generator = code_generator or QuizCodeGenerator()
        self._clock = clock

        self._quizzes: dict[int, Quiz] = {}
        self._questions: dict[int, Question] = {}
        self._participations: dict[int, Participation] = {}
        self._responses: dict[int, Response] = {}
        self._codes: set[str] = set()
        self._response_keys: dict[tuple[int, int], int] = {}

        self._counters: dict[str, int] = {
            "quiz": 0,
            "question": 0,
            "participation": 0,
            "response": 0,
        }

    # --- Quizzes ---

    def create_quiz(
        self, draft: QuizDraft, questions: list[QuestionDraft]
    ) -> tuple[Quiz, list[Question]]:
        ensure_unique_orders(question.order for question in questions)
        with self._lock:
            code = self._allocate_code()
            quiz = Quiz(
                id=self._next_id("quiz"),
                title=draft.title,
                code=code,
                created_at=self._clock(),
                description=draft.description,
                category=draft.category,
                duration=draft.duration,
                creator_id=draft.creator_id,
            )
            self._quizzes[quiz.id] = quiz
            self._codes.add(code)
            created = [self._insert_question(quiz.id, question) for question in questions]
        return quiz, sorted(created, key=lambda question: question.order)

    def get_quiz(self, quiz_id: int) -> Quiz | None:
        with self._lock:
            return self._quizzes.get(quiz_id)

    def get_quiz_by_code(self, code: str) -> Quiz | None:
        wanted = normalize_code(code)
        with self._lock:
            return next((quiz for quiz in self._quizzes.values() if quiz.code == wanted), None)

    def list_quizzes(self, creator_id: int | None = None) -> list[Quiz]:
        with self._lock:
            quizzes = list(self._quizzes.values())
        if creator_id is None:
            return quizzes
        return [quiz for quiz in quizzes if quiz.creator_id == creator_id]

    def update_quiz(self, quiz_id: int, changes: Mapping[str, object]) -> Quiz | None:
        with self._lock:
            existing = self._quizzes.get(quiz_id)
            if existing is None:
                return None
            updated = self._merge(existing, changes, _IMMUTABLE_QUIZ_FIELDS)
            self._quizzes[quiz_id] = updated
            return updated

    def delete_quiz(self, quiz_id: int) -> bool:
        with self._lock:
            quiz = self._quizzes.pop(quiz_id, None)
            if quiz is None:
                return False
            self._codes.discard(quiz.code)
            for question_id in [q.id for q in self._questions.values() if q.quiz_id == quiz_id]:
                del self._questions[question_id]
            participation_ids = [
                p.id for p in self._participations.values() if p.quiz_id == quiz_id
            ]
            for participation_id in participation_ids:
                del self._participations[participation_id]
            self._drop_responses(
                r.id for r in self._responses.values() if r.participation_id in participation_ids
            )
            return True

    # --- Questions ---

    def create_question(self, quiz_id: int, draft: QuestionDraft) -> Question | None:
        with self._lock:
            if quiz_id not in self._quizzes:
                return None
            existing_orders = [q.order for q in self._questions.values() if q.quiz_id == quiz_id]
            ensure_unique_orders([*existing_orders, draft.order])
            return self._insert_question(quiz_id, draft)

    def get_question(self, question_id: int) -> Question | None:
        with self._lock:
            return self._questions.get(question_id)

    def list_questions(self, quiz_id: int) -> list[Question]:
        with self._lock:
            questions = [q for q in self._questions.values() if q.quiz_id == quiz_id]
        return sorted(questions, key=lambda question: question.order)

    def update_question(
        self, question_id: int, changes: Mapping[str, object]
    ) -> Question | None:
        with self._lock:
            existing = self._questions.get(question_id)
            if existing is None:
                return None
            updated = self._merge(existing, changes, _IMMUTABLE_QUESTION_FIELDS)
            if updated.order != existing.order:
                ensure_unique_orders(
                    q.order
                    for q in [*self._questions.values(), updated]
                    if q.quiz_id == existing.quiz_id and q is not existing
                )
            self._questions[question_id] = updated
            return updated

    def delete_question(self, question_id: int) -> bool:
        with self._lock:
            if question_id not in self._questions:
                return False
            answered_by = {
                r.participation_id for r in self._responses.values() if r.question_id == question_id
            }
            if any(self._participations[pid].completed for pid in answered_by):
                raise QuestionInUseError(
                    "Question has answers from submitted participations and cannot be deleted."
                )
            del self._questions[question_id]
            self._drop_responses(
                r.id for r in self._responses.values() if r.question_id == question_id
            )
            return True

    # --- Participations ---

    def create_participation(
        self, quiz_id: int, participant_name: str, started_at: datetime
    ) -> Participation:
        with self._lock:
            participation = Participation(
                id=self._next_id("participation"),
                quiz_id=quiz_id,
                participant_name=participant_name,
                started_at=started_at,
            )
            self._participations[participation.id] = participation
            return participation

    def get_participation(self, participation_id: int) -> Participation | None:
        with self._lock:
            return self._participations.get(participation_id)

    def list_participations(self, quiz_id: int) -> list[Participation]:
        with self._lock:
            return [p for p in self._participations.values() if p.quiz_id == quiz_id]

    def update_participation(
        self, participation_id: int, changes: Mapping[str, object]
    ) -> Participation | None:
        with self._lock:
            existing = self._participations.get(participation_id)
            if existing is None:
                return None
            updated = self._merge(existing, changes, _IMMUTABLE_PARTICIPATION_FIELDS)
            self._participations[participation_id] = updated
            return updated

    # --- Responses ---

    def upsert_response(
        self,
        participation_id: int,
        question_id: int,
        answer: SubmittedValue,
        is_correct: bool | None,
        is_marked_for_review: bool = False,
    ) -> Response | None:
        key = (participation_id, question_id)
        with self._lock:
            # Either record may have been deleted since the caller looked it up.
            if participation_id not in self._participations or question_id not in self._questions:
                return None
            response_id = self._response_keys.get(key)
            if response_id is None:
                response_id = self._next_id("response")
                self._response_keys[key] = response_id
            # A fresh answer starts without a challenge.
            response = Response(
                id=response_id,
                participation_id=participation_id,
                question_id=question_id,
                answer=answer,
                is_correct=is_correct,
                is_marked_for_review=is_marked_for_review,
            )
            self._responses[response_id] = response
            return response

    def get_response(self, response_id: int) -> Response | None:
        with self._lock:
            return self._responses.get(response_id)

    def list_responses(self, participation_id: int) -> list[Response]:
        with self._lock:
            return [r for r in self._responses.values() if r.participation_id == participation_id]

    def list_responses_for_quiz(self, quiz_id: int) -> list[Response]:
        with self._lock:
            participation_ids = {
                p.id for p in self._participations.values() if p.quiz_id == quiz_id
            }
            return [r for r in self._responses.values() if r.participation_id in participation_ids]

    def update_response(
        self, response_id: int, changes: Mapping[str, object]
    ) -> Response | None:
        with self._lock:
            existing = self._responses.get(response_id)
            if existing is None:
                return None
            updated = self._merge(existing, changes, _IMMUTABLE_RESPONSE_FIELDS)
            self._responses[response_id] = updated
            return updated

    # --- Internals (callers hold the lock) ---

    def _next_id(self, kind: str) -> int:
        self._counters[kind] += 1
        return self._counters[kind]

    def _allocate_code(self) -> str:
        for _ in range(MAX_CODE_ATTEMPTS):
            candidate = normalize_code(self._code_generator())
            if candidate not in self._codes:
                return candidate
        raise QuizError("Could not allocate a unique quiz code.")

    def _insert_question(self, quiz_id: int, draft: QuestionDraft) -> Question:
        question = Question(
            id=self._next_id("question"),
            quiz_id=quiz_id,
            text=draft.text,
            type=draft.type,
            correct_answer=draft.correct_answer,
            order=draft.order,
            options=draft.options,
        )
        self._questions[question.id] = question
        return question

    def _drop_responses(self, response_ids: Iterable[int]) -> None:
        for response_id in list(response_ids):
            response = self._responses.pop(response_id)
            self._response_keys.pop((response.participation_id, response.question_id), None)

    @staticmethod
    def _merge(record: _Record, changes: Mapping[str, object], immutable: frozenset[str]) -> _Record:
        allowed = {field.name for field in fields(record)} - immutable
        rejected = sorted(set(changes) - allowed)
        if rejected:
            raise QuizValidationError(f"Cannot update field(s): {', '.join(rejected)}.")
        return replace(record, **changes)
