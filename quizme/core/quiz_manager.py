"""Business logic shared by the HTTP API: authoring, taking and reviewing quizzes."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from quizme.core.errors import NotFoundError, QuizValidationError
from quizme.core.models import (
    Participation,
    Question,
    Quiz,
    Response,
    SubmittedValue,
)
from quizme.core.quiz_validation import (
    answer_key_to_raw,
    prepare_question_draft,
    prepare_question_drafts,
    prepare_quiz_draft,
)
from quizme.core.report_pdf import render_report_pdf
from quizme.core.services.memory_storage import MemoryStorage
from quizme.core.services.participation_lifecycle import ParticipationLifecycle
from quizme.core.services.report_assembler import QuizReport, ReportAssembler
from quizme.core.services.storage import QuizStorage

logger = logging.getLogger(__name__)

_QUIZ_FIELDS = ("title", "description", "category", "duration", "creator_id")
_QUESTION_FIELDS = ("text", "type", "correct_answer", "order", "options")


class QuizManager:
    """Facade for quiz services: Storage, ParticipationLifecycle and ReportAssembler."""

    def __init__(
        self,
        storage: QuizStorage | None = None,
        lifecycle: ParticipationLifecycle | None = None,
    ) -> None:
        self._storage = storage or MemoryStorage()
        self._lifecycle = lifecycle or ParticipationLifecycle(self._storage)
        self._reports = ReportAssembler(self._storage)

    # --- Authoring ---

    def create_quiz(
        self,
        title: str,
        questions: Sequence[Mapping[str, object]] = (),
        **quiz_fields: object,
    ) -> tuple[Quiz, list[Question]]:
        """Validate the whole quiz first, then store it with its questions in one step."""
        draft = prepare_quiz_draft(title, **quiz_fields)
        question_drafts = prepare_question_drafts(questions)
        quiz, created = self._storage.create_quiz(draft, question_drafts)
        logger.info("Quiz %s created with code %s and %d question(s)", quiz.id, quiz.code, len(created))
        return quiz, created

    def list_quizzes(self, creator_id: int | None = None) -> list[Quiz]:
        return self._storage.list_quizzes(creator_id=creator_id)

    def get_quiz(self, quiz_id: int) -> Quiz:
        quiz = self._storage.get_quiz(quiz_id)
        if quiz is None:
            raise NotFoundError("Quiz", quiz_id)
        return quiz

    def get_quiz_by_code(self, code: str) -> Quiz:
        quiz = self._storage.get_quiz_by_code(code)
        if quiz is None:
            raise NotFoundError("Quiz", code)
        return quiz

    def get_questions(self, quiz_id: int) -> list[Question]:
        self.get_quiz(quiz_id)
        return self._storage.list_questions(quiz_id)

    def update_quiz(self, quiz_id: int, changes: Mapping[str, object]) -> Quiz:
        existing = self.get_quiz(quiz_id)
        _reject_unknown(changes, _QUIZ_FIELDS)
        merged = {field: getattr(existing, field) for field in _QUIZ_FIELDS}
        merged.update(changes)
        draft = prepare_quiz_draft(**merged)
        updated = self._storage.update_quiz(
            quiz_id, {field: getattr(draft, field) for field in changes}
        )
        if updated is None:
            raise NotFoundError("Quiz", quiz_id)
        return updated

    def delete_quiz(self, quiz_id: int) -> None:
        if not self._storage.delete_quiz(quiz_id):
            raise NotFoundError("Quiz", quiz_id)
        logger.info("Quiz %s deleted with its questions and participations", quiz_id)

    def add_question(self, quiz_id: int, fields: Mapping[str, object]) -> Question:
        self.get_quiz(quiz_id)
        order = fields.get("order")
        if order is None:
            existing = self._storage.list_questions(quiz_id)
            order = existing[-1].order + 1 if existing else 0
        draft = prepare_question_draft(
            text=fields.get("text"),
            type=fields.get("type"),
            correct_answer=fields.get("correct_answer"),
            order=order,
            options=fields.get("options"),
        )
        question = self._storage.create_question(quiz_id, draft)
        if question is None:
            raise NotFoundError("Quiz", quiz_id)
        return question

    def update_question(self, question_id: int, changes: Mapping[str, object]) -> Question:
        """Merge the changes and re-validate the whole question before storing it."""
        existing = self._storage.get_question(question_id)
        if existing is None:
            raise NotFoundError("Question", question_id)
        _reject_unknown(changes, _QUESTION_FIELDS)
        merged: dict[str, object] = {
            "text": existing.text,
            "type": existing.type,
            "correct_answer": answer_key_to_raw(existing.correct_answer),
            "order": existing.order,
            "options": list(existing.options) if existing.options is not None else None,
        }
        merged.update(changes)
        draft = prepare_question_draft(**merged)
        updated = self._storage.update_question(
            question_id,
            {
                "text": draft.text,
                "type": draft.type,
                "correct_answer": draft.correct_answer,
                "order": draft.order,
                "options": draft.options,
            },
        )
        if updated is None:
            raise NotFoundError("Question", question_id)
        return updated

    def delete_question(self, question_id: int) -> None:
        if not self._storage.delete_question(question_id):
            raise NotFoundError("Question", question_id)

    # --- Participation Lifecycle Delegation ---

    def start_participation(self, quiz_id: int, participant_name: str) -> Participation:
        return self._lifecycle.start(quiz_id, participant_name)

    def get_participation(self, participation_id: int) -> Participation:
        participation = self._storage.get_participation(participation_id)
        if participation is None:
            raise NotFoundError("Participation", participation_id)
        return participation

    def list_participations(self, quiz_id: int) -> list[Participation]:
        self.get_quiz(quiz_id)
        return self._storage.list_participations(quiz_id)

    def record_answer(
        self,
        participation_id: int,
        question_id: int,
        answer: SubmittedValue,
        is_marked_for_review: bool = False,
    ) -> Response:
        return self._lifecycle.record_answer(
            participation_id, question_id, answer, is_marked_for_review=is_marked_for_review
        )

    def challenge_response(self, response_id: int, reason: str | None) -> Response:
        return self._lifecycle.challenge(response_id, reason)

    def list_responses(self, participation_id: int) -> list[Response]:
        self.get_participation(participation_id)
        return self._storage.list_responses(participation_id)

    def list_quiz_responses(self, quiz_id: int) -> list[Response]:
        self.get_quiz(quiz_id)
        return self._storage.list_responses_for_quiz(quiz_id)

    def submit(self, participation_id: int, time_spent: int) -> QuizReport:
        """Complete the participation and return its report."""
        self._lifecycle.submit(participation_id, time_spent)
        return self._reports.build_report(participation_id)

    # --- Reports ---

    def build_report(self, participation_id: int) -> QuizReport:
        return self._reports.build_report(participation_id)

    def export_report_pdf(self, participation_id: int) -> tuple[QuizReport, bytes]:
        report = self._reports.build_report(participation_id)
        return report, render_report_pdf(report)


def _reject_unknown(changes: Mapping[str, object], allowed: Sequence[str]) -> None:
    unknown = sorted(set(changes) - set(allowed))
    if unknown:
        raise QuizValidationError(f"Cannot update field(s): {', '.join(unknown)}.")
