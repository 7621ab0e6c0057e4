"""Service driving a participant's attempt: start, answer, challenge, submit."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from threading import Lock

from quizme.core.errors import NotFoundError, ParticipationClosedError, QuizValidationError
from quizme.core.models import Participation, Response, SubmittedValue
from quizme.core.services.scoring import score_answer
from quizme.core.services.storage import QuizStorage

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ParticipationLifecycle:
    """Moves participations from in progress to completed.

    Each operation reads and then writes the store; the lock keeps those two
    steps together so an answer cannot slip in while a submit is counting.
    """

    def __init__(self, storage: QuizStorage, clock: Callable[[], datetime] = _utcnow) -> None:
        self._storage = storage
        self._clock = clock
        self._lock = Lock()

    def start(self, quiz_id: int, participant_name: str) -> Participation:
        name = (participant_name or "").strip()
        if not name:
            raise QuizValidationError("Participant name must not be empty.")
        with self._lock:
            if self._storage.get_quiz(quiz_id) is None:
                raise NotFoundError("Quiz", quiz_id)
            participation = self._storage.create_participation(quiz_id, name, self._clock())
        logger.info("Participation %s started on quiz %s by %r", participation.id, quiz_id, name)
        return participation

    def record_answer(
        self,
        participation_id: int,
        question_id: int,
        answer: SubmittedValue,
        is_marked_for_review: bool = False,
    ) -> Response:
        """Score an answer and store it, replacing any earlier answer to the question."""
        with self._lock:
            participation = self._require_participation(participation_id)
            if participation.completed:
                raise ParticipationClosedError("Participation has already been submitted.")
            question = self._storage.get_question(question_id)
            if question is None:
                raise NotFoundError("Question", question_id)
            if question.quiz_id != participation.quiz_id:
                raise QuizValidationError("Question does not belong to this participation's quiz.")

            is_correct = score_answer(question, answer)
            response = self._storage.upsert_response(
                participation_id,
                question_id,
                answer,
                is_correct,
                is_marked_for_review=is_marked_for_review,
            )
        if response is None:
            raise NotFoundError("Question", question_id)
        return response

    def challenge(self, response_id: int, reason: str | None) -> Response:
        cleaned = (reason or "").strip()
        if not cleaned:
            raise QuizValidationError("Challenge reason is required.")
        with self._lock:
            updated = self._storage.update_response(response_id, {"challenge_reason": cleaned})
        if updated is None:
            raise NotFoundError("Response", response_id)
        logger.info("Response %s challenged", response_id)
        return updated

    def submit(self, participation_id: int, time_spent: int) -> Participation:
        """Close a participation and record its score.

        A participation can be submitted only once; a second call is rejected
        so a completed result never changes afterwards.
        """
        if isinstance(time_spent, bool) or not isinstance(time_spent, int) or time_spent < 0:
            raise QuizValidationError("Time spent must be a non-negative number of seconds.")
        with self._lock:
            participation = self._require_participation(participation_id)
            if participation.completed:
                raise ParticipationClosedError("Participation has already been submitted.")
            responses = self._storage.list_responses(participation_id)
            score = sum(1 for response in responses if response.is_correct)
            updated = self._storage.update_participation(
                participation_id,
                {
                    "score": score,
                    "completed": True,
                    "time_spent": time_spent,
                    "finished_at": self._clock(),
                },
            )
        if updated is None:
            raise NotFoundError("Participation", participation_id)
        logger.info(
            "Participation %s submitted with score %s after %ss", participation_id, score, time_spent
        )
        return updated

    def _require_participation(self, participation_id: int) -> Participation:
        participation = self._storage.get_participation(participation_id)
        if participation is None:
            raise NotFoundError("Participation", participation_id)
        return participation
