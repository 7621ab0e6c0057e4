"""Service joining a participation with its quiz, questions and responses."""

from __future__ import annotations

from dataclasses import dataclass

from quizme.core.errors import NotFoundError
from quizme.core.models import Participation, Question, Quiz, Response
from quizme.core.services.storage import QuizStorage


@dataclass(slots=True, frozen=True)
class ReportEntry:
    """One question of the quiz next to the participant's response."""

    question: Question
    response: Response
    answered: bool


@dataclass(slots=True, frozen=True)
class QuizReport:
    """Immutable snapshot used by the results views and the PDF export."""

    quiz: Quiz
    participation: Participation
    entries: list[ReportEntry]
    total_questions: int
    correct_answers: int
    percentage: float

    @property
    def responses(self) -> list[Response]:
        return [entry.response for entry in self.entries if entry.answered]


class ReportAssembler:
    """Builds result reports; every question of the quiz appears exactly once."""

    def __init__(self, storage: QuizStorage) -> None:
        self._storage = storage

    def build_report(self, participation_id: int) -> QuizReport:
        participation = self._storage.get_participation(participation_id)
        if participation is None:
            raise NotFoundError("Participation", participation_id)
        quiz = self._storage.get_quiz(participation.quiz_id)
        if quiz is None:
            raise NotFoundError("Quiz", participation.quiz_id)

        questions = self._storage.list_questions(quiz.id)
        by_question = {
            response.question_id: response
            for response in self._storage.list_responses(participation_id)
        }

        entries: list[ReportEntry] = []
        for question in questions:
            response = by_question.get(question.id)
            if response is None:
                entries.append(
                    ReportEntry(
                        question=question,
                        response=_placeholder_response(participation_id, question.id),
                        answered=False,
                    )
                )
            else:
                entries.append(ReportEntry(question=question, response=response, answered=True))

        total = len(questions)
        correct = sum(1 for entry in entries if entry.response.is_correct)
        percentage = (correct / total) * 100 if total else 0.0
        return QuizReport(
            quiz=quiz,
            participation=participation,
            entries=entries,
            total_questions=total,
            correct_answers=correct,
            percentage=percentage,
        )


def _placeholder_response(participation_id: int, question_id: int) -> Response:
    return Response(
        id=None,
        participation_id=participation_id,
        question_id=question_id,
        answer="",
        is_correct=False,
    )
