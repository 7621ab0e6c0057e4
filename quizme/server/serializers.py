"""Conversion of domain records into camelCase JSON documents."""

from __future__ import annotations

from datetime import datetime, timezone

from quizme.core.models import Participation, Question, Quiz, Response
from quizme.core.quiz_validation import answer_key_to_raw
from quizme.core.services.report_assembler import QuizReport


def _iso(value: datetime | None) -> str | None:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def quiz_to_dict(quiz: Quiz) -> dict[str, object]:
    return {
        "id": quiz.id,
        "title": quiz.title,
        "description": quiz.description,
        "category": quiz.category,
        "duration": quiz.duration,
        "creatorId": quiz.creator_id,
        "code": quiz.code,
        "createdAt": _iso(quiz.created_at),
    }


def question_to_dict(question: Question, include_answer: bool = True) -> dict[str, object]:
    """Serialize a question; participants fetching by code do not see the answer key."""
    document: dict[str, object] = {
        "id": question.id,
        "quizId": question.quiz_id,
        "text": question.text,
        "type": question.type.value,
        "options": list(question.options) if question.options is not None else None,
        "order": question.order,
    }
    if include_answer:
        document["correctAnswer"] = answer_key_to_raw(question.correct_answer)
    return document


def quiz_with_questions(
    quiz: Quiz, questions: list[Question], include_answers: bool = True
) -> dict[str, object]:
    document = quiz_to_dict(quiz)
    document["questions"] = [
        question_to_dict(question, include_answer=include_answers) for question in questions
    ]
    return document


def participation_to_dict(participation: Participation) -> dict[str, object]:
    return {
        "id": participation.id,
        "quizId": participation.quiz_id,
        "participantName": participation.participant_name,
        "score": participation.score,
        "timeSpent": participation.time_spent,
        "completed": participation.completed,
        "startedAt": _iso(participation.started_at),
        "finishedAt": _iso(participation.finished_at),
    }


def response_to_dict(response: Response) -> dict[str, object]:
    return {
        "id": response.id,
        "participationId": response.participation_id,
        "questionId": response.question_id,
        "answer": response.answer,
        "isCorrect": response.is_correct,
        "isMarkedForReview": response.is_marked_for_review,
        "challengeReason": response.challenge_reason,
    }


def submit_result_to_dict(report: QuizReport) -> dict[str, object]:
    return {
        "participation": participation_to_dict(report.participation),
        "responses": [response_to_dict(response) for response in report.responses],
        "totalQuestions": report.total_questions,
        "correctAnswers": report.correct_answers,
        "percentage": report.percentage,
    }


def report_to_dict(report: QuizReport) -> dict[str, object]:
    document = submit_result_to_dict(report)
    document["quiz"] = quiz_to_dict(report.quiz)
    document["perQuestion"] = [
        {
            "question": question_to_dict(entry.question),
            "response": response_to_dict(entry.response),
            "answered": entry.answered,
        }
        for entry in report.entries
    ]
    return document
