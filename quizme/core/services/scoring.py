"""Decides whether a submitted answer is correct for a question."""

from __future__ import annotations

from quizme.core.models import ExactAnswer, KeywordAnswer, Question, QuestionType, SubmittedValue


def score_answer(question: Question, answer: SubmittedValue) -> bool:
    """Return True when ``answer`` is correct for ``question``.

    Choice questions need an exact, case-sensitive match. Essays are correct
    when the answer contains any accepted keyword, ignoring case. Matching is
    a plain substring test, so an accepted "10" also matches "210".
    """
    if question.type is QuestionType.ESSAY:
        return _score_essay(question.correct_answer, answer)
    return _score_exact(question.correct_answer, answer)


def _score_exact(answer_key: ExactAnswer, answer: SubmittedValue) -> bool:
    if not isinstance(answer, str):
        return False
    return answer == answer_key.value


def _score_essay(answer_key: KeywordAnswer, answer: SubmittedValue) -> bool:
    text = " ".join(answer) if isinstance(answer, list) else answer
    haystack = text.lower()
    return any(keyword.lower() in haystack for keyword in answer_key.accepted)
