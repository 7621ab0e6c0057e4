from __future__ import annotations

import pytest

from quizme.core.models import ExactAnswer, KeywordAnswer, Question, QuestionType
from quizme.core.services.scoring import score_answer


def _question(question_type: QuestionType, answer_key, options=None) -> Question:
    return Question(
        id=1,
        quiz_id=1,
        text="Question",
        type=question_type,
        correct_answer=answer_key,
        order=0,
        options=options,
    )


@pytest.mark.parametrize(
    ("submitted", "expected"),
    [("true", True), ("True", False), ("false", False), (" true", False)],
)
def test_true_false_is_exact_and_case_sensitive(submitted, expected):
    question = _question(QuestionType.TRUE_FALSE, ExactAnswer("true"))
    assert score_answer(question, submitted) is expected


def test_multiple_choice_requires_exact_option():
    question = _question(QuestionType.MULTIPLE_CHOICE, ExactAnswer("b"), options=("a", "b", "c"))

    assert score_answer(question, "b") is True
    assert score_answer(question, "a") is False
    assert score_answer(question, "B") is False
    assert score_answer(question, ["b"]) is False


def test_essay_matches_any_keyword_ignoring_case():
    question = _question(QuestionType.ESSAY, KeywordAnswer(("paris", "lutetia")))

    assert score_answer(question, "I think it is Paris") is True
    assert score_answer(question, "LUTETIA, in Roman times") is True
    assert score_answer(question, "rome") is False


def test_essay_without_keywords_is_never_correct():
    question = _question(QuestionType.ESSAY, KeywordAnswer(()))

    assert score_answer(question, "anything") is False
    assert score_answer(question, "") is False


def test_essay_substring_match_is_lenient():
    question = _question(QuestionType.ESSAY, KeywordAnswer(("10",)))

    assert score_answer(question, "210") is True


def test_essay_list_answer_is_joined_before_matching():
    question = _question(QuestionType.ESSAY, KeywordAnswer(("new york",)))

    assert score_answer(question, ["New", "York"]) is True
