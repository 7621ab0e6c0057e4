from __future__ import annotations

import pytest

from quizme.core.errors import NotFoundError, QuizValidationError
from quizme.core.models import ExactAnswer, KeywordAnswer, QuestionType
from quizme.core.quiz_manager import QuizManager


def test_full_round_trip_through_the_manager():
    manager = QuizManager()

    quiz, questions = manager.create_quiz(
        "Geography",
        questions=[
            {"text": "Capital of France?", "type": "ESSAY", "correct_answer": ["Paris"]},
            {"text": "Oslo is in Norway.", "type": "TRUE_FALSE", "correct_answer": "true"},
        ],
        description="Warm-up",
    )
    assert len(manager.get_questions(quiz.id)) == 2
    assert manager.get_quiz_by_code(quiz.code.lower()) == quiz

    participation = manager.start_participation(quiz.id, "Student1")
    manager.record_answer(participation.id, questions[0].id, "It is paris")
    manager.record_answer(participation.id, questions[1].id, "false")

    report = manager.submit(participation.id, 61)

    assert report.participation.score == 1
    assert report.correct_answers == 1
    assert report.total_questions == 2
    assert report.percentage == 50.0
    assert [p.id for p in manager.list_participations(quiz.id)] == [participation.id]
    assert len(manager.list_quiz_responses(quiz.id)) == 2


def test_create_quiz_is_all_or_nothing(manager):
    with pytest.raises(QuizValidationError):
        manager.create_quiz(
            "Broken",
            questions=[
                {"text": "Fine", "type": "TRUE_FALSE", "correct_answer": "true"},
                {"text": "Bad", "type": "MULTIPLE_CHOICE", "options": ["a"], "correct_answer": "z"},
            ],
        )

    assert manager.list_quizzes() == []


def test_update_quiz_validates_the_merged_result(manager):
    quiz, _ = manager.create_quiz("Original", category="Science", duration=20)

    updated = manager.update_quiz(quiz.id, {"title": "  Renamed  "})
    assert updated.title == "Renamed"
    assert updated.category == "Science"
    assert updated.duration == 20

    with pytest.raises(QuizValidationError):
        manager.update_quiz(quiz.id, {"duration": 0})
    with pytest.raises(QuizValidationError):
        manager.update_quiz(quiz.id, {"code": "HACKED"})
    assert manager.get_quiz(quiz.id).title == "Renamed"


def test_add_question_appends_after_the_last_order(manager, two_question_quiz):
    quiz, _ = two_question_quiz

    added = manager.add_question(
        quiz.id, {"text": "Name a primary colour", "type": "ESSAY", "correct_answer": ["red", "blue"]}
    )

    assert added.order == 3
    assert added.correct_answer == KeywordAnswer(("red", "blue"))
    assert manager.get_questions(quiz.id)[-1] == added


def test_add_first_question_starts_at_zero(manager):
    quiz, _ = manager.create_quiz("Empty")

    added = manager.add_question(quiz.id, {"text": "Yes?", "type": "TRUE_FALSE", "correct_answer": "true"})

    assert added.order == 0


def test_update_question_revalidates_type_changes(manager, two_question_quiz):
    _, (tf_question, _) = two_question_quiz

    with pytest.raises(QuizValidationError):
        manager.update_question(tf_question.id, {"type": "MULTIPLE_CHOICE"})

    changed = manager.update_question(
        tf_question.id,
        {"type": QuestionType.MULTIPLE_CHOICE, "options": ["round", "flat"], "correct_answer": "round"},
    )
    assert changed.type is QuestionType.MULTIPLE_CHOICE
    assert changed.options == ("round", "flat")
    assert changed.correct_answer == ExactAnswer("round")
    assert changed.text == tf_question.text


def test_update_question_keeps_other_fields(manager, two_question_quiz):
    _, (_, mc_question) = two_question_quiz

    changed = manager.update_question(mc_question.id, {"text": "Pick b"})

    assert changed.text == "Pick b"
    assert changed.options == ("a", "b", "c")
    assert changed.correct_answer == ExactAnswer("b")
    assert changed.order == 2


def test_missing_records_raise_not_found(manager):
    with pytest.raises(NotFoundError):
        manager.get_quiz(1)
    with pytest.raises(NotFoundError):
        manager.get_quiz_by_code("ZZZZZZ")
    with pytest.raises(NotFoundError):
        manager.delete_quiz(1)
    with pytest.raises(NotFoundError):
        manager.update_question(1, {"text": "x"})
    with pytest.raises(NotFoundError):
        manager.delete_question(1)
    with pytest.raises(NotFoundError):
        manager.list_responses(1)
    with pytest.raises(NotFoundError):
        manager.add_question(1, {"text": "x", "type": "TRUE_FALSE", "correct_answer": "true"})


def test_delete_quiz_cascades(manager, two_question_quiz):
    quiz, (tf_question, _) = two_question_quiz
    participation = manager.start_participation(quiz.id, "Alice")
    manager.record_answer(participation.id, tf_question.id, "true")

    manager.delete_quiz(quiz.id)

    with pytest.raises(NotFoundError):
        manager.get_participation(participation.id)
    assert manager.list_quizzes() == []


def test_option_with_trailing_space_can_be_the_answer(manager):
    quiz, (question,) = manager.create_quiz(
        "Capitals",
        questions=[
            {
                "text": "Capital of France?",
                "type": "MULTIPLE_CHOICE",
                "options": ["Paris ", "Rome"],
                "correct_answer": "Paris ",
            }
        ],
    )
    participation = manager.start_participation(quiz.id, "Alice")

    response = manager.record_answer(participation.id, question.id, "Paris ")

    assert question.options == ("Paris ", "Rome")
    assert response.is_correct is True
