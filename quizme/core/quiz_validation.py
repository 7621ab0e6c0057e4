"""Validation and normalization of authored quizzes and questions.

Authoring payloads arrive as loosely typed values (the answer key of a
question is a string for choice questions and a list for essays). Everything
is checked here and turned into drafts carrying a typed answer key, so the
store and the scoring code never have to inspect the shape of a raw answer.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from quizme.constants.quiz_constants import DEFAULT_DURATION_MINUTES, TRUE_FALSE_VALUES
from quizme.core.errors import QuizValidationError
from quizme.core.models import (
    AnswerKey,
    ExactAnswer,
    KeywordAnswer,
    QuestionDraft,
    QuestionType,
    QuizDraft,
)


def prepare_quiz_draft(
    title: str,
    description: str | None = None,
    category: str | None = None,
    duration: int | None = DEFAULT_DURATION_MINUTES,
    creator_id: int | None = None,
) -> QuizDraft:
    cleaned_title = (title or "").strip()
    if not cleaned_title:
        raise QuizValidationError("Quiz title must not be empty.")
    if duration is not None:
        if isinstance(duration, bool) or not isinstance(duration, int):
            raise QuizValidationError("Duration must be an integer number of minutes.")
        if duration <= 0:
            raise QuizValidationError("Duration must be a positive number of minutes.")
    return QuizDraft(
        title=cleaned_title,
        description=_optional_text(description),
        category=_optional_text(category),
        duration=duration,
        creator_id=creator_id,
    )


def prepare_question_draft(
    text: str,
    type: QuestionType | str,
    correct_answer: object,
    order: int,
    options: Sequence[str] | None = None,
) -> QuestionDraft:
    """Validate one question and attach the answer key matching its type."""
    question_type = _parse_question_type(type)
    cleaned_text = (text or "").strip()
    if not cleaned_text:
        raise QuizValidationError("Question text must not be empty.")
    if isinstance(order, bool) or not isinstance(order, int):
        raise QuizValidationError("Question order must be an integer.")

    normalized_options: tuple[str, ...] | None = None
    if question_type is QuestionType.MULTIPLE_CHOICE:
        normalized_options = _validate_options(options)

    answer_key = build_answer_key(question_type, correct_answer)
    if normalized_options is not None and answer_key.value not in normalized_options:
        raise QuizValidationError("Correct answer must be one of the question options.")

    return QuestionDraft(
        text=cleaned_text,
        type=question_type,
        correct_answer=answer_key,
        order=order,
        options=normalized_options,
    )


def prepare_question_drafts(questions: Sequence[Mapping[str, object]]) -> list[QuestionDraft]:
    """Validate every question of an authoring payload.

    A question without an explicit ``order`` takes its position in the list.
    """
    drafts: list[QuestionDraft] = []
    for position, raw in enumerate(questions):
        order = raw.get("order")
        drafts.append(
            prepare_question_draft(
                text=raw.get("text"),
                type=raw.get("type"),
                correct_answer=raw.get("correct_answer"),
                order=position if order is None else order,
                options=raw.get("options"),
            )
        )
    ensure_unique_orders(draft.order for draft in drafts)
    return drafts


def ensure_unique_orders(orders: Iterable[int]) -> None:
    seen: set[int] = set()
    for order in orders:
        if order in seen:
            raise QuizValidationError(f"Question order {order} is used more than once.")
        seen.add(order)


def build_answer_key(question_type: QuestionType, raw: object) -> AnswerKey:
    if question_type is QuestionType.ESSAY:
        if not isinstance(raw, (list, tuple)) or not all(isinstance(item, str) for item in raw):
            raise QuizValidationError("Essay questions need a list of accepted answers.")
        accepted = tuple(item.strip() for item in raw if item.strip())
        return KeywordAnswer(accepted=accepted)

    if not isinstance(raw, str):
        raise QuizValidationError(f"{question_type.value} questions need a single correct answer.")
    if question_type is QuestionType.TRUE_FALSE and raw not in TRUE_FALSE_VALUES:
        raise QuizValidationError("True/false answers must be 'true' or 'false'.")
    return ExactAnswer(value=raw)


def answer_key_to_raw(answer_key: AnswerKey) -> str | list[str]:
    """Return the wire representation of an answer key."""
    if isinstance(answer_key, KeywordAnswer):
        return list(answer_key.accepted)
    return answer_key.value


def _parse_question_type(raw: QuestionType | str) -> QuestionType:
    if isinstance(raw, QuestionType):
        return raw
    try:
        return QuestionType(raw)
    except ValueError as exc:
        allowed = ", ".join(member.value for member in QuestionType)
        raise QuizValidationError(f"Question type must be one of {allowed}.") from exc


def _validate_options(options: Sequence[str] | None) -> tuple[str, ...]:
    """Options are kept exactly as authored; the answer key must match one verbatim."""
    if not options:
        raise QuizValidationError("Multiple choice questions need at least one option.")
    kept = tuple(options)
    if any(not isinstance(option, str) or not option.strip() for option in kept):
        raise QuizValidationError("Option text cannot be empty.")
    if len(set(kept)) != len(kept):
        raise QuizValidationError("Options of a question must be distinct.")
    return kept


def _optional_text(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None
