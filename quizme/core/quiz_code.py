"""Generation of the short public codes participants use to find a quiz."""

from __future__ import annotations

import random

from quizme.constants.quiz_constants import QUIZ_CODE_ALPHABET, QUIZ_CODE_LENGTH


class QuizCodeGenerator:
    """Produces random uppercase alphanumeric quiz codes.

    Uniqueness is not tracked here; the store checks each candidate against
    the codes it already holds and asks for another one on collision.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        length: int = QUIZ_CODE_LENGTH,
        alphabet: str = QUIZ_CODE_ALPHABET,
    ) -> None:
        if length <= 0:
            raise ValueError("Code length must be positive.")
        if not alphabet:
            raise ValueError("Code alphabet cannot be empty.")
        self._rng = rng or random.SystemRandom()
        self._length = length
        self._alphabet = alphabet

    def next_code(self) -> str:
        return "".join(self._rng.choice(self._alphabet) for _ in range(self._length))

    def __call__(self) -> str:
        return self.next_code()


def normalize_code(code: str) -> str:
    """Codes are matched case-insensitively; participants often type lowercase."""
    return code.strip().upper()
