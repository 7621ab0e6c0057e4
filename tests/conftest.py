from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from quizme.core.quiz_manager import QuizManager
from quizme.core.services.memory_storage import MemoryStorage
from quizme.core.services.participation_lifecycle import ParticipationLifecycle
from quizme.server.api_server import create_api_app


class FakeClock:
    """Deterministic clock; tests move it forward explicitly."""

    def __init__(self) -> None:
        self.now = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def storage(clock: FakeClock) -> MemoryStorage:
    return MemoryStorage(clock=clock)


@pytest.fixture
def lifecycle(storage: MemoryStorage, clock: FakeClock) -> ParticipationLifecycle:
    return ParticipationLifecycle(storage, clock=clock)


@pytest.fixture
def manager(storage: MemoryStorage, lifecycle: ParticipationLifecycle) -> QuizManager:
    return QuizManager(storage=storage, lifecycle=lifecycle)


@pytest.fixture
def client(manager: QuizManager) -> TestClient:
    return TestClient(create_api_app(manager))


@pytest.fixture
def two_question_quiz(manager: QuizManager):
    """A true/false question (answer "true") followed by a multiple choice one (answer "b")."""
    return manager.create_quiz(
        "General knowledge",
        questions=[
            {"text": "The earth is round.", "type": "TRUE_FALSE", "correct_answer": "true", "order": 1},
            {
                "text": "Pick the second letter.",
                "type": "MULTIPLE_CHOICE",
                "options": ["a", "b", "c"],
                "correct_answer": "b",
                "order": 2,
            },
        ],
        category="Trivia",
    )
