from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from exam_app.config import Settings
from exam_app.core.exam_manager import ExamManager
from exam_app.server.api_server import create_api_app

ADMIN_PASSWORD = "let-me-in"
CORRECT_ANSWERS = ["A", "B", "C", "D", "A", "B", "C", "D", "A", "B"]


def make_definition(title: str = "Sample Exam", correct_answers: list[str] | None = None) -> dict:
    answers = CORRECT_ANSWERS if correct_answers is None else correct_answers
    return {
        "title": title,
        "duration": 30,
        "questions": [
            {
                "question": f"Question {number}",
                "options": ["A", "B", "C", "D"],
                "correct_answer": answer,
            }
            for number, answer in enumerate(answers, start=1)
        ],
    }


@pytest.fixture
def definition() -> dict:
    return make_definition()


@pytest.fixture
def manager() -> ExamManager:
    return ExamManager(admin_password=ADMIN_PASSWORD)


@pytest.fixture
def settings() -> Settings:
    return Settings(admin_password=ADMIN_PASSWORD, cors_origins=["http://localhost:5173"])


@pytest.fixture
def client(manager: ExamManager, settings: Settings):
    app = create_api_app(manager, settings)
    with TestClient(app) as test_client:
        yield test_client
