"""Service for storing published exams."""

from __future__ import annotations

from copy import deepcopy
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from exam_app.core.errors import ExamNotFoundError, InvalidExamError
from exam_app.core.models import Exam, Question


class ExamRepository:
    """Holds exam definitions. Exams are never updated or deleted."""

    def __init__(self) -> None:
        self._exams: dict[str, Exam] = {}

    def create_exam(self, definition: dict[str, Any]) -> Exam:
        """Store a deep copy of ``definition`` under a fresh identifier."""
        stored = deepcopy(definition)
        stored.pop("id", None)
        stored.pop("createdAt", None)
        exam = Exam(
            id=str(uuid4()),
            questions=self._prepare_questions(stored.get("questions")),
            definition=stored,
            created_at=datetime.now(timezone.utc),
        )
        self._exams[exam.id] = exam
        return self._snapshot(exam)

    def get_exam(self, exam_id: str) -> Exam:
        exam = self._exams.get(exam_id)
        if exam is None:
            raise ExamNotFoundError("Exam not found")
        return self._snapshot(exam)

    def get_first_exam(self) -> Exam:
        """Return the earliest created exam.

        The student page only ever shows one exam, so "the first one" stands in
        for the current exam once several have been published.
        """
        for exam in self._exams.values():
            return self._snapshot(exam)
        raise ExamNotFoundError("No exam found")

    def list_exams(self) -> list[Exam]:
        return [self._snapshot(exam) for exam in self._exams.values()]

    def get_exam_count(self) -> int:
        return len(self._exams)

    def clear(self) -> None:
        self._exams.clear()

    @classmethod
    def _snapshot(cls, exam: Exam) -> Exam:
        """Return a detached copy so callers can never edit the stored exam."""
        definition = deepcopy(exam.definition)
        return Exam(
            id=exam.id,
            questions=cls._prepare_questions(definition["questions"]),
            definition=definition,
            created_at=exam.created_at,
        )

    @staticmethod
    def _prepare_questions(raw_questions: Any) -> tuple[Question, ...]:
        if not isinstance(raw_questions, list):
            raise InvalidExamError("Exam must define a list of questions.")
        questions: list[Question] = []
        for index, raw in enumerate(raw_questions):
            if not isinstance(raw, dict):
                raise InvalidExamError(f"Question {index + 1} must be an object.")
            questions.append(
                Question(
                    index=index,
                    correct_answer=raw.get("correct_answer"),
                    content=deepcopy(raw),
                )
            )
        return tuple(questions)
