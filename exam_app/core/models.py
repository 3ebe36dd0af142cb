"""Domain models for the exam application."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


def to_iso(moment: datetime) -> str:
    """Render a timestamp as an ISO-8601 string."""
    return moment.isoformat()


@dataclass(frozen=True, slots=True)
class Question:
    """A single question; only ``correct_answer`` matters for scoring."""

    index: int
    correct_answer: Any
    content: dict[str, Any]


@dataclass(frozen=True, slots=True)
class Exam:
    """Published exam. The definition is stored verbatim and never changes."""

    id: str
    questions: tuple[Question, ...]
    definition: dict[str, Any]
    created_at: datetime

    @property
    def title(self) -> str | None:
        title = self.definition.get("title")
        return title if isinstance(title, str) else None

    @property
    def question_count(self) -> int:
        return len(self.questions)


@dataclass(frozen=True, slots=True)
class ScoreBreakdown:
    """Output of the scoring engine."""

    correct_count: int
    wrong_count: int
    negative_marks: int
    score: int
    total_questions: int


@dataclass(frozen=True, slots=True)
class ExamResult:
    """Finalized submission owned by the participant ledger."""

    exam_id: str
    participant_name: str
    exam_title: str
    total_questions: int
    answers: tuple[Any, ...]
    score: int
    correct_count: int
    wrong_count: int
    negative_marks: int
    submitted_at: datetime


@dataclass(frozen=True, slots=True)
class LeaderboardEntry:
    """Projection of a result held in the ranked board."""

    name: str
    score: int
    submitted_at: datetime


@dataclass(frozen=True, slots=True)
class ActiveSession:
    """A participant's in-progress attempt at an exam."""

    name: str
    exam_id: str
    start_time: datetime


@dataclass(frozen=True, slots=True)
class ExamHistoryItem:
    exam_id: str
    exam_title: str
    score: int
    total_questions: int
    submitted_at: datetime


@dataclass(slots=True)
class ParticipantProfile:
    name: str
    exams: list[ExamHistoryItem] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class SubmissionOutcome:
    """What the submitter gets back once the result is recorded."""

    exam_id: str
    participant_name: str
    breakdown: ScoreBreakdown
    submitted_at: datetime
