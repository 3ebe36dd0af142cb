"""Business logic for running exams, shared by the API and the startup loader."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
import secrets
from threading import Lock
from typing import Any

from exam_app.constants.exam_constants import DEFAULT_EXAM_TITLE
from exam_app.core.errors import UnauthorizedError
from exam_app.core.models import (
    ActiveSession,
    Exam,
    ExamResult,
    LeaderboardEntry,
    ParticipantProfile,
    SubmissionOutcome,
)
from exam_app.core.scoring import AnswerSet, answer_at, score_answers
from exam_app.core.services.active_sessions import ActiveSessionTracker
from exam_app.core.services.exam_repository import ExamRepository
from exam_app.core.services.leaderboard import Leaderboard
from exam_app.core.services.participant_ledger import ParticipantLedger

logger = logging.getLogger(__name__)


class ExamManager:
    """Facade for exam services: Repository, Ledger, Leaderboard, and ActiveSessions.

    A single lock guards every service, so a submission (record, re-rank,
    evict) is observed by readers either completely or not at all.
    """

    def __init__(self, admin_password: str) -> None:
        self._lock = Lock()
        self._admin_password = admin_password

        # Services
        self._repository = ExamRepository()
        self._ledger = ParticipantLedger()
        self._leaderboard = Leaderboard()
        self._active_sessions = ActiveSessionTracker()

    # --- Exam Repository Delegation ---

    def create_exam(self, definition: dict[str, Any], password: str) -> Exam:
        """Publish a new exam after checking the admin credential."""
        if not secrets.compare_digest(password.encode("utf-8"), self._admin_password.encode("utf-8")):
            logger.warning("Rejected exam creation with an invalid admin password")
            raise UnauthorizedError("Unauthorized")
        with self._lock:
            exam = self._repository.create_exam(definition)
            self._leaderboard.initialize(exam.id)
        logger.info("Created exam %s with %d question(s)", exam.id, exam.question_count)
        return exam

    def get_exam(self, exam_id: str) -> Exam:
        with self._lock:
            return self._repository.get_exam(exam_id)

    def get_any_exam(self) -> Exam:
        with self._lock:
            return self._repository.get_first_exam()

    def list_exams(self) -> list[Exam]:
        with self._lock:
            return self._repository.list_exams()

    def get_exam_count(self) -> int:
        with self._lock:
            return self._repository.get_exam_count()

    # --- Submission ---

    def submit_answers(self, participant_name: str, exam_id: str, answers: AnswerSet) -> SubmissionOutcome:
        with self._lock:
            exam = self._repository.get_exam(exam_id)
            breakdown = score_answers(exam, answers)
            submitted_at = datetime.now(timezone.utc)

            result = ExamResult(
                exam_id=exam.id,
                participant_name=participant_name,
                exam_title=exam.title or DEFAULT_EXAM_TITLE,
                total_questions=breakdown.total_questions,
                answers=tuple(answer_at(answers, q.index) for q in exam.questions),
                score=breakdown.score,
                correct_count=breakdown.correct_count,
                wrong_count=breakdown.wrong_count,
                negative_marks=breakdown.negative_marks,
                submitted_at=submitted_at,
            )
            is_new = self._ledger.record_result(result)
            self._leaderboard.upsert(
                exam.id,
                LeaderboardEntry(name=participant_name, score=breakdown.score, submitted_at=submitted_at),
            )
            self._active_sessions.end(participant_name, exam.id)

        logger.info(
            "%s %s exam %s: score=%d correct=%d wrong=%d",
            participant_name,
            "submitted" if is_new else "resubmitted",
            exam_id,
            breakdown.score,
            breakdown.correct_count,
            breakdown.wrong_count,
        )
        return SubmissionOutcome(
            exam_id=exam.id,
            participant_name=participant_name,
            breakdown=breakdown,
            submitted_at=submitted_at,
        )

    # --- Ledger & Leaderboard Delegation ---

    def has_taken(self, exam_id: str, participant_name: str) -> bool:
        with self._lock:
            return self._ledger.has_taken(exam_id, participant_name)

    def get_result(self, exam_id: str, participant_name: str) -> ExamResult | None:
        with self._lock:
            return self._ledger.get_result(exam_id, participant_name)

    def get_profile(self, participant_name: str) -> ParticipantProfile:
        with self._lock:
            return ParticipantProfile(
                name=participant_name,
                exams=self._ledger.get_history(participant_name),
            )

    def get_leaderboard(self, exam_id: str, limit: int | None = None) -> list[LeaderboardEntry]:
        with self._lock:
            return self._leaderboard.get_ranked(exam_id, limit)

    # --- Active Session Delegation ---

    def start_session(self, participant_name: str, exam_id: str) -> ActiveSession:
        with self._lock:
            return self._active_sessions.start(participant_name, exam_id)

    def end_session(self, participant_name: str, exam_id: str) -> None:
        with self._lock:
            self._active_sessions.end(participant_name, exam_id)

    def list_active_sessions(self, exam_id: str) -> list[ActiveSession]:
        with self._lock:
            return self._active_sessions.list_active(exam_id)

    # --- Lifecycle ---

    def reset(self) -> None:
        """Drop every exam, result, ranking and session."""
        with self._lock:
            self._repository.clear()
            self._ledger.clear()
            self._leaderboard.clear()
            self._active_sessions.clear()
