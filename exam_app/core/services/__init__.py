"""In-memory services composed by the exam manager."""

from .active_sessions import ActiveSessionTracker
from .exam_repository import ExamRepository
from .leaderboard import Leaderboard
from .participant_ledger import ParticipantLedger

__all__ = [
    "ActiveSessionTracker",
    "ExamRepository",
    "Leaderboard",
    "ParticipantLedger",
]
