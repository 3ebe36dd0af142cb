"""Service for ranking exam results."""

from __future__ import annotations

from exam_app.core.errors import LeaderboardNotFoundError
from exam_app.core.models import LeaderboardEntry


class Leaderboard:
    """Per-exam ranked entries, sorted by score descending.

    A participant holds at most one row per exam: a repeat submission replaces
    the earlier row, matching the ledger's last-write-wins results. Ties are
    broken by submission time, earliest first.
    """

    def __init__(self) -> None:
        self._boards: dict[str, list[LeaderboardEntry]] = {}

    def initialize(self, exam_id: str) -> None:
        self._boards.setdefault(exam_id, [])

    def upsert(self, exam_id: str, entry: LeaderboardEntry) -> None:
        board = self._boards.get(exam_id)
        if board is None:
            raise LeaderboardNotFoundError("Leaderboard not found for this exam")

        board[:] = [row for row in board if row.name != entry.name]
        board.append(entry)
        board.sort(key=lambda row: (-row.score, row.submitted_at))

    def get_ranked(self, exam_id: str, limit: int | None = None) -> list[LeaderboardEntry]:
        """Return the ranked rows, optionally only the top ``limit``."""
        board = self._boards.get(exam_id)
        if board is None:
            raise LeaderboardNotFoundError("Leaderboard not found for this exam")
        if limit is None:
            return list(board)
        return board[:limit]

    def clear(self) -> None:
        self._boards.clear()
