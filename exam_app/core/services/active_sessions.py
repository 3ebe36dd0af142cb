"""Service for tracking participants who are currently taking an exam."""

from __future__ import annotations

from datetime import datetime, timezone

from exam_app.core.models import ActiveSession


class ActiveSessionTracker:
    """Keyed by (name, exam id) so each pair has at most one live session."""

    def __init__(self) -> None:
        self._sessions: dict[tuple[str, str], ActiveSession] = {}

    def start(self, name: str, exam_id: str) -> ActiveSession:
        """Begin (or restart) a session, replacing any earlier one for the pair."""
        key = (name, exam_id)
        self._sessions.pop(key, None)
        session = ActiveSession(
            name=name,
            exam_id=exam_id,
            start_time=datetime.now(timezone.utc),
        )
        self._sessions[key] = session
        return session

    def end(self, name: str, exam_id: str) -> None:
        self._sessions.pop((name, exam_id), None)

    def is_active(self, name: str, exam_id: str) -> bool:
        return (name, exam_id) in self._sessions

    def list_active(self, exam_id: str) -> list[ActiveSession]:
        """Return the sessions for ``exam_id`` in the order they started."""
        return sorted(
            (session for session in self._sessions.values() if session.exam_id == exam_id),
            key=lambda s: s.start_time,
        )

    def clear(self) -> None:
        self._sessions.clear()
