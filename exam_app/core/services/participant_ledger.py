"""Service for recording finalized exam results."""

from __future__ import annotations

from exam_app.core.models import ExamHistoryItem, ExamResult


class ParticipantLedger:
    """Keeps one result per (exam, participant name); later submissions win."""

    def __init__(self) -> None:
        self._results: dict[str, dict[str, ExamResult]] = {}

    def record_result(self, result: ExamResult) -> bool:
        """Store ``result``. Returns True if it's a new result, False if it replaced one."""
        exam_results = self._results.setdefault(result.exam_id, {})
        is_new = result.participant_name not in exam_results
        exam_results[result.participant_name] = result
        return is_new

    def has_taken(self, exam_id: str, participant_name: str) -> bool:
        return participant_name in self._results.get(exam_id, {})

    def get_result(self, exam_id: str, participant_name: str) -> ExamResult | None:
        return self._results.get(exam_id, {}).get(participant_name)

    def get_history(self, participant_name: str) -> list[ExamHistoryItem]:
        """Return every recorded result for ``participant_name`` across exams."""
        history: list[ExamHistoryItem] = []
        for exam_results in self._results.values():
            result = exam_results.get(participant_name)
            if result is None:
                continue
            history.append(
                ExamHistoryItem(
                    exam_id=result.exam_id,
                    exam_title=result.exam_title,
                    score=result.score,
                    total_questions=result.total_questions,
                    submitted_at=result.submitted_at,
                )
            )
        return history

    def clear(self) -> None:
        self._results.clear()
