from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from exam_app.core.errors import ExamNotFoundError, InvalidExamError, LeaderboardNotFoundError
from exam_app.core.models import ExamResult, LeaderboardEntry
from exam_app.core.services import ActiveSessionTracker, ExamRepository, Leaderboard, ParticipantLedger
from tests.conftest import make_definition

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _result(exam_id: str, name: str, score: int, title: str = "Sample Exam") -> ExamResult:
    return ExamResult(
        exam_id=exam_id,
        participant_name=name,
        exam_title=title,
        total_questions=10,
        answers=(),
        score=score,
        correct_count=max(score, 0),
        wrong_count=0,
        negative_marks=0,
        submitted_at=BASE_TIME,
    )


# --- ExamRepository ---


def test_repository_assigns_ids_and_keeps_definition():
    repository = ExamRepository()
    definition = make_definition()

    exam = repository.create_exam(definition)

    assert exam.id
    assert exam.title == "Sample Exam"
    assert exam.question_count == 10
    assert exam.questions[2].correct_answer == "C"
    assert exam.definition["duration"] == 30
    assert repository.get_exam(exam.id) == exam


def test_repository_is_not_affected_by_caller_mutation():
    repository = ExamRepository()
    definition = make_definition()
    exam = repository.create_exam(definition)

    definition["questions"][0]["correct_answer"] = "Z"
    definition["title"] = "Changed"

    assert repository.get_exam(exam.id).questions[0].correct_answer == "A"
    assert repository.get_exam(exam.id).title == "Sample Exam"


def test_repository_is_not_affected_by_editing_a_fetched_exam():
    repository = ExamRepository()
    exam_id = repository.create_exam(make_definition()).id

    for fetched in (repository.get_exam(exam_id), repository.get_first_exam(), repository.list_exams()[0]):
        fetched.definition["questions"][0]["correct_answer"] = "Z"
        fetched.definition["title"] = "Tampered"
        fetched.questions[1].content["correct_answer"] = "Z"

    stored = repository.get_exam(exam_id)
    assert stored.title == "Sample Exam"
    assert stored.definition["questions"][0]["correct_answer"] == "A"
    assert stored.definition["questions"][1]["correct_answer"] == "B"
    assert stored.questions[0].correct_answer == "A"


def test_question_content_is_separate_from_definition():
    exam = ExamRepository().create_exam(make_definition())

    exam.questions[0].content["correct_answer"] = "Z"

    assert exam.definition["questions"][0]["correct_answer"] == "A"


def test_repository_first_exam_is_earliest_created():
    repository = ExamRepository()
    first = repository.create_exam(make_definition("First"))
    repository.create_exam(make_definition("Second"))

    assert repository.get_first_exam() == first
    assert [exam.title for exam in repository.list_exams()] == ["First", "Second"]


def test_repository_missing_exam():
    repository = ExamRepository()

    with pytest.raises(ExamNotFoundError):
        repository.get_first_exam()
    with pytest.raises(ExamNotFoundError):
        repository.get_exam("nope")


@pytest.mark.parametrize("definition", [{}, {"questions": "abc"}, {"questions": ["abc"]}])
def test_repository_rejects_malformed_questions(definition):
    repository = ExamRepository()

    with pytest.raises(InvalidExamError):
        repository.create_exam(definition)
    assert repository.get_exam_count() == 0


# --- ParticipantLedger ---


def test_ledger_last_write_wins():
    ledger = ParticipantLedger()

    assert ledger.record_result(_result("exam-1", "alice", 3)) is True
    assert ledger.record_result(_result("exam-1", "alice", 8)) is False

    assert ledger.has_taken("exam-1", "alice")
    assert ledger.get_result("exam-1", "alice").score == 8
    assert len(ledger.get_history("alice")) == 1


def test_ledger_history_spans_exams():
    ledger = ParticipantLedger()
    ledger.record_result(_result("exam-1", "alice", 3, title="One"))
    ledger.record_result(_result("exam-2", "alice", 5, title="Two"))
    ledger.record_result(_result("exam-2", "bob", 1))

    history = ledger.get_history("alice")

    assert {(item.exam_id, item.exam_title, item.score) for item in history} == {
        ("exam-1", "One", 3),
        ("exam-2", "Two", 5),
    }
    assert ledger.get_history("carol") == []
    assert not ledger.has_taken("exam-1", "bob")


# --- Leaderboard ---


def test_leaderboard_requires_initialization():
    leaderboard = Leaderboard()

    with pytest.raises(LeaderboardNotFoundError):
        leaderboard.get_ranked("exam-1")
    with pytest.raises(LeaderboardNotFoundError):
        leaderboard.upsert("exam-1", LeaderboardEntry("alice", 1, BASE_TIME))


def test_leaderboard_sorts_by_score_then_submission_time():
    leaderboard = Leaderboard()
    leaderboard.initialize("exam-1")
    leaderboard.upsert("exam-1", LeaderboardEntry("late", 5, BASE_TIME + timedelta(minutes=2)))
    leaderboard.upsert("exam-1", LeaderboardEntry("low", -1, BASE_TIME))
    leaderboard.upsert("exam-1", LeaderboardEntry("early", 5, BASE_TIME + timedelta(minutes=1)))
    leaderboard.upsert("exam-1", LeaderboardEntry("top", 9, BASE_TIME + timedelta(minutes=3)))

    ranked = leaderboard.get_ranked("exam-1")

    assert [entry.name for entry in ranked] == ["top", "early", "late", "low"]
    assert all(a.score >= b.score for a, b in zip(ranked, ranked[1:]))
    assert [entry.name for entry in leaderboard.get_ranked("exam-1", limit=2)] == ["top", "early"]


def test_leaderboard_repeat_submission_replaces_row():
    leaderboard = Leaderboard()
    leaderboard.initialize("exam-1")
    leaderboard.upsert("exam-1", LeaderboardEntry("alice", 9, BASE_TIME))
    leaderboard.upsert("exam-1", LeaderboardEntry("bob", 4, BASE_TIME))
    leaderboard.upsert("exam-1", LeaderboardEntry("alice", 2, BASE_TIME + timedelta(minutes=1)))

    ranked = leaderboard.get_ranked("exam-1")

    assert [(entry.name, entry.score) for entry in ranked] == [("bob", 4), ("alice", 2)]


def test_leaderboard_initialize_keeps_existing_rows():
    leaderboard = Leaderboard()
    leaderboard.initialize("exam-1")
    leaderboard.upsert("exam-1", LeaderboardEntry("alice", 9, BASE_TIME))
    leaderboard.initialize("exam-1")

    assert len(leaderboard.get_ranked("exam-1")) == 1


# --- ActiveSessionTracker ---


def test_start_twice_leaves_one_session():
    tracker = ActiveSessionTracker()
    first = tracker.start("alice", "exam-1")
    second = tracker.start("alice", "exam-1")

    sessions = tracker.list_active("exam-1")

    assert len(sessions) == 1
    assert sessions[0] == second
    assert second.start_time >= first.start_time


def test_sessions_are_listed_per_exam():
    tracker = ActiveSessionTracker()
    tracker.start("alice", "exam-1")
    tracker.start("bob", "exam-1")
    tracker.start("alice", "exam-2")

    assert [s.name for s in tracker.list_active("exam-1")] == ["alice", "bob"]
    assert [s.name for s in tracker.list_active("exam-2")] == ["alice"]
    assert tracker.list_active("exam-3") == []


def test_end_removes_only_matching_session_and_ignores_missing():
    tracker = ActiveSessionTracker()
    tracker.start("alice", "exam-1")
    tracker.start("alice", "exam-2")

    tracker.end("alice", "exam-1")
    tracker.end("nobody", "exam-1")

    assert not tracker.is_active("alice", "exam-1")
    assert tracker.is_active("alice", "exam-2")
