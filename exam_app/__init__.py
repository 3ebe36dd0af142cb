"""ExamLive: timed multiple-choice exams with a live leaderboard."""
