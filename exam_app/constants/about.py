"""Static metadata describing ExamLive."""

APP_NAME = "ExamLive"
APP_VERSION = "0.1.0"
APP_ABOUT_TEXT = (
    "ExamLive runs timed multiple-choice exams with negative marking. "
    "Publish an exam, let participants submit from the browser, and follow the "
    "leaderboard and the list of active test-takers while the exam runs."
)
