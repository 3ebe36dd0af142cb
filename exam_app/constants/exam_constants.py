"""Exam-related constants shared across the core and API layers."""

# One mark is deducted for every full group of this many wrong answers.
WRONG_ANSWERS_PER_NEGATIVE_MARK: int = 4
DEFAULT_EXAM_TITLE: str = "NTRCA Prelim Test"
DEFAULT_ADMIN_PASSWORD: str = "change-me-in-production"
