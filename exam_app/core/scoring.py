"""Scoring with negative marking.

Every question is worth one mark. An unanswered question (``None`` or an index
past the end of the submitted answers) earns nothing and costs nothing. Every
other mismatch is wrong, and each full group of four wrong answers deducts one
mark. Scores are not floored at zero.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from exam_app.constants.exam_constants import WRONG_ANSWERS_PER_NEGATIVE_MARK
from exam_app.core.models import Exam, ScoreBreakdown

AnswerSet = Sequence[Any] | Mapping[int, Any]


def answer_at(answers: AnswerSet, index: int) -> Any:
    """Return the answer for ``index``, or ``None`` when it was left blank."""
    if isinstance(answers, Mapping):
        return answers.get(index)
    if 0 <= index < len(answers):
        return answers[index]
    return None


def _matches(selected: Any, expected: Any) -> bool:
    """Strict equality: booleans never match numbers, though 1 and 1.0 do."""
    if isinstance(selected, bool) or isinstance(expected, bool):
        return type(selected) is type(expected) and selected == expected
    return selected == expected


def score_answers(exam: Exam, answers: AnswerSet) -> ScoreBreakdown:
    correct_count = 0
    wrong_count = 0
    for question in exam.questions:
        selected = answer_at(answers, question.index)
        if selected is None:
            continue
        if _matches(selected, question.correct_answer):
            correct_count += 1
        else:
            wrong_count += 1

    negative_marks = wrong_count // WRONG_ANSWERS_PER_NEGATIVE_MARK
    return ScoreBreakdown(
        correct_count=correct_count,
        wrong_count=wrong_count,
        negative_marks=negative_marks,
        score=correct_count - negative_marks,
        total_questions=exam.question_count,
    )
