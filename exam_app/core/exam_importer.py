"""Utilities for importing an exam from a human-friendly text file.

File format (an optional title line, then question blocks separated by blank
lines or '---'):

    TITLE: Exam title (optional, first non-empty line of the file)

    Q: Question text. Additional lines until the next marker are treated
       as part of the question.
    A: First option text
    B: Second option text
    C: Third option text
    D: Fourth option text
    CORRECT: A|B|C|D

Example:

    TITLE: Arithmetic warm-up

    Q: What is 2 + 2?
    A: 3
    B: 4
    C: 5
    D: 22
    CORRECT: B

Each question becomes ``{"question": ..., "options": [...], "correct_answer": letter}``
so participants answer with the option letter.
"""

from __future__ import annotations

from dataclasses import dataclass
import re
from pathlib import Path
from typing import Any


class ExamImportError(Exception):
    """Raised when an exam definition cannot be parsed."""


@dataclass(slots=True)
class ImportedExam:
    """Container for an imported exam definition."""

    source_path: Path
    definition: dict[str, Any]


_OPTION_ORDER = ("A", "B", "C", "D")
_CONTINUABLE = ("Q", *_OPTION_ORDER)
_MARKER = re.compile(r"^(Q|[A-D]|CORRECT)\s*:(.*)$", re.IGNORECASE)
# Any run of blank lines or lines holding only "---" ends a question block.
_BLOCK_SEPARATOR = re.compile(r"\n(?:[ \t\r]*(?:---)?[ \t\r]*\n)+")


def load_exam_from_file(file_path: Path) -> ImportedExam:
    text = file_path.read_text(encoding="utf-8")
    definition = parse_exam_text(text)
    if "title" not in definition:
        definition["title"] = file_path.stem
    return ImportedExam(source_path=file_path, definition=definition)


def parse_exam_text(text: str) -> dict[str, Any]:
    title, body = _split_title(text)
    questions = _parse_questions(body)
    if not questions:
        raise ExamImportError("Exam file did not contain any questions.")
    definition: dict[str, Any] = {"questions": questions}
    if title:
        definition["title"] = title
    return definition


def _split_title(text: str) -> tuple[str | None, str]:
    lines = text.splitlines()
    for position, raw_line in enumerate(lines):
        stripped = raw_line.strip()
        if not stripped:
            continue
        if stripped.upper().startswith("TITLE:"):
            title = stripped.split(":", 1)[1].strip()
            if not title:
                raise ExamImportError("TITLE must not be empty.")
            return title, "\n".join(lines[position + 1 :])
        break
    return None, text


def _parse_questions(text: str) -> list[dict[str, Any]]:
    blocks = _BLOCK_SEPARATOR.split("\n" + text + "\n")
    return [_parse_block(block) for block in blocks if block.strip()]


def _parse_block(block: str) -> dict[str, Any]:
    """Collect marker sections; unmarked lines continue the previous section."""
    sections: dict[str, list[str]] = {}
    current: str | None = None

    for line in filter(None, (raw.strip() for raw in block.splitlines())):
        match = _MARKER.match(line)
        if match:
            current = match.group(1).upper()
            sections[current] = [match.group(2).strip()]
        elif current in _CONTINUABLE:
            sections[current].append(line)
        else:
            raise ExamImportError(
                f"Encountered text outside of a known section: '{line}'."
            )

    question_text = "\n".join(sections.get("Q", [])).strip()
    if not question_text:
        raise ExamImportError("Question text missing (Q: ...)")

    options = ["\n".join(sections[letter]).strip() for letter in _OPTION_ORDER if letter in sections]
    if len(options) != len(_OPTION_ORDER):
        raise ExamImportError("Each question must define exactly four options (A-D).")
    if not all(options):
        raise ExamImportError("Option text cannot be empty.")

    if "CORRECT" not in sections:
        raise ExamImportError("Each question must name its correct option (CORRECT: ...).")
    correct_letter = sections["CORRECT"][0].upper()
    if correct_letter not in _OPTION_ORDER:
        raise ExamImportError("CORRECT must be one of A, B, C, or D.")

    return {
        "question": question_text,
        "options": options,
        "correct_answer": correct_letter,
    }
