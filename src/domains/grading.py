"""Student grading workflow."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from core.constants import FAILING_GRADE, GRADE_THRESHOLDS
from core.errors import StockroomIOError
from core.logging_config import get_logger
from core.types import Student

_LOGGER = get_logger(__name__)


def letter_grade(score: int) -> str:
    """Map a numeric score onto a letter grade (A at 80 and above, F below 50)."""
    for threshold, grade in GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return FAILING_GRADE


def grade_report_lines(students: Iterable[Student]) -> list[str]:
    """Render one report line per student, in input order."""
    return [
        f"{student.full_name} (ID: {student.id}): "
        f"Score = {student.score}, Grade = {letter_grade(student.score)}"
        for student in students
    ]


def write_grade_report(students: Iterable[Student], output_path: Path) -> Path:
    """Write the grade report to ``output_path``.

    Args:
        students: Students to report on.
        output_path: Report text file.

    Returns:
        The written report path.

    Raises:
        StockroomIOError: If the report cannot be written.
    """
    lines = grade_report_lines(students)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    except OSError as error:
        raise StockroomIOError(
            f"Failed to write grade report to {output_path}: {error}. "
            "Check that the directory is writable."
        ) from error
    _LOGGER.info("grade_report_written", path=str(output_path), student_count=len(lines))
    return output_path
