"""
Grade Aggregator

Computes academic averages from grade records. Values keep full precision
for eligibility comparisons; only the summary is rounded for display.
"""

from typing import Dict, List, Sequence

from .contracts import GradeRecord, GradeAverages, GradeSummary
from .constants import GradeType, EXAM_BOARD_GRADE_TYPES, DISPLAY_PRECISION
from .rounding import round_half_up


def _mean(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def aggregate_grades(grade_records: Sequence[GradeRecord]) -> GradeAverages:
    """
    Compute overall, core-subject, yearly and exam-board averages.

    - overall: every record except exam-board decisions/averages
    - core subjects: records flagged is_core_subject
    - yearly: grade_type == yearly
    - exam board: grade_type in (exam_board, average)

    Empty subsets average to 0 with a count of 0.
    """
    overall: List[float] = []
    core: List[float] = []
    yearly: List[float] = []
    exam_board: List[float] = []
    distribution: Dict[str, int] = {}

    for record in grade_records:
        grade = float(record.grade)
        distribution[record.grade_type] = distribution.get(record.grade_type, 0) + 1

        if record.grade_type in EXAM_BOARD_GRADE_TYPES:
            exam_board.append(grade)
        else:
            overall.append(grade)

        if record.is_core_subject:
            core.append(grade)
        if record.grade_type == GradeType.YEARLY:
            yearly.append(grade)

    all_grades = [float(r.grade) for r in grade_records]

    return GradeAverages(
        overall=_mean(overall),
        core_subjects=_mean(core),
        yearly=_mean(yearly),
        exam_board=_mean(exam_board),
        overall_count=len(overall),
        core_count=len(core),
        yearly_count=len(yearly),
        exam_board_count=len(exam_board),
        total_count=len(all_grades),
        highest=max(all_grades) if all_grades else None,
        lowest=min(all_grades) if all_grades else None,
        distribution=distribution,
    )


def academic_average(averages: GradeAverages) -> float:
    """Overall subject average, or the exam-board average without subject grades."""
    if averages.overall_count > 0:
        return averages.overall
    return averages.exam_board


def exam_board_or_academic(averages: GradeAverages) -> float:
    """Exam-board average, or the academic average when the board has not reported."""
    if averages.exam_board_count > 0:
        return averages.exam_board
    return academic_average(averages)


def summarize(averages: GradeAverages) -> GradeSummary:
    """Round averages to 2 decimals for display."""
    return GradeSummary(
        overall=round_half_up(averages.overall, DISPLAY_PRECISION),
        core_subjects=round_half_up(averages.core_subjects, DISPLAY_PRECISION),
        yearly=round_half_up(averages.yearly, DISPLAY_PRECISION),
        exam_board=round_half_up(averages.exam_board, DISPLAY_PRECISION),
        total_grades=averages.total_count,
        highest_grade=averages.highest,
        lowest_grade=averages.lowest,
        distribution=dict(averages.distribution),
    )


def summarize_grades(grade_records: Sequence[GradeRecord]) -> GradeSummary:
    return summarize(aggregate_grades(grade_records))
