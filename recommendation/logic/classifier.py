"""
Classifier

Classifies a grade average against a program's minimum grade:
- Eligible (meets the minimum)
- Close (within 0.5)
- Needs Improvement (within 1.0)
- Consider Alternatives (within 1.5, with an average of at least 7.0)
- Not recommended (excluded)

Also checks a person's grades against a program's required subjects.
"""

from typing import List, Optional, Sequence, Tuple

from .contracts import EligibilityResult, GradeRecord
from .constants import (
    EligibilityStatus,
    ELIGIBILITY_LADDER,
    GAP_PRECISION,
    SCORE_MIN,
    SCORE_MAX,
    SUBJECT_SYNONYMS,
)
from .reference_profiles import normalize_text
from .rounding import clamp


def grade_gap(minimum_grade: float, average_grade: float) -> float:
    """minimum - average, rounded so 8.5 - 8.0 is exactly 0.5."""
    return round(minimum_grade - average_grade, GAP_PRECISION)


def classify_eligibility(
    average_grade: float,
    minimum_grade: float
) -> Optional[EligibilityResult]:
    """
    Walk the eligibility ladder; the first matching rule wins.

    Rules are adjacent ranges, so they are evaluated strictly in order and a
    boundary gap (0.5, 1.0) lands in the tighter tier.

    Args:
        average_grade: Person's average on the program's grade scale
        minimum_grade: Program's minimum grade

    Returns:
        EligibilityResult, or None when the program should be excluded
    """
    gap = grade_gap(minimum_grade, average_grade)

    for status, max_gap, min_average, base, slope in ELIGIBILITY_LADDER:
        if gap > max_gap:
            continue
        if average_grade < min_average:
            continue
        component = clamp(base - gap * slope, SCORE_MIN, SCORE_MAX)
        return EligibilityResult(status=status, gap=gap, component_score=component)

    return None


def component_score(result: Optional[EligibilityResult]) -> float:
    """Ladder component for weighting; excluded averages contribute 0."""
    return result.component_score if result else 0.0


def best_status(
    averages: Sequence[float],
    minimum_grade: float
) -> Tuple[EligibilityStatus, float]:
    """
    Status from the ladder applied to the better of several averages.
    Falls through to consider_alternatives when even the best is excluded.

    Returns:
        (status, best average)
    """
    best = max(averages) if averages else 0.0
    result = classify_eligibility(best, minimum_grade)
    if result is None:
        return EligibilityStatus.CONSIDER_ALTERNATIVES, best
    return EligibilityStatus(result.status), best


# =============================================================================
# REQUIRED SUBJECTS
# =============================================================================

def _subject_family(name: str) -> Optional[str]:
    for key, synonyms in SUBJECT_SYNONYMS.items():
        if key in name or any(normalize_text(s) in name for s in synonyms):
            return key
    return None


def subjects_match(required: str, taken: str) -> bool:
    """Substring match either way, or both names in the same synonym family."""
    required_name = normalize_text(required).strip()
    taken_name = normalize_text(taken).strip()
    if not required_name or not taken_name:
        return False
    if required_name in taken_name or taken_name in required_name:
        return True
    family = _subject_family(required_name)
    return family is not None and family == _subject_family(taken_name)


def check_required_subjects(
    required_subjects: Sequence[str],
    grade_records: Sequence[GradeRecord]
) -> Tuple[bool, List[str]]:
    """
    Returns:
        (has every required subject, missing subjects in required order)
    """
    taken = [record.subject_name for record in grade_records if record.subject_name]
    missing = [
        subject for subject in required_subjects
        if subject and not any(subjects_match(subject, name) for name in taken)
    ]
    return not missing, missing
