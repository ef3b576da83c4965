"""
Data Adapter for Recommendation Engine

Transforms host rows (assessment results, grades, careers, programs) into the
engine's contracts. Rows may use snake_case keys or the uppercase storage
column names, and JSON-encoded payloads are decoded.

This is a pure TRANSFORM layer:
- NO scoring logic
- NO ranking/classification
- NO storage access
"""

import json
import logging
import math
from datetime import date, datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar

from .contracts import TestAnswerSet, GradeRecord, CareerSource, ProgramSource
from .constants import TestCategory, GradeType, GRADE_TYPE_ALIASES
from .errors import MalformedRecordError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Words in a stored test type that identify its category
TEST_CATEGORY_HINTS = (
    (TestCategory.PERSONALITY.value, ("personality", "personalitet", "big five", "big5")),
    (TestCategory.INTEREST.value, ("interest", "interes", "riasec", "holland")),
    (TestCategory.APTITUDE.value, ("aptitude", "skill", "aftesi", "ability")),
)

TRUE_WORDS = {"1", "true", "yes", "y", "po"}


def _safe_get(data: Optional[Dict], *keys, default=None):
    """
    Return the first non-empty value among keys, trying each key as given
    and in upper case.
    """
    if data is None:
        return default
    for key in keys:
        for candidate in (key, key.upper()):
            value = data.get(candidate)
            if value is not None and value != "":
                return value
    return default


def _parse_date(date_str: Any) -> Optional[datetime]:
    """Parse date string to datetime object."""
    if not date_str:
        return None
    if isinstance(date_str, datetime):
        return date_str
    if isinstance(date_str, date):
        return datetime(date_str.year, date_str.month, date_str.day)
    text = str(date_str).strip()
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    # Try common formats
    for fmt in ["%Y-%m-%d %H:%M:%S", "%Y/%m/%d", "%d-%m-%Y", "%d/%m/%Y", "%d.%m.%Y"]:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def _parse_json(value: Any, record_id: Any = None) -> Any:
    """Decode JSON text; other values pass through."""
    if not isinstance(value, str):
        return value
    text = value.strip()
    if not text:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedRecordError(f"invalid JSON payload: {e.msg}", record_id=record_id)


def _parse_list(value: Any) -> List[str]:
    """A list, a JSON array, or comma-separated text."""
    if value is None or value == "":
        return []
    if isinstance(value, str):
        text = value.strip()
        if text.startswith("["):
            try:
                value = json.loads(text)
            except json.JSONDecodeError:
                value = text.strip("[]")
        else:
            value = text
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, (list, tuple)):
        return [str(item).strip() for item in value if item is not None and str(item).strip()]
    return [str(value)]


def _to_float(value: Any, field: str, record_id: Any = None) -> Optional[float]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise MalformedRecordError(f"{field} must be a number", record_id=record_id)
    try:
        number = float(str(value).replace(",", ".")) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        raise MalformedRecordError(f"{field} is not a number: {value!r}", record_id=record_id)
    if not math.isfinite(number):
        raise MalformedRecordError(f"{field} is not finite: {value!r}", record_id=record_id)
    return number


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in TRUE_WORDS
    return bool(value)


def normalize_test_category(raw: Any) -> str:
    """Map a stored test type ("Interest (RIASEC)", "skills", ...) to a TestCategory value."""
    if not raw:
        return TestCategory.GENERIC.value
    text = str(raw).strip().lower()
    for category, hints in TEST_CATEGORY_HINTS:
        if any(hint in text for hint in hints):
            return category
    return TestCategory.GENERIC.value


def normalize_grade_type(raw: Any) -> str:
    """Map a stored grade type, including legacy spellings, to a GradeType value."""
    if not raw:
        return GradeType.SUBJECT.value
    text = str(raw).strip().lower()
    text = GRADE_TYPE_ALIASES.get(text, text)
    try:
        return GradeType(text).value
    except ValueError:
        raise MalformedRecordError(f"unknown grade type {raw!r}")


# =============================================================================
# ROW TRANSFORMS
# =============================================================================

def _require_mapping(value: Any, field: str, record_id: Any = None) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise MalformedRecordError(f"{field} must be an object", record_id=record_id)
    return value


def normalize_category_score(score: float) -> float:
    """Stored category scores onto 0-100: 0-1 is a fraction, up to 5 a Likert mean."""
    if 0 <= score <= 1:
        return score * 100
    if 0 <= score <= 5:
        return score * 20
    return max(0.0, min(100.0, score))


def _category_scores(value: Any, record_id: Any = None) -> Dict[str, float]:
    """Lowercased, normalized {category: score}; non-numeric entries are dropped."""
    scores = {}
    for category, raw in _require_mapping(value, "scores", record_id).items():
        if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
            continue
        try:
            score = _to_float(raw, "category score", record_id)
        except MalformedRecordError:
            continue
        if score is not None:
            scores[str(category).strip().lower()] = normalize_category_score(score)
    return scores


def _overall_score(row: Dict[str, Any], details: Dict[str, Any], record_id: Any = None) -> Optional[float]:
    """
    Overall 0-100 score for an assessment.

    RESULT_DETAILS.overallScore wins. With category scores stored, the
    overall score is left to their mean. The SCORE column holds the sum of the
    category scores, so it is only used when it already lies within 0-100.
    """
    overall = _safe_get(details, "overallScore", "overall_score")
    if overall is not None:
        try:
            value = _to_float(overall, "overall score", record_id)
            return max(0.0, min(100.0, value))
        except MalformedRecordError as e:
            logger.warning(f"⚠️ Ignoring overall score of assessment {record_id}: {e.reason}")

    stored = _safe_get(row, "score", "total_score")
    if stored is None or details.get("scores") is not None:
        return None
    try:
        value = _to_float(stored, "score", record_id)
    except MalformedRecordError as e:
        logger.warning(f"⚠️ Ignoring stored score of assessment {record_id}: {e.reason}")
        return None
    if not 0 <= value <= 100:
        logger.debug(f"Stored score {value} of assessment {record_id} is an aggregate; ignored")
        return None
    return value


def transform_test_result(row: Dict[str, Any]) -> TestAnswerSet:
    """
    Transform a stored assessment result into a TestAnswerSet.

    RESULT_DETAILS may be a flat {question_id: answer} map or an object with
    "answers", "weights", "categories" and "scores" maps. Without a
    per-question category map, "scores" become the set's category scores.

    Raises:
        MalformedRecordError: missing id, undecodable payload, or a map field
            that is not an object
    """
    test_id = _safe_get(row, "test_id", "test_result_id", "id")
    if test_id is None:
        raise MalformedRecordError("assessment result has no test id")

    details = _parse_json(_safe_get(row, "result_details", "answers", default={}), record_id=test_id) or {}
    if not isinstance(details, dict):
        raise MalformedRecordError("result details must be an object", record_id=test_id)

    category_scores: Dict[str, float] = {}
    if isinstance(details.get("answers"), dict) or "scores" in details:
        answers = details.get("answers") if isinstance(details.get("answers"), dict) else {}
        weights = _require_mapping(details.get("weights"), "weights", test_id)
        categories = _require_mapping(details.get("categories"), "categories", test_id)
        if not categories and details.get("scores") is not None:
            category_scores = _category_scores(details["scores"], test_id)
    else:
        answers = details
        weights = _require_mapping(
            _parse_json(_safe_get(row, "weights"), record_id=test_id), "weights", test_id
        )
        categories = _require_mapping(
            _parse_json(_safe_get(row, "categories"), record_id=test_id), "categories", test_id
        )

    try:
        return TestAnswerSet(
            test_id=test_id,
            test_name=str(_safe_get(row, "test_name", "name", default="")),
            test_category=normalize_test_category(_safe_get(row, "test_category", "test_type", "type")),
            answers={str(k): v for k, v in answers.items()},
            weights={
                str(k): float(v) for k, v in weights.items()
                if isinstance(v, (int, float)) and not isinstance(v, bool)
            },
            categories={str(k): str(v) for k, v in categories.items() if v},
            category_scores=category_scores,
            score=_overall_score(row, details, record_id=test_id),
            completed_at=_parse_date(_safe_get(row, "completed_at", "created_at")),
        )
    except ValueError as e:
        raise MalformedRecordError(str(e), record_id=test_id)


def transform_grade(row: Dict[str, Any]) -> GradeRecord:
    """
    Transform a stored grade row into a GradeRecord.

    Raises:
        MalformedRecordError: missing/non-numeric grade, unknown type, or out of range
    """
    record_id = _safe_get(row, "grade_id", "id")
    grade = _to_float(_safe_get(row, "grade", "value"), "grade", record_id=record_id)
    if grade is None:
        raise MalformedRecordError("grade row has no grade", record_id=record_id)

    try:
        grade_type = normalize_grade_type(_safe_get(row, "grade_type", "type"))
    except MalformedRecordError as e:
        raise MalformedRecordError(e.reason, record_id=record_id)

    year = _safe_get(row, "year_taken", "year")
    try:
        return GradeRecord(
            subject_name=str(_safe_get(row, "subject_name", "subject", default="")),
            grade=grade,
            grade_type=grade_type,
            is_core_subject=_to_bool(_safe_get(row, "is_core_subject", "is_matura_subject", default=False)),
            year_taken=int(year) if year is not None else None,
        )
    except ValueError as e:
        raise MalformedRecordError(str(e), record_id=record_id)


def transform_career(row: Dict[str, Any]) -> CareerSource:
    """Transform a career catalog row into a CareerSource."""
    career_id = _safe_get(row, "career_id", "id")
    name = _safe_get(row, "name", "career_name", "title")
    if career_id is None or not name:
        raise MalformedRecordError("career row needs an id and a name", record_id=career_id)

    salary = _safe_get(row, "average_salary", "salary")
    try:
        return CareerSource(
            career_id=career_id,
            name=str(name),
            category=str(_safe_get(row, "category", "career_category", default="")),
            description=str(_safe_get(row, "description", default="")),
            average_salary=salary,
            job_outlook=str(_safe_get(row, "job_outlook", "outlook", default="")),
            required_education=str(_safe_get(row, "required_education", "education_level", default="")),
            skills=_parse_list(_safe_get(row, "skills", "skills_required")),
        )
    except ValueError as e:
        raise MalformedRecordError(str(e), record_id=career_id)


def transform_program(row: Dict[str, Any]) -> ProgramSource:
    """
    Transform a university program row into a ProgramSource.

    Args:
        row: Program row, optionally joined with its university columns

    Returns:
        ProgramSource ready for the recommendation engine
    """
    program_id = _safe_get(row, "program_id", "id")
    name = _safe_get(row, "name", "program_name")
    if program_id is None or not name:
        raise MalformedRecordError("program row needs an id and a name", record_id=program_id)

    try:
        return ProgramSource(
            program_id=program_id,
            name=str(name),
            university_id=_safe_get(row, "university_id"),
            university_name=str(_safe_get(row, "university_name", "university", default="")),
            university_type=str(_safe_get(row, "university_type", default="public")).lower(),
            faculty=str(_safe_get(row, "faculty", "faculty_name", default="")),
            location=str(_safe_get(row, "location", "city", default="")),
            description=str(_safe_get(row, "description", default="")),
            duration_years=_to_float(_safe_get(row, "duration_years", "duration"), "duration", program_id),
            minimum_grade=_to_float(_safe_get(row, "minimum_grade", "min_grade"), "minimum grade", program_id),
            required_subjects=_parse_list(_safe_get(row, "required_subjects")),
            tuition_fee=_to_float(_safe_get(row, "tuition_fee", "tuition"), "tuition", program_id),
            language=_safe_get(row, "language"),
        )
    except ValueError as e:
        raise MalformedRecordError(str(e), record_id=program_id)


# =============================================================================
# BATCH TRANSFORMS
# =============================================================================

def _transform_all(rows: Optional[Iterable[Any]], transform: Callable[[Dict[str, Any]], T], label: str) -> List[T]:
    """Transform every row, logging and skipping the malformed ones."""
    if not rows:
        return []

    results = []
    skipped = 0
    for row in rows:
        if not isinstance(row, dict):
            logger.warning(f"⚠️ Skipping {label} row of type {type(row).__name__}")
            skipped += 1
            continue
        try:
            results.append(transform(row))
        except MalformedRecordError as e:
            logger.warning(f"⚠️ Skipping malformed {label} {e.record_id or ''}: {e.reason}")
            skipped += 1

    if skipped:
        logger.info(f"📊 {label}: {len(results)} transformed, {skipped} skipped")
    return results


def transform_test_results(rows: Optional[Iterable[Dict[str, Any]]]) -> List[TestAnswerSet]:
    return _transform_all(rows, transform_test_result, "assessment result")


def transform_grades(rows: Optional[Iterable[Dict[str, Any]]]) -> List[GradeRecord]:
    return _transform_all(rows, transform_grade, "grade")


def transform_careers(rows: Optional[Iterable[Dict[str, Any]]]) -> List[CareerSource]:
    return _transform_all(rows, transform_career, "career")


def transform_programs(rows: Optional[Iterable[Dict[str, Any]]]) -> List[ProgramSource]:
    return _transform_all(rows, transform_program, "program")
