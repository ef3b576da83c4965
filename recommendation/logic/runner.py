"""
Engine Runner

Orchestrates the recommendation pipeline for one person:
1. Fetches assessment results, grades and catalogs from a RecordSource
2. Transforms rows via adapter
3. Runs recommendation engine
4. Returns the recommendation envelope

This is a pure orchestration layer - NO scoring, NO storage queries, NO business logic.
"""

import logging
import time
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence

from .adapter import transform_test_results, transform_grades, transform_careers, transform_programs
from .config import EngineSettings, load_settings
from .constants import ProgramMode
from .contracts import RecommendationOutput
from .engine import RecommendationEngine

logger = logging.getLogger(__name__)

Row = Dict[str, Any]

KIND_ALL = "all"
KIND_CAREERS = "careers"
KIND_PROGRAMS = "programs"
RECOMMENDATION_KINDS = (KIND_ALL, KIND_CAREERS, KIND_PROGRAMS)


class RecordSource(Protocol):
    """Persistence collaborator that supplies raw rows for one person and the catalogs."""

    def fetch_test_results(self, user_id: str) -> Sequence[Row]:
        ...

    def fetch_grades(self, user_id: str) -> Sequence[Row]:
        ...

    def fetch_careers(self) -> Sequence[Row]:
        ...

    def fetch_programs(self) -> Sequence[Row]:
        ...


class InMemoryRecordSource:
    """RecordSource backed by plain lists, keyed by user id."""

    def __init__(
        self,
        test_results: Optional[Dict[str, List[Row]]] = None,
        grades: Optional[Dict[str, List[Row]]] = None,
        careers: Optional[List[Row]] = None,
        programs: Optional[List[Row]] = None
    ):
        self.test_results = test_results or {}
        self.grades = grades or {}
        self.careers = careers or []
        self.programs = programs or []

    def fetch_test_results(self, user_id: str) -> Sequence[Row]:
        return list(self.test_results.get(user_id, []))

    def fetch_grades(self, user_id: str) -> Sequence[Row]:
        return list(self.grades.get(user_id, []))

    def fetch_careers(self) -> Sequence[Row]:
        return list(self.careers)

    def fetch_programs(self) -> Sequence[Row]:
        return list(self.programs)


def _fetch(fetch: Callable[[], Sequence[Row]], label: str) -> Optional[Sequence[Row]]:
    """Call a source method; a failure is logged and reported as None."""
    try:
        rows = fetch()
    except Exception as e:
        logger.warning(f"⚠️ Failed to fetch {label}: {e}")
        return None
    logger.info(f"📦 {label} fetched: {len(rows or [])}")
    return rows


def run_recommendations(
    source: RecordSource,
    user_id: str,
    kind: str = KIND_ALL,
    mode: str = ProgramMode.BOTH.value,
    settings: Optional[EngineSettings] = None
) -> RecommendationOutput:
    """
    Main entry point: run full recommendation pipeline for one person.

    Args:
        source: Where rows come from
        user_id: Person to recommend for
        kind: "all", "careers" or "programs"
        mode: Program matching mode ("grades", "tests", "both")
        settings: Engine settings (read from the environment when None)

    Returns:
        RecommendationOutput; failed catalog fetches degrade to fallback lists,
        failed user-data fetches are treated as no data
    """
    if kind not in RECOMMENDATION_KINDS:
        raise ValueError(f"kind must be one of {RECOMMENDATION_KINDS}, got {kind!r}")

    include_careers = kind in (KIND_ALL, KIND_CAREERS)
    include_programs = kind in (KIND_ALL, KIND_PROGRAMS)

    logger.info(f"🚀 Starting recommendation pipeline for user: {user_id} (kind={kind}, mode={mode})")
    start_time = time.perf_counter()

    # Step 1: Fetch and transform user data
    test_results = transform_test_results(
        _fetch(lambda: source.fetch_test_results(user_id), "assessment results") or []
    )
    grade_records = transform_grades(_fetch(lambda: source.fetch_grades(user_id), "grades") or [])

    # Step 2: Fetch and transform catalogs (None lets the engine fall back)
    career_catalog = None
    if include_careers:
        rows = _fetch(source.fetch_careers, "careers")
        career_catalog = transform_careers(rows) if rows is not None else None

    program_catalog = None
    if include_programs:
        rows = _fetch(source.fetch_programs, "programs")
        program_catalog = transform_programs(rows) if rows is not None else None

    # Step 3: Run engine
    engine = RecommendationEngine(settings or load_settings())
    output = engine.recommend(
        test_results=test_results,
        grade_records=grade_records,
        career_catalog=career_catalog,
        program_catalog=program_catalog,
        mode=mode,
        user_id=user_id,
        include_careers=include_careers,
        include_programs=include_programs,
    )

    elapsed = (time.perf_counter() - start_time) * 1000
    logger.info(
        f"✨ Recommendation pipeline complete ({elapsed:.2f}ms): "
        f"{len(output.careers)} careers, {len(output.programs)} programs, {len(output.warnings)} warnings"
    )
    return output
