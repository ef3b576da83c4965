"""
Recommendation Engine

Main orchestrator that combines all matching components into a single pipeline.
This is the primary entry point for career and program recommendations.

The engine never raises to its caller for data problems: missing assessments,
malformed records and unavailable catalogs degrade to smaller, empty or
fallback results.
"""

import logging
import time
from typing import List, Optional, Sequence, Tuple

from .contracts import (
    TestAnswerSet,
    GradeRecord,
    CareerSource,
    ProgramSource,
    NormalizedProfile,
    ProgramContext,
    MatchResult,
    GradeSummary,
    RecommendationMeta,
    RecommendationOutput,
)
from .constants import ProgramMode, ENGINE_VERSION
from .config import EngineSettings
from .errors import InsufficientDataError, CatalogUnavailableError
from .profile_extractor import extract_profile, count_completed_assessments, mean_test_score
from .grade_aggregator import aggregate_grades, summarize
from .aggregator import batch_score_careers, batch_score_programs
from .ranker import select_careers, select_programs
from .output_assembler import assemble_careers, assemble_programs, assemble_output
from .fallback import fallback_careers, fallback_programs

logger = logging.getLogger(__name__)


class RecommendationEngine:
    """
    Main recommendation engine that orchestrates the matching pipeline.

    Pipeline flow:
    1. Profile Extraction - Answer sets -> normalized category scores
    2. Grade Aggregation - Grade records -> averages
    3. Reference Lookup - Career/program name -> target profile
    4. Scoring - Weighted dimension match / eligibility ladder
    5. Ranking - Threshold filter, stable sort, truncate
    6. Output Assembly - Match reasons and display fields
    """

    def __init__(self, settings: Optional[EngineSettings] = None):
        """
        Initialize the recommendation engine.

        Args:
            settings: Optional engine settings. If None, uses built-in defaults.
        """
        self.settings = settings or EngineSettings()
        self.version = ENGINE_VERSION

    # =========================================================================
    # CAREERS
    # =========================================================================

    def match_careers(
        self,
        test_results: Sequence[TestAnswerSet],
        career_catalog: Optional[Sequence[CareerSource]],
        limit: Optional[int] = None
    ) -> List[MatchResult]:
        """
        Rank careers against the person's assessment profile.

        Args:
            test_results: Completed assessments
            career_catalog: Career rows (None or empty triggers the fallback list)
            limit: Number of careers to return (clamped to 8-12, default 10)

        Returns:
            Ranked MatchResult list; the fallback list when data is insufficient
        """
        results, _, _ = self._match_careers(test_results, career_catalog, limit)
        return results

    def _match_careers(
        self,
        test_results: Sequence[TestAnswerSet],
        career_catalog: Optional[Sequence[CareerSource]],
        limit: Optional[int],
        profile: Optional[NormalizedProfile] = None
    ) -> Tuple[List[MatchResult], NormalizedProfile, bool]:
        limit = limit or self.settings.career_limit
        if profile is None:
            profile = extract_profile(test_results or [])

        try:
            self._require_assessments(profile.completed_assessments)
            careers = self._require_catalog(career_catalog, "career")

            scored = batch_score_careers(profile, careers)
            selected = select_careers(
                scored,
                limit=limit,
                min_score=self.settings.career_min_score,
                relaxed_min_score=self.settings.career_relaxed_min_score,
            )
            if not selected:
                raise InsufficientDataError(
                    f"no career reached {self.settings.career_relaxed_min_score}",
                    required=1,
                    available=0,
                )

            logger.info(f"🏆 Careers matched: {len(selected)} of {len(careers)}")
            return assemble_careers(selected, profile), profile, False

        except InsufficientDataError as e:
            logger.info(f"ℹ️ Career matching needs more data ({e}); using fallback careers")
        except CatalogUnavailableError as e:
            logger.warning(f"⚠️ Degraded mode: {e}; using fallback careers")

        return fallback_careers(limit), profile, True

    # =========================================================================
    # PROGRAMS
    # =========================================================================

    def match_programs(
        self,
        grade_records: Sequence[GradeRecord],
        test_results: Sequence[TestAnswerSet],
        program_catalog: Optional[Sequence[ProgramSource]],
        mode: str = ProgramMode.BOTH.value,
        limit: Optional[int] = None
    ) -> List[MatchResult]:
        """
        Rank university programs by grades, assessments, or both.

        Args:
            grade_records: Person's grades
            test_results: Completed assessments
            program_catalog: Program rows (None or empty triggers the fallback list)
            mode: "grades", "tests" or "both"; tests-based modes switch to
                "grades" with fewer than the required completed assessments;
                an unknown mode is logged and treated as "grades"
            limit: Optional cap on returned programs

        Returns:
            Ranked MatchResult list; empty when there are no grades to match on
        """
        results, _, _, _ = self._match_programs(grade_records, test_results, program_catalog, mode, limit)
        return results

    @staticmethod
    def coerce_program_mode(mode: str) -> str:
        """Known mode value; anything else is logged and treated as grades."""
        try:
            return ProgramMode(mode).value
        except ValueError:
            logger.warning(f"⚠️ Unknown program mode {mode!r}; using '{ProgramMode.GRADES.value}'")
            return ProgramMode.GRADES.value

    def resolve_program_mode(self, mode: str, completed_assessments: int) -> str:
        """Fall back to grades-only matching without enough assessments."""
        requested = ProgramMode(self.coerce_program_mode(mode))
        if requested != ProgramMode.GRADES and completed_assessments < self.settings.min_completed_assessments:
            return ProgramMode.GRADES.value
        return requested.value

    def _match_programs(
        self,
        grade_records: Sequence[GradeRecord],
        test_results: Sequence[TestAnswerSet],
        program_catalog: Optional[Sequence[ProgramSource]],
        mode: str,
        limit: Optional[int],
        profile: Optional[NormalizedProfile] = None
    ) -> Tuple[List[MatchResult], str, bool, NormalizedProfile]:
        grade_records = list(grade_records or [])
        if profile is None:
            profile = extract_profile(test_results or [])
        mode = self.coerce_program_mode(mode)
        effective_mode = self.resolve_program_mode(mode, profile.completed_assessments)

        if effective_mode != mode:
            logger.info(
                f"ℹ️ Program mode '{mode}' needs {self.settings.min_completed_assessments} assessments "
                f"({profile.completed_assessments} completed); using '{effective_mode}'"
            )

        try:
            programs = self._require_catalog(program_catalog, "program")
        except CatalogUnavailableError as e:
            logger.warning(f"⚠️ Degraded mode: {e}; using fallback programs")
            return fallback_programs(limit), effective_mode, True, profile

        try:
            if effective_mode != ProgramMode.TESTS and not grade_records:
                raise InsufficientDataError("no grade records", required=1, available=0)
        except InsufficientDataError as e:
            logger.info(f"ℹ️ Program matching skipped: {e}")
            return [], effective_mode, False, profile

        context = ProgramContext(
            mode=effective_mode,
            averages=aggregate_grades(grade_records),
            grade_records=grade_records,
            profile=profile,
            test_average=mean_test_score(profile),
            field_keywords=self.settings.field_keywords,
            min_score=self.settings.program_min_score,
        )

        scored = batch_score_programs(context, programs)
        ranked = select_programs(scored, limit)
        logger.info(f"🎓 Programs matched ({effective_mode}): {len(ranked)} of {len(programs)}")
        return assemble_programs(ranked, profile), effective_mode, False, profile

    # =========================================================================
    # GRADES
    # =========================================================================

    def summarize_grades(self, grade_records: Sequence[GradeRecord]) -> GradeSummary:
        """Overall, core-subject, yearly and exam-board averages (2 decimals)."""
        return summarize(aggregate_grades(grade_records or []))

    # =========================================================================
    # COMBINED
    # =========================================================================

    def recommend(
        self,
        test_results: Sequence[TestAnswerSet],
        grade_records: Sequence[GradeRecord],
        career_catalog: Optional[Sequence[CareerSource]],
        program_catalog: Optional[Sequence[ProgramSource]],
        mode: str = ProgramMode.BOTH.value,
        career_limit: Optional[int] = None,
        program_limit: Optional[int] = None,
        user_id: Optional[str] = None,
        include_careers: bool = True,
        include_programs: bool = True
    ) -> RecommendationOutput:
        """
        Careers, programs and the grade summary in one envelope.

        Args:
            include_careers: Set False to skip career matching entirely
            include_programs: Set False to skip program matching entirely

        Returns:
            RecommendationOutput with warnings for missing data and
            degraded-mode results
        """
        start_time = time.perf_counter()
        mode = self.coerce_program_mode(mode)
        test_results = list(test_results or [])
        grade_records = list(grade_records or [])

        profile = extract_profile(test_results)
        careers, careers_fallback = [], False
        programs, programs_fallback = [], False
        effective_mode = self.resolve_program_mode(mode, profile.completed_assessments)

        if include_careers:
            careers, profile, careers_fallback = self._match_careers(
                test_results, career_catalog, career_limit, profile=profile
            )
        if include_programs:
            programs, effective_mode, programs_fallback, _ = self._match_programs(
                grade_records, test_results, program_catalog, mode, program_limit, profile=profile
            )

        completed = count_completed_assessments(test_results)
        processing_time = (time.perf_counter() - start_time) * 1000

        meta = RecommendationMeta(
            completed_assessments=completed,
            grade_count=len(grade_records),
            can_get_career_recommendations=completed >= self.settings.min_completed_assessments,
            can_get_program_recommendations=len(grade_records) > 0,
            program_mode=effective_mode,
            careers_from_fallback=careers_fallback,
            programs_from_fallback=programs_fallback,
            processing_time_ms=round(processing_time, 2),
            engine_version=self.version,
        )

        return assemble_output(
            careers=careers,
            programs=programs,
            grade_summary=self.summarize_grades(grade_records),
            meta=meta,
            profile=profile,
            user_id=user_id,
            requested_mode=mode,
            min_assessments=self.settings.min_completed_assessments,
            include_careers=include_careers,
            include_programs=include_programs,
        )

    # =========================================================================
    # GUARDS
    # =========================================================================

    def _require_assessments(self, completed: int) -> None:
        required = self.settings.min_completed_assessments
        if completed < required:
            raise InsufficientDataError(
                f"{completed} of {required} assessments completed",
                required=required,
                available=completed,
            )

    @staticmethod
    def _require_catalog(catalog, name: str) -> list:
        if not catalog:
            raise CatalogUnavailableError(name)
        return list(catalog)


# Convenience functions for simple usage
def match_careers(
    test_results: Sequence[TestAnswerSet],
    career_catalog: Optional[Sequence[CareerSource]],
    limit: Optional[int] = None
) -> List[MatchResult]:
    return RecommendationEngine().match_careers(test_results, career_catalog, limit)


def match_programs(
    grade_records: Sequence[GradeRecord],
    test_results: Sequence[TestAnswerSet],
    program_catalog: Optional[Sequence[ProgramSource]],
    mode: str = ProgramMode.BOTH.value,
    limit: Optional[int] = None
) -> List[MatchResult]:
    return RecommendationEngine().match_programs(grade_records, test_results, program_catalog, mode, limit)


def summarize_grades(grade_records: Sequence[GradeRecord]) -> GradeSummary:
    return RecommendationEngine().summarize_grades(grade_records)


def get_recommendations(
    test_results: Sequence[TestAnswerSet],
    grade_records: Sequence[GradeRecord],
    career_catalog: Optional[Sequence[CareerSource]],
    program_catalog: Optional[Sequence[ProgramSource]],
    mode: str = ProgramMode.BOTH.value,
    settings: Optional[EngineSettings] = None
) -> RecommendationOutput:
    """
    Convenience function to get combined recommendations.

    Args:
        test_results: Completed assessments
        grade_records: Person's grades
        career_catalog: Career rows
        program_catalog: Program rows
        mode: Program matching mode
        settings: Optional engine settings

    Returns:
        RecommendationOutput
    """
    engine = RecommendationEngine(settings)
    return engine.recommend(test_results, grade_records, career_catalog, program_catalog, mode=mode)
