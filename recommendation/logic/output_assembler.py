"""
Output Assembler

Transforms scored careers and programs into MatchResult records with
natural-language match reasons and display fields, and builds the combined
RecommendationOutput envelope.
"""

import logging
import uuid
from typing import Any, Iterable, List, Optional, Tuple

from .contracts import (
    NormalizedProfile,
    ScoredCareer,
    ScoredProgram,
    MatchResult,
    GradeSummary,
    RecommendationMeta,
    RecommendationOutput,
)
from .constants import (
    EligibilityStatus,
    ProgramMode,
    INTEREST_DISPLAY_NAMES,
    APTITUDE_DISPLAY_NAMES,
    REASON_STRONG_CATEGORY_THRESHOLD,
    REASON_TOP_INTEREST_THRESHOLD,
    EXCELLENT_FIT_THRESHOLD,
    GOOD_FIT_THRESHOLD,
    INTEREST_STRENGTH_THRESHOLD,
    GRADE_EXCESS_HIGHLIGHT,
    PROGRAM_REASON_TIERS,
    PROGRAM_REASON_DEFAULT,
    MIN_COMPLETED_ASSESSMENTS,
    DEFAULT_LANGUAGE,
    DEFAULT_TUITION_BY_TYPE,
    ANNUAL_SALARY_THRESHOLD,
    SALARY_RANGE_FACTOR,
    SALARY_NOT_SPECIFIED,
    DISPLAY_PRECISION,
)
from .rounding import round_half_up

logger = logging.getLogger(__name__)


# =============================================================================
# DISPLAY HELPERS
# =============================================================================

def format_salary(salary: Any) -> str:
    """
    Render a salary band. Values above 1000 are read as annual figures,
    smaller ones as monthly; text is passed through.
    """
    if salary is None or salary == "":
        return SALARY_NOT_SPECIFIED

    amount: Optional[float] = None
    if isinstance(salary, (int, float)) and not isinstance(salary, bool):
        amount = float(salary)
    elif isinstance(salary, str):
        try:
            amount = float(salary.strip())
        except ValueError:
            return salary.strip()

    if amount is None or amount <= 0:
        return SALARY_NOT_SPECIFIED

    upper = amount * SALARY_RANGE_FACTOR
    if amount > ANNUAL_SALARY_THRESHOLD:
        return f"{int(round_half_up(amount / 1000))}k - {int(round_half_up(upper / 1000))}k EUR/year"
    return f"{int(round_half_up(amount))} - {int(round_half_up(upper))} EUR/month"


def parse_skills(skills: Any) -> List[str]:
    """Accept a list or comma-separated text."""
    if not skills:
        return []
    if isinstance(skills, (list, tuple)):
        return [str(s).strip() for s in skills if s is not None and str(s).strip()]
    return [part.strip() for part in str(skills).split(",") if part.strip()]


def _display(value: Optional[float]) -> Optional[float]:
    return round_half_up(value, DISPLAY_PRECISION) if value is not None else None


# =============================================================================
# MATCH REASONS
# =============================================================================

def _strongest_category(profile: NormalizedProfile) -> Optional[Tuple[str, str, float]]:
    """(dimension, category, score) of the highest interest/aptitude; interests win ties."""
    best: Optional[Tuple[str, str, float]] = None
    for dimension, values in (("interest", profile.interests), ("aptitude", profile.aptitudes)):
        for category, score in values.items():
            if best is None or score > best[2]:
                best = (dimension, category, score)
    return best


def _top_interest(profile: NormalizedProfile) -> Optional[Tuple[str, float]]:
    if not profile.interests:
        return None
    category = max(profile.interests, key=profile.interests.get)
    return category, profile.interests[category]


def score_tier_sentence(match_score: int) -> str:
    if match_score >= EXCELLENT_FIT_THRESHOLD:
        return "An excellent fit for your profile"
    if match_score >= GOOD_FIT_THRESHOLD:
        return "Shows good potential for your profile"
    return "Worth considering based on your assessments"


def career_match_reason(profile: NormalizedProfile, match_score: int) -> str:
    """
    Pick the highest-signal factor: the strongest category (>= 80), then the
    top interest (>= 70), else a score-tier sentence.
    """
    strongest = _strongest_category(profile)
    if strongest and strongest[2] >= REASON_STRONG_CATEGORY_THRESHOLD:
        dimension, category, _ = strongest
        if dimension == "interest":
            return f"Matches your strong interest in {INTEREST_DISPLAY_NAMES.get(category, category)}"
        return f"Draws on your strong {APTITUDE_DISPLAY_NAMES.get(category, category)} ability"

    top = _top_interest(profile)
    if top and top[1] >= REASON_TOP_INTEREST_THRESHOLD:
        return f"Aligns with your interest in {INTEREST_DISPLAY_NAMES.get(top[0], top[0])}"

    return score_tier_sentence(match_score)


def _grade_clause(scored: ScoredProgram, average: Optional[float]) -> str:
    status = scored.eligibility_status
    minimum = scored.minimum_grade
    gap = scored.grade_gap or 0.0
    average = average or 0.0

    if status == EligibilityStatus.ELIGIBLE:
        if average - minimum >= GRADE_EXCESS_HIGHLIGHT:
            return f"Your average of {average:.1f} is well above the {minimum:.1f} requirement"
        return f"Your average of {average:.1f} meets the {minimum:.1f} requirement"
    if status == EligibilityStatus.CLOSE:
        return f"You are close: {gap:.2f} more points reach the {minimum:.1f} requirement"
    if status == EligibilityStatus.NEEDS_IMPROVEMENT:
        return f"Reachable with effort: you need {gap:.2f} more points to reach {minimum:.1f}"
    return "A longer-term goal; consider preparatory courses or programs with lower requirements"


def _program_tier_phrase(match_score: int) -> str:
    for threshold, phrase in PROGRAM_REASON_TIERS:
        if match_score >= threshold:
            return phrase
    return PROGRAM_REASON_DEFAULT


def program_match_reason(scored: ScoredProgram, profile: NormalizedProfile) -> str:
    """Reason sentence for a program, shaped by the mode it was scored in."""
    if scored.mode == ProgramMode.GRADES:
        return _grade_clause(scored, scored.academic_average)

    tier = _program_tier_phrase(scored.match_score)

    if scored.mode == ProgramMode.TESTS:
        strong = [
            INTEREST_DISPLAY_NAMES.get(category, category)
            for category, score in sorted(profile.interests.items(), key=lambda kv: -kv[1])
            if score >= INTEREST_STRENGTH_THRESHOLD
        ][:2]
        if strong:
            return f"Based on your interest in {' and '.join(strong)}, this is {tier}"
        return f"Based on your assessment profile, this is {tier}"

    best_average = max(
        (a for a in (scored.academic_average, scored.exam_board_average) if a is not None),
        default=None,
    )
    reason = f"{_grade_clause(scored, best_average)}; this is {tier}"
    if scored.field_keyword:
        reason += ", in a field that suits your strongest areas"
    return reason


# =============================================================================
# MATCH RESULTS
# =============================================================================

def assemble_career(scored: ScoredCareer, profile: NormalizedProfile) -> MatchResult:
    """Convert a ScoredCareer into a MatchResult."""
    career = scored.career
    return MatchResult(
        entity_id=career.career_id,
        title=career.name,
        kind="career",
        match_score=scored.match_score,
        match_reason=career_match_reason(profile, scored.match_score),
        category=career.category,
        description=career.description,
        salary_range=format_salary(career.average_salary),
        job_outlook=career.job_outlook or None,
        education_level=career.required_education or None,
        skills=parse_skills(career.skills),
        score_breakdown={
            name: round_half_up(match.score * 100, DISPLAY_PRECISION)
            for name, match in scored.dimension_matches.items()
            if match.has_signal
        },
    )


def assemble_program(scored: ScoredProgram, profile: NormalizedProfile) -> MatchResult:
    """Convert a ScoredProgram into a MatchResult."""
    program = scored.program
    university_type = (program.university_type or "public").lower()
    tuition = program.tuition_fee
    if tuition is None:
        tuition = DEFAULT_TUITION_BY_TYPE.get(university_type, 0.0)

    return MatchResult(
        entity_id=program.program_id,
        title=program.name,
        kind="program",
        match_score=scored.match_score,
        match_reason=program_match_reason(scored, profile),
        category=program.faculty or scored.reference_bucket,
        eligibility_status=scored.eligibility_status,
        description=program.description,
        university_id=program.university_id,
        university_name=program.university_name or None,
        university_type=university_type,
        faculty=program.faculty or None,
        location=program.location or None,
        duration_years=program.duration_years,
        tuition_fee=tuition,
        language=program.language or DEFAULT_LANGUAGE,
        minimum_grade=scored.minimum_grade,
        user_average=_display(scored.academic_average),
        exam_board_average=_display(scored.exam_board_average),
        test_average=_display(scored.test_average),
        grade_gap=_display(scored.grade_gap),
        meets_grade_requirement=scored.meets_grade_requirement,
        has_required_subjects=scored.has_required_subjects,
        missing_subjects=list(scored.missing_subjects),
        score_breakdown={k: round_half_up(v, DISPLAY_PRECISION) for k, v in scored.components.items()},
    )


def assemble_careers(scored: Iterable[ScoredCareer], profile: NormalizedProfile) -> List[MatchResult]:
    return [assemble_career(s, profile) for s in scored]


def assemble_programs(scored: Iterable[ScoredProgram], profile: NormalizedProfile) -> List[MatchResult]:
    return [assemble_program(s, profile) for s in scored]


# =============================================================================
# ENVELOPE
# =============================================================================

def generate_warnings(
    meta: RecommendationMeta,
    requested_mode: Optional[str] = None,
    min_assessments: int = MIN_COMPLETED_ASSESSMENTS,
    include_careers: bool = True,
    include_programs: bool = True
) -> List[str]:
    """User-facing notes about missing data or degraded results."""
    warnings = []

    if include_careers and meta.completed_assessments < min_assessments:
        remaining = min_assessments - meta.completed_assessments
        warnings.append(
            f"Complete {remaining} more assessment(s) to unlock personalized career recommendations."
        )

    if include_programs and meta.grade_count == 0:
        warnings.append("Add your grades to receive university program recommendations.")

    if include_programs and requested_mode and meta.program_mode and requested_mode != meta.program_mode:
        warnings.append(
            f"Program matching used '{meta.program_mode}' mode because there were not enough completed assessments."
        )

    if meta.careers_from_fallback:
        warnings.append("Showing general career suggestions while personalized matches are unavailable.")

    if meta.programs_from_fallback:
        warnings.append("Showing popular programs while the program catalog is unavailable.")

    return warnings


def assemble_output(
    careers: List[MatchResult],
    programs: List[MatchResult],
    grade_summary: GradeSummary,
    meta: RecommendationMeta,
    profile: Optional[NormalizedProfile] = None,
    user_id: Optional[str] = None,
    requested_mode: Optional[str] = None,
    min_assessments: int = MIN_COMPLETED_ASSESSMENTS,
    include_careers: bool = True,
    include_programs: bool = True
) -> RecommendationOutput:
    """
    Assemble the final RecommendationOutput.

    Args:
        careers: Ranked career results
        programs: Ranked program results
        grade_summary: Display grade averages
        meta: Processing metadata
        profile: Profile the matches were computed from
        user_id: Caller's user identifier, if any
        requested_mode: Program mode the caller asked for
        min_assessments: Assessments needed for personalized careers
        include_careers: Whether careers were requested
        include_programs: Whether programs were requested

    Returns:
        Complete RecommendationOutput
    """
    warnings = generate_warnings(meta, requested_mode, min_assessments, include_careers, include_programs)
    for warning in warnings:
        logger.info(f"ℹ️ {warning}")

    return RecommendationOutput(
        request_id=str(uuid.uuid4()),
        user_id=user_id,
        careers=careers,
        programs=programs,
        grade_summary=grade_summary,
        profile=profile,
        meta=meta,
        warnings=warnings,
    )
