"""
Score Aggregator

Combines dimension sub-scores and eligibility components into a single
0-100 match score per career or program.
"""

import logging
from typing import List, Optional, Sequence

from .contracts import (
    NormalizedProfile,
    CareerSource,
    ProgramSource,
    ProgramContext,
    ScoredCareer,
    ScoredProgram,
)
from .constants import (
    ProgramMode,
    PROGRAM_COMPONENT_WEIGHTS,
    SCORE_MIN,
    SCORE_MAX,
)
from .dimension_scorers import (
    score_all_dimensions,
    combine_dimensions,
    score_test_average,
    score_field_bonus,
)
from .classifier import (
    classify_eligibility,
    component_score,
    best_status,
    grade_gap,
    check_required_subjects,
)
from .grade_aggregator import academic_average, exam_board_or_academic
from .reference_profiles import lookup_career_profile, lookup_program_profile
from .rounding import round_half_up, clamp

logger = logging.getLogger(__name__)


def _to_score(raw: float) -> int:
    return int(round_half_up(clamp(raw, SCORE_MIN, SCORE_MAX)))


# =============================================================================
# CAREERS
# =============================================================================

def score_career(profile: NormalizedProfile, career: CareerSource) -> ScoredCareer:
    """
    Match a profile against one career's reference profile.

    Args:
        profile: Person's normalized profile
        career: Catalog row

    Returns:
        ScoredCareer with the 0-100 score and per-dimension matches
    """
    reference = lookup_career_profile(career.name)
    matches = score_all_dimensions(profile, reference)
    return ScoredCareer(
        career=career,
        reference_bucket=reference.bucket,
        dimension_matches=matches,
        match_score=_to_score(combine_dimensions(matches.values())),
    )


def batch_score_careers(
    profile: NormalizedProfile,
    careers: Sequence[CareerSource]
) -> List[ScoredCareer]:
    return [score_career(profile, career) for career in careers]


# =============================================================================
# PROGRAMS
# =============================================================================

def score_program(context: ProgramContext, program: ProgramSource) -> Optional[ScoredProgram]:
    """
    Score one program in the context's mode.

    Returns:
        ScoredProgram, or None when the program is excluded (ladder excluded
        it in grades mode, or the score fell under the keep threshold)
    """
    reference = lookup_program_profile(program.name, program.faculty)
    minimum = program.minimum_grade if program.minimum_grade is not None else reference.minimum_grade
    required = list(program.required_subjects) or list(reference.required_subjects)
    has_required, missing = check_required_subjects(required, context.grade_records)

    base = dict(
        program=program,
        reference_bucket=reference.bucket,
        mode=context.mode,
        minimum_grade=minimum,
        required_subjects=required,
        has_required_subjects=has_required if context.grade_records else None,
        missing_subjects=missing if context.grade_records else [],
    )
    program_text = f"{program.name} {program.faculty}"

    if context.mode == ProgramMode.GRADES:
        academic = academic_average(context.averages)
        result = classify_eligibility(academic, minimum)
        if result is None:
            return None
        return ScoredProgram(
            **base,
            match_score=_to_score(result.component_score),
            eligibility_status=result.status,
            academic_average=academic,
            exam_board_average=context.averages.exam_board if context.averages.exam_board_count else None,
            grade_gap=max(result.gap, 0.0),
            meets_grade_requirement=academic >= minimum,
            components={"academic": result.component_score},
        )

    bonus, keyword = score_field_bonus(
        context.profile.strong_categories, program_text, context.field_keywords
    )

    if context.mode == ProgramMode.TESTS:
        matches = score_all_dimensions(context.profile, reference)
        profile_score = combine_dimensions(matches.values())
        score = _to_score(profile_score + bonus)
        if score < context.min_score:
            return None
        components = {name: round_half_up(m.score * 100, 2) for name, m in matches.items()}
        components["field_bonus"] = bonus
        return ScoredProgram(
            **base,
            match_score=score,
            test_average=context.test_average,
            field_keyword=keyword,
            components=components,
        )

    # Combined grades + assessments
    academic = academic_average(context.averages)
    board = exam_board_or_academic(context.averages)
    academic_component = component_score(classify_eligibility(academic, minimum))
    board_component = component_score(classify_eligibility(board, minimum))
    test_component = score_test_average(context.test_average)

    raw = (
        PROGRAM_COMPONENT_WEIGHTS["academic"] * academic_component
        + PROGRAM_COMPONENT_WEIGHTS["exam_board"] * board_component
        + PROGRAM_COMPONENT_WEIGHTS["tests"] * test_component
        + bonus
    )
    score = _to_score(raw)
    if score < context.min_score:
        return None

    status, best_average = best_status([academic, board], minimum)
    return ScoredProgram(
        **base,
        match_score=score,
        eligibility_status=status,
        academic_average=academic,
        exam_board_average=board,
        test_average=context.test_average,
        grade_gap=max(grade_gap(minimum, best_average), 0.0),
        meets_grade_requirement=best_average >= minimum,
        field_keyword=keyword,
        components={
            "academic": academic_component,
            "exam_board": board_component,
            "tests": test_component,
            "field_bonus": bonus,
        },
    )


def batch_score_programs(
    context: ProgramContext,
    programs: Sequence[ProgramSource]
) -> List[ScoredProgram]:
    """Score all programs, dropping excluded ones."""
    scored = []
    for program in programs:
        result = score_program(context, program)
        if result is None:
            logger.debug(f"Program {program.program_id} excluded in {context.mode} mode")
            continue
        scored.append(result)
    return scored
