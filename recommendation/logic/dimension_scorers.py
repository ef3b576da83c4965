"""
Dimension Scorers

Individual scoring functions for each matching dimension.
Interest and personality sub-scores lie in [0, 1]; the aptitude sub-score may
reach 1.5 when a person exceeds the required levels. A dimension the person
has no data for is reported without signal and a neutral 0.5.
All logic is deterministic.
"""

from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple

from .contracts import NormalizedProfile, ReferenceProfile, DimensionMatch
from .constants import (
    CAREER_DIMENSION_WEIGHTS,
    NEUTRAL_SUBSCORE,
    APTITUDE_OVERSHOOT_CAP,
    PERSONALITY_DISTANCE_SCALE,
    LIKERT_TO_PERCENT,
    SCORE_MIN,
    SCORE_MAX,
    TEST_AVERAGE_STEPS,
    TEST_AVERAGE_FLOOR,
    FIELD_MATCH_BONUS,
)
from .reference_profiles import normalize_text, keyword_matches
from .rounding import clamp


def score_interest_match(
    interests: Mapping[str, float],
    reference: ReferenceProfile
) -> DimensionMatch:
    """
    Weighted agreement between a person's interests and the reference weights.

    Sum of user/100 * weight/100 over categories present on both sides,
    divided by the sum of the weights used.
    """
    weight = CAREER_DIMENSION_WEIGHTS["interest"]
    if not interests:
        return DimensionMatch(dimension="interest", score=NEUTRAL_SUBSCORE, weight=weight, has_signal=False)

    matched = 0.0
    total_weight = 0.0
    for category, ref_weight in reference.interest_weights.items():
        if category not in interests or ref_weight <= 0:
            continue
        matched += (interests[category] / 100) * (ref_weight / 100)
        total_weight += ref_weight / 100

    score = matched / total_weight if total_weight > 0 else NEUTRAL_SUBSCORE
    return DimensionMatch(dimension="interest", score=score, weight=weight)


def score_aptitude_match(
    aptitudes: Mapping[str, float],
    reference: ReferenceProfile
) -> DimensionMatch:
    """
    Credit each required aptitude by user/required (capped at 1.5),
    weighted by the required level.
    """
    weight = CAREER_DIMENSION_WEIGHTS["aptitude"]
    if not aptitudes:
        return DimensionMatch(dimension="aptitude", score=NEUTRAL_SUBSCORE, weight=weight, has_signal=False)

    matched = 0.0
    total_required = 0.0
    for category, required in reference.aptitude_requirements.items():
        user_score = aptitudes.get(category, 0.0)
        if required <= 0 or user_score <= 0:
            continue
        matched += min(user_score / required, APTITUDE_OVERSHOOT_CAP) * required
        total_required += required

    score = matched / total_required if total_required > 0 else NEUTRAL_SUBSCORE
    return DimensionMatch(dimension="aptitude", score=score, weight=weight)


def trait_distance(value: float, ideal_range: Tuple[float, float]) -> float:
    """Distance from the ideal range; 0 inside it."""
    low, high = ideal_range
    if value < low:
        return low - value
    if value > high:
        return value - high
    return 0.0


def score_personality_match(
    personality: Mapping[str, float],
    reference: ReferenceProfile
) -> DimensionMatch:
    """
    Average closeness of each trait to its ideal range.

    The profile stores traits on 0-100; ideal ranges are on the 1-5 Likert
    scale, so traits are divided by 20 before comparing.
    """
    weight = CAREER_DIMENSION_WEIGHTS["personality"]
    if not personality:
        return DimensionMatch(dimension="personality", score=NEUTRAL_SUBSCORE, weight=weight, has_signal=False)

    scores = []
    for trait, ideal_range in reference.personality_ranges.items():
        user_score = personality.get(trait, 0.0)
        if user_score <= 0:
            continue
        distance = trait_distance(user_score / LIKERT_TO_PERCENT, ideal_range)
        scores.append(max(0.0, 1 - distance / PERSONALITY_DISTANCE_SCALE))

    score = sum(scores) / len(scores) if scores else NEUTRAL_SUBSCORE
    return DimensionMatch(dimension="personality", score=score, weight=weight)


def score_all_dimensions(
    profile: NormalizedProfile,
    reference: ReferenceProfile
) -> Dict[str, DimensionMatch]:
    scorers = [
        (score_interest_match, profile.interests),
        (score_aptitude_match, profile.aptitudes),
        (score_personality_match, profile.personality),
    ]
    matches: Dict[str, DimensionMatch] = {}
    for scorer, values in scorers:
        match = scorer(values, reference)
        matches[match.dimension] = match
    return matches


def combine_dimensions(matches: Iterable[DimensionMatch]) -> float:
    """
    Weighted average over dimensions with signal, re-normalized by their
    weights, on 0-100. No dimension with signal yields the neutral 50.
    """
    participating = [m for m in matches if m.has_signal and m.weight > 0]
    total_weight = sum(m.weight for m in participating)
    if total_weight <= 0:
        return NEUTRAL_SUBSCORE * 100

    weighted = sum(m.score * m.weight for m in participating) / total_weight
    return clamp(weighted * 100, SCORE_MIN, SCORE_MAX)


# =============================================================================
# PROGRAM COMPONENTS
# =============================================================================

def score_test_average(mean_score: Optional[float]) -> float:
    """Step function of the mean assessment score: >=80 -> 90 ... else 40."""
    if mean_score is None:
        return TEST_AVERAGE_FLOOR
    for threshold, component in TEST_AVERAGE_STEPS:
        if mean_score >= threshold:
            return component
    return TEST_AVERAGE_FLOOR


def score_field_bonus(
    strong_categories: Sequence[str],
    program_text: str,
    field_keywords: Mapping[str, Sequence[str]]
) -> Tuple[float, Optional[str]]:
    """
    Bonus when the program name/faculty contains a keyword tied to one of the
    person's strong categories.

    Returns:
        (bonus, matched keyword or None)
    """
    text = normalize_text(program_text)
    if not text:
        return 0.0, None
    for category in strong_categories:
        for keyword in field_keywords.get(category, ()):
            if keyword_matches(normalize_text(keyword), text):
                return FIELD_MATCH_BONUS, keyword
    return 0.0, None
