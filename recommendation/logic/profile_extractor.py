"""
Profile Extractor

Turns raw assessment answer sets into a NormalizedProfile.
Each raw answer is resolved once onto the 1-5 scale, weighted, tallied per
scored category and transformed onto 0-100 according to the assessment kind.
"""

import logging
import math
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .contracts import TestAnswerSet, ParsedAnswer, NormalizedProfile
from .constants import (
    TestCategory,
    AnswerKind,
    ANSWER_LABEL_MAP,
    ANSWER_SCALE_MIN,
    ANSWER_SCALE_MAX,
    NEUTRAL_ANSWER,
    LIKERT_TO_PERCENT,
    SCORE_MIN,
    SCORE_MAX,
    INTEREST_STRENGTH_THRESHOLD,
    APTITUDE_STRENGTH_THRESHOLD,
    MAX_STRENGTHS,
    INTEREST_DISPLAY_NAMES,
    APTITUDE_DISPLAY_NAMES,
)
from .errors import MalformedRecordError
from .rounding import clamp

logger = logging.getLogger(__name__)

# Test category -> NormalizedProfile field
_PROFILE_FIELDS: Dict[str, str] = {
    TestCategory.PERSONALITY.value: "personality",
    TestCategory.INTEREST.value: "interests",
    TestCategory.APTITUDE.value: "aptitudes",
    TestCategory.GENERIC.value: "general",
}

DEFAULT_QUESTION_CATEGORY = "general"

# category -> [weighted total, answer count]
Tally = Dict[str, List[float]]


# =============================================================================
# ANSWER PARSING
# =============================================================================

def parse_answer(raw: Any) -> ParsedAnswer:
    """
    Resolve a raw answer onto the 1-5 scale.

    Raises:
        MalformedRecordError: the value is neither numeric nor a known scale word
    """
    # bool before int: True is an int in Python
    if isinstance(raw, bool):
        label = "true" if raw else "false"
        return ParsedAnswer(kind=AnswerKind.LABEL, value=ANSWER_LABEL_MAP[label], label=label)

    if isinstance(raw, (int, float)):
        return _numeric_answer(float(raw))

    if isinstance(raw, str):
        text = raw.strip().lower()
        if text in ANSWER_LABEL_MAP:
            return ParsedAnswer(kind=AnswerKind.LABEL, value=ANSWER_LABEL_MAP[text], label=text)
        try:
            number = float(text)
        except ValueError:
            raise MalformedRecordError(f"unrecognized answer text {raw!r}")
        return _numeric_answer(number)

    raise MalformedRecordError(f"unsupported answer type {type(raw).__name__}")


def _numeric_answer(number: float) -> ParsedAnswer:
    if not math.isfinite(number):
        raise MalformedRecordError(f"non-finite answer {number}")
    return ParsedAnswer(
        kind=AnswerKind.NUMERIC,
        value=clamp(number, ANSWER_SCALE_MIN, ANSWER_SCALE_MAX),
    )


def resolve_answer(raw: Any, record_id: Optional[str] = None) -> ParsedAnswer:
    """Parse an answer, substituting the neutral value for anything malformed."""
    try:
        return parse_answer(raw)
    except MalformedRecordError as e:
        logger.warning(f"⚠️ Malformed answer {record_id or ''}: {e.reason}; using neutral {NEUTRAL_ANSWER}")
        return ParsedAnswer(kind=AnswerKind.NEUTRAL, value=NEUTRAL_ANSWER)


# =============================================================================
# TALLYING
# =============================================================================

def is_completed(answer_set: TestAnswerSet) -> bool:
    """An assessment counts once it has a score, category scores or at least one answer."""
    if answer_set.score is not None or answer_set.category_scores:
        return True
    return any(value is not None for value in answer_set.answers.values())


def count_completed_assessments(test_results: Sequence[TestAnswerSet]) -> int:
    return sum(1 for answer_set in test_results if is_completed(answer_set))


def tally_answers(answer_set: TestAnswerSet) -> Tally:
    """
    Accumulate weighted answers per scored category for one assessment.
    Unanswered questions (None) are skipped.
    """
    tally: Tally = {}
    for question_id, raw in answer_set.answers.items():
        if raw is None:
            continue

        parsed = resolve_answer(raw, record_id=f"{answer_set.test_id}/{question_id}")
        weight = answer_set.weights.get(question_id, 1.0)
        if weight <= 0:
            weight = 1.0

        category = (answer_set.categories.get(question_id) or DEFAULT_QUESTION_CATEGORY).strip().lower()
        totals = tally.setdefault(category, [0.0, 0])
        totals[0] += parsed.value * weight
        totals[1] += 1

    return tally


def category_score(test_category: str, total: float, count: int) -> float:
    """Transform a weighted tally onto the 0-100 scale."""
    if count <= 0:
        return SCORE_MIN
    if test_category == TestCategory.APTITUDE:
        # normalized against the max possible answer
        score = total / (count * ANSWER_SCALE_MAX) * 100
    else:
        score = (total / count) * LIKERT_TO_PERCENT
    return clamp(score, SCORE_MIN, SCORE_MAX)


def _overall_test_score(answer_set: TestAnswerSet, tally: Tally) -> Optional[float]:
    if answer_set.score is not None:
        return float(answer_set.score)
    if answer_set.category_scores:
        scores = [clamp(s, SCORE_MIN, SCORE_MAX) for s in answer_set.category_scores.values()]
        return sum(scores) / len(scores)
    if not tally:
        return None
    scores = [
        category_score(answer_set.test_category, total, int(count))
        for total, count in tally.values()
    ]
    return sum(scores) / len(scores)


# =============================================================================
# PROFILE
# =============================================================================

def extract_profile(test_results: Sequence[TestAnswerSet]) -> NormalizedProfile:
    """
    Build a NormalizedProfile from any number of answer sets.

    Several answer sets of the same kind are pooled before transforming, so
    two interest tests contribute to a single interest profile. An answer set
    carrying category_scores contributes those instead of its answers; a
    category's value is then the mean of its tallied score and those scores.

    Args:
        test_results: Completed assessments (may be empty)

    Returns:
        NormalizedProfile with every dimension on 0-100
    """
    pooled: Dict[str, Tally] = {}
    prescored: Dict[str, Dict[str, List[float]]] = {}
    test_scores: Dict[str, float] = {}

    for answer_set in test_results:
        if answer_set.category_scores:
            tally: Tally = {}
            test_prescored = prescored.setdefault(answer_set.test_category, {})
            for category, score in answer_set.category_scores.items():
                key = category.strip().lower()
                test_prescored.setdefault(key, []).append(clamp(score, SCORE_MIN, SCORE_MAX))
        else:
            tally = tally_answers(answer_set)
            test_pool = pooled.setdefault(answer_set.test_category, {})
            for category, (total, count) in tally.items():
                totals = test_pool.setdefault(category, [0.0, 0])
                totals[0] += total
                totals[1] += count

        overall = _overall_test_score(answer_set, tally)
        if overall is not None:
            # a retaken assessment replaces the earlier overall score
            test_scores[str(answer_set.test_id)] = overall

    fields: Dict[str, Dict[str, float]] = {name: {} for name in _PROFILE_FIELDS.values()}
    for test_category in list(pooled) + [c for c in prescored if c not in pooled]:
        target = fields[_PROFILE_FIELDS.get(test_category, "general")]
        tally = pooled.get(test_category, {})
        scored = prescored.get(test_category, {})
        for category in list(tally) + [c for c in scored if c not in tally]:
            values = list(scored.get(category, []))
            if category in tally:
                total, count = tally[category]
                values.insert(0, category_score(test_category, total, int(count)))
            target[category] = sum(values) / len(values)

    strengths, strong_categories = identify_strengths(fields["interests"], fields["aptitudes"])

    profile = NormalizedProfile(
        personality=fields["personality"],
        interests=fields["interests"],
        aptitudes=fields["aptitudes"],
        general=fields["general"],
        strengths=strengths,
        strong_categories=strong_categories,
        test_scores=test_scores,
        completed_assessments=count_completed_assessments(test_results),
    )

    logger.debug(
        f"Profile extracted: {len(profile.interests)} interests, {len(profile.aptitudes)} aptitudes, "
        f"{len(profile.personality)} traits from {profile.completed_assessments} assessments"
    )
    return profile


def identify_strengths(
    interests: Dict[str, float],
    aptitudes: Dict[str, float]
) -> Tuple[List[str], List[str]]:
    """
    Label interest categories >= 70 and aptitude categories >= 75.

    Returns:
        (labels, categories), highest score first, at most 5 of each.
        Equal scores keep interests ahead of aptitudes, then input order.
    """
    found = []
    for position, (category, score) in enumerate(interests.items()):
        if score >= INTEREST_STRENGTH_THRESHOLD:
            label = f"High interest in {INTEREST_DISPLAY_NAMES.get(category, category)}"
            found.append((score, 0, position, category, label))

    for position, (category, score) in enumerate(aptitudes.items()):
        if score >= APTITUDE_STRENGTH_THRESHOLD:
            label = f"Strong {APTITUDE_DISPLAY_NAMES.get(category, category)} ability"
            found.append((score, 1, position, category, label))

    found.sort(key=lambda item: (-item[0], item[1], item[2]))
    top = found[:MAX_STRENGTHS]
    return [item[4] for item in top], [item[3] for item in top]


def mean_test_score(profile: NormalizedProfile) -> Optional[float]:
    """Mean overall score across assessments, or None without any."""
    if not profile.test_scores:
        return None
    return sum(profile.test_scores.values()) / len(profile.test_scores)
