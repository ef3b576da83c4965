"""
Ranker

Filters scored careers and programs by minimum score and ranks them.
Sorting is stable, so equal scores keep catalog order.
"""

import logging
from typing import List, Optional, Sequence

from .contracts import ScoredCareer, ScoredProgram
from .constants import (
    CAREER_MIN_SCORE,
    CAREER_RELAXED_MIN_SCORE,
    DEFAULT_CAREER_LIMIT,
    CAREER_LIMIT_BOUNDS,
)

logger = logging.getLogger(__name__)


def rank_careers(scored: Sequence[ScoredCareer]) -> List[ScoredCareer]:
    """Rank careers by match score (descending, stable)."""
    return sorted(scored, key=lambda x: x.match_score, reverse=True)


def rank_programs(scored: Sequence[ScoredProgram]) -> List[ScoredProgram]:
    """Rank programs by match score (descending, stable)."""
    return sorted(scored, key=lambda x: x.match_score, reverse=True)


def resolve_career_limit(limit: Optional[int]) -> int:
    """Career lists hold between 8 and 12 entries; None means the default 10."""
    if limit is None:
        return DEFAULT_CAREER_LIMIT
    low, high = CAREER_LIMIT_BOUNDS
    return max(low, min(high, limit))


def select_careers(
    scored: Sequence[ScoredCareer],
    limit: Optional[int] = None,
    min_score: int = CAREER_MIN_SCORE,
    relaxed_min_score: int = CAREER_RELAXED_MIN_SCORE
) -> List[ScoredCareer]:
    """
    Keep careers at or above min_score, relaxing to relaxed_min_score when
    nothing clears it, then rank and truncate.

    Returns:
        Ranked careers; empty when nothing clears the relaxed threshold
    """
    kept = [s for s in scored if s.match_score >= min_score]
    if not kept:
        kept = [s for s in scored if s.match_score >= relaxed_min_score]
        if kept:
            logger.info(f"No career reached {min_score}; relaxed to {relaxed_min_score} ({len(kept)} kept)")

    return rank_careers(kept)[:resolve_career_limit(limit)]


def select_programs(
    scored: Sequence[ScoredProgram],
    limit: Optional[int] = None
) -> List[ScoredProgram]:
    """Rank programs; no cap unless the caller asks for one."""
    ranked = rank_programs(scored)
    if limit is not None and limit > 0:
        return ranked[:limit]
    return ranked
