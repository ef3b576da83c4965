"""
Recommendation Logic Module

Provides the deterministic matching engine for career and university program
recommendations.
"""

from .contracts import (
    TestAnswerSet,
    GradeRecord,
    CareerSource,
    ProgramSource,
    NormalizedProfile,
    GradeSummary,
    MatchResult,
    RecommendationMeta,
    RecommendationOutput,
)
from .engine import (
    RecommendationEngine,
    match_careers,
    match_programs,
    summarize_grades,
    get_recommendations,
)
from .config import EngineSettings, load_settings
from .constants import TestCategory, GradeType, EligibilityStatus, ProgramMode
from .errors import (
    RecommendationError,
    InsufficientDataError,
    MalformedRecordError,
    CatalogUnavailableError,
)

__all__ = [
    # Main engine
    "RecommendationEngine",
    "match_careers",
    "match_programs",
    "summarize_grades",
    "get_recommendations",

    # Settings
    "EngineSettings",
    "load_settings",

    # Contracts
    "TestAnswerSet",
    "GradeRecord",
    "CareerSource",
    "ProgramSource",
    "NormalizedProfile",
    "GradeSummary",
    "MatchResult",
    "RecommendationMeta",
    "RecommendationOutput",

    # Enums
    "TestCategory",
    "GradeType",
    "EligibilityStatus",
    "ProgramMode",

    # Errors
    "RecommendationError",
    "InsufficientDataError",
    "MalformedRecordError",
    "CatalogUnavailableError",
]
