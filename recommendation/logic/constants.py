"""
Matching Engine Constants

Defines all scales, weights, thresholds, label maps, and enums used by the
profile matching engine. All values are fixed, hand-authored rules with no
learned components.
"""

from enum import Enum
from typing import Dict, Tuple


# =============================================================================
# ENUMS
# =============================================================================

class TestCategory(str, Enum):
    """Kind of psychometric assessment an answer set belongs to."""
    __test__ = False

    PERSONALITY = "personality"
    INTEREST = "interest"
    APTITUDE = "aptitude"
    GENERIC = "generic"


class GradeType(str, Enum):
    """Kind of academic grade record."""
    SUBJECT = "subject"
    YEARLY = "yearly"
    EXIT_EXAM = "exit_exam"
    EXAM_BOARD = "exam_board"      # Exam-board (committee) decision
    AVERAGE = "average"            # Final average reported by the exam board


class EligibilityStatus(str, Enum):
    """Grade-gap classification for grade-gated programs."""
    ELIGIBLE = "eligible"
    CLOSE = "close"
    NEEDS_IMPROVEMENT = "needs_improvement"
    CONSIDER_ALTERNATIVES = "consider_alternatives"


class ProgramMode(str, Enum):
    """Signals used when matching programs."""
    GRADES = "grades"
    TESTS = "tests"
    BOTH = "both"


class AnswerKind(str, Enum):
    """How a raw answer was resolved onto the 1-5 scale."""
    NUMERIC = "numeric"
    LABEL = "label"
    NEUTRAL = "neutral"


# =============================================================================
# ANSWER SCALE
# =============================================================================

ANSWER_SCALE_MIN = 1.0
ANSWER_SCALE_MAX = 5.0
NEUTRAL_ANSWER = 3.0

# Textual scale words -> numeric value on the 1-5 scale
ANSWER_LABEL_MAP: Dict[str, float] = {
    "strongly agree": 5.0,
    "agree": 4.0,
    "neutral": 3.0,
    "disagree": 2.0,
    "strongly disagree": 1.0,
    "yes": 5.0,
    "true": 5.0,
    "no": 1.0,
    "false": 1.0,
}

# Multiplier from the 1-5 Likert scale to the 0-100 profile scale
LIKERT_TO_PERCENT = 20.0

SCORE_MIN = 0.0
SCORE_MAX = 100.0

# =============================================================================
# TAXONOMIES
# =============================================================================

INTEREST_CATEGORIES: Tuple[str, ...] = (
    "realistic",
    "investigative",
    "artistic",
    "social",
    "enterprising",
    "conventional",
)

APTITUDE_CATEGORIES: Tuple[str, ...] = (
    "verbal",
    "numerical",
    "spatial",
    "logical",
    "creative",
)

PERSONALITY_TRAITS: Tuple[str, ...] = (
    "openness",
    "conscientiousness",
    "extraversion",
    "agreeableness",
    "neuroticism",
)

# Human-readable phrases used in strength labels and match reasons
INTEREST_DISPLAY_NAMES: Dict[str, str] = {
    "realistic": "hands-on, practical work",
    "investigative": "analysis and research",
    "artistic": "creative expression",
    "social": "helping and working with people",
    "enterprising": "leadership and business",
    "conventional": "structured, organized work",
}

APTITUDE_DISPLAY_NAMES: Dict[str, str] = {
    "verbal": "communication",
    "numerical": "numerical",
    "spatial": "visual-spatial",
    "logical": "problem-solving",
    "creative": "creative",
}

# =============================================================================
# PROFILE EXTRACTION
# =============================================================================

INTEREST_STRENGTH_THRESHOLD = 70.0
APTITUDE_STRENGTH_THRESHOLD = 75.0
MAX_STRENGTHS = 5

# Minimum completed assessments before test-driven matching is attempted
MIN_COMPLETED_ASSESSMENTS = 3

# =============================================================================
# GRADES
# =============================================================================

# Inclusive (min, max) bounds for each grade type
GRADE_TYPE_RANGES: Dict[str, Tuple[float, float]] = {
    GradeType.SUBJECT.value: (4.0, 10.0),
    GradeType.YEARLY.value: (5.0, 10.0),
    GradeType.EXIT_EXAM.value: (4.0, 10.0),
    GradeType.EXAM_BOARD.value: (4.0, 10.0),
    GradeType.AVERAGE.value: (4.0, 10.0),
}

# Grade types reported by the exam board rather than per subject
EXAM_BOARD_GRADE_TYPES: Tuple[str, ...] = (
    GradeType.EXAM_BOARD.value,
    GradeType.AVERAGE.value,
)

# Storage spellings accepted for grade types
GRADE_TYPE_ALIASES: Dict[str, str] = {
    "matura": GradeType.EXIT_EXAM.value,
    "exit-exam": GradeType.EXIT_EXAM.value,
    "exit exam": GradeType.EXIT_EXAM.value,
    "vkm": GradeType.EXAM_BOARD.value,
    "exam-board": GradeType.EXAM_BOARD.value,
    "exam-board-decision": GradeType.EXAM_BOARD.value,
    "exam_board_decision": GradeType.EXAM_BOARD.value,
}

DISPLAY_PRECISION = 2

# =============================================================================
# CAREER MATCHING
# =============================================================================

# Weights per matching dimension (re-normalized over dimensions with signal)
CAREER_DIMENSION_WEIGHTS: Dict[str, float] = {
    "interest": 0.5,
    "aptitude": 0.3,
    "personality": 0.2,
}

NEUTRAL_SUBSCORE = 0.5          # Contribution of a dimension with no signal
APTITUDE_OVERSHOOT_CAP = 1.5    # Max credit for exceeding a required level
PERSONALITY_DISTANCE_SCALE = 2.5

CAREER_MIN_SCORE = 60
CAREER_RELAXED_MIN_SCORE = 40
DEFAULT_CAREER_LIMIT = 10
CAREER_LIMIT_BOUNDS: Tuple[int, int] = (8, 12)

# Match reason thresholds
REASON_STRONG_CATEGORY_THRESHOLD = 80.0
REASON_TOP_INTEREST_THRESHOLD = 70.0
EXCELLENT_FIT_THRESHOLD = 85
GOOD_FIT_THRESHOLD = 70

# =============================================================================
# PROGRAM MATCHING
# =============================================================================

# Ordered eligibility ladder: (status, max_gap, min_average, base, slope).
# First matching rule wins; component score = base - gap * slope.
ELIGIBILITY_LADDER: Tuple[Tuple[EligibilityStatus, float, float, float, float], ...] = (
    (EligibilityStatus.ELIGIBLE, 0.0, 0.0, 70.0, 15.0),
    (EligibilityStatus.CLOSE, 0.5, 0.0, 75.0, 20.0),
    (EligibilityStatus.NEEDS_IMPROVEMENT, 1.0, 0.0, 60.0, 15.0),
    (EligibilityStatus.CONSIDER_ALTERNATIVES, 1.5, 7.0, 45.0, 10.0),
)

GAP_PRECISION = 6

PROGRAM_COMPONENT_WEIGHTS: Dict[str, float] = {
    "academic": 0.35,
    "exam_board": 0.35,
    "tests": 0.30,
}

# Mean test score -> test component, checked highest first
TEST_AVERAGE_STEPS: Tuple[Tuple[float, float], ...] = (
    (80.0, 90.0),
    (70.0, 80.0),
    (60.0, 70.0),
    (50.0, 60.0),
)
TEST_AVERAGE_FLOOR = 40.0

FIELD_MATCH_BONUS = 10.0
PROGRAM_MIN_SCORE = 50

# Excess over the minimum grade that counts as "well above"
GRADE_EXCESS_HIGHLIGHT = 1.0

# Program reason tiers for combined mode
PROGRAM_REASON_TIERS: Tuple[Tuple[int, str], ...] = (
    (85, "an excellent match across grades and assessments"),
    (75, "a strong match for your profile"),
    (65, "a good option to consider"),
)
PROGRAM_REASON_DEFAULT = "some aspects align with your profile"

# =============================================================================
# FIELD KEYWORDS
# =============================================================================

# Strong profile category -> program name/faculty keywords.
# Replaceable at runtime through RECOMMENDATION_FIELD_KEYWORDS_FILE.
FIELD_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "realistic": ("inxhinier", "engineer", "ndertim", "construction", "bujqesi", "agricult", "veteriner", "sport", "teknik"),
    "investigative": ("informatik", "kompjuter", "computer", "matematik", "fizik", "kimi", "biologji", "shkenc", "science", "mjek", "medic"),
    "artistic": ("arte", "arts", "muzik", "music", "dizajn", "design", "arkitekt", "media", "gazetar"),
    "social": ("psikolog", "infermier", "nursing", "mesuesi", "pedagog", "education", "social", "turizem", "tourism"),
    "enterprising": ("biznes", "business", "ekonomi", "economics", "marketing", "menaxhim", "management", "turizem"),
    "conventional": ("financ", "kontabilitet", "accounting", "administrat", "drejtesi", "law", "ekonomi"),
    "verbal": ("gjuh", "language", "letersi", "literature", "gazetar", "journalism", "drejtesi", "law", "media"),
    "numerical": ("matematik", "mathematics", "statistik", "financ", "ekonomi", "economics"),
    "spatial": ("arkitekt", "architecture", "inxhinier", "engineer", "dizajn", "design"),
    "logical": ("informatik", "computer", "kompjuter", "matematik", "fizik", "software"),
    "creative": ("arte", "arts", "dizajn", "design", "muzik", "music", "media", "marketing"),
}

# Subject name synonyms used when checking required subjects
SUBJECT_SYNONYMS: Dict[str, Tuple[str, ...]] = {
    "matematike": ("math", "matematika", "algjebra"),
    "shqipe": ("gjuhe shqipe", "letersi", "gjuha shqipe", "albanian"),
    "anglisht": ("english", "gjuhe e huaj", "anglez"),
    "fizike": ("physics", "fizika"),
    "kimia": ("chemistry", "kimika"),
    "biologji": ("biology", "biologjia"),
    "histori": ("history", "historia"),
    "gjeografi": ("geography", "gjeografia"),
}

# =============================================================================
# DEFAULT VALUES
# =============================================================================

DEFAULT_PROFILE_LEVEL = 50.0
DEFAULT_MINIMUM_GRADE = 6.0
DEFAULT_LANGUAGE = "Albanian"
DEFAULT_TUITION_BY_TYPE: Dict[str, float] = {
    "public": 0.0,
    "private": 2000.0,
}
ANNUAL_SALARY_THRESHOLD = 1000.0
SALARY_RANGE_FACTOR = 1.5
SALARY_NOT_SPECIFIED = "Not specified"

ENGINE_VERSION = "1.0.0"
