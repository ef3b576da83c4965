"""
Data Contracts for the Profile Matching Engine

Defines Pydantic models for engine inputs (answer sets, grades, catalog rows),
intermediate structures (normalized profile, reference profiles) and outputs
(match results, recommendation envelope). These contracts are the API boundary
for the engine.
"""

from datetime import datetime
from typing import List, Optional, Dict, Any, Tuple, Union
from pydantic import BaseModel, Field, model_validator

from .constants import (
    TestCategory,
    GradeType,
    EligibilityStatus,
    AnswerKind,
    GRADE_TYPE_RANGES,
    DEFAULT_MINIMUM_GRADE,
    PROGRAM_MIN_SCORE,
    ENGINE_VERSION,
)


EntityId = Union[int, str]


# =============================================================================
# INPUT CONTRACTS
# =============================================================================

class TestAnswerSet(BaseModel):
    """
    One completed assessment.
    Answers are raw values (numbers, scale words, yes/no) keyed by question id.
    """
    __test__ = False

    test_id: EntityId
    test_name: str = ""
    test_category: TestCategory = TestCategory.GENERIC

    answers: Dict[str, Any] = Field(default_factory=dict)
    weights: Dict[str, float] = Field(default_factory=dict)      # question -> weight (default 1)
    categories: Dict[str, str] = Field(default_factory=dict)     # question -> scored category

    # Category -> score (0-100) already computed by the host; replaces the answers
    category_scores: Dict[str, float] = Field(default_factory=dict)

    # Pre-computed overall score (0-100) when the host already has one
    score: Optional[float] = Field(default=None, ge=0.0, le=100.0)
    completed_at: Optional[datetime] = None

    class Config:
        use_enum_values = True
        frozen = True


class GradeRecord(BaseModel):
    """Single academic grade. The grade must fall inside its type's range."""
    subject_name: str = ""
    grade: float
    grade_type: GradeType = GradeType.SUBJECT
    is_core_subject: bool = False
    year_taken: Optional[int] = None

    class Config:
        use_enum_values = True
        frozen = True

    @model_validator(mode="after")
    def _check_grade_range(self):
        low, high = GRADE_TYPE_RANGES[self.grade_type]
        if not low <= self.grade <= high:
            raise ValueError(
                f"grade {self.grade} outside {self.grade_type} range [{low}, {high}]"
            )
        return self


class CareerSource(BaseModel):
    """Career catalog row as supplied by the host."""
    career_id: EntityId
    name: str
    category: str = ""
    description: str = ""
    average_salary: Optional[Union[float, str]] = None
    job_outlook: str = ""
    required_education: str = ""
    skills: List[str] = Field(default_factory=list)


class ProgramSource(BaseModel):
    """University program catalog row as supplied by the host."""
    program_id: EntityId
    name: str
    university_id: Optional[EntityId] = None
    university_name: str = ""
    university_type: str = "public"
    faculty: str = ""
    location: str = ""
    description: str = ""
    duration_years: Optional[float] = None
    minimum_grade: Optional[float] = None
    required_subjects: List[str] = Field(default_factory=list)
    tuition_fee: Optional[float] = None
    language: Optional[str] = None


# =============================================================================
# INTERMEDIATE DATA STRUCTURES
# =============================================================================

class ParsedAnswer(BaseModel):
    """A raw answer resolved once onto the 1-5 scale."""
    kind: AnswerKind
    value: float = Field(ge=1.0, le=5.0)
    label: Optional[str] = None

    class Config:
        use_enum_values = True
        frozen = True


class NormalizedProfile(BaseModel):
    """
    Category scores derived from a person's assessments.
    Every dimension is on the 0-100 scale.
    """
    personality: Dict[str, float] = Field(default_factory=dict)
    interests: Dict[str, float] = Field(default_factory=dict)
    aptitudes: Dict[str, float] = Field(default_factory=dict)
    general: Dict[str, float] = Field(default_factory=dict)

    strengths: List[str] = Field(default_factory=list)
    strong_categories: List[str] = Field(default_factory=list)

    # test id -> overall score for that assessment (0-100)
    test_scores: Dict[str, float] = Field(default_factory=dict)
    completed_assessments: int = 0


class GradeAverages(BaseModel):
    """Full-precision grade averages used for comparisons."""
    overall: float = 0.0
    core_subjects: float = 0.0
    yearly: float = 0.0
    exam_board: float = 0.0

    overall_count: int = 0
    core_count: int = 0
    yearly_count: int = 0
    exam_board_count: int = 0

    total_count: int = 0
    highest: Optional[float] = None
    lowest: Optional[float] = None
    distribution: Dict[str, int] = Field(default_factory=dict)


class GradeSummary(BaseModel):
    """Display form of the grade averages, rounded to 2 decimals."""
    overall: float = 0.0
    core_subjects: float = 0.0
    yearly: float = 0.0
    exam_board: float = 0.0
    total_grades: int = 0
    highest_grade: Optional[float] = None
    lowest_grade: Optional[float] = None
    distribution: Dict[str, int] = Field(default_factory=dict)


class ReferenceProfile(BaseModel):
    """Idealized target profile for a career or program bucket."""
    bucket: str
    interest_weights: Dict[str, float] = Field(default_factory=dict)
    personality_ranges: Dict[str, Tuple[float, float]] = Field(default_factory=dict)  # Likert 1-5
    aptitude_requirements: Dict[str, float] = Field(default_factory=dict)
    minimum_grade: float = DEFAULT_MINIMUM_GRADE
    required_subjects: List[str] = Field(default_factory=list)

    class Config:
        frozen = True


class DimensionMatch(BaseModel):
    """Sub-score (0-1) for one matching dimension."""
    dimension: str
    score: float = Field(ge=0.0, le=1.5)
    weight: float = Field(ge=0.0, le=1.0)
    has_signal: bool = True


class EligibilityResult(BaseModel):
    """Outcome of the eligibility ladder for one average."""
    status: EligibilityStatus
    gap: float
    component_score: float = Field(ge=0.0, le=100.0)

    class Config:
        use_enum_values = True
        frozen = True


class ProgramContext(BaseModel):
    """Per-request inputs shared by every program being scored."""
    mode: str
    averages: GradeAverages = Field(default_factory=GradeAverages)
    grade_records: List[GradeRecord] = Field(default_factory=list)
    profile: NormalizedProfile = Field(default_factory=NormalizedProfile)
    test_average: Optional[float] = None
    field_keywords: Dict[str, List[str]] = Field(default_factory=dict)
    min_score: int = PROGRAM_MIN_SCORE


class ScoredCareer(BaseModel):
    """
    A career with its computed match.
    Used between scoring and ranking stages.
    """
    career: CareerSource
    reference_bucket: str
    dimension_matches: Dict[str, DimensionMatch] = Field(default_factory=dict)
    match_score: int = Field(ge=0, le=100)


class ScoredProgram(BaseModel):
    """
    A program with its computed match and eligibility details.
    Used between scoring and ranking stages.
    """
    program: ProgramSource
    reference_bucket: str
    mode: str
    match_score: int = Field(ge=0, le=100)
    eligibility_status: Optional[EligibilityStatus] = None

    minimum_grade: float = DEFAULT_MINIMUM_GRADE
    academic_average: Optional[float] = None
    exam_board_average: Optional[float] = None
    test_average: Optional[float] = None
    grade_gap: Optional[float] = None
    meets_grade_requirement: Optional[bool] = None

    field_keyword: Optional[str] = None
    required_subjects: List[str] = Field(default_factory=list)
    has_required_subjects: Optional[bool] = None
    missing_subjects: List[str] = Field(default_factory=list)
    components: Dict[str, float] = Field(default_factory=dict)

    class Config:
        use_enum_values = True


# =============================================================================
# OUTPUT CONTRACTS
# =============================================================================

class MatchResult(BaseModel):
    """
    Single career or program recommendation.
    Created once per request and never mutated.
    """
    entity_id: EntityId
    title: str
    kind: str  # career/program
    match_score: int = Field(ge=0, le=100)
    match_reason: str
    category: str = ""
    is_fallback: bool = False
    source: str = "catalog"  # catalog/fallback

    # Program eligibility (None for careers, fallback entries and test-only matches)
    eligibility_status: Optional[EligibilityStatus] = None

    # Career display fields
    description: str = ""
    salary_range: Optional[str] = None
    job_outlook: Optional[str] = None
    education_level: Optional[str] = None
    skills: List[str] = Field(default_factory=list)

    # Program display fields
    university_id: Optional[EntityId] = None
    university_name: Optional[str] = None
    university_type: Optional[str] = None
    faculty: Optional[str] = None
    location: Optional[str] = None
    duration_years: Optional[float] = None
    tuition_fee: Optional[float] = None
    language: Optional[str] = None

    # Program grade details
    minimum_grade: Optional[float] = None
    user_average: Optional[float] = None
    exam_board_average: Optional[float] = None
    test_average: Optional[float] = None
    grade_gap: Optional[float] = None
    meets_grade_requirement: Optional[bool] = None
    has_required_subjects: Optional[bool] = None
    missing_subjects: List[str] = Field(default_factory=list)

    score_breakdown: Dict[str, float] = Field(default_factory=dict)

    class Config:
        use_enum_values = True
        frozen = True


class RecommendationMeta(BaseModel):
    """Processing metadata for a combined recommendation request."""
    completed_assessments: int = 0
    grade_count: int = 0
    can_get_career_recommendations: bool = False
    can_get_program_recommendations: bool = False
    program_mode: Optional[str] = None
    careers_from_fallback: bool = False
    programs_from_fallback: bool = False
    processing_time_ms: Optional[float] = None
    engine_version: str = ENGINE_VERSION


class RecommendationOutput(BaseModel):
    """
    Output contract for a combined recommendation request.
    Contains ranked careers and programs with the grade summary and warnings.
    """
    request_id: Optional[str] = None
    user_id: Optional[str] = None

    careers: List[MatchResult] = Field(default_factory=list)
    programs: List[MatchResult] = Field(default_factory=list)
    grade_summary: GradeSummary = Field(default_factory=GradeSummary)
    profile: Optional[NormalizedProfile] = None

    meta: RecommendationMeta = Field(default_factory=RecommendationMeta)
    warnings: List[str] = Field(default_factory=list)
