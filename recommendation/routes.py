"""
Recommendation API Routes

Exposes the recommendation engine via REST API. Records (assessment results,
grades, catalogs) travel in the request body as storage-style rows.
"""

import logging
from typing import Optional, List, Dict, Any, Type, TypeVar

from fastapi import APIRouter, Depends, HTTPException, Body
from pydantic import BaseModel, Field, ValidationError

from .logic.adapter import transform_test_results, transform_grades, transform_careers, transform_programs
from .logic.config import load_settings
from .logic.constants import ProgramMode, ENGINE_VERSION
from .logic.engine import RecommendationEngine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recommendations", tags=["recommendations"])

RequestT = TypeVar("RequestT", bound=BaseModel)


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class CareerRecommendationRequest(BaseModel):
    """Request body for career recommendations."""
    user_id: Optional[str] = None
    test_results: List[Dict[str, Any]] = Field(
        default_factory=list,
        description="Assessment results, e.g. {'test_id': 1, 'test_type': 'interest', 'result_details': {...}}"
    )
    careers: Optional[List[Dict[str, Any]]] = Field(
        default=None,
        description="Career catalog rows; omitted or empty returns general suggestions"
    )
    limit: Optional[int] = Field(default=None, ge=1, le=50, description="Careers to return (clamped to 8-12)")


class ProgramRecommendationRequest(BaseModel):
    """Request body for university program recommendations."""
    user_id: Optional[str] = None
    grades: List[Dict[str, Any]] = Field(default_factory=list, description="Grade rows")
    test_results: List[Dict[str, Any]] = Field(default_factory=list, description="Assessment results")
    programs: Optional[List[Dict[str, Any]]] = Field(
        default=None,
        description="Program catalog rows; omitted or empty returns popular programs"
    )
    mode: ProgramMode = Field(default=ProgramMode.BOTH, description="'grades', 'tests' or 'both'")
    limit: Optional[int] = Field(default=None, ge=1, le=200)

    class Config:
        use_enum_values = True


class GradeSummaryRequest(BaseModel):
    """Request body for the grade summary."""
    grades: List[Dict[str, Any]] = Field(default_factory=list)


class CombinedRecommendationRequest(ProgramRecommendationRequest):
    """Request body for careers and programs together."""
    careers: Optional[List[Dict[str, Any]]] = None
    career_limit: Optional[int] = Field(default=None, ge=1, le=50)


def _parse_request(model: Type[RequestT], payload: Dict[str, Any]) -> RequestT:
    """Validate a raw body; anything invalid is a 400."""
    try:
        return model(**payload)
    except ValidationError as e:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid request: {str(e)}"
        )


def get_engine() -> RecommendationEngine:
    """Engine configured from the environment."""
    return RecommendationEngine(load_settings())


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.post("/careers", summary="Get career recommendations")
def recommend_careers(
    payload: Dict[str, Any] = Body(...),
    engine: RecommendationEngine = Depends(get_engine)
):
    """
    Rank careers against the person's assessment profile.

    **Response:**
    - `careers`: ranked matches with scores and reasons
    - `warnings`: missing data or degraded-mode notes
    """
    request = _parse_request(CareerRecommendationRequest, payload)

    output = engine.recommend(
        test_results=transform_test_results(request.test_results),
        grade_records=[],
        career_catalog=transform_careers(request.careers),
        program_catalog=None,
        career_limit=request.limit,
        user_id=request.user_id,
        include_programs=False,
    )
    return {
        "request_id": output.request_id,
        "careers": [c.model_dump() for c in output.careers],
        "count": len(output.careers),
        "is_fallback": output.meta.careers_from_fallback,
        "completed_assessments": output.meta.completed_assessments,
        "warnings": output.warnings,
    }


@router.post("/programs", summary="Get university program recommendations")
def recommend_programs(
    payload: Dict[str, Any] = Body(...),
    engine: RecommendationEngine = Depends(get_engine)
):
    """
    Rank university programs by grades, assessments, or both.

    **Request Body:**
    - `grades`, `test_results`, `programs`: storage rows
    - `mode`: 'grades', 'tests' or 'both' (tests-based modes need 3 completed assessments)
    """
    request = _parse_request(ProgramRecommendationRequest, payload)

    output = engine.recommend(
        test_results=transform_test_results(request.test_results),
        grade_records=transform_grades(request.grades),
        career_catalog=None,
        program_catalog=transform_programs(request.programs),
        mode=request.mode,
        program_limit=request.limit,
        user_id=request.user_id,
        include_careers=False,
    )
    return {
        "request_id": output.request_id,
        "programs": [p.model_dump() for p in output.programs],
        "count": len(output.programs),
        "program_mode": output.meta.program_mode,
        "is_fallback": output.meta.programs_from_fallback,
        "grade_summary": output.grade_summary.model_dump(),
        "warnings": output.warnings,
    }


@router.post("/grades/summary", summary="Summarize grades")
def grade_summary(
    payload: Dict[str, Any] = Body(...),
    engine: RecommendationEngine = Depends(get_engine)
):
    """Overall, core-subject, yearly and exam-board averages."""
    request = _parse_request(GradeSummaryRequest, payload)
    summary = engine.summarize_grades(transform_grades(request.grades))
    return {"grade_summary": summary.model_dump()}


@router.post("", summary="Get career and program recommendations")
@router.post("/", summary="Get career and program recommendations", include_in_schema=False)
def recommend_all(
    payload: Dict[str, Any] = Body(...),
    engine: RecommendationEngine = Depends(get_engine)
):
    """
    Careers, programs, grade summary, profile and warnings in one response.
    """
    request = _parse_request(CombinedRecommendationRequest, payload)

    output = engine.recommend(
        test_results=transform_test_results(request.test_results),
        grade_records=transform_grades(request.grades),
        career_catalog=transform_careers(request.careers),
        program_catalog=transform_programs(request.programs),
        mode=request.mode,
        career_limit=request.career_limit,
        program_limit=request.limit,
        user_id=request.user_id,
    )
    logger.info(f"📊 Recommendations served: {len(output.careers)} careers, {len(output.programs)} programs")
    return output.model_dump()


# =============================================================================
# HEALTH CHECK
# =============================================================================

@router.get("/health", summary="Recommendation engine health check")
def health_check():
    """Check if recommendation engine is operational."""
    return {"status": "ok", "engine": "recommendation", "version": ENGINE_VERSION}
