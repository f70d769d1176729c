"""
Recommendation API Routes

Exposes the recommendation engine via REST API.
Main endpoint: POST /recommendations
"""

import logging
from typing import Optional, Dict, Any

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError

from .logic.contracts import CollegeCandidate, UserProfile
from .logic.constants import MAX_RESULTS_LIMIT
from .logic.engine import RecommendationEngine, build_default_engine
from . import config

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recommendations", tags=["recommendations"])

_engine: Optional[RecommendationEngine] = None


def get_engine() -> RecommendationEngine:
    """Shared engine built from configuration on first use."""
    global _engine
    if _engine is None:
        _engine = build_default_engine()
    return _engine


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class RecommendationRequest(BaseModel):
    """Request body for recommendations endpoint."""
    query: Optional[str] = Field(default=None, description="College name or free-text search")
    user_profile: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Major, GPA, state and guest flag",
        examples=[{"major": "Computer Science", "gpa": "3.8", "state": "WA", "isGuest": False}],
    )
    questionnaire: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Raw questionnaire answers",
        examples=[{"inStateOutOfState": "in_state", "costOfAttendance": "20k_to_40k"}],
    )
    max_results: int = Field(
        default=config.DEFAULT_MAX_RESULTS,
        ge=1,
        le=MAX_RESULTS_LIMIT,
        description="Max results to return",
    )
    weighted_mode: Optional[bool] = Field(
        default=None,
        description="False runs a plain name search; defaults to the questionnaire's useWeightedSearch",
    )


class ScoreCollegeRequest(BaseModel):
    """Request body for scoring a single college."""
    college: CollegeCandidate
    user_profile: Optional[Dict[str, Any]] = None
    questionnaire: Optional[Dict[str, Any]] = None
    query: Optional[str] = None


def _parse_profile(data: Optional[Dict[str, Any]]) -> Optional[UserProfile]:
    if data is None:
        return None
    try:
        return UserProfile(**data)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=f"Invalid user profile: {str(e)}")


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.post("", summary="Get college recommendations")
@router.post("/", summary="Get college recommendations", include_in_schema=False)
def get_recommendations(
    request: RecommendationRequest,
    engine: RecommendationEngine = Depends(get_engine),
):
    """
    Generate ranked, explained college recommendations.

    **Request Body:**
    - `query`: Optional free-text query
    - `user_profile`: Major, GPA, state, guest flag
    - `questionnaire`: Questionnaire answers (labels or enum values)
    - `max_results`: Number of results (1-50, default 12)
    - `weighted_mode`: Weighted scoring (default) or plain name search

    **Response:**
    - `results`: Ranked results with score, breakdowns, reason, missing signals
    - `empty_state`: Code, title and message when there are no results
    - `diagnostics`: Snapshot of how this request was resolved
    """
    try:
        profile = _parse_profile(request.user_profile)
        output = engine.recommend(
            query=request.query,
            profile=profile,
            questionnaire=request.questionnaire,
            max_results=request.max_results,
            weighted_mode=request.weighted_mode,
        )
        return output.model_dump(mode="json")

    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"❌ Recommendation request failed: {e}")
        return JSONResponse(
            status_code=500,
            content={"error": "We couldn't generate recommendations right now. Please try again."},
        )


@router.post("/score", summary="Score a single college")
def score_college(
    request: ScoreCollegeRequest,
    engine: RecommendationEngine = Depends(get_engine),
):
    """Preference breakdown and pipeline components for one college."""
    profile = _parse_profile(request.user_profile)
    return engine.score_single_college(
        request.college,
        profile=profile,
        questionnaire=request.questionnaire,
        query=request.query,
    )


# =============================================================================
# HEALTH CHECK
# =============================================================================

@router.get("/health", summary="Recommendation engine health check")
def health_check():
    """Check if recommendation engine is operational."""
    return {
        "status": "ok",
        "engine": "college-recommendation",
        "scorecard_configured": bool(config.COLLEGE_SCORECARD_KEY) and not config.USE_STUB_DATA,
        "ai_configured": bool(config.OPENAI_API_KEY),
    }
