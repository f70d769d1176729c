"""
Recommendation Logic Module

Provides the deterministic scoring engine for college recommendations.
The top-level pipeline lives in .engine (RecommendationEngine, get_recommendations).
"""

from .contracts import (
    CollegeCandidate,
    CandidateFilter,
    FetchResult,
    Location,
    UserProfile,
    Questionnaire,
    ScoreBreakdown,
    PipelineWeights,
    ScoredCandidate,
    RecommendationResult,
    RecommendationOutput,
    EmptyState,
    Diagnostics,
)
from .constants import EmptyStateCode
from .normalization import normalize_questionnaire, state_matches
from .preference_weights import build_preference_weights
from .dimension_scorers import compute_preference_breakdown

__all__ = [
    # Contracts
    "CollegeCandidate",
    "CandidateFilter",
    "FetchResult",
    "Location",
    "UserProfile",
    "Questionnaire",
    "ScoreBreakdown",
    "PipelineWeights",
    "ScoredCandidate",
    "RecommendationResult",
    "RecommendationOutput",
    "EmptyState",
    "Diagnostics",

    # Enums
    "EmptyStateCode",

    # Helpers
    "normalize_questionnaire",
    "state_matches",
    "build_preference_weights",
    "compute_preference_breakdown",
]
