"""
Score Aggregator

Deterministic pass: computes the GPA/prestige/major/preference components for
each candidate and blends them into a base score with the pipeline weights.
"""

from typing import List, Optional

from .contracts import (
    CollegeCandidate,
    UserProfile,
    Questionnaire,
    PipelineWeights,
    ScoredCandidate,
)
from .dimension_scorers import (
    score_gpa_fit,
    score_prestige,
    score_major_fit,
    score_preference_fit,
    score_query_match,
)
from .constants import GPA_FIT_MISMATCH_THRESHOLD, GPA_MISMATCH_SCORE_CAP, MIN_QUERY_LENGTH
from .normalization import clamp_score


def aggregate_scores(
    candidate: CollegeCandidate,
    weights: PipelineWeights,
    profile: Optional[UserProfile] = None,
    questionnaire: Optional[Questionnaire] = None,
    gpa: Optional[float] = None,
    query: Optional[str] = None,
) -> ScoredCandidate:
    """
    Compute all components for one candidate and its base score.

    Args:
        candidate: College to score
        weights: Pipeline component weights (sum to 1.0)
        profile: User profile (major, state)
        questionnaire: Normalized questionnaire
        gpa: Parsed GPA, or None when not provided/invalid
        query: Free-text query; scored only when at least 2 characters

    Returns:
        ScoredCandidate with base_score set (AI factor still neutral)
    """
    gpa_fit = score_gpa_fit(candidate, gpa)
    prestige = score_prestige(candidate)
    major_fit = score_major_fit(candidate, profile)
    preference_fit = score_preference_fit(candidate, questionnaire)

    base_score = clamp_score(
        gpa_fit * weights.gpa
        + prestige * weights.prestige
        + major_fit * weights.major
        + preference_fit * weights.preference
    )

    # Keep prestige/preference alone from lifting an academic mismatch to the top
    if gpa is not None and gpa_fit < GPA_FIT_MISMATCH_THRESHOLD:
        base_score = min(base_score, GPA_MISMATCH_SCORE_CAP)

    query_match = None
    if query and len(query.strip()) >= MIN_QUERY_LENGTH:
        query_match = score_query_match(candidate, query)

    return ScoredCandidate(
        candidate=candidate,
        gpa_fit=gpa_fit,
        prestige=prestige,
        major_fit=major_fit,
        preference_fit=preference_fit,
        base_score=base_score,
        query_match=query_match,
    )


def batch_aggregate(
    candidates: List[CollegeCandidate],
    weights: PipelineWeights,
    profile: Optional[UserProfile] = None,
    questionnaire: Optional[Questionnaire] = None,
    gpa: Optional[float] = None,
    query: Optional[str] = None,
) -> List[ScoredCandidate]:
    """Score all candidates and sort them by base score (descending)."""
    scored = [
        aggregate_scores(c, weights, profile, questionnaire, gpa, query)
        for c in candidates
    ]
    return sorted(scored, key=lambda s: s.base_score, reverse=True)
