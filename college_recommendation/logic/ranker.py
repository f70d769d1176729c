"""
Ranker

Blends the deterministic base score with the AI factor and the query boost,
ranks candidates and picks the factors used to explain each result.
"""

from typing import Dict, List, Tuple

from .contracts import ScoredCandidate
from .constants import (
    AI_NEUTRAL_FACTOR,
    BASE_SCORE_BLEND,
    AI_FACTOR_BLEND,
    QUERY_BOOST_MAX,
    FACTOR_LABELS,
)
from .normalization import clamp_score, round_half_up


def query_boost(scored: ScoredCandidate) -> int:
    if scored.query_match is None:
        return 0
    return round_half_up(scored.query_match / 100 * QUERY_BOOST_MAX)


def blend_final_scores(
    scored_candidates: List[ScoredCandidate],
    ai_factors: Dict[str, int],
) -> List[ScoredCandidate]:
    """
    Compute the final score for every candidate.

    Candidates outside the AI subset (or omitted by the AI) get the neutral
    factor.

    Args:
        scored_candidates: Output of the deterministic pass
        ai_factors: Candidate id -> AI factor (0-100)

    Returns:
        New ScoredCandidate objects with ai_factor and final_score set
    """
    blended = []
    for scored in scored_candidates:
        ai_factor = clamp_score(ai_factors.get(scored.candidate.id, AI_NEUTRAL_FACTOR))
        final = clamp_score(
            scored.base_score * BASE_SCORE_BLEND
            + ai_factor * AI_FACTOR_BLEND
            + query_boost(scored)
        )
        blended.append(scored.model_copy(update={"ai_factor": ai_factor, "final_score": final}))
    return blended


def rank_candidates(
    scored_candidates: List[ScoredCandidate],
    max_results: int,
) -> List[ScoredCandidate]:
    """Sort by final score (descending) and keep the top max_results."""
    ranked = sorted(scored_candidates, key=lambda s: s.final_score, reverse=True)
    return ranked[:max(0, max_results)]


def top_factors(scored: ScoredCandidate, count: int = 2) -> List[Tuple[str, int]]:
    """The highest-scoring named sub-factors, as (label, score) pairs."""
    components = scored.components()
    ordered = sorted(components.items(), key=lambda item: item[1], reverse=True)
    return [(FACTOR_LABELS[key], value) for key, value in ordered[:count]]


def build_reason(scored: ScoredCandidate, fallback_note: str = "") -> str:
    factors = ", ".join(f"{label} ({value})" for label, value in top_factors(scored))
    reason = f"Top factors: {factors}"
    if fallback_note:
        reason = f"{reason}. {fallback_note}"
    return reason
