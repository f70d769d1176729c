"""
Preference Weight Builder

Derives the 0-100 dimension weights used by the preference breakdown from the
user profile, the questionnaire and the presence of a free-text query.
"""

from typing import Dict, Optional

from .contracts import UserProfile, Questionnaire, PipelineWeights
from .constants import (
    WEIGHT_DIMENSIONS,
    BASELINE_PREFERENCE_WEIGHTS,
    BASELINE_PIPELINE_WEIGHTS,
    RANKING_WEIGHT_SHIFTS,
    CONTINUE_EDUCATION_WEIGHT_SHIFTS,
    FREE_TEXT_ENGAGEMENT_LENGTH,
    MIN_WEIGHTED_QUERY_LENGTH,
    CostOfAttendance,
    GeographyPreference,
    RankingImportance,
)
from .normalization import round_half_up


def budget_level(questionnaire: Optional[Questionnaire]) -> Optional[str]:
    """Explicit budget answer, else one derived from the cost bracket."""
    if questionnaire is None:
        return None
    if questionnaire.budget:
        return questionnaire.budget.lower()
    if questionnaire.cost_of_attendance == CostOfAttendance.UNDER_20K.value:
        return "low"
    if questionnaire.cost_of_attendance == CostOfAttendance.FROM_20K_TO_40K.value:
        return "medium"
    return None


def build_preference_weights(
    profile: Optional[UserProfile] = None,
    questionnaire: Optional[Questionnaire] = None,
    query: Optional[str] = None,
) -> Dict[str, int]:
    """
    Build preference weights (integers summing to exactly 100).

    Adjustments are applied in a fixed order on top of the transfer-student
    baseline, then normalized.
    """
    weights = dict(BASELINE_PREFERENCE_WEIGHTS)

    budget = budget_level(questionnaire)
    if budget in ("low", "tight"):
        weights["cost"] += 20
        weights["aid"] += 10
        weights["debt"] += 5
        weights["academics"] -= 15
    elif budget == "medium":
        weights["cost"] += 5

    if query and len(query.strip()) >= MIN_WEIGHTED_QUERY_LENGTH:
        weights["aiFit"] = 20
        weights["academics"] = max(0, weights["academics"] - 10)
        weights["cost"] = max(0, weights["cost"] - 10)

    if questionnaire is not None:
        geography = questionnaire.in_state_out_of_state
        if geography == GeographyPreference.IN_STATE.value:
            weights["location"] += 20
        elif geography == GeographyPreference.OUT_OF_STATE.value:
            weights["location"] += 5

    if profile is not None and profile.major and profile.major.strip():
        weights["academics"] += 15

    if questionnaire is not None:
        if questionnaire.ranking == RankingImportance.VERY_IMPORTANT.value:
            weights["academics"] += 20
        elif questionnaire.ranking == RankingImportance.SOMEWHAT_IMPORTANT.value:
            weights["academics"] += 10

        if any(len(text) > FREE_TEXT_ENGAGEMENT_LENGTH for text in questionnaire.free_text_values()):
            weights["academics"] += 5

    return normalize_weights(weights)


def normalize_weights(weights: Dict[str, int]) -> Dict[str, int]:
    """Scale to non-negative integers summing to 100; drift lands on the last dimension."""
    values = {dim: max(0, weights.get(dim, 0)) for dim in WEIGHT_DIMENSIONS}
    total = sum(values.values())

    if total <= 0:
        share = 100 // len(WEIGHT_DIMENSIONS)
        result = {dim: share for dim in WEIGHT_DIMENSIONS}
        result[WEIGHT_DIMENSIONS[-1]] += 100 - share * len(WEIGHT_DIMENSIONS)
        return result

    result = {dim: round_half_up(value * 100 / total) for dim, value in values.items()}
    last = WEIGHT_DIMENSIONS[-1]
    result[last] += 100 - sum(result.values())

    if result[last] < 0:
        deficit = -result[last]
        result[last] = 0
        largest = max(WEIGHT_DIMENSIONS, key=lambda dim: result[dim])
        result[largest] -= deficit

    return result


def build_pipeline_weights(questionnaire: Optional[Questionnaire] = None) -> PipelineWeights:
    """
    Component weights for the base-score blend, shifted by the ranking and
    continue-education answers and renormalized to sum to 1.0.
    """
    weights = dict(BASELINE_PIPELINE_WEIGHTS)

    shifts = []
    if questionnaire is not None:
        shifts.append(RANKING_WEIGHT_SHIFTS.get(questionnaire.ranking or "", {}))
        shifts.append(CONTINUE_EDUCATION_WEIGHT_SHIFTS.get(questionnaire.continue_education or "", {}))

    for shift in shifts:
        for key, delta in shift.items():
            weights[key] = max(0.0, weights[key] + delta)

    total = sum(weights.values())
    if total <= 0:
        weights = dict(BASELINE_PIPELINE_WEIGHTS)
        total = sum(weights.values())

    return PipelineWeights(**{key: value / total for key, value in weights.items()})
