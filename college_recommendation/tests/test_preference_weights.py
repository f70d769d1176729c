"""
Tests for preference weights (0-100 integers) and pipeline weights (fractions).
"""

import itertools

import pytest

from college_recommendation.logic.constants import BASELINE_PREFERENCE_WEIGHTS, WEIGHT_DIMENSIONS
from college_recommendation.logic.contracts import UserProfile
from college_recommendation.logic.normalization import normalize_questionnaire
from college_recommendation.logic.preference_weights import (
    budget_level,
    build_preference_weights,
    build_pipeline_weights,
    normalize_weights,
)


def test_baseline_weights_without_inputs():
    assert build_preference_weights() == BASELINE_PREFERENCE_WEIGHTS


def test_weights_always_sum_to_100_and_are_non_negative():
    budgets = [None, "low", "tight", "medium", "high"]
    geographies = [None, "in_state", "out_of_state", "no_preference"]
    rankings = [None, "very_important", "somewhat_important", "not_important"]
    queries = [None, "", "ab", "computer science near seattle"]
    majors = [None, "", "Computer Science"]
    long_text = [None, "x" * 120]

    for budget, geography, ranking, query, major, text in itertools.product(
        budgets, geographies, rankings, queries, majors, long_text
    ):
        q = normalize_questionnaire({
            "budget": budget,
            "inStateOutOfState": geography,
            "ranking": ranking,
            "extracurriculars": text,
        })
        weights = build_preference_weights(UserProfile(major=major), q, query)

        assert sum(weights.values()) == 100
        assert all(value >= 0 for value in weights.values())
        assert list(weights) == WEIGHT_DIMENSIONS


def test_tight_budget_shifts_weight_to_cost():
    q = normalize_questionnaire({"budget": "low"})
    weights = build_preference_weights(questionnaire=q)

    assert weights["cost"] > BASELINE_PREFERENCE_WEIGHTS["cost"]
    assert weights["aid"] > 0
    assert weights["debt"] > 0
    assert weights["academics"] < BASELINE_PREFERENCE_WEIGHTS["academics"]


def test_query_longer_than_two_characters_enables_ai_fit():
    assert build_preference_weights(query="nursing")["aiFit"] > 0
    assert build_preference_weights(query="ab")["aiFit"] == 0


def test_in_state_weights_location_more_than_out_of_state():
    in_state = build_preference_weights(questionnaire=normalize_questionnaire({"inStateOutOfState": "in_state"}))
    out_state = build_preference_weights(questionnaire=normalize_questionnaire({"inStateOutOfState": "out_of_state"}))
    assert in_state["location"] > out_state["location"]


def test_budget_level_derived_from_cost_bracket():
    assert budget_level(normalize_questionnaire({"costOfAttendance": "under_20k"})) == "low"
    assert budget_level(normalize_questionnaire({"costOfAttendance": "20k_to_40k"})) == "medium"
    assert budget_level(normalize_questionnaire({"costOfAttendance": "over_60k"})) is None
    assert budget_level(normalize_questionnaire({"budget": "High", "costOfAttendance": "under_20k"})) == "high"
    assert budget_level(None) is None


def test_normalize_weights_handles_all_zero():
    weights = normalize_weights({})
    assert sum(weights.values()) == 100
    assert all(value >= 0 for value in weights.values())


def test_normalize_weights_rounding_drift_never_negative():
    # every dimension rounds up, so the drift exceeds the last dimension
    weights = normalize_weights({dim: 1 for dim in WEIGHT_DIMENSIONS[:8]})
    assert sum(weights.values()) == 100
    assert min(weights.values()) >= 0


def test_pipeline_weights_baseline():
    weights = build_pipeline_weights()
    assert weights.gpa == pytest.approx(0.35)
    assert weights.prestige == pytest.approx(0.25)
    assert weights.major == pytest.approx(0.20)
    assert weights.preference == pytest.approx(0.20)


@pytest.mark.parametrize("answers", [
    {"ranking": "very_important"},
    {"ranking": "not_important", "continueEducation": "no"},
    {"ranking": "somewhat_important", "continueEducation": "yes"},
    {"continueEducation": "maybe"},
])
def test_pipeline_weights_sum_to_one(answers):
    weights = build_pipeline_weights(normalize_questionnaire(answers))
    total = weights.gpa + weights.prestige + weights.major + weights.preference
    assert total == pytest.approx(1.0)
    assert min(weights.gpa, weights.prestige, weights.major, weights.preference) >= 0


def test_ranking_importance_moves_prestige_weight():
    important = build_pipeline_weights(normalize_questionnaire({"ranking": "very_important"}))
    unimportant = build_pipeline_weights(normalize_questionnaire({"ranking": "not_important"}))

    assert important.prestige > 0.25
    assert unimportant.prestige < 0.25
    assert unimportant.preference > 0.20
