"""
Tests for the normalization helpers: rounding, rates, GPA, states and
questionnaire coercion.
"""

import pytest

from college_recommendation.logic.constants import (
    CostOfAttendance,
    ClassSize,
    GeographyPreference,
    NO_PREFERENCE,
)
from college_recommendation.logic.contracts import Questionnaire
from college_recommendation.logic.normalization import (
    round_half_up,
    clamp_score,
    normalize_rate,
    parse_gpa,
    parse_amount,
    state_matches,
    state_abbreviation,
    coerce_enum,
    normalize_questionnaire,
)


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.5) == 1
    assert round_half_up(2.4999) == 2
    assert round_half_up(-2.5) == -3


def test_clamp_score():
    assert clamp_score(120) == 100
    assert clamp_score(-5) == 0
    assert clamp_score(72.5) == 73


def test_normalize_rate_accepts_fraction_or_percent():
    assert normalize_rate(0.23) == pytest.approx(0.23)
    assert normalize_rate(23) == pytest.approx(0.23)
    assert normalize_rate("23") == pytest.approx(0.23)
    assert normalize_rate(150) == 1.0
    assert normalize_rate(None) is None
    assert normalize_rate("n/a") is None
    assert normalize_rate(True) is None


def test_parse_gpa():
    assert parse_gpa("3.8") == pytest.approx(3.8)
    assert parse_gpa(4) == 4.0
    assert parse_gpa(0) == 0.0
    assert parse_gpa("4.5") is None
    assert parse_gpa(-1) is None
    assert parse_gpa("abc") is None
    assert parse_gpa(None) is None


def test_parse_amount():
    assert parse_amount("12076") == 12076.0
    assert parse_amount(-10) == 0.0
    assert parse_amount(None) is None


@pytest.mark.parametrize("a,b", [
    ("WA", "Washington"),
    ("Washington", "wa"),
    ("wa.", "WASHINGTON"),
    ("Washington State", "WA"),
    ("new  york", "NY"),
])
def test_state_matches(a, b):
    assert state_matches(a, b)


@pytest.mark.parametrize("a,b", [
    ("WA", "Oregon"),
    ("WA", ""),
    (None, "WA"),
    ("Washington", "West Virginia"),
])
def test_state_does_not_match(a, b):
    assert not state_matches(a, b)


def test_state_abbreviation():
    assert state_abbreviation("washington") == "WA"
    assert state_abbreviation("Oregon") == "OR"
    assert state_abbreviation("fl") == "FL"
    assert state_abbreviation("Atlantis") is None
    assert state_abbreviation("") is None


def test_coerce_enum_matches_labels():
    assert coerce_enum(GeographyPreference, "In-State") == "in_state"
    assert coerce_enum(CostOfAttendance, "Under $20k") == "under_20k"
    assert coerce_enum(ClassSize, "questionnaire.small") == "small"
    assert coerce_enum(ClassSize, ClassSize.LARGE) == "large"


def test_coerce_enum_blank_and_unknown():
    assert coerce_enum(ClassSize, "") is None
    assert coerce_enum(ClassSize, None) is None
    assert coerce_enum(ClassSize, "enormous") == NO_PREFERENCE


def test_normalize_questionnaire_from_dict():
    q = normalize_questionnaire({
        "inStateOutOfState": "in_state",
        "costOfAttendance": "20k_to_40k",
        "budget": "Tight",
        "favoriteColor": "blue",
    })

    assert q.in_state_out_of_state == "in_state"
    assert q.cost_of_attendance == "20k_to_40k"
    assert q.budget == "tight"
    assert q.extra_answers == {"favoriteColor": "blue"}
    assert q.use_weighted_search is True


def test_normalize_questionnaire_legacy_and_snake_keys():
    q = normalize_questionnaire({
        "geography": "Out of state",
        "class_size": "Small",
        "use_weighted_search": "false",
    })

    assert q.in_state_out_of_state == "out_of_state"
    assert q.class_size == "small"
    assert q.use_weighted_search is False
    assert "geography" not in q.extra_answers


@pytest.mark.parametrize("answer", ["false", "no", "0", "off", " No ", 0])
def test_weighted_search_falsy_answers(answer):
    assert normalize_questionnaire({"useWeightedSearch": answer}).use_weighted_search is False


@pytest.mark.parametrize("answer,expected", [("yes", True), ("1", True), ("on", True), ("maybe", True), (None, True)])
def test_weighted_search_truthy_and_unknown_answers(answer, expected):
    assert normalize_questionnaire({"useWeightedSearch": answer}).use_weighted_search is expected


def test_normalize_questionnaire_passthrough_and_none():
    existing = Questionnaire(ranking="very_important")
    assert normalize_questionnaire(existing) is existing

    empty = normalize_questionnaire(None)
    assert empty.in_state_out_of_state is None
    assert empty.extra_answers == {}


def test_free_text_values_include_unknown_keys():
    q = normalize_questionnaire({"companiesNearby": "Boeing", "dreamJob": "pilot", "age": 20})
    assert sorted(q.free_text_values()) == ["Boeing", "pilot"]
