"""
Normalization Helpers

Pure helpers shared by the scorers: rounding and clamping, rate and GPA
parsing, US state matching, and questionnaire coercion into the enumerated
answer space. None of these raise on missing or malformed input.
"""

import math
import re
from enum import Enum
from typing import Any, Dict, Optional, Type, Mapping

from .constants import (
    STATE_NAMES,
    MAX_GPA,
    NO_PREFERENCE,
    CostOfAttendance,
    ClassSize,
    Transportation,
    GeographyPreference,
    Housing,
    RankingImportance,
    ContinueEducation,
)
from .contracts import Questionnaire


# =============================================================================
# NUMBERS
# =============================================================================

def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    if value < 0:
        return -int(math.floor(-value + 0.5))
    return int(math.floor(value + 0.5))


def clamp_score(value: float, low: int = 0, high: int = 100) -> int:
    return max(low, min(high, round_half_up(value)))


def _as_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def normalize_rate(value: Any) -> Optional[float]:
    """
    Normalize a rate given either as a 0-1 fraction or a 0-100 percentage.
    Returns a fraction in [0, 1], or None when unknown.
    """
    number = _as_number(value)
    if number is None:
        return None
    if number > 1:
        number = number / 100
    return max(0.0, min(1.0, number))


def parse_gpa(value: Any) -> Optional[float]:
    """Parse a GPA on the 0-4 scale. Invalid or out-of-range input means no GPA."""
    number = _as_number(value)
    if number is None or number < 0 or number > MAX_GPA:
        return None
    return number


def parse_amount(value: Any) -> Optional[float]:
    """Dollar amounts (tuition, debt); negatives clamp to zero."""
    number = _as_number(value)
    if number is None:
        return None
    return max(0.0, number)


# =============================================================================
# STATES
# =============================================================================

_STATE_ABBREVIATIONS: Mapping[str, str] = {name: abbr for abbr, name in STATE_NAMES.items()}


def normalize_state_text(value: Any) -> str:
    text = str(value or "").strip().lower().replace(".", "")
    text = re.sub(r"\s+", " ", text)
    if text.endswith(" state"):
        text = text[: -len(" state")].strip()
    return text


def _expand(text: str) -> str:
    if len(text) == 2:
        return STATE_NAMES.get(text, text)
    return text


def state_matches(a: Any, b: Any) -> bool:
    """True when two free-text state values denote the same US state."""
    left = normalize_state_text(a)
    right = normalize_state_text(b)
    if not left or not right:
        return False
    if left == right:
        return True
    if len(left) == 2 or len(right) == 2:
        return _expand(left) == _expand(right)
    return False


def state_abbreviation(value: Any) -> Optional[str]:
    """Two-letter uppercase abbreviation for a state name or abbreviation."""
    text = normalize_state_text(value)
    if not text:
        return None
    if len(text) == 2 and text in STATE_NAMES:
        return text.upper()
    abbr = _STATE_ABBREVIATIONS.get(text)
    return abbr.upper() if abbr else None


# =============================================================================
# QUESTIONNAIRE
# =============================================================================

# answer key (as sent by clients) -> enum
QUESTIONNAIRE_ENUM_FIELDS: Dict[str, Type[Enum]] = {
    "costOfAttendance": CostOfAttendance,
    "classSize": ClassSize,
    "transportation": Transportation,
    "inStateOutOfState": GeographyPreference,
    "housing": Housing,
    "ranking": RankingImportance,
    "continueEducation": ContinueEducation,
}

# Legacy keys that carried the geography answer
GEOGRAPHY_LEGACY_KEYS = ("geography", "locationPreferences")

QUESTIONNAIRE_TEXT_FIELDS = (
    "budget",
    "location",
    "sizePreference",
    "settingPreference",
    "companiesNearby",
    "extracurriculars",
)

_SNAKE_TO_ALIAS = {
    "cost_of_attendance": "costOfAttendance",
    "class_size": "classSize",
    "in_state_out_of_state": "inStateOutOfState",
    "continue_education": "continueEducation",
    "size_preference": "sizePreference",
    "setting_preference": "settingPreference",
    "companies_nearby": "companiesNearby",
    "use_weighted_search": "useWeightedSearch",
}


def _norm_answer(value: Any) -> str:
    text = str(value if value is not None else "").strip().lower()
    if text.startswith("questionnaire."):
        text = text[len("questionnaire."):]
    text = re.sub(r"[\s_\-]+", " ", text)
    text = re.sub(r"[^\w ]", "", text)
    return text.strip()


def coerce_enum(enum_cls: Type[Enum], value: Any) -> Optional[str]:
    """
    Map a raw answer onto enum_cls, ignoring case, separators and punctuation.
    Blank answers return None; unrecognized answers return "no_preference".
    """
    if isinstance(value, enum_cls):
        return value.value
    raw = _norm_answer(value)
    if not raw:
        return None
    squashed = raw.replace(" ", "")
    for member in enum_cls:
        key = _norm_answer(member.value)
        if key == raw or key.replace(" ", "") == squashed:
            return member.value
    return NO_PREFERENCE


TRUTHY_ANSWERS = ("1", "true", "yes", "on")
FALSY_ANSWERS = ("0", "false", "no", "off")


def _coerce_bool(value: Any, default: bool = True) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return default
    raw = str(value).strip().lower()
    if raw in TRUTHY_ANSWERS:
        return True
    if raw in FALSY_ANSWERS:
        return False
    return default


def _clean_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def normalize_questionnaire(answers: Any) -> Questionnaire:
    """
    Build a Questionnaire from raw answers (dict, Questionnaire or None).
    Accepts camelCase or snake_case keys; unknown keys are kept in extra_answers.
    """
    if isinstance(answers, Questionnaire):
        return answers
    if not isinstance(answers, dict):
        return Questionnaire()

    raw: Dict[str, Any] = {}
    for key, value in answers.items():
        raw[_SNAKE_TO_ALIAS.get(key, key)] = value

    data: Dict[str, Any] = {}
    extra: Dict[str, Any] = {}

    if raw.get("inStateOutOfState") is None:
        for legacy in GEOGRAPHY_LEGACY_KEYS:
            if raw.get(legacy) is not None:
                raw["inStateOutOfState"] = raw[legacy]
                break

    for key, value in raw.items():
        if key in QUESTIONNAIRE_ENUM_FIELDS:
            coerced = coerce_enum(QUESTIONNAIRE_ENUM_FIELDS[key], value)
            if coerced is not None:
                data[key] = coerced
        elif key in QUESTIONNAIRE_TEXT_FIELDS:
            data[key] = _clean_text(value)
        elif key == "useWeightedSearch":
            data[key] = _coerce_bool(value)
        elif key == "extra_answers" and isinstance(value, dict):
            extra.update(value)
        elif key not in GEOGRAPHY_LEGACY_KEYS:
            extra[key] = value

    if isinstance(data.get("budget"), str):
        data["budget"] = data["budget"].lower()
    for key in ("sizePreference", "settingPreference"):
        if isinstance(data.get(key), str):
            data[key] = data[key].lower()

    return Questionnaire(**data, extra_answers=extra)
