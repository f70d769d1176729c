"""
Scoring Engine Constants

Defines baseline weights, scaling caps, GPA bands, thresholds, enums and the
state lookup table used by the recommendation engine.
"""

from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Tuple


# =============================================================================
# QUESTIONNAIRE ENUMS
# =============================================================================

NO_PREFERENCE = "no_preference"


class CostOfAttendance(str, Enum):
    UNDER_20K = "under_20k"
    FROM_20K_TO_40K = "20k_to_40k"
    FROM_40K_TO_60K = "40k_to_60k"
    OVER_60K = "over_60k"
    NO_PREFERENCE = NO_PREFERENCE


class ClassSize(str, Enum):
    SMALL = "small"
    LARGE = "large"
    NO_PREFERENCE = NO_PREFERENCE


class Transportation(str, Enum):
    CAR = "car"
    TRANSIT = "transit"
    BIKE = "bike"
    WALK = "walk"
    NO_PREFERENCE = NO_PREFERENCE


class GeographyPreference(str, Enum):
    IN_STATE = "in_state"
    OUT_OF_STATE = "out_of_state"
    NO_PREFERENCE = NO_PREFERENCE


class Housing(str, Enum):
    ON_CAMPUS = "on_campus"
    OFF_CAMPUS = "off_campus"
    COMMUTE = "commute"
    NO_PREFERENCE = NO_PREFERENCE


class RankingImportance(str, Enum):
    VERY_IMPORTANT = "very_important"
    SOMEWHAT_IMPORTANT = "somewhat_important"
    NOT_IMPORTANT = "not_important"
    NO_PREFERENCE = NO_PREFERENCE


class ContinueEducation(str, Enum):
    YES = "yes"
    NO = "no"
    MAYBE = "maybe"
    NO_PREFERENCE = NO_PREFERENCE


class EmptyStateCode(str, Enum):
    """Reasons the engine can give for returning zero results."""
    QUERY_NO_RESULTS = "QUERY_NO_RESULTS"
    IN_STATE_STATE_MISSING = "IN_STATE_STATE_MISSING"
    IN_STATE_NO_MATCHES = "IN_STATE_NO_MATCHES"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    NETWORK_TIMEOUT = "NETWORK_TIMEOUT"


EMPTY_STATE_COPY: Dict[EmptyStateCode, Tuple[str, str]] = {
    EmptyStateCode.QUERY_NO_RESULTS: (
        "No colleges found",
        "Try a longer or different college name.",
    ),
    EmptyStateCode.IN_STATE_STATE_MISSING: (
        "Add your state",
        "You asked for in-state colleges, but we don't know your state yet. Add it to your profile.",
    ),
    EmptyStateCode.IN_STATE_NO_MATCHES: (
        "No in-state matches",
        "We couldn't find colleges in your state. Try changing your in-state preference.",
    ),
    EmptyStateCode.UPSTREAM_ERROR: (
        "Something went wrong",
        "We couldn't load colleges right now. Please try again.",
    ),
    EmptyStateCode.NETWORK_TIMEOUT: (
        "Connection timed out",
        "College data is taking too long to load. Check your connection and try again.",
    ),
}


# =============================================================================
# PREFERENCE WEIGHTS (0-100, must sum to 100)
# =============================================================================

# Dimension order matters: normalization drift lands on the last entry.
WEIGHT_DIMENSIONS: List[str] = [
    "academics",
    "cost",
    "location",
    "prestige",
    "size",
    "setting",
    "aid",
    "debt",
    "aiFit",
]

# Transfer-student defaults
BASELINE_PREFERENCE_WEIGHTS: Dict[str, int] = {
    "academics": 45,
    "cost": 25,
    "location": 15,
    "prestige": 5,
    "size": 5,
    "setting": 5,
    "aid": 0,
    "debt": 0,
    "aiFit": 0,
}

FREE_TEXT_ENGAGEMENT_LENGTH = 80
MIN_WEIGHTED_QUERY_LENGTH = 3  # query must be longer than 2 characters


# =============================================================================
# PIPELINE WEIGHTS (floats, must sum to 1.0)
# =============================================================================

BASELINE_PIPELINE_WEIGHTS: Dict[str, float] = {
    "gpa": 0.35,
    "prestige": 0.25,
    "major": 0.20,
    "preference": 0.20,
}

RANKING_WEIGHT_SHIFTS: Dict[str, Dict[str, float]] = {
    RankingImportance.VERY_IMPORTANT.value: {"prestige": 0.15, "gpa": 0.05},
    RankingImportance.SOMEWHAT_IMPORTANT.value: {"prestige": 0.05},
    RankingImportance.NOT_IMPORTANT.value: {"prestige": -0.15, "preference": 0.10},
}

CONTINUE_EDUCATION_WEIGHT_SHIFTS: Dict[str, Dict[str, float]] = {
    ContinueEducation.YES.value: {"gpa": 0.05, "prestige": 0.05},
    ContinueEducation.NO.value: {"preference": 0.10},
}


# =============================================================================
# DIMENSION SCALING
# =============================================================================

NEUTRAL_SCORE = 50
TUITION_SCALE_CAP = 60000
DEBT_SCALE_CAP = 50000
MAX_GPA = 4.0

ACADEMIC_MAJOR_MATCH_BONUS = 30
ACADEMIC_GPA_MAX_BONUS = 20
ACADEMIC_MISSING_MAJOR_PENALTY = 40
ACADEMIC_ARTICULATION_BONUS = 15
ACADEMIC_COMPLETION_MAX_BONUS = 20
LOCATION_MATCH_BONUS = 25

MAJOR_FIT_MATCH = 90
MAJOR_FIT_MISMATCH = 20

# Budget ceiling per cost-of-attendance bracket (None = open ended)
COST_BRACKET_CEILINGS: Dict[str, int] = {
    CostOfAttendance.UNDER_20K.value: 20000,
    CostOfAttendance.FROM_20K_TO_40K.value: 40000,
    CostOfAttendance.FROM_40K_TO_60K.value: 60000,
}

TIGHT_BUDGET_BRACKETS = (
    CostOfAttendance.UNDER_20K.value,
    CostOfAttendance.FROM_20K_TO_40K.value,
)

# preferred size -> candidate size -> fit
SIZE_FIT_TABLE: Dict[str, Dict[str, int]] = {
    "small": {"small": 100, "medium": 60, "large": 20},
    "medium": {"small": 60, "medium": 100, "large": 60},
    "large": {"small": 30, "medium": 60, "large": 100},
}

# transportation answer -> candidate setting -> fit
TRANSPORTATION_SETTING_FIT: Dict[str, Dict[str, int]] = {
    Transportation.TRANSIT.value: {"urban": 100, "suburban": 60, "rural": 20},
    Transportation.WALK.value: {"urban": 90, "suburban": 60, "rural": 40},
    Transportation.BIKE.value: {"urban": 70, "suburban": 80, "rural": 40},
    Transportation.CAR.value: {"urban": 50, "suburban": 80, "rural": 70},
}


# =============================================================================
# GPA BANDS (implied by admission rate)
# =============================================================================

# (admission rate upper bound, (band low, band high)); most selective first
GPA_BANDS_BY_ADMISSION_RATE: List[Tuple[float, Tuple[float, float]]] = [
    (0.15, (3.8, 4.0)),
    (0.30, (3.6, 3.9)),
    (0.50, (3.3, 3.7)),
    (0.75, (3.0, 3.5)),
]
OPEN_ADMISSION_GPA_BAND: Tuple[float, float] = (2.5, 3.2)
UNKNOWN_ADMISSION_GPA_BAND: Tuple[float, float] = (2.8, 3.4)

GPA_FIT_MISMATCH_THRESHOLD = 40
GPA_MISMATCH_SCORE_CAP = 65


# =============================================================================
# BLEND & RANKING CONFIGURATION
# =============================================================================

AI_CANDIDATE_LIMIT = 20
AI_NEUTRAL_FACTOR = 50
BASE_SCORE_BLEND = 0.9
AI_FACTOR_BLEND = 0.1
QUERY_BOOST_MAX = 10
MIN_QUERY_LENGTH = 2

MAX_RESULTS_LIMIT = 50
DIAGNOSTIC_TOP_N = 5
SEARCH_MODE_SCORE = 50

# Display names for the named sub-factors used in result explanations
FACTOR_LABELS: Dict[str, str] = {
    "gpa_fit": "GPA fit",
    "prestige": "Prestige",
    "major_fit": "Major match",
    "preference_fit": "Preference fit",
    "ai_factor": "AI fit",
    "query_match": "Query match",
}


# =============================================================================
# US STATES
# =============================================================================

STATE_NAMES: Mapping[str, str] = MappingProxyType({
    "al": "alabama", "ak": "alaska", "az": "arizona", "ar": "arkansas",
    "ca": "california", "co": "colorado", "ct": "connecticut", "de": "delaware",
    "dc": "district of columbia", "fl": "florida", "ga": "georgia", "hi": "hawaii",
    "id": "idaho", "il": "illinois", "in": "indiana", "ia": "iowa",
    "ks": "kansas", "ky": "kentucky", "la": "louisiana", "me": "maine",
    "md": "maryland", "ma": "massachusetts", "mi": "michigan", "mn": "minnesota",
    "ms": "mississippi", "mo": "missouri", "mt": "montana", "ne": "nebraska",
    "nv": "nevada", "nh": "new hampshire", "nj": "new jersey", "nm": "new mexico",
    "ny": "new york", "nc": "north carolina", "nd": "north dakota", "oh": "ohio",
    "ok": "oklahoma", "or": "oregon", "pa": "pennsylvania", "ri": "rhode island",
    "sc": "south carolina", "sd": "south dakota", "tn": "tennessee", "tx": "texas",
    "ut": "utah", "vt": "vermont", "va": "virginia", "wa": "washington",
    "wv": "west virginia", "wi": "wisconsin", "wy": "wyoming",
})
