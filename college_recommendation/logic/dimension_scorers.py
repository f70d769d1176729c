"""
Dimension Scorers

Individual scoring functions for each evaluation dimension.
Each scorer produces an integer score between 0 and 100.
All logic is deterministic - the AI factor is supplied by the caller.
"""

from typing import Dict, List, Optional, Tuple

from .contracts import CollegeCandidate, UserProfile, Questionnaire, ScoreBreakdown
from .constants import (
    NEUTRAL_SCORE,
    TUITION_SCALE_CAP,
    DEBT_SCALE_CAP,
    MAX_GPA,
    ACADEMIC_MAJOR_MATCH_BONUS,
    ACADEMIC_GPA_MAX_BONUS,
    ACADEMIC_MISSING_MAJOR_PENALTY,
    ACADEMIC_ARTICULATION_BONUS,
    ACADEMIC_COMPLETION_MAX_BONUS,
    LOCATION_MATCH_BONUS,
    MAJOR_FIT_MATCH,
    MAJOR_FIT_MISMATCH,
    COST_BRACKET_CEILINGS,
    TIGHT_BUDGET_BRACKETS,
    SIZE_FIT_TABLE,
    TRANSPORTATION_SETTING_FIT,
    GPA_BANDS_BY_ADMISSION_RATE,
    OPEN_ADMISSION_GPA_BAND,
    UNKNOWN_ADMISSION_GPA_BAND,
    MIN_QUERY_LENGTH,
    ClassSize,
    CostOfAttendance,
)
from .normalization import (
    clamp_score,
    round_half_up,
    normalize_rate,
    parse_gpa,
    parse_amount,
    state_matches,
)


# =============================================================================
# HELPERS
# =============================================================================

def _declared_major(profile: Optional[UserProfile]) -> str:
    if profile is None or not profile.major:
        return ""
    return profile.major.strip().lower()


def offers_major(college: CollegeCandidate, major: str) -> bool:
    """Case-insensitive substring match of the major against program names."""
    if not major:
        return False
    return any(major in (program or "").lower() for program in college.programs)


def preferred_size(questionnaire: Optional[Questionnaire]) -> Optional[str]:
    if questionnaire is None:
        return None
    if questionnaire.size_preference:
        return questionnaire.size_preference
    if questionnaire.class_size in (ClassSize.SMALL.value, ClassSize.LARGE.value):
        return questionnaire.class_size
    return None


# =============================================================================
# PREFERENCE DIMENSIONS
# =============================================================================

def score_academics(
    college: CollegeCandidate,
    profile: Optional[UserProfile] = None,
) -> int:
    """
    Academic/transfer fit. Admission rate is deliberately not used here;
    selectivity only feeds the prestige dimension.
    """
    major = _declared_major(profile)
    score = 50

    has_major = offers_major(college, major)
    if has_major:
        score += ACADEMIC_MAJOR_MATCH_BONUS
    elif major:
        score -= ACADEMIC_MISSING_MAJOR_PENALTY

    gpa = parse_gpa(profile.gpa) if profile is not None else None
    if gpa is not None:
        score += round_half_up(gpa / MAX_GPA * ACADEMIC_GPA_MAX_BONUS)

    # Articulation-agreement proxy
    if profile is not None and college.is_public and state_matches(profile.state, college.location.state):
        score += ACADEMIC_ARTICULATION_BONUS

    completion = normalize_rate(college.completion_rate)
    if completion is not None:
        score += round_half_up(completion * ACADEMIC_COMPLETION_MAX_BONUS)

    return clamp_score(score)


def score_cost(college: CollegeCandidate) -> int:
    tuition = parse_amount(college.tuition)
    if tuition is None:
        return NEUTRAL_SCORE
    return 100 - round_half_up(min(TUITION_SCALE_CAP, tuition) / TUITION_SCALE_CAP * 100)


def score_aid(college: CollegeCandidate) -> int:
    rate = normalize_rate(college.pell_grant_rate)
    if rate is None:
        return NEUTRAL_SCORE
    return round_half_up(rate * 100)


def score_debt(college: CollegeCandidate) -> int:
    debt = parse_amount(college.median_debt)
    if debt is None:
        return NEUTRAL_SCORE
    return 100 - round_half_up(min(DEBT_SCALE_CAP, debt) / DEBT_SCALE_CAP * 100)


def score_location(college: CollegeCandidate, questionnaire: Optional[Questionnaire] = None) -> int:
    score = NEUTRAL_SCORE
    if questionnaire is not None and state_matches(questionnaire.location, college.location.state):
        score += LOCATION_MATCH_BONUS
    return score


def score_size(college: CollegeCandidate, questionnaire: Optional[Questionnaire] = None) -> int:
    wanted = preferred_size(questionnaire)
    if wanted and wanted == college.size:
        return 100
    return NEUTRAL_SCORE


def score_setting(college: CollegeCandidate, questionnaire: Optional[Questionnaire] = None) -> int:
    wanted = questionnaire.setting_preference if questionnaire is not None else None
    if wanted and wanted == college.setting:
        return 100
    return NEUTRAL_SCORE


def score_prestige(college: CollegeCandidate) -> int:
    """Lower admission rate means higher selectivity and prestige."""
    rate = normalize_rate(college.admission_rate)
    if rate is None:
        return NEUTRAL_SCORE
    return round_half_up((1 - rate) * 100)


def compute_preference_breakdown(
    college: CollegeCandidate,
    weights: Dict[str, int],
    profile: Optional[UserProfile] = None,
    questionnaire: Optional[Questionnaire] = None,
    ai_fit_score: Optional[int] = None,
) -> ScoreBreakdown:
    """
    Score every preference dimension and combine them with the 0-100 weights.
    """
    scores: Dict[str, int] = {
        "academics": score_academics(college, profile),
        "cost": score_cost(college),
        "aid": score_aid(college),
        "debt": score_debt(college),
        "location": score_location(college, questionnaire),
        "size": score_size(college, questionnaire),
        "setting": score_setting(college, questionnaire),
        "prestige": score_prestige(college),
    }

    ai_fit: Optional[int] = None
    if ai_fit_score is not None:
        ai_fit = clamp_score(ai_fit_score)
    elif weights.get("aiFit", 0):
        # neutral rather than zeroing out a weighted dimension
        ai_fit = NEUTRAL_SCORE

    weighted = sum(score * weights.get(dim, 0) for dim, score in scores.items())
    if ai_fit is not None:
        weighted += ai_fit * weights.get("aiFit", 0)

    return ScoreBreakdown(**scores, ai_fit=ai_fit, final=clamp_score(weighted / 100))


# =============================================================================
# PIPELINE COMPONENTS
# =============================================================================

def implied_gpa_band(college: CollegeCandidate) -> Tuple[float, float]:
    """Typical admitted GPA band; more selective schools get tighter, higher bands."""
    rate = normalize_rate(college.admission_rate)
    if rate is None:
        return UNKNOWN_ADMISSION_GPA_BAND
    for upper_bound, band in GPA_BANDS_BY_ADMISSION_RATE:
        if rate < upper_bound:
            return band
    return OPEN_ADMISSION_GPA_BAND


def score_gpa_fit(college: CollegeCandidate, gpa: Optional[float]) -> int:
    """Position the student's GPA against the college's implied GPA band."""
    if gpa is None:
        return NEUTRAL_SCORE
    low, high = implied_gpa_band(college)
    if gpa >= high:
        return clamp_score(90 + min(10, round_half_up((gpa - high) * 20)))
    if gpa >= low:
        position = (gpa - low) / (high - low)
        return clamp_score(60 + round_half_up(position * 30))
    return clamp_score(max(0, 60 - round_half_up((low - gpa) * 60)))


def score_major_fit(college: CollegeCandidate, profile: Optional[UserProfile] = None) -> int:
    major = _declared_major(profile)
    if not major:
        return NEUTRAL_SCORE
    if offers_major(college, major):
        return MAJOR_FIT_MATCH
    return MAJOR_FIT_MISMATCH


def _cost_fit(college: CollegeCandidate, questionnaire: Optional[Questionnaire]) -> int:
    bracket = questionnaire.cost_of_attendance if questionnaire is not None else None
    tuition = parse_amount(college.tuition)
    if tuition is None or not bracket:
        return NEUTRAL_SCORE
    if bracket == CostOfAttendance.OVER_60K.value:
        return 100
    ceiling = COST_BRACKET_CEILINGS.get(bracket)
    if ceiling is None:
        return NEUTRAL_SCORE
    if tuition <= ceiling:
        return 100
    return clamp_score(100 - (tuition - ceiling) / ceiling * 100)


def _aid_fit(college: CollegeCandidate, questionnaire: Optional[Questionnaire]) -> int:
    bracket = questionnaire.cost_of_attendance if questionnaire is not None else None
    if bracket in TIGHT_BUDGET_BRACKETS:
        return score_aid(college)
    return NEUTRAL_SCORE


def _size_fit(college: CollegeCandidate, questionnaire: Optional[Questionnaire]) -> int:
    wanted = preferred_size(questionnaire)
    return SIZE_FIT_TABLE.get(wanted or "", {}).get(college.size, NEUTRAL_SCORE)


def _setting_fit(college: CollegeCandidate, questionnaire: Optional[Questionnaire]) -> int:
    if questionnaire is None:
        return NEUTRAL_SCORE
    if questionnaire.setting_preference:
        return 100 if questionnaire.setting_preference == college.setting else 40
    table = TRANSPORTATION_SETTING_FIT.get(questionnaire.transportation or "", {})
    return table.get(college.setting, NEUTRAL_SCORE)


def preference_sub_fits(college: CollegeCandidate, questionnaire: Optional[Questionnaire] = None) -> Dict[str, int]:
    return {
        "cost": _cost_fit(college, questionnaire),
        "debt": score_debt(college),
        "aid": _aid_fit(college, questionnaire),
        "size": _size_fit(college, questionnaire),
        "setting": _setting_fit(college, questionnaire),
    }


def score_preference_fit(college: CollegeCandidate, questionnaire: Optional[Questionnaire] = None) -> int:
    """Average of the questionnaire-derived cost/debt/aid/size/setting fits."""
    fits = preference_sub_fits(college, questionnaire)
    return clamp_score(sum(fits.values()) / len(fits))


# =============================================================================
# QUERY RELEVANCE
# =============================================================================

def score_query_match(college: CollegeCandidate, query: Optional[str]) -> int:
    """
    Relevance of a free-text query to a college name and programs.
    Queries under 2 characters are not scored (neutral 50).
    """
    q = (query or "").strip().lower()
    if len(q) < MIN_QUERY_LENGTH:
        return NEUTRAL_SCORE

    name = (college.name or "").lower()
    programs: List[str] = [(p or "").lower() for p in college.programs]

    if q in name:
        return 100
    if any(q in program for program in programs):
        return 90

    tokens = q.split()
    matched = sum(
        1 for token in tokens
        if token in name or any(token in program for program in programs)
    )
    coverage = matched / len(tokens) if tokens else 0.0

    if coverage >= 1.0:
        return 85
    if coverage >= 0.75:
        return 75
    if coverage >= 0.5:
        return 65
    if coverage > 0:
        return 55
    return 20
