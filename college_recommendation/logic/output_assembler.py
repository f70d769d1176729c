"""
Output Assembler

Transforms internal scoring data into RecommendationResult objects:
score text, human-readable breakdowns, explanations and missing-signal notes.
"""

from typing import Dict, List, Optional

from .contracts import (
    CollegeCandidate,
    UserProfile,
    Questionnaire,
    ScoredCandidate,
    ScoreBreakdown,
    RecommendationResult,
    EmptyState,
    DiagnosticEntry,
)
from .constants import EmptyStateCode, EMPTY_STATE_COPY, SEARCH_MODE_SCORE
from .normalization import normalize_rate, round_half_up
from .ranker import build_reason


DIMENSION_LABELS: Dict[str, str] = {
    "academics": "Academic Match",
    "gpa": "GPA Fit",
    "gpa_fit": "GPA Fit",
    "prestige": "Prestige Match",
    "major_fit": "Major Match",
    "preference_fit": "Preference Fit",
    "cost": "Cost Match",
    "aid": "Financial Aid Match",
    "debt": "Debt Match",
    "location": "Location Match",
    "size": "Size Match",
    "setting": "Setting Match",
    "ai_fit": "Search Match",
    "ai_factor": "AI Fit",
    "query_match": "Query Match",
    "final": "Overall Match",
}

MISSING_SIGNAL_LABELS: Dict[str, str] = {
    "college.programs": "College program list",
    "user.major": "Declared major",
    "college.tuition": "Published tuition",
    "questionnaire.costOfAttendance": "Your cost/budget preference",
    "college.pellGrantRate": "College Pell grant rate",
    "questionnaire.geography": "In-state / out-of-state preference",
    "college.location.state": "College state/location",
    "questionnaire.location": "Preferred location",
    "college.size": "College size (small/medium/large)",
    "questionnaire.classSize": "Preferred class size",
    "college.setting": "College setting (urban/suburban/rural)",
    "questionnaire.setting": "Preferred campus setting",
    "college.medianDebt": "Median graduate debt",
}


# =============================================================================
# FORMATTING
# =============================================================================

def format_currency(value: Optional[float]) -> str:
    if value is None:
        return "N/A"
    return f"${round_half_up(value):,}"


def format_percent(value: Optional[float]) -> str:
    if value is None:
        return "N/A"
    return f"{round_half_up(value)}%"


def format_score_text(score: Optional[float]) -> str:
    if score is None:
        return "N/A"
    return f"{round_half_up(score)}/100"


def humanize_dimension(key: str) -> str:
    return DIMENSION_LABELS.get(key, key)


def format_breakdown(breakdown: Dict[str, int], college: Optional[CollegeCandidate] = None) -> Dict[str, str]:
    """Turn a numeric breakdown into labelled, human-readable strings."""
    out: Dict[str, str] = {}
    admission = normalize_rate(college.admission_rate) if college else None
    pell = normalize_rate(college.pell_grant_rate) if college else None

    for key, value in breakdown.items():
        text = format_percent(value)
        if key == "final":
            text = format_score_text(value)
        elif key in ("cost", "preference_fit") and college and college.tuition is not None:
            text = f"{text} (typical tuition {format_currency(college.tuition)})"
        elif key == "debt" and college and college.median_debt is not None:
            text = f"{text} (median debt {format_currency(college.median_debt)})"
        elif key == "aid" and pell is not None:
            text = f"{text} (Pell grant rate {format_percent(pell * 100)})"
        elif key == "prestige" and admission is not None:
            text = f"{text} (admission rate {format_percent(admission * 100)})"
        out[humanize_dimension(key)] = text
    return out


# =============================================================================
# MISSING SIGNALS
# =============================================================================

def compute_missing_signals(
    college: CollegeCandidate,
    profile: Optional[UserProfile],
    questionnaire: Optional[Questionnaire],
) -> List[str]:
    """Keys of inputs that are missing and lower confidence in the score."""
    q = questionnaire or Questionnaire()
    missing: List[str] = []

    if not college.programs:
        missing.append("college.programs")
    if profile is None or not profile.major:
        missing.append("user.major")
    if college.tuition is None:
        missing.append("college.tuition")
    if not q.cost_of_attendance and not q.budget:
        missing.append("questionnaire.costOfAttendance")
    if college.pell_grant_rate is None:
        missing.append("college.pellGrantRate")
    if not q.in_state_out_of_state:
        missing.append("questionnaire.geography")
    if not college.location.state:
        missing.append("college.location.state")
    if not q.location:
        missing.append("questionnaire.location")
    if college.size == "unknown":
        missing.append("college.size")
    if not q.class_size and not q.size_preference:
        missing.append("questionnaire.classSize")
    if college.setting == "unknown":
        missing.append("college.setting")
    if not q.setting_preference and not q.transportation:
        missing.append("questionnaire.setting")
    if college.median_debt is None:
        missing.append("college.medianDebt")
    return missing


def humanize_missing(missing: List[str]) -> List[str]:
    return [MISSING_SIGNAL_LABELS.get(key, key) for key in missing]


# =============================================================================
# RESULTS
# =============================================================================

def assemble_result(
    scored: ScoredCandidate,
    preference_breakdown: Optional[ScoreBreakdown] = None,
    profile: Optional[UserProfile] = None,
    questionnaire: Optional[Questionnaire] = None,
    fallback_note: str = "",
) -> RecommendationResult:
    """Convert a ranked ScoredCandidate into a RecommendationResult."""
    college = scored.candidate
    breakdown = dict(scored.components())
    breakdown["base"] = scored.base_score
    breakdown["final"] = scored.final_score

    human = format_breakdown({k: v for k, v in breakdown.items() if k != "base"}, college)

    return RecommendationResult(
        college=college,
        score=scored.final_score,
        score_text=format_score_text(scored.final_score),
        breakdown=breakdown,
        breakdown_human=human,
        reason=build_reason(scored, fallback_note),
        preference_breakdown=preference_breakdown.as_dict() if preference_breakdown else None,
        missing_signals=humanize_missing(compute_missing_signals(college, profile, questionnaire)),
    )


def assemble_search_result(college: CollegeCandidate) -> RecommendationResult:
    """Name-search hit with neutral score metadata and no breakdown."""
    return RecommendationResult(
        college=college,
        score=SEARCH_MODE_SCORE,
        score_text=format_score_text(SEARCH_MODE_SCORE),
        reason="Name search result",
    )


def build_empty_state(code: EmptyStateCode) -> EmptyState:
    title, message = EMPTY_STATE_COPY[code]
    return EmptyState(code=code, title=title, message=message)


def build_diagnostic_entries(ranked: List[ScoredCandidate], limit: int) -> List[DiagnosticEntry]:
    entries = []
    for scored in ranked[:limit]:
        components = dict(scored.components())
        components["base"] = scored.base_score
        entries.append(DiagnosticEntry(
            id=scored.candidate.id,
            name=scored.candidate.name,
            score=scored.final_score,
            components=components,
        ))
    return entries
