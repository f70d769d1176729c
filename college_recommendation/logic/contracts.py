"""
Data Contracts for the Recommendation Engine

Defines Pydantic models for the engine inputs (UserProfile, Questionnaire),
the candidate records supplied by providers, and the engine output
(RecommendationOutput with results, empty-state and diagnostics).
"""

from typing import List, Optional, Dict, Any, Union
from pydantic import BaseModel, Field

from .constants import (
    CostOfAttendance,
    ClassSize,
    Transportation,
    GeographyPreference,
    Housing,
    RankingImportance,
    ContinueEducation,
    EmptyStateCode,
)


# =============================================================================
# CANDIDATES
# =============================================================================

class Location(BaseModel):
    city: str = ""
    state: str = ""

    class Config:
        frozen = True


class CollegeCandidate(BaseModel):
    """
    One institution as returned by a candidate provider.
    Rates may be 0-1 fractions or 0-100 percentages; normalize before use.
    """
    id: str
    name: str
    location: Location = Field(default_factory=Location)

    tuition: Optional[float] = None
    tuition_in_state: Optional[float] = None
    tuition_out_of_state: Optional[float] = None

    student_size: Optional[int] = None
    size: str = "unknown"      # small/medium/large/unknown
    setting: str = "unknown"   # urban/suburban/rural/unknown

    admission_rate: Optional[float] = None
    completion_rate: Optional[float] = None
    pell_grant_rate: Optional[float] = None
    median_debt: Optional[float] = None

    programs: List[str] = Field(default_factory=list)
    ownership: Optional[str] = None  # "public", "private nonprofit", ...

    website: Optional[str] = None
    price_calculator: Optional[str] = None

    class Config:
        frozen = True

    @property
    def is_public(self) -> bool:
        return "public" in (self.ownership or "").lower()


class CandidateFilter(BaseModel):
    """Scoping options passed to CandidateProvider.get_candidates."""
    state: Optional[str] = None
    limit: Optional[int] = None


class FetchResult(BaseModel):
    """Candidates returned by one provider call, with the source that answered."""
    candidates: List[CollegeCandidate] = Field(default_factory=list)
    source: str  # live/cached/stub/skipped


# =============================================================================
# INPUT CONTRACTS
# =============================================================================

class UserProfile(BaseModel):
    major: Optional[str] = None
    gpa: Optional[Union[float, str]] = None  # 0-4; invalid values are ignored
    state: Optional[str] = None               # abbreviation or full name
    is_guest: bool = Field(default=False, alias="isGuest")

    class Config:
        populate_by_name = True


class Questionnaire(BaseModel):
    """
    Normalized questionnaire answers.
    Build with normalize_questionnaire(); unknown keys land in extra_answers.
    """
    cost_of_attendance: Optional[CostOfAttendance] = Field(default=None, alias="costOfAttendance")
    class_size: Optional[ClassSize] = Field(default=None, alias="classSize")
    transportation: Optional[Transportation] = None
    in_state_out_of_state: Optional[GeographyPreference] = Field(default=None, alias="inStateOutOfState")
    housing: Optional[Housing] = None
    ranking: Optional[RankingImportance] = None
    continue_education: Optional[ContinueEducation] = Field(default=None, alias="continueEducation")

    budget: Optional[str] = None  # low/tight/medium/high
    location: Optional[str] = None
    size_preference: Optional[str] = Field(default=None, alias="sizePreference")
    setting_preference: Optional[str] = Field(default=None, alias="settingPreference")

    companies_nearby: Optional[str] = Field(default=None, alias="companiesNearby")
    extracurriculars: Optional[str] = None

    use_weighted_search: bool = Field(default=True, alias="useWeightedSearch")

    extra_answers: Dict[str, Any] = Field(default_factory=dict)

    class Config:
        populate_by_name = True
        use_enum_values = True

    def free_text_values(self) -> List[str]:
        """All free-form string answers, including unknown keys."""
        values = [self.companies_nearby, self.extracurriculars]
        values.extend(v for v in self.extra_answers.values() if isinstance(v, str))
        return [v for v in values if isinstance(v, str)]


# =============================================================================
# SCORING STRUCTURES
# =============================================================================

class ScoreBreakdown(BaseModel):
    """Per-dimension preference scores (0-100) and their weighted final."""
    academics: int
    cost: int
    aid: int
    debt: int
    location: int
    size: int
    setting: int
    prestige: int
    ai_fit: Optional[int] = None
    final: int

    def as_dict(self) -> Dict[str, int]:
        data = self.model_dump()
        if data["ai_fit"] is None:
            data.pop("ai_fit")
        return data


class PipelineWeights(BaseModel):
    """Component weights for the base-score blend (sum to 1.0)."""
    gpa: float
    prestige: float
    major: float
    preference: float


class ScoredCandidate(BaseModel):
    """
    A candidate with computed component scores.
    Used between the deterministic pass, AI augmentation and final ranking.
    """
    candidate: CollegeCandidate
    gpa_fit: int
    prestige: int
    major_fit: int
    preference_fit: int
    base_score: int
    query_match: Optional[int] = None
    ai_factor: int = 50
    final_score: int = 0

    def components(self) -> Dict[str, int]:
        data = {
            "gpa_fit": self.gpa_fit,
            "prestige": self.prestige,
            "major_fit": self.major_fit,
            "preference_fit": self.preference_fit,
            "ai_factor": self.ai_factor,
        }
        if self.query_match is not None:
            data["query_match"] = self.query_match
        return data


# =============================================================================
# OUTPUT CONTRACTS
# =============================================================================

class EmptyState(BaseModel):
    code: EmptyStateCode
    title: str
    message: str

    class Config:
        use_enum_values = True


class RecommendationResult(BaseModel):
    college: CollegeCandidate
    score: int = Field(ge=0, le=100)
    score_text: str
    breakdown: Dict[str, int] = Field(default_factory=dict)
    breakdown_human: Dict[str, str] = Field(default_factory=dict)
    reason: Optional[str] = None
    preference_breakdown: Optional[Dict[str, int]] = None
    missing_signals: List[str] = Field(default_factory=list)


class DiagnosticEntry(BaseModel):
    id: str
    name: str
    score: int
    components: Dict[str, int] = Field(default_factory=dict)


class Diagnostics(BaseModel):
    """Snapshot of one recommend() call, for debugging and support."""
    mode: str = "weighted"  # weighted/search
    source: Optional[str] = None  # live/cached/stub/skipped
    resolved_state: Optional[str] = None
    wants_in_state: bool = False
    used_fallback_state: bool = False
    fetched_count: int = 0
    filtered_count: int = 0
    candidate_count: int = 0
    ai_candidate_count: int = 0
    ai_mode: Optional[str] = None  # live/neutral/failed
    preference_weights: Dict[str, int] = Field(default_factory=dict)
    pipeline_weights: Optional[PipelineWeights] = None
    top: List[DiagnosticEntry] = Field(default_factory=list)
    notes: List[str] = Field(default_factory=list)


class RecommendationOutput(BaseModel):
    results: List[RecommendationResult] = Field(default_factory=list)
    empty_state: Optional[EmptyState] = None
    diagnostics: Diagnostics = Field(default_factory=Diagnostics)
