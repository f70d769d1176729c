"""
Recommendation Engine

Main orchestrator that combines all scoring components into a single pipeline.
This is the primary entry point for generating recommendations.
"""

import logging
import time
from typing import Any, Dict, List, Optional, Tuple

from .. import config
from ..ai.ai_factors import fetch_ai_factors
from ..ai.completion import CompletionProvider, build_default_completion_provider
from ..errors import CandidateProviderError, CandidateProviderTimeout
from .contracts import (
    CollegeCandidate,
    CandidateFilter,
    UserProfile,
    Questionnaire,
    RecommendationOutput,
    Diagnostics,
)
from .constants import (
    AI_CANDIDATE_LIMIT,
    DIAGNOSTIC_TOP_N,
    MAX_RESULTS_LIMIT,
    MIN_QUERY_LENGTH,
    EmptyStateCode,
    GeographyPreference,
)
from .normalization import normalize_questionnaire, parse_gpa, state_matches, state_abbreviation
from .preference_weights import build_preference_weights, build_pipeline_weights
from .dimension_scorers import compute_preference_breakdown
from .aggregator import aggregate_scores, batch_aggregate
from .ranker import blend_final_scores, rank_candidates
from .output_assembler import (
    assemble_result,
    assemble_search_result,
    build_empty_state,
    build_diagnostic_entries,
    compute_missing_signals,
    format_breakdown,
    humanize_missing,
)

logger = logging.getLogger(__name__)

MODE_WEIGHTED = "weighted"
MODE_SEARCH = "search"


def _coerce_profile(profile: Any) -> UserProfile:
    """No profile at all is treated as a guest."""
    if isinstance(profile, UserProfile):
        return profile
    if isinstance(profile, dict):
        return UserProfile(**profile)
    return UserProfile(is_guest=True)


def _clamp_max_results(max_results: Optional[int]) -> int:
    if max_results is None:
        return config.DEFAULT_MAX_RESULTS
    return max(1, min(MAX_RESULTS_LIMIT, int(max_results)))


class RecommendationEngine:
    """
    Main recommendation engine that orchestrates the scoring pipeline.

    Pipeline flow:
    1. Mode dispatch - name search skips scoring entirely
    2. Weights - preference weights and pipeline component weights
    3. In-state policy - wants_in_state and the effective state
    4. Candidate fetch - state scoped, unscoped retry, client-side state filter
    5. Deterministic pass - gpa/prestige/major/preference components, base score
    6. AI augmentation - AI factor for the top slice, neutral on any failure
    7. Final blend & rank - explanation, breakdowns, missing signals
    8. Diagnostics - returned with every output
    """

    def __init__(
        self,
        provider,
        ai_provider: Optional[CompletionProvider] = None,
        default_state: Optional[str] = None,
    ):
        """
        Initialize the recommendation engine.

        Args:
            provider: CandidateProvider supplying colleges
            ai_provider: CompletionProvider for AI factors; None means neutral AI mode
            default_state: Fallback state when the profile has none ("" disables it)
        """
        self.provider = provider
        self.ai_provider = ai_provider
        self.default_state = (config.DEFAULT_STATE if default_state is None else default_state).strip()

    def recommend(
        self,
        query: Optional[str] = None,
        profile: Any = None,
        questionnaire: Any = None,
        max_results: Optional[int] = None,
        weighted_mode: Optional[bool] = None,
    ) -> RecommendationOutput:
        """
        Generate recommendations.

        Args:
            query: Free-text query (college name or topic)
            profile: UserProfile or dict; None is treated as a guest
            questionnaire: Raw answers (dict), Questionnaire or None
            max_results: Number of results to return (1-50)
            weighted_mode: False runs a plain name search; defaults to the
                questionnaire's useWeightedSearch flag

        Returns:
            RecommendationOutput with results, optional empty_state and diagnostics
        """
        start_time = time.perf_counter()

        q = normalize_questionnaire(questionnaire)
        user = _coerce_profile(profile)
        limit = _clamp_max_results(max_results)
        text = (query or "").strip()

        weighted = q.use_weighted_search if weighted_mode is None else bool(weighted_mode)
        diagnostics = Diagnostics(mode=MODE_WEIGHTED if weighted else MODE_SEARCH)

        if weighted:
            output = self._recommend_weighted(text, user, q, limit, diagnostics)
        else:
            output = self._search(text, limit, diagnostics)

        processing_time = (time.perf_counter() - start_time) * 1000
        logger.info(
            f"✨ Recommendation pipeline complete: {len(output.results)} results, "
            f"mode={diagnostics.mode} ({processing_time:.2f}ms)"
        )
        return output

    # -------------------------------------------------------------------------
    # Search mode
    # -------------------------------------------------------------------------

    def _search(self, query: str, limit: int, diagnostics: Diagnostics) -> RecommendationOutput:
        if len(query) < MIN_QUERY_LENGTH:
            diagnostics.notes.append(f"Search query shorter than {MIN_QUERY_LENGTH} characters.")
            return self._empty(EmptyStateCode.QUERY_NO_RESULTS, diagnostics)

        logger.info(f"🔎 Name search: {query!r}")
        try:
            fetched = self.provider.search_by_name(query)
        except CandidateProviderError as e:
            return self._provider_failure(e, diagnostics)

        hits = fetched.candidates
        diagnostics.source = fetched.source
        diagnostics.fetched_count = len(hits)
        diagnostics.filtered_count = len(hits)
        diagnostics.candidate_count = len(hits)

        if not hits:
            return self._empty(EmptyStateCode.QUERY_NO_RESULTS, diagnostics)

        results = [assemble_search_result(college) for college in hits[:limit]]
        return RecommendationOutput(results=results, diagnostics=diagnostics)

    # -------------------------------------------------------------------------
    # Weighted mode
    # -------------------------------------------------------------------------

    def _recommend_weighted(
        self,
        query: str,
        profile: UserProfile,
        questionnaire: Questionnaire,
        limit: int,
        diagnostics: Diagnostics,
    ) -> RecommendationOutput:
        gpa = parse_gpa(profile.gpa)
        if profile.gpa not in (None, "") and gpa is None:
            diagnostics.notes.append("GPA was not a number between 0 and 4; scored as not provided.")

        preference_weights = build_preference_weights(profile, questionnaire, query)
        pipeline_weights = build_pipeline_weights(questionnaire)
        diagnostics.preference_weights = preference_weights
        diagnostics.pipeline_weights = pipeline_weights

        # Step 1: In-state policy
        wants_in_state = self.wants_in_state(profile, questionnaire)
        state, used_fallback = self.resolve_state(profile, wants_in_state)
        diagnostics.wants_in_state = wants_in_state
        diagnostics.resolved_state = state
        diagnostics.used_fallback_state = used_fallback

        fallback_note = ""
        if used_fallback:
            fallback_note = f"Showing colleges in {state} because no state is on your profile"
            diagnostics.notes.append(f"No profile state; fell back to default state {state}.")
            logger.warning(f"⚠️ No profile state, using default state {state}")

        if wants_in_state and not state:
            diagnostics.notes.append("In-state requested but no state could be resolved.")
            return self._empty(EmptyStateCode.IN_STATE_STATE_MISSING, diagnostics)

        # Step 2: Fetch candidates
        try:
            candidates = self._fetch_candidates(state if wants_in_state else None, diagnostics)
        except CandidateProviderError as e:
            return self._provider_failure(e, diagnostics)

        if not candidates:
            if wants_in_state:
                logger.warning(f"⚠️ No in-state candidates for {state}")
                return self._empty(EmptyStateCode.IN_STATE_NO_MATCHES, diagnostics)
            diagnostics.notes.append("Candidate provider returned no colleges.")
            return RecommendationOutput(diagnostics=diagnostics)

        # Step 3: Deterministic pass
        logger.info(f"🎲 Scoring {len(candidates)} candidates...")
        scored = batch_aggregate(candidates, pipeline_weights, profile, questionnaire, gpa, query)
        diagnostics.candidate_count = len(scored)

        # Step 4: AI augmentation over the top slice
        ai_slice = scored[:AI_CANDIDATE_LIMIT]
        diagnostics.ai_candidate_count = len(ai_slice)
        factors, ai_mode, ai_note = fetch_ai_factors(
            [s.candidate for s in ai_slice], self.ai_provider, profile, questionnaire, query
        )
        diagnostics.ai_mode = ai_mode
        if ai_note:
            diagnostics.notes.append(ai_note)

        # Step 5: Final blend & rank
        ranked = rank_candidates(blend_final_scores(scored, factors), limit)
        logger.info(f"🏆 Candidates ranked: {len(ranked)}")

        results = [
            assemble_result(
                s,
                compute_preference_breakdown(
                    s.candidate, preference_weights, profile, questionnaire, ai_fit_score=s.ai_factor
                ),
                profile,
                questionnaire,
                fallback_note,
            )
            for s in ranked
        ]

        diagnostics.top = build_diagnostic_entries(ranked, DIAGNOSTIC_TOP_N)
        return RecommendationOutput(results=results, diagnostics=diagnostics)

    def wants_in_state(self, profile: UserProfile, questionnaire: Questionnaire) -> bool:
        """Explicit in-state answer, or a guest who has not answered the question."""
        geography = questionnaire.in_state_out_of_state
        if geography == GeographyPreference.IN_STATE.value:
            return True
        return profile.is_guest and not geography

    def resolve_state(self, profile: UserProfile, wants_in_state: bool) -> Tuple[Optional[str], bool]:
        """
        Effective state for in-state scoping.

        Returns:
            (state, used_fallback); state is None when nothing resolves
        """
        own_state = (profile.state or "").strip()
        if own_state:
            return state_abbreviation(own_state) or own_state, False
        if wants_in_state and self.default_state:
            return state_abbreviation(self.default_state) or self.default_state, True
        return None, False

    def _fetch_candidates(self, state: Optional[str], diagnostics: Diagnostics) -> List[CollegeCandidate]:
        scope = CandidateFilter(state=state) if state else None
        fetched = self.provider.get_candidates(scope)

        if state and not fetched.candidates:
            logger.warning(f"⚠️ State-scoped fetch for {state} returned nothing, retrying unscoped")
            diagnostics.notes.append(f"State-scoped fetch for {state} was empty; retried without a state filter.")
            fetched = self.provider.get_candidates()

        candidates = fetched.candidates
        diagnostics.source = fetched.source
        diagnostics.fetched_count = len(candidates)
        logger.info(f"📦 Candidates fetched: {len(candidates)} (source={diagnostics.source})")

        if state:
            candidates = [c for c in candidates if state_matches(c.location.state, state)]
        diagnostics.filtered_count = len(candidates)
        return candidates

    # -------------------------------------------------------------------------
    # Empty states
    # -------------------------------------------------------------------------

    def _empty(self, code: EmptyStateCode, diagnostics: Diagnostics) -> RecommendationOutput:
        return RecommendationOutput(empty_state=build_empty_state(code), diagnostics=diagnostics)

    def _provider_failure(self, error: CandidateProviderError, diagnostics: Diagnostics) -> RecommendationOutput:
        diagnostics.notes.append(f"Candidate provider failed: {type(error).__name__}")
        if isinstance(error, CandidateProviderTimeout):
            logger.error(f"❌ Candidate provider timed out: {error}")
            return self._empty(EmptyStateCode.NETWORK_TIMEOUT, diagnostics)
        logger.error(f"❌ Candidate provider failed: {error}")
        return self._empty(EmptyStateCode.UPSTREAM_ERROR, diagnostics)

    # -------------------------------------------------------------------------
    # Single college
    # -------------------------------------------------------------------------

    def score_single_college(
        self,
        college: CollegeCandidate,
        profile: Any = None,
        questionnaire: Any = None,
        query: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Score one college without fetching or AI.

        Useful for detail and compare views of a college the student picked.
        """
        q = normalize_questionnaire(questionnaire)
        user = _coerce_profile(profile)
        text = (query or "").strip()

        weights = build_preference_weights(user, q, text)
        breakdown = compute_preference_breakdown(college, weights, user, q).as_dict()
        scored = aggregate_scores(college, build_pipeline_weights(q), user, q, parse_gpa(user.gpa), text)

        components = scored.components()
        components.pop("ai_factor", None)

        return {
            "college_id": college.id,
            "preference_weights": weights,
            "preference_breakdown": breakdown,
            "breakdown_human": format_breakdown(breakdown, college),
            "components": components,
            "base_score": scored.base_score,
            "missing_signals": humanize_missing(compute_missing_signals(college, user, q)),
        }


def build_default_engine() -> RecommendationEngine:
    """Engine wired to the configured candidate source and AI backend."""
    from ..providers import build_default_provider

    return RecommendationEngine(build_default_provider(), build_default_completion_provider())


# Convenience function for simple usage
def get_recommendations(
    query: Optional[str] = None,
    profile: Any = None,
    questionnaire: Any = None,
    max_results: Optional[int] = None,
    weighted_mode: Optional[bool] = None,
    engine: Optional[RecommendationEngine] = None,
) -> RecommendationOutput:
    engine = engine or build_default_engine()
    return engine.recommend(query, profile, questionnaire, max_results, weighted_mode)
