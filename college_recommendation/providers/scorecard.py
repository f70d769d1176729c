"""
College Scorecard Candidate Provider

Reads schools from the College Scorecard API and transforms the nested JSON
rows into CollegeCandidate records.

This is a pure READ + TRANSFORM layer:
- NO scoring logic
- NO ranking/filtering beyond the API's own state/name parameters
"""

import logging
import threading
import time
from collections import OrderedDict
from typing import Any, Dict, List, Optional, Tuple

import requests

from .. import config
from ..logic.contracts import CollegeCandidate, CandidateFilter, FetchResult, Location
from ..logic.normalization import state_abbreviation
from .base import CandidateProvider, CandidateProviderError, CandidateProviderTimeout

logger = logging.getLogger(__name__)


CANDIDATE_FIELDS = [
    "id",
    "school.name",
    "school.city",
    "school.state",
    "school.school_url",
    "school.price_calculator_url",
    "school.locale",
    "school.ownership",
    "latest.admissions.admission_rate.overall",
    "latest.student.size",
    "latest.cost.tuition.in_state",
    "latest.cost.tuition.out_of_state",
    "latest.completion.completion_rate_4yr_150nt",
    "latest.aid.pell_grant_rate",
    "latest.aid.median_debt.completers.overall",
    "latest.programs.cip_4_digit",
]

SEARCH_FIELDS = [
    "id",
    "school.name",
    "school.city",
    "school.state",
    "school.ownership",
    "latest.admissions.admission_rate.overall",
    "latest.student.size",
    "latest.cost.tuition.in_state",
]

MIN_SEARCH_LENGTH = 3

# Scorecard ownership codes
OWNERSHIP_LABELS = {1: "public", 2: "private nonprofit", 3: "private for-profit"}


def _safe_get(data: Optional[Dict], *keys, default=None):
    """Safely traverse nested dicts."""
    if data is None:
        return default
    result = data
    for key in keys:
        if isinstance(result, dict):
            result = result.get(key)
        else:
            return default
        if result is None:
            return default
    return result


def size_category(student_size: Optional[int]) -> str:
    if not isinstance(student_size, (int, float)):
        return "unknown"
    if student_size > 15000:
        return "large"
    if student_size > 5000:
        return "medium"
    return "small"


def setting_category(locale: Any) -> str:
    """
    Map an IPEDS locale code (11-43) to urban/suburban/rural.
    11-13 city, 21-23 suburb, 31-43 town/rural.
    """
    try:
        code = int(locale)
    except (TypeError, ValueError):
        return "unknown"
    if 11 <= code <= 13:
        return "urban"
    if 21 <= code <= 23:
        return "suburban"
    if 31 <= code <= 43:
        return "rural"
    return "unknown"


def _program_titles(raw_programs: Any) -> List[str]:
    if not isinstance(raw_programs, list):
        return []
    titles: List[str] = []
    for program in raw_programs:
        title = program.get("title") if isinstance(program, dict) else program
        if isinstance(title, str):
            title = title.strip().rstrip(".")
            if title and title not in titles:
                titles.append(title)
    return titles


def transform_school(row: Dict[str, Any], index: int = 0) -> CollegeCandidate:
    """Convert one nested Scorecard result row into a CollegeCandidate."""
    student_size = _safe_get(row, "latest", "student", "size")
    tuition_in_state = _safe_get(row, "latest", "cost", "tuition", "in_state")
    tuition_out_of_state = _safe_get(row, "latest", "cost", "tuition", "out_of_state")
    ownership_code = _safe_get(row, "school", "ownership")

    return CollegeCandidate(
        id=str(row.get("id", index)),
        name=_safe_get(row, "school", "name", default="Unknown College"),
        location=Location(
            city=_safe_get(row, "school", "city", default=""),
            state=_safe_get(row, "school", "state", default=""),
        ),
        tuition=tuition_in_state if tuition_in_state is not None else tuition_out_of_state,
        tuition_in_state=tuition_in_state,
        tuition_out_of_state=tuition_out_of_state,
        student_size=student_size,
        size=size_category(student_size),
        setting=setting_category(_safe_get(row, "school", "locale")),
        admission_rate=_safe_get(row, "latest", "admissions", "admission_rate", "overall"),
        completion_rate=_safe_get(row, "latest", "completion", "completion_rate_4yr_150nt"),
        pell_grant_rate=_safe_get(row, "latest", "aid", "pell_grant_rate"),
        median_debt=_safe_get(row, "latest", "aid", "median_debt", "completers", "overall"),
        programs=_program_titles(_safe_get(row, "latest", "programs", "cip_4_digit")),
        ownership=OWNERSHIP_LABELS.get(ownership_code),
        website=_safe_get(row, "school", "school_url"),
        price_calculator=_safe_get(row, "school", "price_calculator_url") or _safe_get(row, "school", "school_url"),
    )


class ScorecardProvider(CandidateProvider):
    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        page_size: Optional[int] = None,
        cache_ttl: Optional[int] = None,
        cache_max_entries: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key or config.COLLEGE_SCORECARD_KEY
        self.base_url = (base_url or config.COLLEGE_SCORECARD_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else config.SCORECARD_TIMEOUT_SECONDS
        self.page_size = page_size or config.SCORECARD_PAGE_SIZE
        self.cache_ttl = cache_ttl if cache_ttl is not None else config.SCORECARD_CACHE_TTL_SECONDS
        self.cache_max_entries = max(1, cache_max_entries or config.SCORECARD_CACHE_MAX_ENTRIES)
        self.session = session or requests.Session()
        # params -> (fetched_at, candidates), least recently used first.
        # Expired entries stay until evicted so they can be served if the API fails.
        self._cache: "OrderedDict[Tuple, Tuple[float, List[CollegeCandidate]]]" = OrderedDict()
        self._cache_lock = threading.Lock()

    # -------------------------------------------------------------------------
    # CandidateProvider
    # -------------------------------------------------------------------------

    def get_candidates(self, filter: Optional[CandidateFilter] = None) -> FetchResult:
        params: Dict[str, str] = {
            "fields": ",".join(CANDIDATE_FIELDS),
            "per_page": str(self.page_size),
            "sort": "latest.student.size:desc",
        }
        if filter is not None:
            if filter.state:
                params["school.state"] = state_abbreviation(filter.state) or filter.state
            if filter.limit:
                params["per_page"] = str(min(self.page_size, filter.limit))
        return self._fetch(params)

    def search_by_name(self, text: str) -> FetchResult:
        q = (text or "").strip()
        if len(q) < MIN_SEARCH_LENGTH:
            return FetchResult(source="skipped")
        params = {
            "fields": ",".join(SEARCH_FIELDS),
            "per_page": "20",
            "school.name": q,
        }
        return self._fetch(params)

    # -------------------------------------------------------------------------
    # HTTP + cache
    # -------------------------------------------------------------------------

    def clear_cache(self) -> None:
        with self._cache_lock:
            self._cache.clear()

    def cache_size(self) -> int:
        with self._cache_lock:
            return len(self._cache)

    def _cache_get(self, key: Tuple) -> Optional[Tuple[float, List[CollegeCandidate]]]:
        with self._cache_lock:
            entry = self._cache.get(key)
            if entry is not None:
                self._cache.move_to_end(key)
            return entry

    def _cache_put(self, key: Tuple, candidates: List[CollegeCandidate]) -> None:
        with self._cache_lock:
            self._cache[key] = (time.time(), candidates)
            self._cache.move_to_end(key)
            while len(self._cache) > self.cache_max_entries:
                self._cache.popitem(last=False)

    def _fetch(self, params: Dict[str, str]) -> FetchResult:
        key = tuple(sorted(params.items()))
        cached = self._cache_get(key)
        if cached and time.time() - cached[0] < self.cache_ttl:
            return FetchResult(candidates=list(cached[1]), source="cached")

        try:
            payload = self._request_with_retry(params)
        except CandidateProviderError:
            if cached:
                logger.warning("⚠️ Scorecard unavailable, serving stale cached results")
                return FetchResult(candidates=list(cached[1]), source="cached")
            raise

        rows = payload.get("results") or []
        candidates = []
        for index, row in enumerate(rows):
            if not isinstance(row, dict):
                continue
            candidates.append(transform_school(row, index))

        self._cache_put(key, candidates)
        logger.info(f"📦 Scorecard returned {len(candidates)} schools")
        return FetchResult(candidates=list(candidates), source="live")

    def _request_with_retry(self, params: Dict[str, str]) -> Dict[str, Any]:
        try:
            return self._request(params, self.timeout)
        except requests.Timeout:
            # one retry with a slightly longer timeout before failing
            retry_timeout = max(self.timeout + 4, 12)
            logger.warning(f"Scorecard request timed out, retrying with {retry_timeout}s timeout")
            try:
                return self._request(params, retry_timeout)
            except requests.Timeout as e:
                raise CandidateProviderTimeout("Scorecard API request timed out") from e

    def _request(self, params: Dict[str, str], timeout: float) -> Dict[str, Any]:
        if not self.api_key:
            raise CandidateProviderError("College Scorecard API key not configured")

        query = dict(params, api_key=self.api_key, keys_nested="true")
        try:
            response = self.session.get(f"{self.base_url}/schools", params=query, timeout=timeout)
        except requests.Timeout:
            raise
        except requests.RequestException as e:
            raise CandidateProviderError(f"Scorecard request failed: {e}") from e

        if not response.ok:
            raise CandidateProviderError(
                f"Scorecard API error: {response.status_code} {response.reason} {response.text[:200]}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise CandidateProviderError("Scorecard API returned invalid JSON") from e
        return data if isinstance(data, dict) else {}
