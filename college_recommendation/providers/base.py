from typing import Optional

from ..errors import CandidateProviderError, CandidateProviderTimeout  # noqa: F401
from ..logic.contracts import CandidateFilter, FetchResult


class CandidateProvider:
    """
    Source of college candidates.

    Each call returns a FetchResult carrying the rows together with the source
    that answered ("live", "cached", "stub" or "skipped"). Providers keep no
    per-request state, so one instance can serve concurrent requests.
    """

    def get_candidates(self, filter: Optional[CandidateFilter] = None) -> FetchResult:
        raise NotImplementedError

    def search_by_name(self, text: str) -> FetchResult:
        raise NotImplementedError
