"""
Candidate Providers

Sources of college candidates for the recommendation engine.
"""

import logging

from .. import config
from .base import CandidateProvider, CandidateProviderError, CandidateProviderTimeout
from .scorecard import ScorecardProvider
from .stub import StubCandidateProvider, STUB_COLLEGES

logger = logging.getLogger(__name__)


def build_default_provider() -> CandidateProvider:
    """Scorecard when a key is configured, otherwise the fixture colleges."""
    if config.USE_STUB_DATA or not config.COLLEGE_SCORECARD_KEY:
        logger.info("Using stub college data (USE_STUB_DATA set or COLLEGE_SCORECARD_KEY missing)")
        return StubCandidateProvider()
    return ScorecardProvider()


__all__ = [
    "CandidateProvider",
    "CandidateProviderError",
    "CandidateProviderTimeout",
    "ScorecardProvider",
    "StubCandidateProvider",
    "STUB_COLLEGES",
    "build_default_provider",
]
