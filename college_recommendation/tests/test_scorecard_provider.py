"""
Tests for the College Scorecard provider, using a fake requests session.
"""

import pytest
import requests

from college_recommendation import config
from college_recommendation.errors import CandidateProviderError, CandidateProviderTimeout
from college_recommendation.logic.contracts import CandidateFilter
from college_recommendation.providers import build_default_provider
from college_recommendation.providers.scorecard import (
    ScorecardProvider,
    transform_school,
    size_category,
    setting_category,
)
from college_recommendation.providers.stub import StubCandidateProvider


UW_ROW = {
    "id": 236948,
    "school": {
        "name": "University of Washington-Seattle Campus",
        "city": "Seattle",
        "state": "WA",
        "school_url": "www.washington.edu",
        "price_calculator_url": None,
        "locale": 11,
        "ownership": 1,
    },
    "latest": {
        "admissions": {"admission_rate": {"overall": 0.5277}},
        "student": {"size": 36872},
        "cost": {"tuition": {"in_state": 12076, "out_of_state": 41997}},
        "completion": {"completion_rate_4yr_150nt": 0.84},
        "aid": {"pell_grant_rate": 0.2178, "median_debt": {"completers": {"overall": 16500}}},
        "programs": {"cip_4_digit": [
            {"code": "1107", "title": "Computer Science."},
            {"code": "1407", "title": "Chemical Engineering."},
            {"code": "1107", "title": "Computer Science."},
        ]},
    },
}


class FakeResponse:
    def __init__(self, payload=None, status_code=200):
        self.payload = payload if payload is not None else {"results": [UW_ROW]}
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        self.reason = "OK" if self.ok else "Server Error"
        self.text = "" if self.ok else "upstream failure"

    def json(self):
        return self.payload


class FakeSession:
    """Returns (or raises) queued outcomes and records each call."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def make_provider(*outcomes, **kwargs):
    session = FakeSession(*outcomes)
    kwargs.setdefault("api_key", "test-key")
    kwargs.setdefault("timeout", 8)
    provider = ScorecardProvider(session=session, **kwargs)
    return provider, session


# =============================================================================
# ROW MAPPING
# =============================================================================

def test_transform_school():
    college = transform_school(UW_ROW)

    assert college.id == "236948"
    assert college.name == "University of Washington-Seattle Campus"
    assert college.location.state == "WA"
    assert college.tuition == 12076
    assert college.tuition_out_of_state == 41997
    assert college.size == "large"
    assert college.setting == "urban"
    assert college.ownership == "public"
    assert college.is_public
    assert college.programs == ["Computer Science", "Chemical Engineering"]
    assert college.median_debt == 16500
    assert college.price_calculator == "www.washington.edu"


def test_transform_school_with_missing_fields():
    college = transform_school({"id": 1, "school": {"name": "Tiny College"}}, index=0)
    assert college.size == "unknown"
    assert college.setting == "unknown"
    assert college.tuition is None
    assert college.programs == []
    assert college.ownership is None


@pytest.mark.parametrize("size,expected", [(36872, "large"), (15001, "large"), (15000, "medium"), (5000, "small"), (None, "unknown")])
def test_size_category(size, expected):
    assert size_category(size) == expected


@pytest.mark.parametrize("locale,expected", [(11, "urban"), (13, "urban"), (21, "suburban"), (32, "rural"), (43, "rural"), (None, "unknown"), (99, "unknown")])
def test_setting_category(locale, expected):
    assert setting_category(locale) == expected


# =============================================================================
# REQUESTS
# =============================================================================

def test_get_candidates_scopes_by_state_abbreviation():
    provider, session = make_provider(FakeResponse())
    result = provider.get_candidates(CandidateFilter(state="Washington"))

    assert [c.id for c in result.candidates] == ["236948"]
    assert result.source == "live"

    call = session.calls[0]
    assert call["url"].endswith("/schools")
    assert call["params"]["school.state"] == "WA"
    assert call["params"]["api_key"] == "test-key"
    assert call["params"]["keys_nested"] == "true"
    assert call["timeout"] == 8


def test_results_are_cached():
    provider, session = make_provider(FakeResponse())
    first = provider.get_candidates()
    second = provider.get_candidates()

    assert len(session.calls) == 1
    assert first.source == "live"
    assert second.source == "cached"
    assert second.candidates[0].id == "236948"


def test_timeout_is_retried_once_with_longer_timeout():
    provider, session = make_provider(requests.Timeout(), FakeResponse())
    result = provider.get_candidates()

    assert result.candidates
    assert [call["timeout"] for call in session.calls] == [8, 12]


def test_second_timeout_raises_provider_timeout():
    provider, session = make_provider(requests.Timeout(), requests.Timeout())
    with pytest.raises(CandidateProviderTimeout):
        provider.get_candidates()


def test_http_error_raises_provider_error():
    provider, session = make_provider(FakeResponse(status_code=500))
    with pytest.raises(CandidateProviderError):
        provider.get_candidates()


def test_connection_error_raises_provider_error():
    provider, session = make_provider(requests.ConnectionError("refused"))
    with pytest.raises(CandidateProviderError):
        provider.get_candidates()


def test_stale_cache_served_on_failure():
    provider, session = make_provider(FakeResponse(), FakeResponse(status_code=503), cache_ttl=0)
    provider.get_candidates()
    result = provider.get_candidates()

    assert len(session.calls) == 2
    assert result.source == "cached"
    assert result.candidates[0].id == "236948"


def test_short_name_search_skips_network():
    provider, session = make_provider()
    result = provider.search_by_name("uw")

    assert result.candidates == []
    assert result.source == "skipped"
    assert session.calls == []


def test_name_search():
    provider, session = make_provider(FakeResponse())
    result = provider.search_by_name("Washington")

    assert result.candidates[0].name.startswith("University of Washington")
    assert session.calls[0]["params"]["school.name"] == "Washington"


def test_missing_api_key(monkeypatch):
    monkeypatch.setattr(config, "COLLEGE_SCORECARD_KEY", "")
    provider = ScorecardProvider(api_key="", session=FakeSession())
    with pytest.raises(CandidateProviderError):
        provider.get_candidates()


def test_default_provider_falls_back_to_stub(monkeypatch):
    monkeypatch.setattr(config, "COLLEGE_SCORECARD_KEY", "")
    assert isinstance(build_default_provider(), StubCandidateProvider)

    monkeypatch.setattr(config, "COLLEGE_SCORECARD_KEY", "key")
    monkeypatch.setattr(config, "USE_STUB_DATA", False)
    assert isinstance(build_default_provider(), ScorecardProvider)


def test_cache_is_bounded_and_evicts_least_recently_used():
    outcomes = [FakeResponse() for _ in range(30)]
    provider, session = make_provider(*outcomes, cache_ttl=0, cache_max_entries=8)

    for i in range(25):
        provider.search_by_name(f"college {i}")
        assert provider.cache_size() <= 8

    assert provider.cache_size() == 8

    # oldest searches were dropped, so a failure there has no stale copy to serve
    session.outcomes = [FakeResponse(status_code=503)]
    with pytest.raises(CandidateProviderError):
        provider.search_by_name("college 0")

    # recent ones are still available as a stale fallback
    session.outcomes = [FakeResponse(status_code=503)]
    assert provider.search_by_name("college 24").source == "cached"


def test_cache_hit_refreshes_recency():
    provider, session = make_provider(FakeResponse(), FakeResponse(), FakeResponse(), cache_max_entries=2)

    provider.search_by_name("alpha")
    provider.search_by_name("bravo")
    provider.search_by_name("alpha")
    provider.search_by_name("charlie")

    assert len(session.calls) == 3
    assert provider.search_by_name("alpha").source == "cached"
