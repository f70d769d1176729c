"""
API tests for the /recommendations router.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from college_recommendation.logic.engine import RecommendationEngine
from college_recommendation.providers.base import CandidateProvider
from college_recommendation.providers.stub import StubCandidateProvider, STUB_COLLEGES
from college_recommendation.routes import router, get_engine


class BrokenProvider(CandidateProvider):
    def get_candidates(self, filter=None):
        raise RuntimeError("database exploded")

    def search_by_name(self, text):
        raise RuntimeError("database exploded")


def build_client(provider=None) -> TestClient:
    app = FastAPI()
    app.include_router(router)
    engine = RecommendationEngine(provider or StubCandidateProvider(), None, default_state="WA")
    app.dependency_overrides[get_engine] = lambda: engine
    return TestClient(app)


@pytest.fixture
def client():
    return build_client()


def test_health(client):
    response = client.get("/recommendations/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_weighted_recommendations(client):
    response = client.post("/recommendations", json={
        "query": "",
        "user_profile": {"major": "Computer Science", "gpa": "3.8", "state": "WA"},
        "questionnaire": {"inStateOutOfState": "in_state", "costOfAttendance": "20k_to_40k"},
        "max_results": 3,
    })
    assert response.status_code == 200

    data = response.json()
    assert data["empty_state"] is None
    assert len(data["results"]) == 3
    assert data["results"][0]["college"]["location"]["state"] == "WA"
    assert data["results"][0]["breakdown"]["major_fit"] >= 90
    assert data["diagnostics"]["mode"] == "weighted"
    assert data["diagnostics"]["resolved_state"] == "WA"


def test_search_mode_empty_state(client):
    response = client.post("/recommendations", json={"query": "a", "weighted_mode": False})
    assert response.status_code == 200

    data = response.json()
    assert data["results"] == []
    assert data["empty_state"]["code"] == "QUERY_NO_RESULTS"
    assert data["empty_state"]["title"]


@pytest.mark.parametrize("max_results", [0, 51])
def test_max_results_out_of_range(client, max_results):
    response = client.post("/recommendations", json={"max_results": max_results})
    assert response.status_code == 422


def test_invalid_profile_is_rejected(client):
    response = client.post("/recommendations", json={"user_profile": {"isGuest": "not-a-bool"}})
    assert response.status_code == 400


def test_unexpected_errors_return_generic_500():
    client = build_client(BrokenProvider())
    response = client.post("/recommendations", json={"user_profile": {"state": "WA"}})

    assert response.status_code == 500
    assert "exploded" not in response.text
    assert "error" in response.json()


def test_score_single_college(client):
    college = STUB_COLLEGES[0].model_dump()
    response = client.post("/recommendations/score", json={
        "college": college,
        "user_profile": {"major": "Computer Science", "gpa": 3.8},
        "questionnaire": {"budget": "low"},
    })
    assert response.status_code == 200

    data = response.json()
    assert data["college_id"] == college["id"]
    assert data["components"]["major_fit"] == 90
