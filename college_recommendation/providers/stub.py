"""
Fixture candidate provider, used when Scorecard is not configured.
"""

from typing import List, Optional

from ..logic.contracts import CollegeCandidate, CandidateFilter, FetchResult, Location
from ..logic.normalization import state_matches
from .base import CandidateProvider


STUB_COLLEGES: List[CollegeCandidate] = [
    CollegeCandidate(
        id="236948", name="University of Washington-Seattle Campus",
        location=Location(city="Seattle", state="WA"),
        tuition=12076, tuition_in_state=12076, tuition_out_of_state=42000,
        student_size=36872, size="large", setting="urban",
        admission_rate=0.53, completion_rate=0.84, pell_grant_rate=0.22, median_debt=16500,
        programs=["Computer Science", "Engineering", "Business"], ownership="public",
    ),
    CollegeCandidate(
        id="236939", name="Washington State University",
        location=Location(city="Pullman", state="WA"),
        tuition=12701, tuition_in_state=12701, tuition_out_of_state=34000,
        student_size=24278, size="large", setting="rural",
        admission_rate=0.86, completion_rate=0.62, pell_grant_rate=0.33, median_debt=21000,
        programs=["Business", "Engineering", "Agriculture", "Computer Science"], ownership="public",
    ),
    CollegeCandidate(
        id="237011", name="Western Washington University",
        location=Location(city="Bellingham", state="WA"),
        tuition=9456, tuition_in_state=9456, tuition_out_of_state=20000,
        student_size=14077, size="medium", setting="suburban",
        admission_rate=0.93, completion_rate=0.70, pell_grant_rate=0.25, median_debt=19500,
        programs=["Education", "Environmental Science", "Business"], ownership="public",
    ),
    CollegeCandidate(
        id="134130", name="University of Florida",
        location=Location(city="Gainesville", state="FL"),
        tuition=28659, tuition_in_state=28659, tuition_out_of_state=45000,
        student_size=34552, size="large", setting="suburban",
        admission_rate=0.23, completion_rate=0.90, pell_grant_rate=0.25, median_debt=14000,
        programs=["Computer Science", "Engineering"], ownership="public",
    ),
    CollegeCandidate(
        id="235167", name="The Evergreen State College",
        location=Location(city="Olympia", state="WA"),
        tuition=10232, tuition_in_state=10232, tuition_out_of_state=25000,
        student_size=2044, size="small", setting="suburban",
        admission_rate=0.97, completion_rate=0.48, pell_grant_rate=0.37, median_debt=22000,
        programs=["Liberal Arts", "Environmental Studies"], ownership="public",
    ),
    CollegeCandidate(
        id="236230", name="Pacific Lutheran University",
        location=Location(city="Tacoma", state="WA"),
        tuition=51000, student_size=2606, size="small", setting="suburban",
        admission_rate=0.81, completion_rate=0.67, pell_grant_rate=0.30, median_debt=27000,
        programs=["Nursing", "Business", "Computer Science"], ownership="private nonprofit",
    ),
    CollegeCandidate(
        id="209551", name="University of Oregon",
        location=Location(city="Eugene", state="OR"),
        tuition=15054, tuition_in_state=15054, tuition_out_of_state=41700,
        student_size=19100, size="large", setting="urban",
        admission_rate=0.86, completion_rate=0.74, pell_grant_rate=0.24, median_debt=20500,
        programs=["Journalism", "Business", "Computer Science"], ownership="public",
    ),
]


class StubCandidateProvider(CandidateProvider):
    def __init__(self, colleges: Optional[List[CollegeCandidate]] = None):
        self.colleges = list(colleges) if colleges is not None else list(STUB_COLLEGES)

    def get_candidates(self, filter: Optional[CandidateFilter] = None) -> FetchResult:
        results = self.colleges
        if filter is not None and filter.state:
            results = [c for c in results if state_matches(c.location.state, filter.state)]
        if filter is not None and filter.limit:
            results = results[:filter.limit]
        return FetchResult(candidates=list(results), source="stub")

    def search_by_name(self, text: str) -> FetchResult:
        q = (text or "").strip().lower()
        if not q:
            return FetchResult(source="stub")
        return FetchResult(candidates=[c for c in self.colleges if q in c.name.lower()], source="stub")
