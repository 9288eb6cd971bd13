"""Integration test: orchestrator + cache + parser + fallback with a mock driver (no browser)."""

import asyncio
import json
import random
from typing import Any

import pytest

from src.core.config import ScraperConfig
from src.core.schemas import Query, RawRecord
from src.pipeline.orchestrator import ScrapeOrchestrator
from src.pipeline.result_cache import ResultCache
from src.platforms.base import SearchDriver

# ---------------------------------------------------------------------------
# Mock driver
# ---------------------------------------------------------------------------


class MockDriver(SearchDriver):
    """Serves queued behaviours: a list of records, an exception, or "hang"."""

    def __init__(self, *behaviours: Any) -> None:
        self._behaviours = list(behaviours)
        self.calls = 0

    async def fetch_records(self, url: str) -> list[RawRecord]:
        self.calls += 1
        behaviour = self._behaviours.pop(0) if self._behaviours else []
        if behaviour == "hang":
            await asyncio.sleep(60)
        if isinstance(behaviour, BaseException):
            raise behaviour
        return list(behaviour)


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def _card(title: str, *, location: str | None = "Seattle, WA") -> dict[str, Any]:
    card: dict[str, Any] = {
        "title": {".base-search-card__title": title},
        "company": {".base-search-card__subtitle": "Initech"},
        "location": {},
        "link": {"a.base-card__full-link@href": "https://www.linkedin.com/jobs/view/9/?x=1"},
        "logo": {},
        "postedDate": {"time.job-search-card__listdate": "1 week ago"},
        "salary": {},
    }
    if location is not None:
        card["location"][".job-search-card__location"] = location
    return card


ENGINEER = Query(keywords="engineer", location="", job_type="all", date_posted="anytime")

REQUIRED_FIELDS = ("id", "title", "company", "location", "job_type", "date_posted",
                   "description", "url")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


def _build(driver: SearchDriver, clock: FakeClock) -> ScrapeOrchestrator:
    return ScrapeOrchestrator(
        driver,
        ResultCache(ttl_seconds=30 * 60, clock=clock),
        ScraperConfig(),
        rng=random.Random(1234),
        deadline_seconds=0.05,
    )


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------


class TestTimeoutThenCache:
    """Browser hangs → synthetic jobs; immediate repeat → served from cache."""

    async def test_scenario_timeout_fallback(self, clock: FakeClock) -> None:
        orchestrator = _build(MockDriver("hang"), clock)
        result = await orchestrator.fetch(ENGINEER)
        await orchestrator.aclose()

        assert len(result.jobs) > 0
        assert result.warning is not None
        assert "timeout" in result.warning.lower()
        assert result.is_from_cache is False

    async def test_scenario_repeat_served_from_cache(self, clock: FakeClock) -> None:
        driver = MockDriver("hang")
        orchestrator = _build(driver, clock)
        first = await orchestrator.fetch(ENGINEER)
        second = await orchestrator.fetch(ENGINEER)
        await orchestrator.aclose()

        assert second.is_from_cache is True
        assert second.jobs == first.jobs
        assert second.total_count == first.total_count
        assert second.warning is None
        assert driver.calls == 1

    async def test_expired_entry_not_served(self, clock: FakeClock) -> None:
        driver = MockDriver("hang", [_card("Platform Engineer")])
        orchestrator = _build(driver, clock)
        await orchestrator.fetch(ENGINEER)
        clock.now += 30 * 60 + 1
        result = await orchestrator.fetch(ENGINEER)
        await orchestrator.aclose()

        assert result.is_from_cache is False
        assert [j.title for j in result.jobs] == ["Platform Engineer"]
        assert result.warning is None
        assert driver.calls == 2


class TestRemoteFilterWithMissingLocations:
    """jobType=remote, three cards without a location match."""

    async def test_location_placeholder_and_inferred_job_type(self, clock: FakeClock) -> None:
        cards = [
            _card("Contract Backend Engineer", location=None),
            _card("Software Engineer", location=None),
            _card("Remote Data Engineer", location=None),
        ]
        orchestrator = _build(MockDriver(cards), clock)
        result = await orchestrator.fetch(
            Query(keywords="engineer", job_type="remote"),
        )

        assert len(result.jobs) == 3
        assert all(j.location == "Unknown Location" for j in result.jobs)
        assert [j.job_type for j in result.jobs] == ["Contract", "Full-time", "Remote"]
        assert result.warning is None


# ---------------------------------------------------------------------------
# Properties across many queries
# ---------------------------------------------------------------------------


QUERIES = [
    Query(keywords="engineer"),
    Query(keywords="nurse", location="Chicago, IL", job_type="parttime"),
    Query(keywords="designer", job_type="temporary", date_posted="past24hours"),
    Query(keywords="analyst", job_type="internship", date_posted="pastWeek", page=4),
    Query(keywords="writer", location="Remote", job_type="contract", date_posted="pastMonth"),
]


class TestResultInvariants:
    @pytest.mark.parametrize("query", QUERIES, ids=lambda q: q.fingerprint)
    @pytest.mark.parametrize("behaviour", [
        "hang",
        RuntimeError("net::ERR_ABORTED"),
        [],
        [_card(f"Role {i}", location=None) for i in range(40)],
        [{}, {}, {}],
    ], ids=["timeout", "navigation", "empty", "many", "blank-cards"])
    async def test_bounds_and_required_fields(
        self, clock: FakeClock, query: Query, behaviour: Any,
    ) -> None:
        orchestrator = _build(MockDriver(behaviour), clock)
        result = await orchestrator.fetch(query)
        await orchestrator.aclose()

        assert len(result.jobs) <= 25
        assert result.total_count >= len(result.jobs)
        for job in result.jobs:
            for field in REQUIRED_FIELDS:
                value = getattr(job, field)
                assert isinstance(value, str)
                assert value.strip()
        assert len({j.id for j in result.jobs}) == len(result.jobs)

    async def test_payload_is_json_serializable(self, clock: FakeClock) -> None:
        orchestrator = _build(MockDriver("hang"), clock)
        result = await orchestrator.fetch(ENGINEER)
        await orchestrator.aclose()

        payload = json.loads(json.dumps(result.to_payload()))
        assert set(payload) == {"jobs", "totalCount", "isFromCache", "page", "warning"}
        assert {"id", "title", "company", "location", "jobType", "datePosted",
                "description", "url"} <= set(payload["jobs"][0])


class TestConcurrentRequests:
    async def test_distinct_queries_run_concurrently(self, clock: FakeClock) -> None:
        driver = MockDriver([_card("A")], [_card("B")], [_card("C")])
        orchestrator = _build(driver, clock)
        results = await asyncio.gather(*(
            orchestrator.fetch(Query(keywords=k)) for k in ("alpha", "beta", "gamma")
        ))
        assert sorted(r.jobs[0].title for r in results) == ["A", "B", "C"]
        assert all(not r.is_from_cache for r in results)

    async def test_identical_concurrent_queries_both_scrape(self, clock: FakeClock) -> None:
        """No single-flight: both callers miss and both hit the driver."""
        driver = MockDriver([_card("First")], [_card("Second")])
        orchestrator = _build(driver, clock)
        a, b = await asyncio.gather(orchestrator.fetch(ENGINEER), orchestrator.fetch(ENGINEER))
        assert driver.calls == 2
        assert not a.is_from_cache and not b.is_from_cache
        cached = await orchestrator.fetch(ENGINEER)
        assert cached.is_from_cache is True
