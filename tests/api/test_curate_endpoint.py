"""
Curation Endpoint Tests

Tests for POST /v1/curate:
- Declarative criteria compiled to pipeline strategies
- Response schema
- Error mapping (400 invalid criteria, 413 oversized input, 422 bad body)
"""

import inspect
from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from list_curation.api.curate import CriteriaIn, build_criteria, cached_settings
from list_curation.api.curate import curate as curate_handler
from list_curation.core.config import Settings
from list_curation.curation.models import Record
from list_curation.main import app


def _test_settings() -> Settings:
    return Settings(_env_file=None, max_records=6, default_max_count=10)


@pytest.fixture
def client() -> Iterator[TestClient]:
    app.dependency_overrides[cached_settings] = _test_settings
    yield TestClient(app)
    app.dependency_overrides.clear()


USERS = [
    {"id": "u1", "label": "Ada", "permission_level": 1, "score": 0.9},
    {"id": "u2", "label": "Ben", "permission_level": 2, "score": 0.4},
    {"id": "u3", "label": "Cy", "permission_level": 1, "score": 0.8},
    {"id": "u4", "label": "Dee", "permission_level": 3, "score": 0.7},
    {"id": "u5", "label": "Eve", "permission_level": 2, "score": 0.95},
]


# =============================================================================
# Happy path
# =============================================================================


class TestCurateEndpoint:
    """Tests for successful curation requests."""

    def test_returns_ranked_permitted_users(self, client: TestClient) -> None:
        """Users at level >= 2 come back by score descending."""
        response = client.post(
            "/v1/curate",
            json={"records": USERS, "criteria": {"required_level": 2}},
        )

        assert response.status_code == 200
        data = response.json()
        assert [e["id"] for e in data["entries"]] == ["u5", "u4", "u2"]
        assert [e["position"] for e in data["entries"]] == [1, 2, 3]
        assert data["dropped"] == []
        assert data["metadata"]["total_input"] == 5
        assert data["metadata"]["total_results"] == 3

    def test_entries_have_required_fields(self, client: TestClient) -> None:
        """Each entry carries id, label, position, rank and attributes."""
        response = client.post("/v1/curate", json={"records": USERS[:2]})

        for entry in response.json()["entries"]:
            assert set(entry) == {"id", "label", "position", "rank", "attributes"}
            assert entry["attributes"]["status"] == "active"

    def test_respects_max_count(self, client: TestClient) -> None:
        """max_count bounds the result."""
        response = client.post(
            "/v1/curate",
            json={"records": USERS, "criteria": {"max_count": 2}},
        )

        assert len(response.json()["entries"]) == 2

    def test_zero_max_count_returns_no_entries(self, client: TestClient) -> None:
        """max_count=0 is an empty result, not an error."""
        response = client.post(
            "/v1/curate",
            json={"records": USERS, "criteria": {"max_count": 0}},
        )

        assert response.status_code == 200
        assert response.json()["entries"] == []

    def test_empty_records(self, client: TestClient) -> None:
        """No records returns an empty list."""
        response = client.post("/v1/curate", json={"records": []})

        assert response.status_code == 200
        assert response.json()["entries"] == []

    def test_reports_dropped_records(self, client: TestClient) -> None:
        """Records without a score are listed as dropped."""
        records = USERS[:4] + [{"id": "u9", "label": "Nobody"}]

        response = client.post("/v1/curate", json={"records": records})

        data = response.json()
        assert len(data["entries"]) == 4
        assert data["dropped"] == [{"id": "u9", "reason": "ranking returned None"}]

    def test_post_feed_by_interest_and_recency(self, client: TestClient) -> None:
        """Interest filter and recency ranking for posts."""
        posts = [
            {"id": "p1", "tags": ["python"], "timestamp": "2024-06-01T08:00:00Z"},
            {"id": "p2", "tags": ["food"], "timestamp": "2024-06-01T10:00:00Z"},
            {"id": "p3", "tags": ["python"], "timestamp": "2024-06-01T09:00:00Z"},
        ]

        response = client.post(
            "/v1/curate",
            json={"records": posts, "criteria": {"interests": ["python"], "ranking": "recency"}},
        )

        assert [e["id"] for e in response.json()["entries"]] == ["p3", "p1"]

    def test_status_filter_can_be_disabled(self, client: TestClient) -> None:
        """statuses=null keeps inactive records."""
        records = [
            {"id": "a", "status": "suspended", "score": 1.0},
            {"id": "b", "status": "active", "score": 0.5},
        ]

        default = client.post("/v1/curate", json={"records": records})
        unfiltered = client.post(
            "/v1/curate", json={"records": records, "criteria": {"statuses": None}}
        )

        assert [e["id"] for e in default.json()["entries"]] == ["b"]
        assert [e["id"] for e in unfiltered.json()["entries"]] == ["a", "b"]

    def test_weighted_ranking(self, client: TestClient) -> None:
        """Weighted ranking combines attributes."""
        records = [
            {"id": "a", "score": 1.0, "attributes": {"followers": 10}},
            {"id": "b", "score": 0.5, "attributes": {"followers": 500}},
        ]

        response = client.post(
            "/v1/curate",
            json={
                "records": records,
                "criteria": {"ranking": "weighted", "weights": {"score": 1.0, "followers": 0.01}},
            },
        )

        assert [e["id"] for e in response.json()["entries"]] == ["b", "a"]

    def test_overflowing_rank_is_dropped(self, client: TestClient) -> None:
        """A weighted rank that overflows is dropped instead of losing its rank."""
        records = [{"id": "a", "score": 1e308}, {"id": "b", "score": 1.0}]

        response = client.post(
            "/v1/curate",
            json={"records": records, "criteria": {"ranking": "weighted", "weights": {"score": 10.0}}},
        )

        assert response.status_code == 200
        data = response.json()
        assert [(e["id"], e["rank"]) for e in data["entries"]] == [("b", 10.0)]
        assert data["dropped"][0]["id"] == "a"
        assert "non-finite" in data["dropped"][0]["reason"]

    def test_record_fields_not_overwritten_by_attributes(self, client: TestClient) -> None:
        """Attributes named like record fields do not replace them."""
        records = [{"id": "a", "score": 1.0, "attributes": {"score": "junk", "status": "x"}}]

        response = client.post("/v1/curate", json={"records": records})

        attributes = response.json()["entries"][0]["attributes"]
        assert attributes["score"] == 1.0
        assert attributes["status"] == "active"

    def test_handler_runs_in_threadpool(self) -> None:
        """The curate handler is synchronous so FastAPI runs it off the event loop."""
        assert not inspect.iscoroutinefunction(curate_handler)


# =============================================================================
# Error mapping
# =============================================================================


class TestCurateErrors:
    """Tests for error responses."""

    def test_invalid_required_level_returns_400(self, client: TestClient) -> None:
        """Levels outside the configured scale are rejected."""
        response = client.post(
            "/v1/curate",
            json={"records": USERS, "criteria": {"required_level": 9}},
        )

        assert response.status_code == 400
        assert "outside the scale" in response.json()["detail"]

    def test_duplicate_ids_return_400(self, client: TestClient) -> None:
        """Duplicate identifiers are rejected."""
        response = client.post(
            "/v1/curate",
            json={"records": [{"id": "x", "score": 1}, {"id": "x", "score": 2}]},
        )

        assert response.status_code == 400

    def test_oversized_input_returns_413(self, client: TestClient) -> None:
        """More records than max_records is refused."""
        records = [{"id": f"r{i}", "score": i} for i in range(7)]

        response = client.post("/v1/curate", json={"records": records})

        assert response.status_code == 413

    def test_missing_records_returns_422(self, client: TestClient) -> None:
        """records is required."""
        response = client.post("/v1/curate", json={"criteria": {}})

        assert response.status_code == 422

    def test_weighted_without_weights_returns_422(self, client: TestClient) -> None:
        """Weighted ranking needs weights."""
        response = client.post(
            "/v1/curate",
            json={"records": USERS, "criteria": {"ranking": "weighted"}},
        )

        assert response.status_code == 422


# =============================================================================
# build_criteria
# =============================================================================


class TestBuildCriteria:
    """Tests for compiling declarative criteria."""

    def test_defaults_come_from_settings(self) -> None:
        """max_count and scale are taken from settings."""
        settings = Settings(_env_file=None, default_max_count=4, permission_levels=[5, 6])

        criteria = build_criteria(CriteriaIn(), settings)

        assert criteria.max_count == 4
        assert criteria.scale.levels == (5, 6)

    def test_default_eligibility_is_active_only(self) -> None:
        """Without statuses in the body, only active records qualify."""
        criteria = build_criteria(CriteriaIn(), Settings(_env_file=None))

        assert criteria.eligibility(Record(id="a", label="A"))
        assert not criteria.eligibility(Record(id="b", label="B", status="idle"))
