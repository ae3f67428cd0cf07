"""
Tests for POST /agent/recommendations.

Tests cover:
- Happy path: fresh recommendations, cache hit, follow-up question
- Failure path: missing token → 401
- Failure path: empty or oversized query → 422
- Pipeline failures collapse to {"error": "agent_failed"} (503 / 500)
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from bfflix.auth.dependencies import AuthenticatedUser, get_authenticated_user
from bfflix.errors import HistoryLoadFailed, ModelCallFailed, SubscriptionLoadFailed
from bfflix.main import app
from bfflix.routes.recommendations import get_recommendation_orchestrator
from bfflix.schemas.recommendations import RecommendationQueryResponse


@pytest.fixture
def client():
    """Create test client for FastAPI app."""
    return TestClient(app)


async def mock_authenticated_user():
    """Mock dependency that returns a test user."""
    return AuthenticatedUser(user_id="test-user-uuid-123", access_token="test-token")


@pytest.fixture
def orchestrator():
    """Override the orchestrator dependency with a mock."""
    mock = MagicMock()
    mock.recommend = AsyncMock()

    app.dependency_overrides[get_authenticated_user] = mock_authenticated_user
    app.dependency_overrides[get_recommendation_orchestrator] = lambda: mock

    yield mock

    # Clean up after test
    app.dependency_overrides.clear()


class TestRecommendationsEndpoint:
    def test_fresh_recommendations(self, client, orchestrator):
        orchestrator.recommend.return_value = RecommendationQueryResponse(
            query="something cozy",
            cached=False,
            results=[{"title": "Up", "type": "movie", "reason": "Warm", "matchScore": 88}],
            based_on_count=7,
            platforms=["Netflix"],
        )

        response = client.post(
            "/agent/recommendations",
            json={"query": "something cozy"},
            headers={"Authorization": "Bearer test-token"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body == {
            "query": "something cozy",
            "cached": False,
            "results": [{"title": "Up", "type": "movie", "reason": "Warm", "matchScore": 88}],
            "based_on_count": 7,
            "platforms": ["Netflix"],
        }
        orchestrator.recommend.assert_awaited_once_with(
            user_id="test-user-uuid-123", query="something cozy"
        )

    def test_cache_hit(self, client, orchestrator):
        orchestrator.recommend.return_value = RecommendationQueryResponse(
            query="q",
            cached=True,
            results={"raw": "cached text"},
            message="Served from cache",
        )

        response = client.post("/agent/recommendations", json={"query": "q"})

        assert response.status_code == 200
        assert response.json() == {
            "query": "q",
            "cached": True,
            "results": {"raw": "cached text"},
            "message": "Served from cache",
        }

    def test_follow_up_question(self, client, orchestrator):
        orchestrator.recommend.return_value = RecommendationQueryResponse(
            query="hi",
            cached=False,
            results={"kind": "conversation", "message": "Trending or a genre list?"},
        )

        response = client.post("/agent/recommendations", json={"query": "hi"})

        assert response.status_code == 200
        assert response.json()["results"]["kind"] == "conversation"
        assert "based_on_count" not in response.json()

    def test_query_passed_verbatim(self, client, orchestrator):
        orchestrator.recommend.return_value = RecommendationQueryResponse(
            query="Comedy ", cached=False, results={"raw": "x"}
        )

        client.post("/agent/recommendations", json={"query": "Comedy "})

        assert orchestrator.recommend.await_args.kwargs["query"] == "Comedy "

    @pytest.mark.parametrize("payload", [{"query": ""}, {}, {"query": "x" * 1001}])
    def test_invalid_query_returns_422(self, client, orchestrator, payload):
        response = client.post("/agent/recommendations", json=payload)

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"
        orchestrator.recommend.assert_not_awaited()

    def test_model_failure_returns_503(self, client, orchestrator):
        orchestrator.recommend.side_effect = ModelCallFailed("Gemini call timed out")

        response = client.post("/agent/recommendations", json={"query": "q"})

        assert response.status_code == 503
        assert response.json() == {"error": "agent_failed"}

    @pytest.mark.parametrize("error", [
        HistoryLoadFailed("db"),
        SubscriptionLoadFailed("db"),
        RuntimeError("unexpected"),
    ])
    def test_other_failures_return_500(self, client, orchestrator, error):
        orchestrator.recommend.side_effect = error

        response = client.post("/agent/recommendations", json={"query": "q"})

        assert response.status_code == 500
        assert response.json() == {"error": "agent_failed"}


class TestAuthentication:
    def test_missing_token_returns_401(self, client):
        app.dependency_overrides[get_recommendation_orchestrator] = lambda: MagicMock()
        try:
            response = client.post("/agent/recommendations", json={"query": "q"})
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 401
        assert response.json()["detail"]["error"] == "unauthorized"

    def test_malformed_header_returns_401(self, client):
        app.dependency_overrides[get_recommendation_orchestrator] = lambda: MagicMock()
        try:
            response = client.post(
                "/agent/recommendations",
                json={"query": "q"},
                headers={"Authorization": "Token abc"},
            )
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 401
