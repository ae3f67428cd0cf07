"""
Tests for /viewings endpoints.

The Supabase client factory and the viewing service functions are patched,
so these tests only exercise routing, validation and error mapping.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from bfflix.auth.dependencies import AuthenticatedUser, get_authenticated_user
from bfflix.main import app
from bfflix.schemas.viewings import ViewingRecord


@pytest.fixture
def client():
    """Create test client for FastAPI app."""
    return TestClient(app)


async def mock_authenticated_user():
    return AuthenticatedUser(user_id="test-user-uuid-123", access_token="test-token")


@pytest.fixture(autouse=True)
def authenticated():
    app.dependency_overrides[get_authenticated_user] = mock_authenticated_user
    with patch("bfflix.routes.viewings.get_supabase_client", return_value=MagicMock()) as factory:
        yield factory
    app.dependency_overrides.clear()


class TestCreateViewing:
    def test_records_viewing(self, client, authenticated):
        with patch("bfflix.routes.viewings.create_viewing", new_callable=AsyncMock) as create:
            create.return_value = {"id": 42}

            response = client.post("/viewings", json={
                "media_type": "tv",
                "tmdb_id": " 1399 ",
                "season_number": 1,
                "episode_number": 3,
                "rating": 5,
                "comment": "wow",
            })

        assert response.status_code == 201
        assert response.json() == {"id": "42"}
        authenticated.assert_called_once_with("test-token")
        kwargs = create.await_args.kwargs
        assert kwargs["user_id"] == "test-user-uuid-123"
        assert kwargs["tmdb_id"] == "1399"
        assert kwargs["watched_at"] is None

    @pytest.mark.parametrize("payload", [
        {"media_type": "tv", "tmdb_id": "1399", "episode_number": 3},
        {"media_type": "movie", "tmdb_id": "603", "rating": 6},
        {"media_type": "podcast", "tmdb_id": "1"},
        {"media_type": "movie", "tmdb_id": ""},
    ])
    def test_invalid_payload_returns_422(self, client, payload):
        with patch("bfflix.routes.viewings.create_viewing", new_callable=AsyncMock) as create:
            response = client.post("/viewings", json=payload)

        assert response.status_code == 422
        create.assert_not_awaited()

    def test_database_failure_returns_500(self, client):
        with patch("bfflix.routes.viewings.create_viewing", new_callable=AsyncMock) as create:
            create.side_effect = Exception("insert failed")

            response = client.post("/viewings", json={"media_type": "movie", "tmdb_id": "603"})

        assert response.status_code == 500
        assert response.json()["detail"]["error"] == "create_error"


class TestListViewings:
    def test_lists_my_viewings(self, client):
        record = ViewingRecord(
            id="v1",
            user_id="test-user-uuid-123",
            media_type="movie",
            tmdb_id="603",
            rating=4,
            watched_at=datetime(2025, 6, 1, tzinfo=timezone.utc),
        )
        with patch("bfflix.routes.viewings.get_user_viewings", new_callable=AsyncMock) as list_fn:
            list_fn.return_value = [record]

            response = client.get("/viewings/me", params={"page": 2, "limit": 5, "media_type": "movie"})

        assert response.status_code == 200
        body = response.json()
        assert body["page"] == 2
        assert body["limit"] == 5
        assert body["items"][0]["tmdb_id"] == "603"
        kwargs = list_fn.await_args.kwargs
        assert kwargs["page"] == 2
        assert kwargs["limit"] == 5
        assert kwargs["media_type"] == "movie"
        assert kwargs["start"] is None

    def test_limit_above_50_returns_422(self, client):
        response = client.get("/viewings/me", params={"limit": 51})

        assert response.status_code == 422


class TestDeleteViewing:
    def test_deletes_viewing(self, client):
        with patch("bfflix.routes.viewings.delete_viewing", new_callable=AsyncMock) as delete:
            delete.return_value = True

            response = client.delete("/viewings/v1")

        assert response.status_code == 200
        assert response.json() == {"ok": True}
        assert delete.await_args.kwargs["viewing_id"] == "v1"

    def test_missing_viewing_returns_404(self, client):
        with patch("bfflix.routes.viewings.delete_viewing", new_callable=AsyncMock) as delete:
            delete.return_value = False

            response = client.delete("/viewings/unknown")

        assert response.status_code == 404
        assert response.json()["detail"]["error"] == "not_found"
