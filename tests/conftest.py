"""
Pytest configuration for BFFlix backend tests.

Sets up test environment and global fixtures.
"""
import os
from datetime import datetime, timedelta, timezone
from typing import List, Optional

import pytest
from unittest.mock import MagicMock

# Disable config validation during tests
# This allows tests to run without requiring real environment variables
os.environ["VALIDATE_CONFIG"] = "false"

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_PUBLISHABLE_KEY", "test-publishable-key")
os.environ.setdefault("GOOGLE_API_KEY", "test-google-api-key")
os.environ.setdefault("RECOMMENDATION_CACHE_BACKEND", "memory")

from bfflix.schemas.viewings import ViewingRecord  # noqa: E402


class FakeClock:
    """Manually advanced UTC clock for TTL tests."""

    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class FakeModelClient:
    """ModelClient that replays canned responses and records prompts."""

    def __init__(self, *responses: str, error: Optional[Exception] = None):
        self.responses: List[str] = list(responses)
        self.error = error
        self.prompts: List[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]

    @property
    def calls(self) -> int:
        return len(self.prompts)


def make_viewing(
    tmdb_id: str = "1399",
    media_type: str = "tv",
    days_ago: int = 0,
    **fields,
) -> ViewingRecord:
    watched_at = datetime(2025, 6, 1, tzinfo=timezone.utc) - timedelta(days=days_ago)
    return ViewingRecord(
        id=fields.pop("id", f"v-{tmdb_id}-{days_ago}"),
        user_id=fields.pop("user_id", "user-1"),
        media_type=media_type,
        tmdb_id=tmdb_id,
        watched_at=watched_at,
        **fields,
    )


@pytest.fixture
def supabase_client():
    """
    Mock Supabase client for testing services.
    Returns a MagicMock that simulates Supabase client behavior.
    """
    mock_client = MagicMock()
    return mock_client


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def model_client_factory():
    """Build FakeModelClient instances inside a test."""
    return FakeModelClient


@pytest.fixture
def viewing_factory():
    """Build ViewingRecord instances with sensible defaults."""
    return make_viewing
