"""Tests for streaming subscription lookups (Supabase client mocked)."""

from unittest.mock import MagicMock

import pytest

from bfflix.errors import SubscriptionLoadFailed
from bfflix.services.subscription_service import SupabaseSubscriptions


def _chain(supabase_client):
    return supabase_client.table.return_value.select.return_value.eq.return_value


@pytest.mark.asyncio
async def test_returns_sorted_distinct_names(supabase_client):
    mock_response = MagicMock()
    mock_response.data = [
        {"streaming_service": {"name": "Netflix"}},
        {"streaming_service": {"name": "Hulu"}},
        {"streaming_service": [{"name": "Netflix"}]},
        {"streaming_service": None},
        {"streaming_service": {"name": "  "}},
    ]
    _chain(supabase_client).execute.return_value = mock_response

    names = await SupabaseSubscriptions(supabase_client).list_platform_names("user-1")

    assert names == ["Hulu", "Netflix"]
    supabase_client.table.assert_called_once_with("user_streaming_service")
    supabase_client.table.return_value.select.assert_called_once_with("streaming_service(name)")
    supabase_client.table.return_value.select.return_value.eq.assert_called_once_with("user_id", "user-1")


@pytest.mark.asyncio
async def test_no_subscriptions(supabase_client):
    mock_response = MagicMock()
    mock_response.data = []
    _chain(supabase_client).execute.return_value = mock_response

    assert await SupabaseSubscriptions(supabase_client).list_platform_names("user-1") == []


@pytest.mark.asyncio
async def test_query_failure_raises(supabase_client):
    _chain(supabase_client).execute.side_effect = Exception("timeout")

    with pytest.raises(SubscriptionLoadFailed):
        await SupabaseSubscriptions(supabase_client).list_platform_names("user-1")
