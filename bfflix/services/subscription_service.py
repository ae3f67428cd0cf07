"""
Streaming subscription service.

Resolves the names of the platforms a user subscribes to. The link table
`user_streaming_service` references `streaming_service`, and only the
platform name is needed by the recommendation prompts.
"""

import logging
from typing import Any, Dict, List, Protocol, cast

from supabase import Client

from bfflix.errors import SubscriptionLoadFailed
from bfflix.utils.constants import TABLES

logger = logging.getLogger(__name__)


class SubscriptionProvider(Protocol):
    """Source of a user's distinct subscribed platform names."""

    async def list_platform_names(self, user_id: str) -> List[str]:
        ...


def _platform_name(row: Dict[str, Any]) -> str:
    service = row.get(TABLES['STREAMING_SERVICE'])
    # PostgREST embeds a to-one relation as an object, some setups as a list
    if isinstance(service, list):
        service = service[0] if service else None
    if not isinstance(service, dict):
        return ""
    return str(service.get("name") or "").strip()


class SupabaseSubscriptions:
    """SubscriptionProvider backed by `user_streaming_service`."""

    def __init__(self, supabase_client: Client):
        self.supabase_client = supabase_client

    async def list_platform_names(self, user_id: str) -> List[str]:
        """
        Return distinct platform names, sorted.

        Links whose platform was deleted (no embedded name) are ignored.

        Raises:
            SubscriptionLoadFailed: if the query fails
        """
        try:
            result = (
                self.supabase_client.table(TABLES['USER_STREAMING_SERVICE'])
                .select(f"{TABLES['STREAMING_SERVICE']}(name)")
                .eq("user_id", user_id)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to load streaming subscriptions for user {user_id}: {e}")
            raise SubscriptionLoadFailed("streaming subscriptions could not be loaded") from e

        rows = cast(List[Dict[str, Any]], result.data or [])
        names = sorted({name for name in (_platform_name(row) for row in rows) if name})
        logger.debug(f"User {user_id} subscribes to {len(names)} platforms")

        return names
