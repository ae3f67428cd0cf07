"""
Viewing history service.

Handles recording and listing a user's watched movies and TV episodes, and
provides the history collaborator used by the recommendation pipeline.

A failure to load history is raised as HistoryLoadFailed and is never turned
into an empty list: "no history" selects the follow-up question branch of
the pipeline, so the two cases must stay distinguishable.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol, cast

from pydantic import ValidationError
from supabase import Client

from bfflix.schemas.viewings import ViewingRecord
from bfflix.errors import HistoryLoadFailed
from bfflix.utils.constants import TABLES

logger = logging.getLogger(__name__)

VIEWING_COLUMNS = (
    "id, user_id, media_type, tmdb_id, season_number, episode_number, "
    "rating, comment, watched_at"
)


class HistoryProvider(Protocol):
    """Source of a user's most recent viewings, most recent first."""

    async def list_recent_viewings(self, user_id: str, limit: int) -> List[ViewingRecord]:
        ...


def _to_records(rows: List[Dict[str, Any]], strict: bool = False) -> List[ViewingRecord]:
    """
    Validate rows as ViewingRecord.

    Lenient mode (listing endpoint) skips malformed rows. Strict mode
    (recommendation history) re-raises the ValidationError, since dropping
    rows would shrink or even empty the history the prompt is built from.
    """
    records: List[ViewingRecord] = []
    for row in rows:
        if row.get("id") is not None:
            row = {**row, "id": str(row["id"])}
        try:
            records.append(ViewingRecord.model_validate(row))
        except ValidationError as e:
            if strict:
                raise
            logger.warning(f"Skipping malformed viewing row id={row.get('id')}: {e.error_count()} errors")
    return records


async def create_viewing(
    supabase_client: Client,
    user_id: str,
    media_type: str,
    tmdb_id: str,
    season_number: Optional[int] = None,
    episode_number: Optional[int] = None,
    rating: Optional[int] = None,
    comment: Optional[str] = None,
    watched_at: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Record a watched movie or episode.

    Args:
        supabase_client: Authenticated Supabase client
        user_id: The authenticated user's ID
        media_type: "movie" or "tv"
        tmdb_id: Title identifier in the movie-metadata catalog
        season_number: Season (TV only, optional)
        episode_number: Episode (requires season_number)
        rating: 1-5 rating (optional)
        comment: Free-text note (optional)
        watched_at: When it was watched (defaults to now)

    Returns:
        The created viewing row

    Security:
        - RLS enforces user_id = auth.uid()
    """
    viewing_data: Dict[str, Any] = {
        "user_id": user_id,
        "media_type": media_type,
        "tmdb_id": tmdb_id,
        "watched_at": (watched_at or datetime.now(timezone.utc)).isoformat(),
    }

    if season_number is not None:
        viewing_data["season_number"] = season_number
    if episode_number is not None:
        viewing_data["episode_number"] = episode_number
    if rating is not None:
        viewing_data["rating"] = rating
    if comment:
        viewing_data["comment"] = comment

    logger.info(f"Recording {media_type} viewing for user {user_id}")

    result = supabase_client.table(TABLES['VIEWING']).insert(viewing_data).execute()

    if not result.data or len(result.data) == 0:
        raise Exception("Failed to create viewing: no data returned")

    created: Dict[str, Any] = cast(Dict[str, Any], result.data[0])
    logger.info(f"Viewing {created.get('id')} recorded for user {user_id}")

    return created


async def get_user_viewings(
    supabase_client: Client,
    user_id: str,
    page: int = 1,
    limit: int = 20,
    media_type: Optional[str] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> List[ViewingRecord]:
    """
    List the user's viewings, most recent first, with optional filters.

    Args:
        supabase_client: Authenticated Supabase client
        user_id: The authenticated user's ID
        page: 1-based page number
        limit: Page size
        media_type: Only "movie" or only "tv" (optional)
        start: Inclusive lower bound on watched_at (optional)
        end: Exclusive upper bound on watched_at (optional)

    Returns:
        List of ViewingRecord
    """
    offset = (page - 1) * limit
    logger.debug(f"Fetching viewings for user {user_id} (page={page}, limit={limit})")

    query = (
        supabase_client.table(TABLES['VIEWING'])
        .select(VIEWING_COLUMNS)
        .eq("user_id", user_id)
    )
    if media_type:
        query = query.eq("media_type", media_type)
    if start:
        query = query.gte("watched_at", start.isoformat())
    if end:
        query = query.lt("watched_at", end.isoformat())

    result = (
        query.order("watched_at", desc=True)
        .order("id", desc=True)
        .range(offset, offset + limit - 1)
        .execute()
    )

    viewings = _to_records(cast(List[Dict[str, Any]], result.data or []))
    logger.info(f"Found {len(viewings)} viewings for user {user_id}")

    return viewings


async def delete_viewing(
    supabase_client: Client,
    user_id: str,
    viewing_id: str,
) -> bool:
    """
    Delete one of the user's viewings.

    Returns:
        True if a row was deleted, False if no such viewing belongs to the user
    """
    logger.info(f"Deleting viewing {viewing_id} for user {user_id}")

    result = (
        supabase_client.table(TABLES['VIEWING'])
        .delete()
        .eq("id", viewing_id)
        .eq("user_id", user_id)
        .execute()
    )

    return bool(result.data)


class SupabaseViewingHistory:
    """HistoryProvider backed by the `viewing` table."""

    def __init__(self, supabase_client: Client):
        self.supabase_client = supabase_client

    async def list_recent_viewings(self, user_id: str, limit: int) -> List[ViewingRecord]:
        """
        Fetch the `limit` most recent viewings, newest first.

        Raises:
            HistoryLoadFailed: if the query fails or any returned row is
                malformed (never reported as a shorter or empty history)
        """
        try:
            result = (
                self.supabase_client.table(TABLES['VIEWING'])
                .select(VIEWING_COLUMNS)
                .eq("user_id", user_id)
                .order("watched_at", desc=True)
                .order("id", desc=True)
                .limit(limit)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to load viewing history for user {user_id}: {e}")
            raise HistoryLoadFailed("viewing history could not be loaded") from e

        try:
            return _to_records(cast(List[Dict[str, Any]], result.data or []), strict=True)
        except ValidationError as e:
            logger.error(
                f"Malformed viewing row in history for user {user_id}: {e.error_count()} errors"
            )
            raise HistoryLoadFailed("viewing history contains malformed rows") from e
