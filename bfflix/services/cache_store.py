"""
Recommendation cache.

Stores the last computed recommendation payload per (user_id, query) for a
fixed freshness window (6 hours by default).

Contract (RecommendationCacheStore):
- get(user_id, query): the live entry, or None. Entries whose expires_at has
  passed are never returned, even if the row still exists.
- put(user_id, query, payload, ttl_seconds): upsert. The whole entry is
  replaced, so concurrent readers see either the old or the new entry.
- purge_expired(): housekeeping only; reads never depend on it.

Any infrastructure failure is raised as StoreUnavailable. The orchestrator
treats that as a cache miss, never as a failed request.

Backends:
- SupabaseRecommendationCache: `recommendation_cache` table with a unique
  index on (user_id, query); RLS scopes rows to auth.uid()
- InMemoryRecommendationCache: single-process dict, for local development
"""

import copy
import logging
import threading
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional, Protocol, Tuple

from supabase import Client

from bfflix.config import settings
from bfflix.errors import StoreUnavailable
from bfflix.utils.constants import TABLES

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_timestamp(value: Any) -> datetime:
    """Parse a timestamptz value returned by PostgREST."""
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class CacheEntry:
    """One cached recommendation payload."""
    user_id: str
    query: str
    result_payload: Any
    expires_at: datetime

    def is_live(self, now: datetime) -> bool:
        return now < self.expires_at


class RecommendationCacheStore(Protocol):
    """Keyed, time-limited storage of recommendation payloads."""

    async def get(self, user_id: str, query: str) -> Optional[CacheEntry]:
        ...

    async def put(self, user_id: str, query: str, payload: Any, ttl_seconds: int) -> None:
        ...

    async def purge_expired(self) -> int:
        ...


class SupabaseRecommendationCache:
    """Cache backed by the `recommendation_cache` table."""

    def __init__(self, supabase_client: Client, clock: Clock = utc_now):
        self.supabase_client = supabase_client
        self.clock = clock

    async def get(self, user_id: str, query: str) -> Optional[CacheEntry]:
        now = self.clock()
        try:
            result = (
                self.supabase_client.table(TABLES['RECOMMENDATION_CACHE'])
                .select("user_id, query, results, expires_at")
                .eq("user_id", user_id)
                .eq("query", query)
                .gt("expires_at", now.isoformat())
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.warning(f"Recommendation cache read failed: {e}")
            raise StoreUnavailable("recommendation cache read failed") from e

        if not result.data:
            return None

        row: Dict[str, Any] = result.data[0]
        try:
            expires_at = _parse_timestamp(row["expires_at"])
        except (KeyError, ValueError) as e:
            logger.warning(f"Malformed recommendation cache row for user_id={user_id}: {e}")
            return None

        entry = CacheEntry(
            user_id=user_id,
            query=query,
            result_payload=row.get("results"),
            expires_at=expires_at,
        )
        # The filter above ran on the database clock; re-check against ours
        if not entry.is_live(now):
            return None
        return entry

    async def put(self, user_id: str, query: str, payload: Any, ttl_seconds: int) -> None:
        expires_at = self.clock() + timedelta(seconds=ttl_seconds)
        row = {
            "user_id": user_id,
            "query": query,
            "results": payload,
            "expires_at": expires_at.isoformat(),
        }
        try:
            (
                self.supabase_client.table(TABLES['RECOMMENDATION_CACHE'])
                .upsert(row, on_conflict="user_id,query")
                .execute()
            )
        except Exception as e:
            logger.warning(f"Recommendation cache write failed: {e}")
            raise StoreUnavailable("recommendation cache write failed") from e

        logger.debug(f"Cached recommendations for user_id={user_id} until {expires_at.isoformat()}")

    async def purge_expired(self) -> int:
        now = self.clock()
        try:
            result = (
                self.supabase_client.table(TABLES['RECOMMENDATION_CACHE'])
                .delete()
                .lte("expires_at", now.isoformat())
                .execute()
            )
        except Exception as e:
            logger.warning(f"Recommendation cache purge failed: {e}")
            raise StoreUnavailable("recommendation cache purge failed") from e

        removed = len(result.data or [])
        logger.info(f"Purged {removed} expired recommendation cache entries")
        return removed


class InMemoryRecommendationCache:
    """
    Process-local cache.

    Entries are frozen and replaced under a lock; payloads are deep-copied
    on the way in and out so callers cannot mutate a stored entry.
    """

    def __init__(self, clock: Clock = utc_now):
        self.clock = clock
        self._entries: Dict[Tuple[str, str], CacheEntry] = {}
        self._lock = threading.Lock()

    async def get(self, user_id: str, query: str) -> Optional[CacheEntry]:
        now = self.clock()
        with self._lock:
            entry = self._entries.get((user_id, query))
        if entry is None or not entry.is_live(now):
            return None
        return replace(entry, result_payload=copy.deepcopy(entry.result_payload))

    async def put(self, user_id: str, query: str, payload: Any, ttl_seconds: int) -> None:
        entry = CacheEntry(
            user_id=user_id,
            query=query,
            result_payload=copy.deepcopy(payload),
            expires_at=self.clock() + timedelta(seconds=ttl_seconds),
        )
        with self._lock:
            self._entries[(user_id, query)] = entry

    async def purge_expired(self) -> int:
        now = self.clock()
        with self._lock:
            dead = [key for key, entry in self._entries.items() if not entry.is_live(now)]
            for key in dead:
                del self._entries[key]
        return len(dead)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


# Shared by every request when RECOMMENDATION_CACHE_BACKEND=memory
_memory_cache: Optional[InMemoryRecommendationCache] = None


def get_memory_cache() -> InMemoryRecommendationCache:
    global _memory_cache

    if _memory_cache is None:
        _memory_cache = InMemoryRecommendationCache()

    return _memory_cache


def build_cache_store(supabase_client: Client) -> RecommendationCacheStore:
    """Select the cache backend configured by RECOMMENDATION_CACHE_BACKEND."""
    if settings.RECOMMENDATION_CACHE_BACKEND == "memory":
        return get_memory_cache()
    return SupabaseRecommendationCache(supabase_client)
