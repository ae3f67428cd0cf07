"""
Recommendation Service - cached, history-aware Gemini recommendations

This service turns a user's recent viewings and streaming subscriptions into
3-5 personalized movie/TV recommendations.

Pipeline (RecommendationOrchestrator.recommend):

    CHECK_CACHE ──hit──▶ return (cached=True)
        │ miss
        ▼
    LOAD_HISTORY ──no viewings──▶ ASK_FALLBACK ──▶ return (never cached)
        │ has viewings
        ▼
    BUILD_PROFILE ▶ CALL_MODEL ▶ EXTRACT ▶ WRITE_CACHE ▶ return (cached=False)

Key rules:
- The cache key is (user_id, query) with the query used verbatim
- A cache that cannot be reached is a cache miss, never a failed request
- History/subscription/model failures are fatal and propagate as
  RecommendationError subclasses; the route maps them to "agent_failed"
- The cache write is the only commit point and happens after a complete
  extraction, degraded {"raw": ...} payloads included
- Concurrent misses on the same key may both call the model; the last
  write wins
"""

import logging
from typing import Any, List, Optional, Sequence

from pydantic import ValidationError
from supabase import Client

from bfflix.agents.recommendation.extraction import extract_json, is_raw_carrier
from bfflix.agents.recommendation.model_client import ModelClient, get_model_client
from bfflix.agents.recommendation.profile import build_viewing_profile
from bfflix.agents.recommendation.prompts import (
    DEFAULT_FOLLOW_UP_MESSAGE,
    build_fallback_prompt,
    build_recommendation_prompt,
)
from bfflix.config import settings
from bfflix.errors import ModelCallFailed, StoreUnavailable
from bfflix.schemas.recommendations import (
    ConversationPayload,
    RecommendationItem,
    RecommendationQueryResponse,
)
from bfflix.schemas.viewings import ViewingRecord
from bfflix.services.cache_store import (
    CacheEntry,
    RecommendationCacheStore,
    build_cache_store,
)
from bfflix.services.subscription_service import SubscriptionProvider, SupabaseSubscriptions
from bfflix.services.viewing_service import HistoryProvider, SupabaseViewingHistory
from bfflix.utils.logging import preview

logger = logging.getLogger(__name__)

MIN_RECOMMENDATIONS = 3
MAX_RECOMMENDATIONS = 5
CACHE_HIT_MESSAGE = "Served from cache"


def _normalize_recommendations(parsed: Any, raw_text: str) -> Any:
    """
    Shape extracted model output into the list payload.

    - list: each item validated as RecommendationItem; invalid items are
      dropped and at most MAX_RECOMMENDATIONS are kept. If nothing survives,
      the raw text carrier is returned instead.
      A short list (fewer than MIN_RECOMMENDATIONS) is kept and cached as
      a normal result; only the shortfall is logged.
    - dict (including the {"raw": ...} carrier): passed through unchanged
    - anything else: raw text carrier
    """
    if isinstance(parsed, dict):
        if is_raw_carrier(parsed):
            logger.warning("Recommendation output degraded to raw text")
        else:
            logger.warning(f"Recommendation output is an object, expected a list (keys={sorted(parsed)[:5]})")
        return parsed

    if not isinstance(parsed, list):
        logger.warning(f"Recommendation output has unexpected type {type(parsed).__name__}")
        return {"raw": raw_text.strip()}

    items: List[dict] = []
    for idx, candidate in enumerate(parsed):
        try:
            item = RecommendationItem.model_validate(candidate)
        except ValidationError as e:
            logger.warning(f"Dropping recommendation {idx}: {e.error_count()} validation errors")
            continue
        items.append(item.model_dump(by_alias=True))

    if not items:
        logger.warning("No usable recommendations in model output")
        return {"raw": raw_text.strip()}

    if len(items) < MIN_RECOMMENDATIONS:
        logger.warning(f"Model returned only {len(items)} usable recommendations")

    return items[:MAX_RECOMMENDATIONS]


def _conversation_message(parsed: Any) -> str:
    """Pick the follow-up question out of whatever the model returned."""
    if isinstance(parsed, dict):
        for key in ("message", "raw"):
            value = parsed.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    elif isinstance(parsed, str) and parsed.strip():
        return parsed.strip()

    logger.info("Using default follow-up message")
    return DEFAULT_FOLLOW_UP_MESSAGE


class RecommendationOrchestrator:
    """
    Ties cache, history, subscriptions and the model together.

    Collaborators are injected so each can be swapped or mocked:
        history: HistoryProvider (list_recent_viewings)
        subscriptions: SubscriptionProvider (list_platform_names)
        cache: RecommendationCacheStore (get/put)
        model_client: ModelClient (generate)
    """

    def __init__(
        self,
        history: HistoryProvider,
        subscriptions: SubscriptionProvider,
        cache: RecommendationCacheStore,
        model_client: ModelClient,
        history_limit: Optional[int] = None,
        cache_ttl_seconds: Optional[int] = None,
    ):
        self.history = history
        self.subscriptions = subscriptions
        self.cache = cache
        self.model_client = model_client
        self.history_limit = history_limit or settings.RECOMMENDATION_HISTORY_LIMIT
        self.cache_ttl_seconds = cache_ttl_seconds or settings.RECOMMENDATION_CACHE_TTL_SECONDS

    async def recommend(self, user_id: str, query: str) -> RecommendationQueryResponse:
        """
        Run the recommendation pipeline for one request.

        Args:
            user_id: User UUID from auth token
            query: The user's request, used verbatim as half of the cache key

        Returns:
            RecommendationQueryResponse (cache hit, follow-up question, or
            fresh recommendations)

        Raises:
            HistoryLoadFailed, SubscriptionLoadFailed, ModelCallFailed
        """
        logger.info(f"recommend called for user_id={user_id}, query='{query[:50]}'")

        # CHECK_CACHE
        entry = await self._read_cache(user_id, query)
        if entry is not None:
            logger.info(f"Recommendation cache hit for user_id={user_id}")
            return RecommendationQueryResponse(
                query=query,
                cached=True,
                results=entry.result_payload,
                message=CACHE_HIT_MESSAGE,
            )

        # LOAD_HISTORY
        viewings = list(await self.history.list_recent_viewings(user_id, self.history_limit))
        viewings = viewings[:self.history_limit]
        platforms = list(await self.subscriptions.list_platform_names(user_id))
        logger.info(f"Loaded history_count={len(viewings)}, platforms={len(platforms)}")

        if not viewings:
            return await self._ask_follow_up(query, platforms)

        # BUILD_PROFILE → CALL_MODEL → EXTRACT
        results = await self._recommend_from_history(query, viewings, platforms)

        # WRITE_CACHE
        await self._write_cache(user_id, query, results)

        return RecommendationQueryResponse(
            query=query,
            cached=False,
            results=results,
            based_on_count=len(viewings),
            platforms=platforms,
        )

    async def _read_cache(self, user_id: str, query: str) -> Optional[CacheEntry]:
        try:
            entry = await self.cache.get(user_id, query)
        except StoreUnavailable:
            logger.warning("Recommendation cache unavailable; computing live")
            return None

        if entry is not None and entry.result_payload is None:
            logger.warning("Ignoring cache entry without payload")
            return None
        return entry

    async def _write_cache(self, user_id: str, query: str, results: Any) -> None:
        try:
            await self.cache.put(user_id, query, results, self.cache_ttl_seconds)
        except StoreUnavailable:
            logger.warning("Recommendation cache unavailable; result not cached")

    async def _generate(self, prompt: str) -> str:
        try:
            return await self.model_client.generate(prompt)
        except ModelCallFailed:
            raise
        except Exception as e:
            logger.error(f"Model client raised {type(e).__name__}: {e}")
            raise ModelCallFailed("model client failed") from e

    async def _ask_follow_up(self, query: str, platforms: List[str]) -> RecommendationQueryResponse:
        logger.info("No viewing history; asking follow-up question")

        raw_text = await self._generate(build_fallback_prompt(platforms))
        parsed = extract_json(raw_text)
        payload = ConversationPayload(message=_conversation_message(parsed))

        return RecommendationQueryResponse(
            query=query,
            cached=False,
            results=payload.model_dump(),
        )

    async def _recommend_from_history(
        self,
        query: str,
        viewings: Sequence[ViewingRecord],
        platforms: List[str],
    ) -> Any:
        profile_text = build_viewing_profile(viewings)
        prompt = build_recommendation_prompt(
            query=query,
            profile_text=profile_text,
            platforms=platforms,
        )

        raw_text = await self._generate(prompt)
        logger.debug(f"Recommendation raw output: {preview(raw_text)}")

        results = _normalize_recommendations(extract_json(raw_text), raw_text)
        if isinstance(results, list):
            logger.info(f"Returning {len(results)} recommendations")
        return results


def build_recommendation_orchestrator(supabase_client: Client) -> RecommendationOrchestrator:
    """Wire the orchestrator to Supabase collaborators and the shared Gemini client."""
    return RecommendationOrchestrator(
        history=SupabaseViewingHistory(supabase_client),
        subscriptions=SupabaseSubscriptions(supabase_client),
        cache=build_cache_store(supabase_client),
        model_client=get_model_client(),
    )
