"""
Service layer for the BFFlix backend.

Contains business logic orchestration that:
- Loads viewing history and streaming subscriptions under RLS
- Runs the recommendation pipeline (cache, prompt, model, extraction)
- Maps pipeline output into Pydantic response models

Services act as the glue between routes (HTTP layer) and agents/database.
"""

from bfflix.errors import (
    HistoryLoadFailed,
    ModelCallFailed,
    RecommendationError,
    StoreUnavailable,
    SubscriptionLoadFailed,
)
from .cache_store import (
    CacheEntry,
    InMemoryRecommendationCache,
    RecommendationCacheStore,
    SupabaseRecommendationCache,
    build_cache_store,
)
from .recommendation_service import (
    RecommendationOrchestrator,
    build_recommendation_orchestrator,
)
from .subscription_service import SupabaseSubscriptions
from .viewing_service import (
    SupabaseViewingHistory,
    create_viewing,
    delete_viewing,
    get_user_viewings,
)

__all__ = [
    "CacheEntry",
    "RecommendationCacheStore",
    "SupabaseRecommendationCache",
    "InMemoryRecommendationCache",
    "build_cache_store",
    "RecommendationError",
    "StoreUnavailable",
    "HistoryLoadFailed",
    "SubscriptionLoadFailed",
    "ModelCallFailed",
    "RecommendationOrchestrator",
    "build_recommendation_orchestrator",
    "SupabaseSubscriptions",
    "SupabaseViewingHistory",
    "create_viewing",
    "get_user_viewings",
    "delete_viewing",
]
