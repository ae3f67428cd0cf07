"""
Recommendation System - Single-Shot LLM Architecture

Architecture:
- Pattern: one prompt, one response, best-effort JSON extraction
- Model: Gemini 2.5 Flash (Google Gen AI SDK), behind the ModelClient protocol
- Output: JSON array of 3-5 titles, or a conversation object when the user
  has no viewing history

The orchestration layer is in:
- bfflix/services/recommendation_service.py
"""

from bfflix.agents.recommendation.extraction import extract_json, is_raw_carrier
from bfflix.agents.recommendation.model_client import (
    GeminiModelClient,
    ModelClient,
    get_model_client,
)
from bfflix.agents.recommendation.profile import (
    build_viewing_profile,
    describe_viewing,
    format_platforms,
)
from bfflix.agents.recommendation.prompts import (
    DEFAULT_FOLLOW_UP_MESSAGE,
    RECOMMENDATION_ROLE,
    build_fallback_prompt,
    build_recommendation_prompt,
)

__all__ = [
    "extract_json",
    "is_raw_carrier",
    "ModelClient",
    "GeminiModelClient",
    "get_model_client",
    "build_viewing_profile",
    "describe_viewing",
    "format_platforms",
    "RECOMMENDATION_ROLE",
    "DEFAULT_FOLLOW_UP_MESSAGE",
    "build_fallback_prompt",
    "build_recommendation_prompt",
]
