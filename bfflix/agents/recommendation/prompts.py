"""
Recommendation Prompt Templates

Contains the role framing and the two prompt builders used by the
recommendation pipeline:

- build_fallback_prompt: user has no viewing history, ask one follow-up
  question instead of recommending
- build_recommendation_prompt: user has history, ask for 3-5 titles as a
  bare JSON array

Both prompts are sent as a single user turn (no system instruction) so that
any text-in/text-out model client can serve them.
"""

from typing import Iterable

from bfflix.agents.recommendation.profile import format_platforms

RECOMMENDATION_ROLE = "You are the AI movie assistant for BFFlix."

DEFAULT_FOLLOW_UP_MESSAGE = "Want trending now or a top list by genre?"


def build_fallback_prompt(platforms: Iterable[str]) -> str:
    """
    Build the follow-up question prompt for users without viewing history.

    Args:
        platforms: Subscribed platform names (may be empty)

    Returns:
        str: Prompt asking for a {"type": "conversation", "message": ...} object
    """
    return f"""The user has no recent viewing history.
Ask one short follow-up question (1-2 sentences). Offer two options:
1) "Want the current most popular movies people are watching across all platforms?"
2) "Prefer a top list by a specific genre you like (for example comedy, sci fi, drama)?"
If applicable, mention their platforms: {format_platforms(platforms)}.
Return JSON object:
{{ "type": "conversation", "message": "string" }}"""


def build_recommendation_prompt(
    query: str,
    profile_text: str,
    platforms: Iterable[str],
) -> str:
    """
    Build the personalized recommendation prompt.

    The query is embedded verbatim; the profile text comes from
    build_viewing_profile and is ordered most recent first.

    Args:
        query: The user's request exactly as submitted
        profile_text: Compact description of recent viewings
        platforms: Subscribed platform names (may be empty)

    Returns:
        str: Prompt asking for ONLY a JSON array of 3-5 recommendation objects
    """
    return f"""{RECOMMENDATION_ROLE}

User platforms (prefer titles likely available here): {format_platforms(platforms)}.

Recent viewing history (most recent first):
{profile_text}

User query: "{query}"

Generate 3 to 5 high quality personalized recommendations. Infer tone, genre, and runtime preferences from their ratings and comments. Return ONLY a JSON array with items like:
[
  {{ "title": "string", "type": "movie" | "tv", "reason": "string", "matchScore": number }}
]"""
