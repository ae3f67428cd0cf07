"""
Pydantic schemas for the recommendation endpoint.

These models define the request/response contracts for the recommendation
pipeline powered by Gemini. The `results` field carries whichever payload
shape the pipeline produced:
- a list of RecommendationItem dicts (user has viewing history)
- a ConversationPayload dict (user has no viewing history)
- a degraded {"raw": "..."} carrier (model output could not be parsed)
"""

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ============================================================================
# REQUEST MODELS
# ============================================================================

class RecommendationQueryRequest(BaseModel):
    """
    Request for personalized movie/TV recommendations.

    The query is used verbatim as part of the cache key: it is NOT trimmed
    or case-folded, so "feel-good comedy" and "feel-good comedy " are two
    distinct cache entries.
    """
    query: str = Field(
        ...,
        description="What the user is in the mood for, in their own words",
        min_length=1,
        max_length=1000,
        examples=[
            "something like Dark but less confusing",
            "a short comedy for tonight"
        ]
    )


# ============================================================================
# PAYLOAD MODELS
# ============================================================================

class RecommendationItem(BaseModel):
    """
    One recommended title as returned by the model.

    The model is asked for camelCase `matchScore`; both spellings are
    accepted on input and the alias is used when serializing.
    """
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1, examples=["The OA"])
    type: Literal["movie", "tv"] = Field(..., examples=["tv"])
    reason: str = Field(
        ...,
        examples=["You rated Stranger Things 5/5 and enjoy slow-burn mysteries."]
    )
    match_score: float = Field(..., alias="matchScore", examples=[92])

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value


class ConversationPayload(BaseModel):
    """Follow-up question returned when the user has no viewing history."""
    kind: Literal["conversation"] = "conversation"
    message: str = Field(
        ...,
        examples=[
            "Want the most popular titles across all platforms right now, "
            "or a top list for a genre you like?"
        ]
    )


# ============================================================================
# RESPONSE MODELS
# ============================================================================

RecommendationResults = Union[List[Dict[str, Any]], Dict[str, Any]]


class RecommendationQueryResponse(BaseModel):
    """
    Successful pipeline response.

    - cached=True: served from the recommendation cache, no model call made
    - cached=False: freshly generated (history branch) or a follow-up
      question (no-history branch, never cached)
    """
    query: str = Field(..., description="The query exactly as submitted")
    cached: bool = Field(..., description="Whether results came from the cache")
    results: RecommendationResults = Field(
        ...,
        description="List of recommendations, a conversation payload, or a raw-text carrier"
    )
    based_on_count: Optional[int] = Field(
        None,
        description="How many recent viewings informed the prompt",
        ge=0
    )
    platforms: Optional[List[str]] = Field(
        None,
        description="Platform names used to steer recommendations"
    )
    message: Optional[str] = Field(
        None,
        examples=["Served from cache"]
    )


class RecommendationErrorResponse(BaseModel):
    """Single failure category exposed to clients; details are only logged."""
    error: Literal["agent_failed"] = "agent_failed"
