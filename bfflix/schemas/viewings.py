"""
Pydantic schemas for viewing history.

A viewing is one watched movie or TV episode. The recommendation pipeline
only reads viewings; these endpoints are how they get recorded.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

MediaType = Literal["movie", "tv"]


def _check_episode_has_season(season_number: Optional[int], episode_number: Optional[int]) -> None:
    if episode_number is not None and season_number is None:
        raise ValueError("season_number is required when episode_number is provided")


# ============================================================================
# REQUEST MODELS
# ============================================================================

class ViewingCreateRequest(BaseModel):
    """
    Request to record a watched movie or TV episode.

    Episode context is optional, but an episode number without a season
    number is rejected.
    """
    media_type: MediaType = Field(
        ...,
        description="Whether the title is a movie or a TV show",
        examples=["movie", "tv"]
    )
    tmdb_id: str = Field(
        ...,
        description="Title identifier in the movie-metadata catalog",
        min_length=1,
        max_length=40,
        examples=["603", "1399"]
    )
    season_number: Optional[int] = Field(
        None,
        description="Season of the watched episode (TV only)",
        ge=0
    )
    episode_number: Optional[int] = Field(
        None,
        description="Episode within the season (requires season_number)",
        ge=0
    )
    rating: Optional[int] = Field(
        None,
        description="User rating from 1 to 5",
        ge=1,
        le=5
    )
    comment: Optional[str] = Field(
        None,
        description="Short free-text note about the viewing",
        max_length=1000
    )
    watched_at: Optional[datetime] = Field(
        None,
        description="When it was watched (defaults to now)"
    )

    @model_validator(mode="after")
    def episode_requires_season(self) -> "ViewingCreateRequest":
        _check_episode_has_season(self.season_number, self.episode_number)
        return self

    @model_validator(mode="before")
    @classmethod
    def strip_text_fields(cls, data):
        if isinstance(data, dict):
            for key in ("tmdb_id", "comment"):
                if isinstance(data.get(key), str):
                    data = {**data, key: data[key].strip()}
        return data


# ============================================================================
# RESPONSE MODELS
# ============================================================================

class ViewingRecord(BaseModel):
    """A stored viewing as read by the history provider."""
    id: Optional[str] = None
    user_id: str
    media_type: MediaType
    tmdb_id: str
    season_number: Optional[int] = Field(None, ge=0)
    episode_number: Optional[int] = Field(None, ge=0)
    rating: Optional[int] = Field(None, ge=1, le=5)
    comment: Optional[str] = None
    watched_at: datetime

    @model_validator(mode="after")
    def episode_requires_season(self) -> "ViewingRecord":
        _check_episode_has_season(self.season_number, self.episode_number)
        return self


class ViewingCreateResponse(BaseModel):
    """Response after recording a viewing."""
    id: str = Field(..., description="Identifier of the new viewing")


class ViewingListResponse(BaseModel):
    """A page of the caller's own viewings, most recent first."""
    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1, le=50)
    items: List[ViewingRecord]


class ViewingDeleteResponse(BaseModel):
    """Response after deleting a viewing."""
    ok: bool = True
