"""
FastAPI routes for viewing history.

Endpoints:
- POST /viewings: record a watched movie or episode
- GET /viewings/me: list the caller's viewings (paged, filterable)
- DELETE /viewings/{viewing_id}: delete one of the caller's viewings

Recorded viewings are what the recommendation pipeline reads as history.
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from bfflix.auth.dependencies import AuthenticatedUser, get_authenticated_user
from bfflix.db.client import get_supabase_client
from bfflix.schemas.viewings import (
    MediaType,
    ViewingCreateRequest,
    ViewingCreateResponse,
    ViewingDeleteResponse,
    ViewingListResponse,
)
from bfflix.services.viewing_service import (
    create_viewing,
    delete_viewing,
    get_user_viewings,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/viewings",
    tags=["viewings"]
)


@router.post(
    "",
    response_model=ViewingCreateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a viewing",
)
async def create_viewing_endpoint(
    request: ViewingCreateRequest,
    auth_user: AuthenticatedUser = Depends(get_authenticated_user)
) -> ViewingCreateResponse:
    """Record a watched movie or episode for the authenticated user."""
    logger.info(f"POST /viewings called by user_id={auth_user.user_id}")

    supabase_client = get_supabase_client(auth_user.access_token)

    try:
        created = await create_viewing(
            supabase_client=supabase_client,
            user_id=auth_user.user_id,
            media_type=request.media_type,
            tmdb_id=request.tmdb_id,
            season_number=request.season_number,
            episode_number=request.episode_number,
            rating=request.rating,
            comment=request.comment,
            watched_at=request.watched_at,
        )
    except Exception as e:
        logger.error(f"Failed to record viewing: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "create_error", "details": "Failed to record viewing"}
        )

    return ViewingCreateResponse(id=str(created["id"]))


@router.get(
    "/me",
    response_model=ViewingListResponse,
    summary="List my viewings",
)
async def list_my_viewings_endpoint(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=50),
    media_type: Optional[MediaType] = Query(None),
    start: Optional[datetime] = Query(None, description="Inclusive lower bound on watched_at"),
    end: Optional[datetime] = Query(None, description="Exclusive upper bound on watched_at"),
    auth_user: AuthenticatedUser = Depends(get_authenticated_user)
) -> ViewingListResponse:
    """List the authenticated user's viewings, most recent first."""
    logger.info(f"GET /viewings/me called by user_id={auth_user.user_id}")

    supabase_client = get_supabase_client(auth_user.access_token)

    try:
        items = await get_user_viewings(
            supabase_client=supabase_client,
            user_id=auth_user.user_id,
            page=page,
            limit=limit,
            media_type=media_type,
            start=start,
            end=end,
        )
    except Exception as e:
        logger.error(f"Failed to list viewings: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "fetch_error", "details": "Failed to list viewings"}
        )

    return ViewingListResponse(page=page, limit=limit, items=items)


@router.delete(
    "/{viewing_id}",
    response_model=ViewingDeleteResponse,
    summary="Delete one of my viewings",
)
async def delete_viewing_endpoint(
    viewing_id: str,
    auth_user: AuthenticatedUser = Depends(get_authenticated_user)
) -> ViewingDeleteResponse:
    """Delete a viewing owned by the authenticated user."""
    logger.info(f"DELETE /viewings/{viewing_id} called by user_id={auth_user.user_id}")

    supabase_client = get_supabase_client(auth_user.access_token)

    try:
        deleted = await delete_viewing(
            supabase_client=supabase_client,
            user_id=auth_user.user_id,
            viewing_id=viewing_id,
        )
    except Exception as e:
        logger.error(f"Failed to delete viewing: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "delete_error", "details": "Failed to delete viewing"}
        )

    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "not_found", "details": "Viewing not found"}
        )

    return ViewingDeleteResponse(ok=True)
