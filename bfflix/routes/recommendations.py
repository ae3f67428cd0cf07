"""
FastAPI routes for the recommendation pipeline.

Endpoints:
- POST /agent/recommendations: personalized movie/TV recommendations

Every failure inside the pipeline collapses into one response body,
{"error": "agent_failed"}. Model failures (unreachable, rate-limited,
timed out) use 503 so clients know an identical resubmission may succeed;
everything else uses 500. The specific failure kind is only logged.
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from bfflix.auth.dependencies import AuthenticatedUser, get_authenticated_user
from bfflix.db.client import get_supabase_client
from bfflix.errors import ModelCallFailed, RecommendationError
from bfflix.schemas.recommendations import (
    RecommendationErrorResponse,
    RecommendationQueryRequest,
    RecommendationQueryResponse,
)
from bfflix.services.recommendation_service import (
    RecommendationOrchestrator,
    build_recommendation_orchestrator,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/agent",
    tags=["recommendations"]
)


def get_recommendation_orchestrator(
    auth_user: AuthenticatedUser = Depends(get_authenticated_user)
) -> RecommendationOrchestrator:
    """Build an orchestrator whose Supabase collaborators run under the caller's RLS."""
    supabase_client = get_supabase_client(auth_user.access_token)
    return build_recommendation_orchestrator(supabase_client)


def _agent_failed(status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=RecommendationErrorResponse().model_dump()
    )


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.post(
    "/recommendations",
    response_model=RecommendationQueryResponse,
    response_model_exclude_none=True,
    status_code=200,
    summary="Get personalized movie/TV recommendations",
    responses={
        500: {"model": RecommendationErrorResponse},
        503: {"model": RecommendationErrorResponse},
    },
    description="""
    Recommends 3-5 titles based on the user's 10 most recent viewings and
    their streaming platforms.

    **Authentication:** Required (Bearer token)

    **Responses:**
    - cached=true: same user and exact same query within the last 6 hours
    - results is a list: fresh recommendations (now cached for 6 hours)
    - results.kind == "conversation": the user has no viewing history yet;
      the message is a follow-up question (not cached)
    - results.raw: the model answer could not be parsed; raw text is returned

    The query is matched verbatim: different casing or whitespace is a
    different cache entry.
    """
)
async def recommendations_endpoint(
    request: RecommendationQueryRequest,
    auth_user: AuthenticatedUser = Depends(get_authenticated_user),
    orchestrator: RecommendationOrchestrator = Depends(get_recommendation_orchestrator),
):
    """
    Recommendation endpoint.

    - Auth: Handled by get_authenticated_user dependency
    - Parse/Validate: Handled by Pydantic RecommendationQueryRequest
    - Pipeline: RecommendationOrchestrator (cache, history, Gemini)
    - Errors: collapsed to agent_failed
    """
    logger.info(
        f"POST /agent/recommendations called by user_id={auth_user.user_id}, "
        f"query='{request.query[:50]}'"
    )

    try:
        response = await orchestrator.recommend(
            user_id=auth_user.user_id,
            query=request.query,
        )
    except ModelCallFailed as e:
        logger.error(f"Recommendation failed (ModelCallFailed): {e}")
        return _agent_failed(status.HTTP_503_SERVICE_UNAVAILABLE)
    except RecommendationError as e:
        logger.error(f"Recommendation failed ({type(e).__name__}): {e}")
        return _agent_failed(status.HTTP_500_INTERNAL_SERVER_ERROR)
    except Exception as e:
        logger.error(f"Unexpected recommendation error: {e}", exc_info=True)
        return _agent_failed(status.HTTP_500_INTERNAL_SERVER_ERROR)

    logger.info(f"Returning response with cached={response.cached}")
    return response
