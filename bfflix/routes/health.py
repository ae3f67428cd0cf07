"""
Health check route.

PUBLIC: no authentication and no downstream calls, so it stays green while
Supabase or Gemini are degraded (those surface as 500/503 on the API routes).
"""

import logging

from fastapi import APIRouter

from bfflix.config import settings
from bfflix.schemas.health import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["system"])


@router.get("/health", response_model=HealthResponse, summary="Health check endpoint")
async def health_check() -> HealthResponse:
    logger.debug("Health check endpoint called")
    return HealthResponse(environment=settings.ENVIRONMENT)
