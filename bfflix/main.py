"""
FastAPI application entry point for the BFFlix backend.

Run locally with:
    uvicorn bfflix.main:app --reload
"""

import logging
from typing import List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bfflix.config import settings
from bfflix.routes.health import router as health_router
from bfflix.routes.recommendations import router as recommendations_router
from bfflix.routes.viewings import router as viewings_router
from bfflix.utils.logging import configure_logging

configure_logging(settings.LOG_LEVEL)

logger = logging.getLogger(__name__)


def _get_cors_origins() -> List[str]:
    """
    Allowed CORS origins.

    Production only allows CORS_ALLOWED_ORIGINS (none when unset); any other
    environment allows every origin so the web client can run on localhost.
    """
    if not settings.is_production():
        logger.info(f"CORS configured for {settings.ENVIRONMENT}: allowing all origins")
        return ["*"]

    origins = settings.CORS_ALLOWED_ORIGINS
    if not origins:
        logger.warning(
            "CORS_ALLOWED_ORIGINS not set in production. "
            "No web origins allowed. Set CORS_ALLOWED_ORIGINS for web clients."
        )
    else:
        logger.info(f"CORS configured for production with {len(origins)} allowed origins")
    return origins


def _summarize_errors(exc: RequestValidationError) -> List[dict]:
    """Validation errors without the submitted input (queries and comments are free text)."""
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]


app = FastAPI(
    title="BFFlix API",
    description="Viewing history and AI movie/TV recommendations for BFFlix",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc"
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = _summarize_errors(exc)
    logger.warning(f"Validation error on {request.method} {request.url.path}: {details}")

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"error": "validation_error", "details": details}
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=_get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(recommendations_router)
app.include_router(viewings_router)

logger.info(
    f"BFFlix API ready (environment={settings.ENVIRONMENT}, "
    f"model={settings.GEMINI_MODEL}, cache_backend={settings.RECOMMENDATION_CACHE_BACKEND})"
)
