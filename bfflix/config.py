"""
Configuration module for the BFFlix recommendation backend.

Settings are read from environment variables (a local .env file is loaded
first) once, at import time. Numeric values that fail to parse keep their
default and are reported by `Settings.validate()`.
"""
import os
from typing import List
from dotenv import load_dotenv

# Load .env file
load_dotenv()

_PARSE_ERRORS: List[str] = []


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        _PARSE_ERRORS.append(f"{name}={raw!r} is not a number")
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        _PARSE_ERRORS.append(f"{name}={raw!r} is not an integer")
        return default


def _env_list(name: str) -> List[str]:
    return [item.strip() for item in os.getenv(name, "").split(",") if item.strip()]


class Settings:
    """Application settings loaded from environment variables."""

    # Supabase: the publishable key is used with the caller's JWT so RLS applies
    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "").rstrip("/")
    SUPABASE_PUBLISHABLE_KEY: str = os.getenv("SUPABASE_PUBLISHABLE_KEY", "")
    # Service-role key, only for housekeeping scripts (bypasses RLS)
    SUPABASE_SECRET_KEY: str = os.getenv("SUPABASE_SECRET_KEY", "")

    # Gemini (GEMINI_API_KEY accepted as an alias)
    GOOGLE_API_KEY: str = os.getenv("GOOGLE_API_KEY", "") or os.getenv("GEMINI_API_KEY", "")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
    GEMINI_TEMPERATURE: float = _env_float("GEMINI_TEMPERATURE", 0.4)
    MODEL_TIMEOUT_SECONDS: float = _env_float("MODEL_TIMEOUT_SECONDS", 30.0)

    # Recommendation pipeline
    RECOMMENDATION_CACHE_TTL_SECONDS: int = _env_int("RECOMMENDATION_CACHE_TTL_SECONDS", 6 * 60 * 60)
    RECOMMENDATION_HISTORY_LIMIT: int = _env_int("RECOMMENDATION_HISTORY_LIMIT", 10)
    # "supabase" (shared table) or "memory" (single process, local development)
    RECOMMENDATION_CACHE_BACKEND: str = os.getenv("RECOMMENDATION_CACHE_BACKEND", "supabase").strip().lower()

    # Application
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    CORS_ALLOWED_ORIGINS: List[str] = _env_list("CORS_ALLOWED_ORIGINS")

    @property
    def SUPABASE_JWKS_URL(self) -> str:
        """Public keys used to verify Supabase access tokens (ES256)."""
        if not self.SUPABASE_URL:
            return ""
        return f"{self.SUPABASE_URL}/auth/v1/.well-known/jwks.json"

    @classmethod
    def validate(cls) -> None:
        """
        Check required settings and value ranges.

        GOOGLE_API_KEY is not required here: without it the API still serves
        viewings and cached recommendations, and model calls fail with 503.

        Raises:
            ValueError: listing every problem found
        """
        problems: List[str] = list(_PARSE_ERRORS)

        if not cls.SUPABASE_URL:
            problems.append("SUPABASE_URL is required")
        if cls.RECOMMENDATION_CACHE_BACKEND not in ("supabase", "memory"):
            problems.append(
                f"RECOMMENDATION_CACHE_BACKEND={cls.RECOMMENDATION_CACHE_BACKEND!r} "
                "must be 'supabase' or 'memory'"
            )
        if cls.RECOMMENDATION_CACHE_TTL_SECONDS <= 0:
            problems.append("RECOMMENDATION_CACHE_TTL_SECONDS must be positive")
        if cls.RECOMMENDATION_HISTORY_LIMIT <= 0:
            problems.append("RECOMMENDATION_HISTORY_LIMIT must be positive")
        if cls.MODEL_TIMEOUT_SECONDS <= 0:
            problems.append("MODEL_TIMEOUT_SECONDS must be positive")
        if not 0.0 <= cls.GEMINI_TEMPERATURE <= 2.0:
            problems.append("GEMINI_TEMPERATURE must be between 0 and 2")

        if problems:
            raise ValueError(
                "Invalid configuration: " + "; ".join(problems) + ". Please check your .env file."
            )

    @classmethod
    def is_production(cls) -> bool:
        return cls.ENVIRONMENT.lower() == "production"

    @classmethod
    def is_development(cls) -> bool:
        return cls.ENVIRONMENT.lower() == "development"


settings = Settings()

# Fail fast on misconfiguration, except in development (warn) or when
# VALIDATE_CONFIG=false (tests, tooling)
if os.getenv("VALIDATE_CONFIG", "true").lower() == "true":
    try:
        settings.validate()
    except ValueError as e:
        if settings.is_development():
            print(f"⚠️  Warning: {e}")
            print("   The app may not work correctly until you configure your .env file.")
        else:
            raise
