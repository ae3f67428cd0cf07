"""
FastAPI dependency functions for authentication.

These functions verify Supabase Auth bearer tokens and expose the
authenticated user_id (and the raw token, needed to build RLS-scoped
Supabase clients) to route handlers.

Uses Supabase's JWT Signing Keys system with ECC (P-256) public key verification.
"""

import logging
from dataclasses import dataclass
from typing import Annotated, Optional

from fastapi import Header, HTTPException, status
from jwt import PyJWKClient, decode
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError, PyJWKClientError

from bfflix.config import settings

logger = logging.getLogger(__name__)

# JWKS client for fetching and caching Supabase's public keys
_jwks_client: Optional[PyJWKClient] = None


@dataclass
class AuthenticatedUser:
    """
    Represents an authenticated user with their token.

    Attributes:
        user_id: The user's UUID from the JWT token's 'sub' claim
        access_token: The full JWT access token (for creating authenticated Supabase clients)
    """
    user_id: str
    access_token: str


def _unauthorized(error: str, details: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": error, "details": details}
    )


def get_jwks_client() -> PyJWKClient:
    """
    Get or create the JWKS client instance.

    Raises:
        ValueError: If SUPABASE_URL is not configured
    """
    global _jwks_client

    if _jwks_client is None:
        jwks_url = settings.SUPABASE_JWKS_URL
        if not jwks_url:
            raise ValueError(
                "SUPABASE_URL is not configured. "
                "Cannot construct JWKS URL for JWT verification."
            )

        logger.info(f"Initializing JWKS client with URL: {jwks_url}")
        _jwks_client = PyJWKClient(
            jwks_url,
            cache_keys=True,
            max_cached_keys=16,
        )

    return _jwks_client


def _extract_bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        logger.warning("Missing Authorization header")
        raise _unauthorized("unauthorized", "Missing Authorization header")

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        logger.warning("Invalid Authorization header format")
        raise _unauthorized("unauthorized", "Invalid Authorization header format")

    return parts[1]


def _verify_access_token(token: str) -> str:
    """
    Verify a Supabase access token and return its 'sub' claim.

    Raises:
        HTTPException: 401 if the token is invalid, expired, or unverifiable
    """
    try:
        jwks_client = get_jwks_client()
        signing_key = jwks_client.get_signing_key_from_jwt(token)

        # Supabase tokens use an issuer that includes the /auth/v1 path
        issuer = f"{settings.SUPABASE_URL}/auth/v1"

        payload = decode(
            token,
            signing_key.key,
            algorithms=["ES256"],
            audience="authenticated",
            issuer=issuer,
            options={
                "verify_signature": True,
                "verify_exp": True,
                "verify_aud": True,
                "verify_iss": True,
            }
        )
    except ExpiredSignatureError:
        logger.warning("Token has expired")
        raise _unauthorized("token_expired", "Authentication token has expired")
    except PyJWKClientError as e:
        logger.error(f"JWKS client error: {str(e)}")
        raise _unauthorized("jwks_error", "Unable to verify token signature")
    except InvalidTokenError as e:
        logger.warning(f"Invalid token: {str(e)}")
        raise _unauthorized("invalid_token", "Invalid authentication token")
    except Exception as e:
        logger.error(f"Unexpected error during token verification: {str(e)}")
        raise _unauthorized("unauthorized", "Token verification failed")

    user_id = payload.get("sub")
    if not user_id:
        logger.error("Token payload missing 'sub' claim")
        raise _unauthorized("unauthorized", "Invalid token: missing user ID")

    logger.info(f"Token verified successfully for user_id={user_id}")
    return str(user_id)


async def get_authenticated_user(
    authorization: Annotated[Optional[str], Header()] = None
) -> AuthenticatedUser:
    """
    Verify the bearer token and return the user with their token.

    Args:
        authorization: Authorization header value ("Bearer <token>")

    Returns:
        AuthenticatedUser: Contains user_id and access_token

    Raises:
        HTTPException: 401 if token is missing, invalid, or expired

    Security:
        - This is the ONLY source of truth for user_id
        - Any user_id sent in a request body is ignored

    Usage:
        @router.post("/agent/recommendations")
        async def recommend(
            auth_user: AuthenticatedUser = Depends(get_authenticated_user)
        ):
            supabase_client = get_supabase_client(auth_user.access_token)
    """
    token = _extract_bearer_token(authorization)
    user_id = _verify_access_token(token)
    return AuthenticatedUser(user_id=user_id, access_token=token)
