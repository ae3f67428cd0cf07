"""
Supabase client factories.

Request handlers build one client per request from the caller's access
token, so Row Level Security limits every read and write on `viewing`,
`user_streaming_service` and `recommendation_cache` to user_id = auth.uid().

The service-role client skips RLS. It exists only for maintenance scripts
that must see every user's rows (purging expired cache entries) and must
never be reachable from an HTTP route.
"""

import logging

from bfflix.config import settings
from supabase import Client, create_client

logger = logging.getLogger(__name__)


def get_supabase_client(access_token: str) -> Client:
    """
    Create a Supabase client that acts as the authenticated user.

    Args:
        access_token: The bearer token already verified by
            bfflix.auth.dependencies.get_authenticated_user

    Returns:
        Client whose PostgREST requests carry the user's JWT (RLS enforced)
    """
    client: Client = create_client(
        supabase_url=settings.SUPABASE_URL,
        supabase_key=settings.SUPABASE_PUBLISHABLE_KEY
    )
    # No refresh token is available server-side; the access token stands in
    client.auth.set_session(access_token, access_token)

    logger.debug("Created user-scoped Supabase client")
    return client


def get_service_role_client() -> Client:
    """
    Create a Supabase client with the service-role key (RLS bypassed).

    Raises:
        ValueError: If SUPABASE_SECRET_KEY is not configured
    """
    if not settings.SUPABASE_SECRET_KEY:
        raise ValueError(
            "SUPABASE_SECRET_KEY is not configured. "
            "It is required for cross-user maintenance tasks."
        )

    logger.warning("Creating service_role Supabase client (RLS bypassed)")
    return create_client(
        supabase_url=settings.SUPABASE_URL,
        supabase_key=settings.SUPABASE_SECRET_KEY
    )
