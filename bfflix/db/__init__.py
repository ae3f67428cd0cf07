"""
Supabase access for the BFFlix backend.

Use get_supabase_client in request handlers (RLS enforced).
get_service_role_client is for maintenance scripts only.
"""

from .client import get_service_role_client, get_supabase_client

__all__ = ["get_supabase_client", "get_service_role_client"]
