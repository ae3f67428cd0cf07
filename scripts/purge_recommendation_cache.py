#!/usr/bin/env python3
"""
Recommendation Cache Purge Script

Deletes expired rows from the recommendation_cache table. Expiry is already
enforced at read time, so this only reclaims storage; it is safe to run at
any interval (e.g. from a cron job or Cloud Scheduler).

Requires SUPABASE_URL and SUPABASE_SECRET_KEY, because expired rows belong
to many users and RLS would otherwise hide them.

Usage:
    python scripts/purge_recommendation_cache.py
    python scripts/purge_recommendation_cache.py --debug
"""

import argparse
import asyncio
import logging
import os
import sys

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv

load_dotenv()

from bfflix.db.client import get_service_role_client
from bfflix.errors import StoreUnavailable
from bfflix.services.cache_store import SupabaseRecommendationCache
from bfflix.utils.logging import configure_logging

configure_logging(logging.INFO)
logger = logging.getLogger(__name__)


async def run_purge() -> int:
    """Purge expired cache rows and return the number removed."""
    supabase_client = get_service_role_client()
    cache = SupabaseRecommendationCache(supabase_client)
    return await cache.purge_expired()


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Delete expired rows from the recommendation cache",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    args = parser.parse_args()

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        removed = asyncio.run(run_purge())
    except ValueError as e:
        print(f"\n⚠️  ERROR: {e}")
        print("   Please set it in your .env file or export it.")
        return 1
    except StoreUnavailable as e:
        logger.error(f"Purge failed: {e}")
        return 1

    print(f"✅ Removed {removed} expired recommendation cache row(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
