"""Supabase client wrapper with async context manager support."""

import os
from typing import Optional
from supabase import create_client, Client
from supabase.client import ClientOptions
from planner.utils.config import PlannerConfig
from planner.utils.errors import ConfigurationError, DataSourceError
import logging

logger = logging.getLogger(__name__)

# Global client instance (singleton pattern)
_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """Get or create Supabase client singleton."""
    global _client

    if _client is None:
        url = os.environ.get("SUPABASE_URL")
        key = os.environ.get("SUPABASE_SERVICE_ROLE_KEY")

        if not url or not key:
            raise ConfigurationError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")

        options = ClientOptions(
            auto_refresh_token=False,
            persist_session=False,
        )

        _client = create_client(url, key, options)
        logger.info("Supabase client initialized", extra={"url": url})

    return _client


class SupabaseClient:
    """Async context manager for Supabase client."""

    def __init__(self):
        self.client: Optional[Client] = None

    async def __aenter__(self) -> Client:
        self.client = get_supabase_client()
        return self.client

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            logger.error(
                "Supabase operation error",
                extra={"error": str(exc_val), "type": exc_type.__name__}
            )
        return False


async def fetch_opportunities(limit: Optional[int] = None) -> list[dict]:
    """Fetch opportunity documents, newest first."""
    if limit is None:
        limit = PlannerConfig.OPPORTUNITY_FETCH_LIMIT
    async with SupabaseClient() as client:
        try:
            result = client.table("opportunities").select("*").order("createdAt", desc=True).limit(limit).execute()
            return result.data if result.data else []
        except Exception as e:
            raise DataSourceError(f"Failed to fetch opportunities: {e}")


async def fetch_assignments() -> list[dict]:
    """Fetch all assignment documents."""
    async with SupabaseClient() as client:
        try:
            result = client.table("assignments").select("*").execute()
            return result.data if result.data else []
        except Exception as e:
            raise DataSourceError(f"Failed to fetch assignments: {e}")


async def fetch_users(limit: Optional[int] = None) -> list[dict]:
    """Fetch user directory entries."""
    if limit is None:
        limit = PlannerConfig.USER_FETCH_LIMIT
    async with SupabaseClient() as client:
        try:
            result = client.table("users").select("*").limit(limit).execute()
            return result.data if result.data else []
        except Exception as e:
            raise DataSourceError(f"Failed to fetch users: {e}")
