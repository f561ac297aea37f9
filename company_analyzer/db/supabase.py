"""Supabase client connection."""

from supabase import AsyncClient, create_async_client

from company_analyzer.config import get_settings

# Singleton instance
_async_client: AsyncClient | None = None


async def get_async_supabase_client() -> AsyncClient:
    """Get async Supabase client (cached singleton)."""
    global _async_client
    if _async_client is None:
        settings = get_settings()
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError(
                "SUPABASE_URL and SUPABASE_SERVICE_KEY are required for the supabase job store"
            )
        _async_client = await create_async_client(
            settings.supabase_url,
            settings.supabase_service_key,
        )
    return _async_client


def reset_clients() -> None:
    """Reset clients for testing."""
    global _async_client
    _async_client = None
