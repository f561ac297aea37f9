"""Database connections module."""

from company_analyzer.db.supabase import get_async_supabase_client, reset_clients

__all__ = ["get_async_supabase_client", "reset_clients"]
