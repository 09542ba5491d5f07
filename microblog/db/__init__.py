"""
Database module - Supabase client and realtime helpers.
"""
from microblog.db.supabase import get_db, get_supabase_client, test_supabase_connection

__all__ = [
    "get_db",
    "get_supabase_client",
    "test_supabase_connection"
]
