from supabase import create_client, Client
from functools import lru_cache
from typing import Optional
from ..utils.config import Settings, get_settings

@lru_cache(maxsize=1)
def get_supabase_client() -> Client:
    """Get Supabase client singleton"""
    return create_supabase_client(get_settings())

def create_supabase_client(settings: Optional[Settings] = None) -> Client:
    """Create a Supabase client from explicit settings"""
    settings = settings or get_settings()
    return create_client(settings.supabase_url, settings.supabase_key)
