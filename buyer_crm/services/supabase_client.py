"""Supabase client wrapper with async context manager support."""

import os
from typing import Optional
from supabase import create_client, Client
from supabase.client import ClientOptions

from buyer_crm.utils.errors import AuthorizationError, NotFoundError, SupabaseError
from buyer_crm.utils.logging import get_structured_logger, mask_sensitive_data

logger = get_structured_logger(__name__)

# Global client instance (singleton pattern)
_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """Get or create the service-role Supabase client singleton."""
    global _client
    
    if _client is None:
        url = os.environ.get("SUPABASE_URL")
        key = os.environ.get("SUPABASE_SERVICE_ROLE_KEY")
        
        if not url or not key:
            raise SupabaseError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")
        
        # Service role bypasses database RLS; policies are enforced in buyer_crm.services.policies
        options = ClientOptions(
            auto_refresh_token=False,
            persist_session=False,
        )
        
        _client = create_client(url, key, options)
        logger.info("Supabase client initialized", supabase_url=url)
    
    return _client


class SupabaseClient:
    """Async context manager for Supabase client."""
    
    def __init__(self):
        self.client: Optional[Client] = None
    
    async def __aenter__(self) -> Client:
        self.client = get_supabase_client()
        return self.client
    
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if exc_type and not issubclass(exc_type, (AuthorizationError, NotFoundError)):
            logger.error(
                "Supabase operation error",
                error=mask_sensitive_data(str(exc_val)),
                error_type=exc_type.__name__,
            )
        return False


def first_row(result) -> Optional[dict]:
    """First row of an executed query, or None."""
    return result.data[0] if result.data else None
