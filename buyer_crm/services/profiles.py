"""Profile data access."""

from buyer_crm.config import AppConfig
from buyer_crm.models.caller import Caller
from buyer_crm.models.profile import Profile, ProfileUpdate
from buyer_crm.services import hooks, policies
from buyer_crm.services.supabase_client import SupabaseClient, first_row
from buyer_crm.utils.errors import NotFoundError, SupabaseError


async def list_profiles(caller: Caller) -> list[Profile]:
    """All profiles, ordered by display name."""
    policies.authorize(policies.can_read_profile(caller), AppConfig.PROFILES_TABLE, "read")
    
    async with SupabaseClient() as client:
        try:
            result = client.table(AppConfig.PROFILES_TABLE).select("*").order("full_name").execute()
        except Exception as e:
            raise SupabaseError(f"Failed to list profiles: {e}")
    
    return [Profile(**row) for row in result.data or []]


async def _get_profile_row(client, user_id: str) -> dict:
    try:
        result = client.table(AppConfig.PROFILES_TABLE).select("*").eq("user_id", user_id).execute()
    except Exception as e:
        raise SupabaseError(f"Failed to get profile: {e}")
    
    row = first_row(result)
    if row is None:
        raise NotFoundError(AppConfig.PROFILES_TABLE, user_id)
    return row


async def get_profile(caller: Caller, user_id: str) -> Profile:
    """Profile of the given identity."""
    policies.authorize(policies.can_read_profile(caller), AppConfig.PROFILES_TABLE, "read")
    
    async with SupabaseClient() as client:
        row = await _get_profile_row(client, user_id)
    return Profile(**row)


async def update_profile(caller: Caller, user_id: str, changes: ProfileUpdate) -> Profile:
    """Update a profile; only its own identity may do so."""
    async with SupabaseClient() as client:
        existing = await _get_profile_row(client, user_id)
        policies.authorize(
            policies.can_update_profile(caller, existing), AppConfig.PROFILES_TABLE, "update"
        )
        
        try:
            result = (
                client.table(AppConfig.PROFILES_TABLE)
                .update(hooks.before_update(changes.model_dump(exclude_unset=True)))
                .eq("user_id", user_id)
                .execute()
            )
        except Exception as e:
            raise SupabaseError(f"Failed to update profile: {e}")
    
    updated = first_row(result)
    if updated is None:
        raise SupabaseError(f"Failed to update profile: {user_id}")
    return Profile(**updated)
