"""Role resolution - map an identity to its app_role."""

from typing import Optional

from buyer_crm.config import AppConfig
from buyer_crm.models.enums import AppRole
from buyer_crm.services.supabase_client import SupabaseClient, first_row
from buyer_crm.utils.errors import SupabaseError
from buyer_crm.utils.logging import get_structured_logger, mask_user_id

logger = get_structured_logger(__name__)


async def get_user_role(user_id: str) -> Optional[AppRole]:
    """
    Return the role stored on the identity's profile, or None without a profile.
    
    Reads through the service-role client and is never policy-checked itself,
    so policy predicates can call it without recursing.
    """
    if not user_id:
        return None
    
    async with SupabaseClient() as client:
        try:
            result = (
                client.table(AppConfig.PROFILES_TABLE)
                .select("role")
                .eq("user_id", user_id)
                .execute()
            )
        except Exception as e:
            raise SupabaseError(f"Failed to resolve role: {e}")
    
    row = first_row(result)
    if row is None or row.get("role") is None:
        logger.debug("Identity has no profile role", user_id=mask_user_id(user_id))
        return None
    return AppRole(row["role"])
