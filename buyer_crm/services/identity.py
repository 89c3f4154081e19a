"""Identity resolution and profile provisioning for new identities."""

from typing import Any, Mapping, Optional

from buyer_crm.config import AppConfig
from buyer_crm.models.caller import Caller
from buyer_crm.models.enums import AppRole
from buyer_crm.models.profile import Profile
from buyer_crm.services.roles import get_user_role
from buyer_crm.services.supabase_client import SupabaseClient, first_row
from buyer_crm.utils.errors import AuthenticationError, ProvisioningError, SupabaseError
from buyer_crm.utils.logging import get_structured_logger, mask_sensitive_data, mask_user_id

logger = get_structured_logger(__name__)


async def resolve_caller(access_token: Optional[str]) -> Caller:
    """Turn a Supabase access token into a Caller with its current role."""
    if not access_token:
        raise AuthenticationError("Missing access token")
    
    async with SupabaseClient() as client:
        try:
            response = client.auth.get_user(access_token)
        except Exception as e:
            raise AuthenticationError(f"Invalid access token: {e}")
    
    user = getattr(response, "user", None)
    if user is None or not getattr(user, "id", None):
        raise AuthenticationError("Invalid access token")
    
    user_id = str(user.id)
    return Caller(user_id=user_id, role=await get_user_role(user_id))


async def provision_profile(user_id: str, user_metadata: Optional[Mapping[str, Any]] = None) -> Profile:
    """
    after_identity_created hook: create the identity's single profile.
    
    Uses the supplied full_name or the default literal, always with role agent.
    An existing profile is never overwritten.
    """
    full_name = (user_metadata or {}).get("full_name") or AppConfig.DEFAULT_PROFILE_NAME
    
    async with SupabaseClient() as client:
        try:
            existing = (
                client.table(AppConfig.PROFILES_TABLE)
                .select("id")
                .eq("user_id", user_id)
                .execute()
            )
        except Exception as e:
            raise ProvisioningError(f"Failed to check existing profile: {e}")
        
        if existing.data:
            raise ProvisioningError(f"Profile already exists for identity {user_id}")
        
        try:
            result = client.table(AppConfig.PROFILES_TABLE).insert({
                "user_id": user_id,
                "full_name": full_name,
                "role": AppRole.AGENT.value,
            }).execute()
        except Exception as e:
            raise ProvisioningError(f"Failed to create profile: {e}")
    
    created = first_row(result)
    if created is None:
        raise ProvisioningError("Failed to create profile: no data returned")
    
    logger.info("Profile provisioned", user_id=mask_user_id(user_id), role=AppRole.AGENT.value)
    return Profile(**created)


async def register_identity(email: str, password: str, full_name: Optional[str] = None) -> Profile:
    """
    Create an auth identity and its profile as one unit.
    
    The identity stays unconfirmed, and cannot sign in, until the address is
    confirmed through the link Supabase mails out. If provisioning fails the
    identity is deleted again and registration fails.
    """
    metadata = {"full_name": full_name} if full_name else {}
    
    async with SupabaseClient() as client:
        try:
            response = client.auth.admin.create_user({
                "email": email,
                "password": password,
                "email_confirm": AppConfig.SIGNUP_AUTO_CONFIRM,
                "user_metadata": metadata,
            })
        except Exception as e:
            raise SupabaseError(f"Failed to create identity: {e}")
        
        user = getattr(response, "user", None)
        if user is None:
            raise SupabaseError("Failed to create identity: no user returned")
        user_id = str(user.id)
        
        try:
            profile = await provision_profile(user_id, getattr(user, "user_metadata", None) or metadata)
        except ProvisioningError:
            logger.warning("Provisioning failed, removing identity", user_id=mask_user_id(user_id))
            try:
                client.auth.admin.delete_user(user_id)
            except Exception as e:
                logger.error(
                    "Failed to remove identity after provisioning failure",
                    user_id=mask_user_id(user_id),
                    error=str(e),
                )
            raise
        
        if not AppConfig.SIGNUP_AUTO_CONFIRM:
            try:
                client.auth.resend({"type": "signup", "email": email})
            except Exception as e:
                logger.warning(
                    "Failed to send confirmation e-mail",
                    user_id=mask_user_id(user_id),
                    error=mask_sensitive_data(str(e)),
                )
    
    return profile
