"""Lead activity log - append-only history per lead."""

from typing import Optional

from buyer_crm.config import AppConfig
from buyer_crm.models.activity import LeadActivity, LeadActivityCreate
from buyer_crm.models.caller import Caller
from buyer_crm.services import policies
from buyer_crm.services.supabase_client import SupabaseClient, first_row
from buyer_crm.utils.errors import NotFoundError, SupabaseError
from buyer_crm.utils.logging import get_structured_logger, mask_user_id

logger = get_structured_logger(__name__)


async def _fetch_parent_lead(client, lead_id: str) -> dict:
    try:
        result = (
            client.table(AppConfig.LEADS_TABLE)
            .select("id, created_by, assigned_to")
            .eq("id", lead_id)
            .execute()
        )
    except Exception as e:
        raise SupabaseError(f"Failed to load lead {lead_id}: {e}")
    
    lead = first_row(result)
    if lead is None:
        raise NotFoundError(AppConfig.LEADS_TABLE, lead_id)
    return lead


async def list_activities(caller: Caller, lead_id: str) -> list[LeadActivity]:
    """Activities for a lead, newest first."""
    policies.authorize(
        policies.can_read_activities(caller), AppConfig.ACTIVITIES_TABLE, "read"
    )
    
    async with SupabaseClient() as client:
        await _fetch_parent_lead(client, lead_id)
        try:
            result = (
                client.table(AppConfig.ACTIVITIES_TABLE)
                .select("*")
                .eq("lead_id", lead_id)
                .order("created_at", desc=True)
                .execute()
            )
        except Exception as e:
            raise SupabaseError(f"Failed to get activities: {e}")
    
    return [LeadActivity(**row) for row in result.data or []]


async def log_activity(
    caller: Caller,
    lead_id: str,
    payload: LeadActivityCreate,
    parent_lead: Optional[dict] = None,
) -> LeadActivity:
    """
    Append an activity to a lead the caller may write to.
    
    parent_lead skips the ownership lookup when the caller already holds the row.
    """
    async with SupabaseClient() as client:
        if parent_lead is None:
            parent_lead = await _fetch_parent_lead(client, lead_id)
        
        policies.authorize(
            policies.can_insert_activity(caller, parent_lead),
            AppConfig.ACTIVITIES_TABLE,
            "insert",
        )
        
        row = {
            "lead_id": lead_id,
            "user_id": caller.user_id,
            "activity_type": payload.activity_type,
            "description": payload.description,
            "metadata": payload.metadata,
        }
        try:
            result = client.table(AppConfig.ACTIVITIES_TABLE).insert(row).execute()
        except Exception as e:
            raise SupabaseError(f"Failed to log activity: {e}")
    
    created = first_row(result)
    if created is None:
        raise SupabaseError("Failed to log activity: no data returned")
    
    logger.info(
        "Lead activity logged",
        lead_id=lead_id,
        activity_type=payload.activity_type,
        user_id=mask_user_id(caller.user_id),
    )
    return LeadActivity(**created)
