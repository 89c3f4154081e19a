"""Lead data access - every operation is policy-checked before its query runs."""

import math
import re
from typing import Optional

from buyer_crm.config import AppConfig
from buyer_crm.models.activity import LeadActivityCreate
from buyer_crm.models.caller import Caller
from buyer_crm.models.lead import Lead, LeadCreate, LeadFilters, LeadPage, LeadUpdate
from buyer_crm.services import hooks, policies
from buyer_crm.services.activities import log_activity
from buyer_crm.services.supabase_client import SupabaseClient, first_row
from buyer_crm.utils.errors import NotFoundError, SupabaseError
from buyer_crm.utils.logging import get_structured_logger, mask_user_id

logger = get_structured_logger(__name__)

SEARCH_COLUMNS = ("first_name", "last_name", "email")

# PostgREST caps a single response; larger reads are fetched in batches of this size
FETCH_BATCH_SIZE = 1000

# Characters that would break a PostgREST or=(...) filter expression
_FILTER_UNSAFE = re.compile(r"[,()]")


def build_search_filter(term: str) -> Optional[str]:
    """or=(...) expression matching term as a substring of name or email."""
    cleaned = _FILTER_UNSAFE.sub(" ", term).strip()
    if not cleaned:
        return None
    return ",".join(f"{column}.ilike.%{cleaned}%" for column in SEARCH_COLUMNS)


async def list_leads(caller: Caller, filters: Optional[LeadFilters] = None) -> LeadPage:
    """Filtered, ordered, paginated lead listing with an exact total count."""
    policies.require_lead_read(caller)
    filters = filters or LeadFilters()
    
    async with SupabaseClient() as client:
        try:
            query = client.table(AppConfig.LEADS_TABLE).select("*", count="exact")
            
            if filters.search:
                search_filter = build_search_filter(filters.search)
                if search_filter:
                    query = query.or_(search_filter)
            if filters.status:
                query = query.eq("status", filters.status)
            if filters.source:
                query = query.eq("source", filters.source)
            
            result = (
                query.order(filters.order_by, desc=not filters.ascending)
                .range(filters.offset, filters.offset + filters.page_size - 1)
                .execute()
            )
        except Exception as e:
            raise SupabaseError(f"Failed to list leads: {e}")
    
    total = result.count or 0
    return LeadPage(
        leads=[Lead(**row) for row in result.data or []],
        total=total,
        page=filters.page,
        page_size=filters.page_size,
        total_pages=math.ceil(total / filters.page_size),
    )


async def fetch_all_visible_leads(caller: Caller) -> list[Lead]:
    """Every lead the caller may read, newest first."""
    policies.require_lead_read(caller)
    
    rows: list[dict] = []
    async with SupabaseClient() as client:
        while True:
            try:
                result = (
                    client.table(AppConfig.LEADS_TABLE)
                    .select("*")
                    .order("created_at", desc=True)
                    .range(len(rows), len(rows) + FETCH_BATCH_SIZE - 1)
                    .execute()
                )
            except Exception as e:
                raise SupabaseError(f"Failed to fetch leads: {e}")
            
            batch = result.data or []
            rows.extend(batch)
            if len(batch) < FETCH_BATCH_SIZE:
                break
    
    return [Lead(**row) for row in rows]


async def _get_lead_row(client, lead_id: str) -> dict:
    try:
        result = client.table(AppConfig.LEADS_TABLE).select("*").eq("id", lead_id).execute()
    except Exception as e:
        raise SupabaseError(f"Failed to get lead: {e}")
    
    row = first_row(result)
    if row is None:
        raise NotFoundError(AppConfig.LEADS_TABLE, lead_id)
    return row


async def get_lead(caller: Caller, lead_id: str) -> Lead:
    """Single lead by id."""
    policies.require_lead_read(caller)
    
    async with SupabaseClient() as client:
        row = await _get_lead_row(client, lead_id)
    return Lead(**row)


async def insert_lead(caller: Caller, payload: LeadCreate) -> Lead:
    """Insert one lead attributed to the caller."""
    policies.require_lead_insert(caller)
    
    row = payload.model_dump(mode="json")
    row["created_by"] = caller.user_id
    
    async with SupabaseClient() as client:
        try:
            result = client.table(AppConfig.LEADS_TABLE).insert(row).execute()
        except Exception as e:
            raise SupabaseError(f"Failed to create lead: {e}")
    
    created = first_row(result)
    if created is None:
        raise SupabaseError("Failed to create lead: no data returned")
    return Lead(**created)


async def create_lead(caller: Caller, payload: LeadCreate) -> Lead:
    """Insert a lead and record a lead_created activity."""
    lead = await insert_lead(caller, payload)
    
    await log_activity(
        caller,
        lead.id,
        LeadActivityCreate(
            activity_type="lead_created",
            description=f"Lead created for {lead.first_name} {lead.last_name}",
        ),
        parent_lead=lead.model_dump(),
    )
    logger.info("Lead created", lead_id=lead.id, created_by=mask_user_id(caller.user_id))
    return lead


async def _apply_update(caller: Caller, lead_id: str, changes: dict) -> tuple[dict, Lead]:
    async with SupabaseClient() as client:
        existing = await _get_lead_row(client, lead_id)
        policies.require_lead_update(caller, existing)
        
        try:
            result = (
                client.table(AppConfig.LEADS_TABLE)
                .update(hooks.before_update(changes))
                .eq("id", lead_id)
                .execute()
            )
        except Exception as e:
            raise SupabaseError(f"Failed to update lead: {e}")
    
    updated = first_row(result)
    if updated is None:
        raise SupabaseError(f"Failed to update lead: {lead_id}")
    return existing, Lead(**updated)


async def update_lead(caller: Caller, lead_id: str, changes: LeadUpdate) -> Lead:
    """Apply a partial update; allowed for admin, the creator or the assignee."""
    fields = changes.changes()
    existing, lead = await _apply_update(caller, lead_id, fields)
    
    if fields:
        # Audited against the pre-update row so a writer can hand a lead off
        await log_activity(
            caller,
            lead_id,
            LeadActivityCreate(
                activity_type="lead_updated",
                description=f"Lead updated for {lead.first_name} {lead.last_name}",
                metadata={"fields": sorted(fields)},
            ),
            parent_lead=existing,
        )
    return lead


async def assign_lead(caller: Caller, lead_id: str, assignee_id: Optional[str]) -> Lead:
    """Set (or clear) the identity responsible for following up on a lead."""
    existing, lead = await _apply_update(caller, lead_id, {"assigned_to": assignee_id})
    
    await log_activity(
        caller,
        lead_id,
        LeadActivityCreate(
            activity_type="lead_assigned",
            description=(
                f"Lead assigned for {lead.first_name} {lead.last_name}"
                if assignee_id else f"Lead unassigned for {lead.first_name} {lead.last_name}"
            ),
            metadata={"from": existing.get("assigned_to"), "to": assignee_id},
        ),
        parent_lead=existing,
    )
    return lead


async def delete_lead(caller: Caller, lead_id: str) -> None:
    """Admin-only delete; activities cascade in the database."""
    policies.require_lead_delete(caller)
    
    async with SupabaseClient() as client:
        await _get_lead_row(client, lead_id)
        try:
            client.table(AppConfig.LEADS_TABLE).delete().eq("id", lead_id).execute()
        except Exception as e:
            raise SupabaseError(f"Failed to delete lead: {e}")
    
    logger.info("Lead deleted", lead_id=lead_id, deleted_by=mask_user_id(caller.user_id))
