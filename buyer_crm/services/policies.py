"""Row-level policy engine.

Every data-access function in buyer_crm.services decides allow/deny here
before its query executes. Predicates are pure functions of the caller
and the row so the policy table can be tested without a database.

    profiles        read    any authenticated caller
    profiles        update  caller owns the row
    buyer_leads     read    role in (admin, agent, viewer)
    buyer_leads     insert  role in (admin, agent)
    buyer_leads     update  admin, or an agent who is creator or assignee
    buyer_leads     delete  admin
    lead_activities read    caller may read the parent lead
    lead_activities insert  caller may update the parent lead
"""

from typing import Mapping, Any

from buyer_crm.config import AppConfig
from buyer_crm.models.caller import Caller
from buyer_crm.models.enums import AppRole
from buyer_crm.utils.errors import AuthorizationError

LEAD_READ_ROLES = (AppRole.ADMIN, AppRole.AGENT, AppRole.VIEWER)
LEAD_INSERT_ROLES = (AppRole.ADMIN, AppRole.AGENT)


def is_admin(caller: Caller) -> bool:
    return caller.role == AppRole.ADMIN


def can_read_profile(caller: Caller) -> bool:
    return bool(caller.user_id)


def can_update_profile(caller: Caller, profile: Mapping[str, Any]) -> bool:
    return bool(caller.user_id) and profile.get("user_id") == caller.user_id


def can_read_leads(caller: Caller) -> bool:
    return caller.role in LEAD_READ_ROLES


def can_insert_lead(caller: Caller) -> bool:
    return caller.role in LEAD_INSERT_ROLES


def can_update_lead(caller: Caller, lead: Mapping[str, Any]) -> bool:
    """Admin, or an agent who created the row or is its current assignee.

    Viewers and identities without a profile never write. A lead whose
    creator and assignee are both null is writable by admin only.
    """
    if is_admin(caller):
        return True
    if caller.role != AppRole.AGENT or not caller.user_id:
        return False
    return lead.get("created_by") == caller.user_id or lead.get("assigned_to") == caller.user_id


def can_delete_lead(caller: Caller) -> bool:
    return is_admin(caller)


def can_read_activities(caller: Caller) -> bool:
    return can_read_leads(caller)


def can_insert_activity(caller: Caller, parent_lead: Mapping[str, Any]) -> bool:
    return can_update_lead(caller, parent_lead)


def authorize(allowed: bool, table: str, operation: str) -> None:
    """Raise AuthorizationError unless the predicate allowed the operation."""
    if not allowed:
        raise AuthorizationError(table, operation)


def require_lead_read(caller: Caller) -> None:
    authorize(can_read_leads(caller), AppConfig.LEADS_TABLE, "read")


def require_lead_insert(caller: Caller) -> None:
    authorize(can_insert_lead(caller), AppConfig.LEADS_TABLE, "insert")


def require_lead_update(caller: Caller, lead: Mapping[str, Any]) -> None:
    authorize(can_update_lead(caller, lead), AppConfig.LEADS_TABLE, "update")


def require_lead_delete(caller: Caller) -> None:
    authorize(can_delete_lead(caller), AppConfig.LEADS_TABLE, "delete")
