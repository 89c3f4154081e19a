"""CSV lead export."""

from datetime import date
from typing import Any, Iterable, Optional

from buyer_crm.models.caller import Caller
from buyer_crm.models.csv_io import LeadExport
from buyer_crm.models.lead import Lead
from buyer_crm.services.csv_import import AREA_DELIMITER
from buyer_crm.services.leads import fetch_all_visible_leads
from buyer_crm.utils.logging import get_structured_logger, timed

logger = get_structured_logger(__name__)

EXPORT_COLUMNS = (
    "first_name", "last_name", "email", "phone", "budget_min", "budget_max",
    "preferred_areas", "property_type", "bedrooms", "bathrooms", "status",
    "source", "priority", "notes", "created_at",
)

SAMPLE_IMPORT_CSV = "\n".join([
    "first_name,last_name,email,phone,budget_min,budget_max,preferred_areas,property_type,bedrooms,bathrooms,status,source,priority,notes",
    "John,Doe,john.doe@example.com,+1-555-0123,300000,500000,Downtown;Midtown,Single Family Home,3,2.5,new,website,3,Looking for move-in ready home",
    "Jane,Smith,jane.smith@example.com,+1-555-0124,200000,350000,Suburbs,Condo,2,2,contacted,referral,4,First-time buyer",
])


def format_csv_value(value: Any) -> str:
    """
    Render one cell.
    
    Lists join with ';', None renders empty, and a value containing a comma is
    wrapped in double quotes. Embedded quotes and newlines are not escaped.
    """
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        text = AREA_DELIMITER.join(str(item) for item in value)
    elif isinstance(value, float) and value.is_integer():
        text = str(int(value))
    else:
        text = str(value)
    
    if "," in text:
        return f'"{text}"'
    return text


def serialize_leads(leads: Iterable[Lead]) -> str:
    """Header plus one line per lead; empty string when there are no leads."""
    lines = [
        ",".join(format_csv_value(row.get(column)) for column in EXPORT_COLUMNS)
        for row in (lead.model_dump(mode="json") for lead in leads)
    ]
    if not lines:
        return ""
    return "\n".join([",".join(EXPORT_COLUMNS), *lines])


def export_filename(today: Optional[date] = None) -> str:
    return f"leads_export_{(today or date.today()).isoformat()}.csv"


@timed("csv_export", logger=logger)
async def export_leads_csv(caller: Caller, today: Optional[date] = None) -> LeadExport:
    """Every lead visible to the caller, newest first, as one CSV blob."""
    leads = await fetch_all_visible_leads(caller)
    content = serialize_leads(leads)
    
    logger.info("CSV export finished", row_count=len(leads))
    return LeadExport(filename=export_filename(today), row_count=len(leads), content=content)


def sample_import_csv() -> str:
    """Two-row template showing every recognised import column."""
    return SAMPLE_IMPORT_CSV
