"""CSV lead import: parse, validate and insert row by row with a per-row error report."""

import re
from typing import Optional

from pydantic import ValidationError

from buyer_crm.models.caller import Caller
from buyer_crm.models.csv_io import ImportResult, ImportRowError
from buyer_crm.models.lead import REQUIRED_LEAD_FIELDS, LeadCreate
from buyer_crm.services import policies
from buyer_crm.services.leads import insert_lead
from buyer_crm.utils.errors import BuyerCRMError, CSVImportError, format_validation_error
from buyer_crm.utils.logging import get_structured_logger, log_timing, mask_sensitive_data, mask_user_id

logger = get_structured_logger(__name__)

OPTIONAL_IMPORT_FIELDS = (
    "phone", "budget_min", "budget_max", "preferred_areas", "property_type",
    "bedrooms", "bathrooms", "status", "source", "priority", "notes",
)
IMPORT_FIELDS = REQUIRED_LEAD_FIELDS + OPTIONAL_IMPORT_FIELDS
AREA_DELIMITER = ";"

_WHITESPACE = re.compile(r"\s+")


def parse_csv_line(line: str) -> list[str]:
    """
    Split one line on commas outside double quotes; fields are trimmed.
    
    Quotes only toggle the in-quotes state and are dropped. There is no
    escaped-quote ("") support inside a quoted field.
    """
    fields = []
    current = []
    in_quotes = False
    
    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    
    fields.append("".join(current).strip())
    return fields


def normalize_header(name: str) -> str:
    """Case-fold a header and turn whitespace runs into underscores."""
    return _WHITESPACE.sub("_", name.strip().lower())


def split_lines(text: str) -> list[str]:
    """Non-blank lines; both \\n and \\r\\n endings are accepted, a leading BOM is dropped."""
    text = text.lstrip("\ufeff")
    return [line.rstrip("\r") for line in text.split("\n") if line.strip()]


def row_to_lead(headers: list[str], values: list[str]) -> LeadCreate:
    """Map values onto headers positionally and validate them as a lead.
    
    Empty cells and unknown columns are treated as absent.
    """
    record = {}
    for index, header in enumerate(headers):
        if header in IMPORT_FIELDS and index < len(values) and values[index]:
            record[header] = values[index]
    
    if "preferred_areas" in record:
        record["preferred_areas"] = [
            area.strip() for area in record["preferred_areas"].split(AREA_DELIMITER) if area.strip()
        ]
    
    return LeadCreate(**record)


async def import_leads_csv(caller: Caller, text: str) -> ImportResult:
    """
    Import leads from CSV text.
    
    Raises CSVImportError (nothing imported) when the file has fewer than two
    non-blank lines or lacks a required column, and AuthorizationError when the
    caller may not insert leads. Otherwise every data row is attempted in
    order; failures are recorded with their line number and never stop the batch.
    """
    policies.require_lead_insert(caller)
    
    lines = split_lines(text or "")
    if len(lines) < 2:
        raise CSVImportError("CSV file must contain at least a header row and one data row")
    
    headers = [normalize_header(h) for h in parse_csv_line(lines[0])]
    missing = [field for field in REQUIRED_LEAD_FIELDS if field not in headers]
    if missing:
        raise CSVImportError(f"Missing required columns: {', '.join(missing)}")
    
    data_lines = lines[1:]
    result = ImportResult(total_rows=len(data_lines))
    
    with log_timing("csv_import", logger=logger, rows=len(data_lines), user_id=mask_user_id(caller.user_id)):
        for index, line in enumerate(data_lines):
            row_number = index + 2
            message: Optional[str] = None
            
            try:
                lead = row_to_lead(headers, parse_csv_line(line))
                await insert_lead(caller, lead)
            except ValidationError as e:
                message = format_validation_error(e)
            except BuyerCRMError as e:
                message = str(e) or "Unknown error"
            
            if message is None:
                result.success_count += 1
            else:
                logger.debug("CSV row rejected", row=row_number, error=mask_sensitive_data(message))
                result.errors.append(ImportRowError(row=row_number, message=message))
    
    logger.info(
        "CSV import finished",
        total_rows=result.total_rows,
        success_count=result.success_count,
        error_count=len(result.errors),
    )
    return result
