"""Custom assertion helpers."""

import json
from typing import Any, Dict

from buyer_crm.models.enums import LeadSource, LeadStatus


def assert_valid_lead(lead: Any) -> None:
    """Assert that a stored lead respects the schema constraints."""
    assert lead.first_name and lead.last_name and lead.email
    assert 1 <= lead.priority <= 5
    assert lead.status in {status.value for status in LeadStatus}
    assert lead.source in {source.value for source in LeadSource}
    assert isinstance(lead.preferred_areas, list)


def assert_json_response(response: Dict[str, Any], expected_status: int = 200) -> Any:
    """Assert status and JSON content type; return the decoded body."""
    assert response["status"] == expected_status, response["body"]
    assert response["headers"].get("content-type", "").startswith("application/json")
    return json.loads(response["body"])
