"""Tests for Lead models."""

import pytest
from pydantic import ValidationError
from buyer_crm.models.lead import Lead, LeadCreate, LeadFilters, LeadUpdate


@pytest.mark.unit
def test_lead_create_defaults():
    """Test documented defaults for status, source and priority."""
    lead = LeadCreate(first_name="John", last_name="Doe", email="john@x.com")
    
    assert lead.status == "new"
    assert lead.source == "website"
    assert lead.priority == 3
    assert lead.preferred_areas == []
    assert lead.phone is None


@pytest.mark.unit
@pytest.mark.parametrize("priority", [1, 2, 3, 4, 5])
def test_lead_create_priority_in_range(priority):
    lead = LeadCreate(first_name="John", last_name="Doe", email="john@x.com", priority=priority)
    assert lead.priority == priority


@pytest.mark.unit
@pytest.mark.parametrize("priority", [0, 6, -1])
def test_lead_create_priority_out_of_range(priority):
    with pytest.raises(ValidationError):
        LeadCreate(first_name="John", last_name="Doe", email="john@x.com", priority=priority)


@pytest.mark.unit
@pytest.mark.parametrize("field,value", [
    ("status", "lost"),
    ("status", "New"),
    ("source", "billboard"),
    ("source", "Website"),
])
def test_lead_create_rejects_unknown_enum_literals(field, value):
    """Enumerations are case-sensitive."""
    with pytest.raises(ValidationError):
        LeadCreate(first_name="John", last_name="Doe", email="john@x.com", **{field: value})


@pytest.mark.unit
@pytest.mark.parametrize("missing", ["first_name", "last_name", "email"])
def test_lead_create_required_fields(missing):
    data = {"first_name": "John", "last_name": "Doe", "email": "john@x.com"}
    data[missing] = ""
    with pytest.raises(ValidationError):
        LeadCreate(**data)


@pytest.mark.unit
def test_lead_create_rejects_invalid_email():
    with pytest.raises(ValidationError):
        LeadCreate(first_name="John", last_name="Doe", email="not-an-email")


@pytest.mark.unit
def test_lead_create_budget_order():
    """Test that min budget above max budget is rejected."""
    with pytest.raises(ValidationError) as exc_info:
        LeadCreate(
            first_name="John",
            last_name="Doe",
            email="john@x.com",
            budget_min=500000,
            budget_max=300000,
        )
    assert "Minimum budget cannot be greater than maximum budget" in str(exc_info.value)


@pytest.mark.unit
def test_lead_create_bathrooms_half_steps():
    assert LeadCreate(first_name="J", last_name="D", email="j@x.com", bathrooms=2.5).bathrooms == 2.5
    with pytest.raises(ValidationError):
        LeadCreate(first_name="J", last_name="D", email="j@x.com", bathrooms=2.3)


@pytest.mark.unit
def test_lead_create_dump_is_json_ready():
    lead = LeadCreate(first_name="John", last_name="Doe", email="john@x.com", status="qualified")
    data = lead.model_dump(mode="json")
    
    assert data["status"] == "qualified"
    assert data["source"] == "website"
    assert data["next_follow_up"] is None


@pytest.mark.unit
def test_stored_lead_null_areas_become_empty_list():
    lead = Lead(
        id="9b2f", first_name="John", last_name="Doe", email="john@x.com", preferred_areas=None
    )
    assert lead.preferred_areas == []
    assert lead.status == "new"


@pytest.mark.unit
def test_lead_update_only_set_fields():
    changes = LeadUpdate(priority=5, notes=None)
    assert changes.changes() == {"priority": 5, "notes": None}


@pytest.mark.unit
def test_lead_update_empty_is_allowed():
    assert LeadUpdate().changes() == {}


@pytest.mark.unit
@pytest.mark.parametrize("column", ["first_name", "email", "status", "source", "priority"])
def test_lead_update_rejects_null_for_not_null_columns(column):
    with pytest.raises(ValidationError):
        LeadUpdate(**{column: None})


@pytest.mark.unit
def test_lead_update_rejects_unknown_and_owner_columns():
    with pytest.raises(ValidationError):
        LeadUpdate(created_by="someone-else")
    with pytest.raises(ValidationError):
        LeadUpdate(favourite_color="blue")


@pytest.mark.unit
def test_lead_update_priority_bounds():
    with pytest.raises(ValidationError):
        LeadUpdate(priority=9)


@pytest.mark.unit
def test_lead_filters_offset():
    filters = LeadFilters(page=3, page_size=10)
    assert filters.offset == 20
    assert filters.ascending is False
    assert filters.order_by == "created_at"


@pytest.mark.unit
def test_lead_filters_rejects_unknown_order_column():
    with pytest.raises(ValidationError):
        LeadFilters(order_by="password")
