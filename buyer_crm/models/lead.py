"""Lead models - prospective buyers tracked through the sales funnel."""

from typing import Optional, Literal
from datetime import datetime
from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

from buyer_crm.config import AppConfig
from buyer_crm.models.enums import LeadSource, LeadStatus


REQUIRED_LEAD_FIELDS = ("first_name", "last_name", "email")

# Columns a caller may order lead listings by
SortableLeadColumn = Literal[
    "created_at", "updated_at", "first_name", "last_name", "email",
    "priority", "status", "source", "next_follow_up",
]


def _check_budget_range(budget_min: Optional[float], budget_max: Optional[float]) -> None:
    if budget_min is not None and budget_max is not None and budget_min > budget_max:
        raise ValueError("Minimum budget cannot be greater than maximum budget")


class Lead(BaseModel):
    """Stored buyer_leads row."""
    model_config = ConfigDict(use_enum_values=True, validate_default=True)
    
    id: str = Field(..., description="Lead ID (uuid)")
    created_by: Optional[str] = Field(None, description="Creator identity (nullable on identity removal)")
    assigned_to: Optional[str] = Field(None, description="Assignee identity (nullable on identity removal)")
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    budget_min: Optional[float] = None
    budget_max: Optional[float] = None
    preferred_areas: list[str] = Field(default_factory=list)
    property_type: Optional[str] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[float] = None
    status: LeadStatus = LeadStatus.NEW
    source: LeadSource = LeadSource.WEBSITE
    priority: int = Field(default=3, ge=1, le=5, description="Priority (1-5, 5 highest)")
    notes: Optional[str] = None
    last_contacted: Optional[str] = None
    next_follow_up: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _null_areas_to_empty(cls, data):
        if isinstance(data, dict) and data.get("preferred_areas") is None:
            data = {**data, "preferred_areas": []}
        return data


class LeadCreate(BaseModel):
    """Payload for inserting a lead."""
    model_config = ConfigDict(use_enum_values=True, validate_default=True, str_strip_whitespace=True)
    
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: EmailStr
    phone: Optional[str] = None
    budget_min: Optional[float] = Field(None, ge=0)
    budget_max: Optional[float] = Field(None, ge=0)
    preferred_areas: list[str] = Field(default_factory=list)
    property_type: Optional[str] = None
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[float] = Field(None, ge=0, multiple_of=0.5)
    status: LeadStatus = LeadStatus.NEW
    source: LeadSource = LeadSource.WEBSITE
    priority: int = Field(default=3, ge=1, le=5)
    notes: Optional[str] = None
    assigned_to: Optional[str] = None
    last_contacted: Optional[datetime] = None
    next_follow_up: Optional[datetime] = None

    @model_validator(mode="after")
    def _budget_order(self):
        _check_budget_range(self.budget_min, self.budget_max)
        return self


class LeadUpdate(BaseModel):
    """Partial update of a lead; only fields that were set are written."""
    model_config = ConfigDict(use_enum_values=True, str_strip_whitespace=True, extra="forbid")
    
    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    budget_min: Optional[float] = Field(None, ge=0)
    budget_max: Optional[float] = Field(None, ge=0)
    preferred_areas: Optional[list[str]] = None
    property_type: Optional[str] = None
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[float] = Field(None, ge=0, multiple_of=0.5)
    status: Optional[LeadStatus] = None
    source: Optional[LeadSource] = None
    priority: Optional[int] = Field(None, ge=1, le=5)
    notes: Optional[str] = None
    assigned_to: Optional[str] = None
    last_contacted: Optional[datetime] = None
    next_follow_up: Optional[datetime] = None

    @model_validator(mode="after")
    def _not_null_columns(self):
        for column in (*REQUIRED_LEAD_FIELDS, "status", "source", "priority"):
            if column in self.model_fields_set and getattr(self, column) is None:
                raise ValueError(f"{column} cannot be null")
        _check_budget_range(self.budget_min, self.budget_max)
        return self

    def changes(self) -> dict:
        """Columns explicitly set by the caller, JSON-ready."""
        data = self.model_dump(mode="json", exclude_unset=True)
        if "preferred_areas" in data and data["preferred_areas"] is None:
            data["preferred_areas"] = []
        return data


class LeadFilters(BaseModel):
    """Search, equality filters, ordering and pagination for lead listings."""
    model_config = ConfigDict(use_enum_values=True)
    
    search: Optional[str] = Field(None, description="Case-insensitive match on name or email")
    status: Optional[LeadStatus] = None
    source: Optional[LeadSource] = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=AppConfig.LEADS_PAGE_SIZE, ge=1, le=AppConfig.LEADS_MAX_PAGE_SIZE)
    order_by: SortableLeadColumn = "created_at"
    ascending: bool = False

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


class LeadPage(BaseModel):
    """One page of a lead listing."""
    leads: list[Lead]
    total: int
    page: int
    page_size: int
    total_pages: int
