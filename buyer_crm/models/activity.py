"""LeadActivity model - append-only audit trail entries for a lead."""

from typing import Optional, Any
from pydantic import BaseModel, Field


class LeadActivity(BaseModel):
    """Stored lead_activities row."""
    id: str = Field(..., description="Activity ID (uuid)")
    lead_id: str = Field(..., description="Parent lead (cascade on delete)")
    user_id: Optional[str] = Field(None, description="Acting identity (nullable on identity removal)")
    activity_type: str = Field(..., description="Free-text tag, e.g. lead_created")
    description: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[str] = None


class LeadActivityCreate(BaseModel):
    """Payload for logging an activity against a lead."""
    activity_type: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    metadata: dict[str, Any] = Field(default_factory=dict)
