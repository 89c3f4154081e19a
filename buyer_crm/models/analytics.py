"""Dashboard and analytics aggregates."""

from pydantic import BaseModel, Field

from buyer_crm.models.lead import Lead


class DashboardStats(BaseModel):
    total_leads: int = 0
    new_leads: int = 0
    qualified_leads: int = 0
    closed_leads: int = 0
    recent_leads: list[Lead] = Field(default_factory=list)


class SourceShare(BaseModel):
    source: str
    count: int
    percentage: float


class LeadAnalytics(BaseModel):
    """Breakdowns over all leads visible to the caller."""
    total_leads: int = 0
    status_breakdown: dict[str, int] = Field(default_factory=dict)
    source_breakdown: dict[str, int] = Field(default_factory=dict)
    priority_breakdown: dict[int, int] = Field(default_factory=dict)
    recent_activity: int = Field(0, description="Leads created inside the recent window")
    conversion_rate: float = Field(0.0, description="(qualified + closed) / total, percent")
    top_sources: list[SourceShare] = Field(default_factory=list)
