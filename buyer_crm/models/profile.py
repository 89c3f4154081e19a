"""Profile model - one row per registered identity."""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from buyer_crm.models.enums import AppRole


class Profile(BaseModel):
    """Stored profiles row."""
    model_config = ConfigDict(use_enum_values=True, validate_default=True)
    
    id: str = Field(..., description="Profile ID (uuid)")
    user_id: str = Field(..., description="Identity reference (unique)")
    full_name: Optional[str] = Field(None, description="Display name")
    role: AppRole = Field(default=AppRole.AGENT, description="Role: admin, agent, viewer")
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ProfileUpdate(BaseModel):
    """Fields an identity may change on its own profile."""
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)
    
    full_name: Optional[str] = Field(None, min_length=1)
