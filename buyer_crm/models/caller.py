"""The authenticated identity behind a request."""

from typing import Optional
from pydantic import BaseModel, ConfigDict

from buyer_crm.models.enums import AppRole


class Caller(BaseModel):
    """Identity claim plus the role resolved from its profile (None when it has no profile)."""
    model_config = ConfigDict(frozen=True)
    
    user_id: str
    role: Optional[AppRole] = None
