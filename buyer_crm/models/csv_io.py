"""CSV import report and export payload models."""

from pydantic import BaseModel, Field


class ImportRowError(BaseModel):
    """A rejected data row; row is the 1-based line number (header is row 1)."""
    row: int
    message: str


class ImportResult(BaseModel):
    """Tally returned once every row has been attempted."""
    success_count: int = 0
    total_rows: int = 0
    errors: list[ImportRowError] = Field(default_factory=list)


class LeadExport(BaseModel):
    """Serialized CSV for every lead visible to the caller."""
    filename: str
    row_count: int
    content: str
