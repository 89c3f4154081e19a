"""Error handling utilities."""

from typing import Optional

from pydantic import ValidationError


class BuyerCRMError(Exception):
    """Base exception for the buyer CRM backend."""
    pass


class AuthenticationError(BuyerCRMError):
    """Access token missing, invalid or expired."""
    pass


class AuthorizationError(BuyerCRMError):
    """Row-level policy denied the operation."""

    def __init__(self, table: str, operation: str, detail: Optional[str] = None):
        self.table = table
        self.operation = operation
        message = f"Not permitted to {operation} {table}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class NotFoundError(BuyerCRMError):
    """Requested row does not exist."""

    def __init__(self, table: str, row_id: str):
        self.table = table
        self.row_id = row_id
        super().__init__(f"{table} row not found: {row_id}")


class CSVImportError(BuyerCRMError):
    """Whole-file CSV import failure (nothing was imported)."""
    pass


class ProvisioningError(BuyerCRMError):
    """Profile provisioning for a new identity failed."""
    pass


class SupabaseError(BuyerCRMError):
    """Supabase operation error."""
    pass


class RequestError(BuyerCRMError):
    """Malformed HTTP request (bad JSON, missing parameter)."""
    pass


def format_validation_error(error: ValidationError) -> str:
    """'field: reason' pairs joined with '; '."""
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "row"
        parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)
