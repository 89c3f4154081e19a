"""Write hooks applied by the data-access layer (replace database triggers)."""

from datetime import datetime, timezone


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def before_update(changes: dict) -> dict:
    """Stamp updated_at on every profile/lead update, including no-op updates."""
    stamped = dict(changes)
    stamped["updated_at"] = utc_now_iso()
    return stamped
