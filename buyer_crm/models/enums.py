"""Enumerations mirrored from the Postgres enum types."""

from enum import Enum


class LeadStatus(str, Enum):
    """Sales funnel stage of a lead (lead_status)."""
    NEW = "new"
    CONTACTED = "contacted"
    QUALIFIED = "qualified"
    NOT_QUALIFIED = "not_qualified"
    CLOSED = "closed"


class LeadSource(str, Enum):
    """Where a lead came from (lead_source)."""
    WEBSITE = "website"
    REFERRAL = "referral"
    SOCIAL_MEDIA = "social_media"
    COLD_CALL = "cold_call"
    EMAIL_CAMPAIGN = "email_campaign"
    OTHER = "other"


class AppRole(str, Enum):
    """Permission level of an identity (app_role)."""
    ADMIN = "admin"
    AGENT = "agent"
    VIEWER = "viewer"
